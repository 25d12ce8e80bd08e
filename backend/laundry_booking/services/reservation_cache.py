"""Versioned in-memory snapshot of every reservation."""
from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime

from laundry_booking.schemas.reservation import ReservationRead
from laundry_booking.services.reservation_store import ReservationStore

logger = logging.getLogger(__name__)


class ReservationCache:
    """Read-mostly copy of the reservation set.

    ``refresh`` swaps in a whole new snapshot; readers holding the previous
    tuple keep a consistent view. A failed reload leaves the snapshot and
    its version untouched and re-raises the store error.
    """

    def __init__(self, store: ReservationStore) -> None:
        self._store = store
        self._snapshot: tuple[ReservationRead, ...] = ()
        self._version = 0
        self._loaded_at: datetime | None = None
        self._refresh_lock = asyncio.Lock()

    @property
    def version(self) -> int:
        return self._version

    @property
    def loaded_at(self) -> datetime | None:
        return self._loaded_at

    def all(self) -> tuple[ReservationRead, ...]:
        return self._snapshot

    async def refresh(self) -> tuple[ReservationRead, ...]:
        async with self._refresh_lock:
            try:
                loaded = await self._store.list_all()
            except Exception:
                logger.warning(
                    "Reservation cache refresh failed; keeping version %s",
                    self._version,
                )
                raise
            self._snapshot = tuple(sorted(loaded, key=lambda item: item.reserved_on))
            self._version += 1
            self._loaded_at = datetime.now(UTC)
            logger.debug(
                "Reservation cache at version %s with %s entries",
                self._version,
                len(self._snapshot),
            )
            return self._snapshot
