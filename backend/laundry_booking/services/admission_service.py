"""Reservation admission: the only path that mutates the reservation set."""
from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Sequence
from datetime import date

from laundry_booking.core.errors import (
    DateAlreadyReserved,
    Forbidden,
    NotFound,
    Unauthenticated,
    WeeklyQuotaExceeded,
)
from laundry_booking.schemas.audit import AuditEventRead
from laundry_booking.schemas.auth import ActingUser
from laundry_booking.schemas.reservation import ReservationDraft, ReservationRead
from laundry_booking.services import quota_service
from laundry_booking.services.reservation_cache import ReservationCache
from laundry_booking.services.reservation_store import ReservationStore

logger = logging.getLogger(__name__)


class AdmissionController:
    """Admit, reject and cancel reservations.

    Creates and cancels run one at a time behind ``_write_lock``. Inside the
    lock the cache is reloaded from the store before any check, so every
    decision is taken against all previously committed writes.
    """

    def __init__(
        self,
        store: ReservationStore,
        *,
        cache: ReservationCache | None = None,
        weekly_limit: int = quota_service.DEFAULT_WEEKLY_LIMIT,
    ) -> None:
        self._store = store
        self._cache = cache or ReservationCache(store)
        self._weekly_limit = weekly_limit
        self._write_lock = asyncio.Lock()

    @property
    def cache(self) -> ReservationCache:
        return self._cache

    @property
    def weekly_limit(self) -> int:
        return self._weekly_limit

    async def create(
        self,
        acting_user: ActingUser | None,
        portal: str,
        floor: str,
        door: str,
        reserved_on: date,
    ) -> ReservationRead:
        """Admit a reservation for the unit on ``reserved_on``."""
        if acting_user is None:
            raise Unauthenticated()
        portal, floor, door = portal.strip(), floor.strip(), door.strip()

        async with self._write_lock:
            current = await self._cache.refresh()

            if any(existing.reserved_on == reserved_on for existing in current):
                logger.info("Rejected %s: date already reserved", reserved_on)
                raise DateAlreadyReserved(reserved_on)

            used = quota_service.count_weekly(current, portal, floor, door, reserved_on)
            if used >= self._weekly_limit:
                week_start, _ = quota_service.week_bounds(reserved_on)
                logger.info(
                    "Rejected %s for unit %s/%s/%s: %s of %s weekly reservations used",
                    reserved_on,
                    portal,
                    floor,
                    door,
                    used,
                    self._weekly_limit,
                )
                raise WeeklyQuotaExceeded(week_start, self._weekly_limit)

            created = await self._store.create(
                ReservationDraft(
                    portal=portal,
                    floor=floor,
                    door=door,
                    reserved_on=reserved_on,
                    user_id=acting_user.id,
                )
            )
            await self._cache.refresh()

        logger.info(
            "Admitted reservation %s on %s for user %s",
            created.id,
            created.reserved_on,
            acting_user.id,
        )
        return created

    async def cancel(
        self,
        acting_user: ActingUser | None,
        reservation_id: uuid.UUID,
    ) -> None:
        """Cancel a reservation owned by ``acting_user``."""
        if acting_user is None:
            raise Unauthenticated()

        async with self._write_lock:
            current = await self._cache.refresh()
            reservation = next(
                (item for item in current if item.id == reservation_id), None
            )
            if reservation is None:
                raise NotFound(reservation_id)
            if reservation.user_id != acting_user.id:
                logger.info(
                    "User %s may not cancel reservation %s",
                    acting_user.id,
                    reservation_id,
                )
                raise Forbidden()

            await self._store.delete(reservation_id)
            await self._cache.refresh()

        logger.info("Canceled reservation %s", reservation_id)

    def weekly_count(self, portal: str, floor: str, door: str, reserved_on: date) -> int:
        """Count the unit's reservations in the week of ``reserved_on``."""
        return quota_service.count_weekly(
            self._cache.all(), portal.strip(), floor.strip(), door.strip(), reserved_on
        )

    def list_reservations(self) -> tuple[ReservationRead, ...]:
        """Return the current cache snapshot."""
        return self._cache.all()

    async def history(self, *, limit: int = 50) -> Sequence[AuditEventRead]:
        """Return recent create/cancel events from the store's audit trail."""
        return await self._store.history(limit=limit)
