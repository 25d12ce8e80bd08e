"""Reservation persistence backends.

The admission engine talks to storage only through :class:`ReservationStore`.
Two implementations ship: a SQLAlchemy store used in deployments and a
process-local store used by tests and throwaway demos.
"""
from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Protocol

from sqlalchemy import and_, func, or_, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from laundry_booking.core.errors import (
    DateAlreadyReserved,
    NotFound,
    StoreError,
    WeeklyQuotaExceeded,
)
from laundry_booking.models.reservation import Reservation
from laundry_booking.schemas.audit import AuditEventRead
from laundry_booking.schemas.reservation import ReservationDraft, ReservationRead
from laundry_booking.services import audit_service, quota_service

logger = logging.getLogger(__name__)

# Key for the PostgreSQL transaction-level advisory lock taken by writers.
_WRITE_LOCK_KEY = 0x4C41554E


class ReservationStore(Protocol):
    """Contract for reservation persistence."""

    async def list_all(self) -> Sequence[ReservationRead]: ...

    async def create(self, draft: ReservationDraft) -> ReservationRead: ...

    async def delete(self, reservation_id: uuid.UUID) -> None: ...

    async def history(self, *, limit: int = 50) -> Sequence[AuditEventRead]: ...


class _CreatedAtClock:
    """Hands out UTC timestamps that never go backwards."""

    def __init__(self) -> None:
        self._last: datetime | None = None

    def now(self) -> datetime:
        current = datetime.now(UTC)
        if self._last is not None and current < self._last:
            current = self._last
        self._last = current
        return current


def _audit_payload(reservation: ReservationRead) -> dict[str, object]:
    return reservation.model_dump(mode="json", exclude={"id"})


class SqlAlchemyReservationStore:
    """Reservation store backed by an async SQLAlchemy session factory.

    ``create`` takes a database write lock before re-reading the date and
    the unit's week, so writers in other processes sharing the database
    cannot double-book a date or overrun the weekly limit.
    """

    def __init__(
        self,
        sessionmaker: async_sessionmaker[AsyncSession],
        *,
        weekly_limit: int = quota_service.DEFAULT_WEEKLY_LIMIT,
    ) -> None:
        self._sessionmaker = sessionmaker
        self._weekly_limit = weekly_limit
        self._clock = _CreatedAtClock()

    async def list_all(self) -> list[ReservationRead]:
        try:
            async with self._sessionmaker() as session:
                result = await session.execute(
                    select(Reservation).order_by(Reservation.reserved_on)
                )
                rows = result.scalars().all()
        except SQLAlchemyError as exc:
            raise StoreError("list") from exc
        return [ReservationRead.model_validate(row) for row in rows]

    async def create(self, draft: ReservationDraft) -> ReservationRead:
        async with self._sessionmaker() as session:
            try:
                await self._lock_for_write(session)
                await self._ensure_admissible(session, draft)
                reservation = Reservation(
                    id=uuid.uuid4(),
                    portal=draft.portal,
                    floor=draft.floor,
                    door=draft.door,
                    reserved_on=draft.reserved_on,
                    status=draft.status,
                    user_id=draft.user_id,
                    created_at=self._clock.now(),
                )
                created = ReservationRead.model_validate(reservation)
                session.add(reservation)
                audit_service.record_event(
                    session,
                    event_type=audit_service.RESERVATION_CREATED,
                    reservation_id=created.id,
                    user_id=created.user_id,
                    payload=_audit_payload(created),
                )
                await session.commit()
            except IntegrityError as exc:
                # Dialects without a write lock still hit the unique reserved_on column.
                await session.rollback()
                raise DateAlreadyReserved(draft.reserved_on) from exc
            except SQLAlchemyError as exc:
                await session.rollback()
                raise StoreError("create") from exc
        logger.info("Stored reservation %s for %s", created.id, created.reserved_on)
        return created

    async def _lock_for_write(self, session: AsyncSession) -> None:
        """Serialize writers until the session's transaction ends."""
        dialect = session.get_bind().dialect.name
        if dialect == "sqlite":
            await session.execute(text("BEGIN IMMEDIATE"))
        elif dialect == "postgresql":
            await session.execute(select(func.pg_advisory_xact_lock(_WRITE_LOCK_KEY)))

    async def _ensure_admissible(self, session: AsyncSession, draft: ReservationDraft) -> None:
        week_start, week_end = quota_service.week_bounds(draft.reserved_on)
        result = await session.execute(
            select(Reservation).where(
                or_(
                    Reservation.reserved_on == draft.reserved_on,
                    and_(
                        Reservation.portal == draft.portal,
                        Reservation.floor == draft.floor,
                        Reservation.reserved_on.between(week_start, week_end),
                    ),
                )
            )
        )
        rows = result.scalars().all()
        if any(row.reserved_on == draft.reserved_on for row in rows):
            raise DateAlreadyReserved(draft.reserved_on)
        used = quota_service.count_weekly(
            rows, draft.portal, draft.floor, draft.door, draft.reserved_on
        )
        if used >= self._weekly_limit:
            raise WeeklyQuotaExceeded(week_start, self._weekly_limit)

    async def delete(self, reservation_id: uuid.UUID) -> None:
        async with self._sessionmaker() as session:
            try:
                reservation = await session.get(Reservation, reservation_id)
                if reservation is None:
                    raise NotFound(reservation_id)
                snapshot = ReservationRead.model_validate(reservation)
                await session.delete(reservation)
                audit_service.record_event(
                    session,
                    event_type=audit_service.RESERVATION_CANCELED,
                    reservation_id=snapshot.id,
                    user_id=snapshot.user_id,
                    payload=_audit_payload(snapshot),
                )
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                raise StoreError("delete") from exc
        logger.info("Deleted reservation %s", reservation_id)

    async def history(self, *, limit: int = 50) -> list[AuditEventRead]:
        try:
            async with self._sessionmaker() as session:
                events = await audit_service.list_events(session, limit=limit)
        except SQLAlchemyError as exc:
            raise StoreError("history") from exc
        return [AuditEventRead.model_validate(event) for event in events]


class InMemoryReservationStore:
    """Process-local reservation store.

    Mirrors the SQL store's behaviour, including the uniqueness of
    ``reserved_on`` and the weekly limit per unit. Every operation yields
    to the event loop once so concurrent callers interleave the way they
    would around real I/O.
    """

    def __init__(
        self,
        reservations: Sequence[ReservationRead] = (),
        *,
        weekly_limit: int = quota_service.DEFAULT_WEEKLY_LIMIT,
    ) -> None:
        self._reservations: dict[uuid.UUID, ReservationRead] = {
            reservation.id: reservation for reservation in reservations
        }
        self._events: list[AuditEventRead] = []
        self._weekly_limit = weekly_limit
        self._clock = _CreatedAtClock()

    async def list_all(self) -> list[ReservationRead]:
        await asyncio.sleep(0)
        return sorted(self._reservations.values(), key=lambda item: item.reserved_on)

    async def create(self, draft: ReservationDraft) -> ReservationRead:
        await asyncio.sleep(0)
        if any(
            existing.reserved_on == draft.reserved_on
            for existing in self._reservations.values()
        ):
            raise DateAlreadyReserved(draft.reserved_on)
        used = quota_service.count_weekly(
            self._reservations.values(),
            draft.portal,
            draft.floor,
            draft.door,
            draft.reserved_on,
        )
        if used >= self._weekly_limit:
            week_start, _ = quota_service.week_bounds(draft.reserved_on)
            raise WeeklyQuotaExceeded(week_start, self._weekly_limit)
        created = ReservationRead(
            id=uuid.uuid4(),
            created_at=self._clock.now(),
            **draft.model_dump(),
        )
        self._reservations[created.id] = created
        self._record(audit_service.RESERVATION_CREATED, created)
        return created

    async def delete(self, reservation_id: uuid.UUID) -> None:
        await asyncio.sleep(0)
        reservation = self._reservations.pop(reservation_id, None)
        if reservation is None:
            raise NotFound(reservation_id)
        self._record(audit_service.RESERVATION_CANCELED, reservation)

    async def history(self, *, limit: int = 50) -> list[AuditEventRead]:
        await asyncio.sleep(0)
        return list(reversed(self._events))[:limit]

    def _record(self, event_type: str, reservation: ReservationRead) -> None:
        self._events.append(
            AuditEventRead(
                id=uuid.uuid4(),
                event_type=event_type,
                reservation_id=reservation.id,
                user_id=reservation.user_id,
                payload=_audit_payload(reservation),
                created_at=self._clock.now(),
            )
        )
