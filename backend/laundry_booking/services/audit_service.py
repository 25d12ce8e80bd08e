"""Helper utilities for recording audit events."""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from laundry_booking.models.audit_event import AuditEvent

RESERVATION_CREATED = "reservation.created"
RESERVATION_CANCELED = "reservation.canceled"


def record_event(
    session: AsyncSession,
    *,
    event_type: str,
    reservation_id: uuid.UUID,
    user_id: str,
    payload: dict[str, Any] | None = None,
) -> AuditEvent:
    """Stage an audit event on the session.

    The caller commits, so the event lands in the same transaction as the
    reservation change it describes.
    """
    event = AuditEvent(
        event_type=event_type,
        reservation_id=reservation_id,
        user_id=user_id,
        payload=payload,
    )
    session.add(event)
    return event


async def list_events(
    session: AsyncSession,
    *,
    limit: int = 50,
) -> Sequence[AuditEvent]:
    """Return the most recent audit events, newest first."""
    result = await session.execute(
        select(AuditEvent).order_by(AuditEvent.created_at.desc()).limit(limit)
    )
    return result.scalars().all()
