"""Audit event model for reservation history."""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from laundry_booking.db.base import Base
from laundry_booking.models.mixins import CreatedAtMixin


class AuditEvent(CreatedAtMixin, Base):
    """Immutable record of a reservation being created or canceled.

    The payload keeps a full copy of the reservation so history survives
    the hard delete of the reservation row.
    """

    __tablename__ = "audit_events"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    event_type: Mapped[str] = mapped_column(String(120), nullable=False)
    reservation_id: Mapped[uuid.UUID] = mapped_column(nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    payload: Mapped[dict[str, Any] | None] = mapped_column(JSON)
