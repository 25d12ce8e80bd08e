"""Reservation models."""
from __future__ import annotations

import enum
import uuid
from datetime import date

from sqlalchemy import Date, Enum, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from laundry_booking.db.base import Base
from laundry_booking.models.mixins import CreatedAtMixin


class ReservationStatus(str, enum.Enum):
    """Lifecycle states for reservations.

    Cancellation deletes the row, so ``confirmed`` is the only stored state.
    """

    CONFIRMED = "confirmed"


class Reservation(CreatedAtMixin, Base):
    """One unit's claim on the shared laundry for a calendar date."""

    __tablename__ = "reservations"
    __table_args__ = (
        UniqueConstraint("reserved_on", name="uq_reservations_reserved_on"),
        Index("ix_reservations_unit", "portal", "floor"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    portal: Mapped[str] = mapped_column(String(32), nullable=False)
    floor: Mapped[str] = mapped_column(String(16), nullable=False)
    door: Mapped[str] = mapped_column(String(16), nullable=False)
    reserved_on: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[ReservationStatus] = mapped_column(
        Enum(ReservationStatus), default=ReservationStatus.CONFIRMED, nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
