"""Schema exports."""

from laundry_booking.schemas.audit import AuditEventRead
from laundry_booking.schemas.auth import ActingUser
from laundry_booking.schemas.reservation import (
    ReservationCreate,
    ReservationDraft,
    ReservationRead,
    WeeklyCountRead,
)

__all__ = [
    "ActingUser",
    "AuditEventRead",
    "ReservationCreate",
    "ReservationDraft",
    "ReservationRead",
    "WeeklyCountRead",
]
