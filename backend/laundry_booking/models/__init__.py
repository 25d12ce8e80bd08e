"""ORM models package export."""

from laundry_booking.models.audit_event import AuditEvent
from laundry_booking.models.reservation import Reservation, ReservationStatus

__all__ = [
    "AuditEvent",
    "Reservation",
    "ReservationStatus",
]
