"""Service layer exports."""
from laundry_booking.services import (
    audit_service,
    quota_service,
    reservation_store,
    reservation_cache,
    admission_service,
)

__all__ = [
    "admission_service",
    "audit_service",
    "quota_service",
    "reservation_cache",
    "reservation_store",
]
