"""Rejections raised by the reservation admission engine.

Every error carries a stable ``code`` and the HTTP status the API layer
renders it with. Callers decide whether to retry; nothing here retries.
"""

from __future__ import annotations

import uuid
from datetime import date


class ReservationError(Exception):
    """Base class for reservation rejections."""

    code = "reservation_error"
    http_status = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Unauthenticated(ReservationError):
    """No acting user was supplied for a mutating operation."""

    code = "unauthenticated"
    http_status = 401

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class DateAlreadyReserved(ReservationError):
    """The requested date already holds a reservation."""

    code = "date_already_reserved"
    http_status = 409

    def __init__(self, reserved_on: date) -> None:
        super().__init__(f"{reserved_on.isoformat()} is already reserved")
        self.reserved_on = reserved_on


class WeeklyQuotaExceeded(ReservationError):
    """The unit already used its reservations for that week."""

    code = "weekly_quota_exceeded"
    http_status = 409

    def __init__(self, week_start: date, limit: int) -> None:
        super().__init__(
            f"Unit has reached the limit of {limit} reservations "
            f"for the week of {week_start.isoformat()}"
        )
        self.week_start = week_start
        self.limit = limit


class NotFound(ReservationError):
    """The reservation does not exist."""

    code = "not_found"
    http_status = 404

    def __init__(self, reservation_id: uuid.UUID) -> None:
        super().__init__(f"Reservation {reservation_id} not found")
        self.reservation_id = reservation_id


class Forbidden(ReservationError):
    """The acting user does not own the reservation."""

    code = "forbidden"
    http_status = 403

    def __init__(self, message: str = "Only the owner may cancel a reservation") -> None:
        super().__init__(message)


class StoreError(ReservationError):
    """The reservation store failed; the original exception is ``__cause__``."""

    code = "store_error"
    http_status = 503

    def __init__(self, operation: str) -> None:
        super().__init__(f"Reservation store {operation} failed")
        self.operation = operation


__all__ = [
    "DateAlreadyReserved",
    "Forbidden",
    "NotFound",
    "ReservationError",
    "StoreError",
    "Unauthenticated",
    "WeeklyQuotaExceeded",
]
