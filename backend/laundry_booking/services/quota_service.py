"""Weekly quota calculation for apartment units."""
from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta
from typing import Protocol

DEFAULT_WEEKLY_LIMIT = 2


class _UnitReservation(Protocol):
    portal: str
    floor: str
    door: str
    reserved_on: date


def week_bounds(reserved_on: date) -> tuple[date, date]:
    """Return the Monday and Sunday of the week containing ``reserved_on``."""
    week_start = reserved_on - timedelta(days=reserved_on.weekday())
    return week_start, week_start + timedelta(days=6)


def same_unit(reservation: _UnitReservation, portal: str, floor: str, door: str) -> bool:
    """Match portal and floor exactly and the door label case-insensitively."""
    return (
        reservation.portal == portal
        and reservation.floor == floor
        and reservation.door.casefold() == door.casefold()
    )


def count_weekly(
    reservations: Iterable[_UnitReservation],
    portal: str,
    floor: str,
    door: str,
    reserved_on: date,
) -> int:
    """Count the unit's reservations that fall in the week of ``reserved_on``."""
    week_start, week_end = week_bounds(reserved_on)
    return sum(
        1
        for reservation in reservations
        if week_start <= reservation.reserved_on <= week_end
        and same_unit(reservation, portal, floor, door)
    )
