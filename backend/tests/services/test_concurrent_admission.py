"""Concurrent create requests must never double-book or overrun the quota."""

from __future__ import annotations

import asyncio
from datetime import date, timedelta

import pytest

from laundry_booking.core.errors import DateAlreadyReserved, WeeklyQuotaExceeded
from laundry_booking.db.session import get_sessionmaker
from laundry_booking.schemas.auth import ActingUser
from laundry_booking.services import quota_service
from laundry_booking.services.admission_service import AdmissionController
from laundry_booking.services.reservation_store import (
    InMemoryReservationStore,
    ReservationStore,
    SqlAlchemyReservationStore,
)

pytestmark = pytest.mark.asyncio


async def _race_same_date(controller: AdmissionController) -> list[object]:
    residents = [ActingUser(id=f"resident-{index}") for index in range(8)]
    return await asyncio.gather(
        *(
            controller.create(resident, "P1", str(index), "A", date(2024, 2, 10))
            for index, resident in enumerate(residents)
        ),
        return_exceptions=True,
    )


async def _race_same_week(controller: AdmissionController) -> list[object]:
    resident = ActingUser(id="resident-x")
    monday = date(2024, 1, 1)
    return await asyncio.gather(
        *(
            controller.create(resident, "P1", "2", "A", monday + timedelta(days=offset))
            for offset in range(7)
        ),
        return_exceptions=True,
    )


def _assert_single_winner(results: list[object]) -> None:
    winners = [item for item in results if not isinstance(item, BaseException)]
    losers = [item for item in results if isinstance(item, BaseException)]
    assert len(winners) == 1
    assert all(isinstance(item, DateAlreadyReserved) for item in losers)


def _assert_two_winners(results: list[object]) -> None:
    winners = [item for item in results if not isinstance(item, BaseException)]
    losers = [item for item in results if isinstance(item, BaseException)]
    assert len(winners) == 2
    assert all(isinstance(item, WeeklyQuotaExceeded) for item in losers)


async def _assert_store_invariants(store: ReservationStore) -> None:
    reservations = await store.list_all()
    days = [item.reserved_on for item in reservations]
    assert len(days) == len(set(days))
    for item in reservations:
        assert (
            quota_service.count_weekly(
                reservations, item.portal, item.floor, item.door, item.reserved_on
            )
            <= 2
        )


async def test_same_date_race_in_memory() -> None:
    store = InMemoryReservationStore()
    results = await _race_same_date(AdmissionController(store))

    _assert_single_winner(results)
    await _assert_store_invariants(store)


async def test_same_week_race_in_memory() -> None:
    store = InMemoryReservationStore()
    results = await _race_same_week(AdmissionController(store))

    _assert_two_winners(results)
    await _assert_store_invariants(store)


async def test_same_date_race_sql(reset_database: None, db_url: str) -> None:
    store = SqlAlchemyReservationStore(get_sessionmaker(db_url))
    results = await _race_same_date(AdmissionController(store))

    _assert_single_winner(results)
    await _assert_store_invariants(store)


async def test_same_week_race_sql(reset_database: None, db_url: str) -> None:
    store = SqlAlchemyReservationStore(get_sessionmaker(db_url))
    results = await _race_same_week(AdmissionController(store))

    _assert_two_winners(results)
    await _assert_store_invariants(store)


async def test_same_date_race_across_controllers_sql(
    reset_database: None, db_url: str
) -> None:
    # Separate controllers share no lock; the unique date column still
    # admits only one writer.
    stores = [SqlAlchemyReservationStore(get_sessionmaker(db_url)) for _ in range(4)]
    controllers = [AdmissionController(store) for store in stores]
    results = await asyncio.gather(
        *(
            controller.create(
                ActingUser(id=f"resident-{index}"), "P1", str(index), "A", date(2024, 2, 10)
            )
            for index, controller in enumerate(controllers)
        ),
        return_exceptions=True,
    )

    _assert_single_winner(results)
    await _assert_store_invariants(stores[0])


async def test_same_week_race_across_controllers_sql(
    reset_database: None, db_url: str
) -> None:
    # Each store re-counts the unit's week under a database write lock.
    stores = [SqlAlchemyReservationStore(get_sessionmaker(db_url)) for _ in range(4)]
    controllers = [AdmissionController(store) for store in stores]
    monday = date(2024, 1, 1)
    results = await asyncio.gather(
        *(
            controller.create(
                ActingUser(id="resident-x"), "P1", "2", "A", monday + timedelta(days=offset)
            )
            for offset, controller in enumerate(controllers)
        ),
        return_exceptions=True,
    )

    _assert_two_winners(results)
    await _assert_store_invariants(stores[0])
    assert (
        quota_service.count_weekly(await stores[0].list_all(), "P1", "2", "A", monday) == 2
    )
