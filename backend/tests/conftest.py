"""Test fixtures for the laundry reservation backend."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

from laundry_booking.api.deps import build_admission_controller
from laundry_booking.core.config import get_settings
from laundry_booking.core.security import create_access_token
from laundry_booking.db.base import Base
from laundry_booking.db.session import dispose_engine, get_sessionmaker
from laundry_booking.main import app
from laundry_booking.schemas.auth import ActingUser
from laundry_booking.services.admission_service import AdmissionController
from laundry_booking.services.reservation_store import (
    InMemoryReservationStore,
    SqlAlchemyReservationStore,
)


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    os.environ["RESERVATION_STORE"] = "sql"
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest.fixture()
def resident_x() -> ActingUser:
    return ActingUser(id="resident-x")


@pytest.fixture()
def resident_y() -> ActingUser:
    return ActingUser(id="resident-y")


@pytest.fixture()
def memory_store() -> InMemoryReservationStore:
    return InMemoryReservationStore()


@pytest.fixture()
def memory_controller(memory_store: InMemoryReservationStore) -> AdmissionController:
    return AdmissionController(memory_store)


@pytest_asyncio.fixture()
async def sql_store(reset_database: None, db_url: str) -> SqlAlchemyReservationStore:
    return SqlAlchemyReservationStore(get_sessionmaker(db_url))


@pytest_asyncio.fixture()
async def app_context(reset_database: None) -> AsyncIterator[dict[str, object]]:
    """Yield an async client wired to a fresh SQL-backed controller."""
    controller = build_admission_controller(get_settings())
    await controller.cache.refresh()
    app.state.admission_controller = controller

    context: dict[str, object] = {
        "controller": controller,
        "x_headers": {"Authorization": f"Bearer {create_access_token('resident-x')}"},
        "y_headers": {"Authorization": f"Bearer {create_access_token('resident-y')}"},
    }

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        context["client"] = client
        yield context
    app.state.admission_controller = None
