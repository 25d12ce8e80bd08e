"""FastAPI application entrypoint."""

import logging
from contextlib import asynccontextmanager

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from secure import Secure

from laundry_booking.api import api_router
from laundry_booking.api.deps import build_admission_controller
from laundry_booking.api.error_handlers import register_error_handlers
from laundry_booking.core.config import get_settings
from laundry_booking.core.errors import StoreError
from laundry_booking.db.session import create_schema, dispose_engine
from laundry_booking.security.logging_filters import install_sensitive_filter

logger = logging.getLogger(__name__)

settings = get_settings()

_ALLOWED_ORIGINS = [origin for origin in settings.cors_allowlist if origin]
if not _ALLOWED_ORIGINS:
    _ALLOWED_ORIGINS = ["http://localhost:5173"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    current = get_settings()
    logging.getLogger("laundry_booking").setLevel(current.log_level.upper())
    if current.reservation_store == "sql" and current.database_url.startswith("sqlite"):
        await create_schema(current.database_url)

    controller = build_admission_controller(current)
    app.state.admission_controller = controller
    try:
        await controller.cache.refresh()
    except StoreError:
        # Admission reloads the cache under its lock, so serving can start.
        logger.exception("Initial reservation cache load failed")
    try:
        yield
    finally:
        app.state.admission_controller = None
        await dispose_engine(current.database_url)


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_ALLOWED_ORIGINS,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID", "X-Snapshot-Version"],
)
app.add_middleware(CorrelationIdMiddleware, header_name="X-Request-ID")

_secure_headers = Secure()


@app.middleware("http")
async def _apply_security_headers(request, call_next):
    response = await call_next(request)
    _secure_headers.set_headers(response)
    return response


install_sensitive_filter("uvicorn", "uvicorn.access", "uvicorn.error", "")

register_error_handlers(app)
app.include_router(api_router)


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Return a simple welcome message."""
    return {"message": settings.app_name}
