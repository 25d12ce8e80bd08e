"""Common API dependencies."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from laundry_booking.core.config import Settings
from laundry_booking.core.security import decode_access_token
from laundry_booking.db.session import get_sessionmaker
from laundry_booking.schemas.auth import ActingUser
from laundry_booking.services.admission_service import AdmissionController
from laundry_booking.services.reservation_store import (
    InMemoryReservationStore,
    ReservationStore,
    SqlAlchemyReservationStore,
)

bearer_scheme = HTTPBearer(auto_error=False)


def build_admission_controller(settings: Settings) -> AdmissionController:
    """Wire the configured store into a fresh admission controller."""
    limit = settings.weekly_reservation_limit
    store: ReservationStore
    if settings.reservation_store == "memory":
        store = InMemoryReservationStore(weekly_limit=limit)
    else:
        store = SqlAlchemyReservationStore(
            get_sessionmaker(settings.database_url), weekly_limit=limit
        )
    return AdmissionController(store, weekly_limit=limit)


def get_admission_controller(request: Request) -> AdmissionController:
    """Return the controller owned by the running application."""
    controller = getattr(request.app.state, "admission_controller", None)
    if controller is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Reservation service is not ready",
        )
    return controller


async def get_acting_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> ActingUser | None:
    """Resolve the resident from an optional bearer token.

    A missing token yields ``None`` so the admission engine can reject the
    request itself; a token that fails verification is refused here.
    """
    if credentials is None:
        return None

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError as exc:
        raise credentials_exception from exc

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise credentials_exception
    return ActingUser(id=subject)
