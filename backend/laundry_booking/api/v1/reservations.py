"""Reservation API."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from laundry_booking.api import deps
from laundry_booking.core.errors import Unauthenticated
from laundry_booking.schemas.audit import AuditEventRead
from laundry_booking.schemas.auth import ActingUser
from laundry_booking.schemas.reservation import (
    ReservationCreate,
    ReservationRead,
    WeeklyCountRead,
)
from laundry_booking.services import quota_service
from laundry_booking.services.admission_service import AdmissionController

router = APIRouter()

Controller = Annotated[AdmissionController, Depends(deps.get_admission_controller)]
OptionalUser = Annotated[ActingUser | None, Depends(deps.get_acting_user)]


@router.get("", response_model=list[ReservationRead], summary="List reservations")
async def list_reservations(
    controller: Controller,
    response: Response,
) -> list[ReservationRead]:
    response.headers["X-Snapshot-Version"] = str(controller.cache.version)
    return list(controller.list_reservations())


@router.post(
    "",
    response_model=ReservationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create reservation",
)
async def create_reservation(
    payload: ReservationCreate,
    controller: Controller,
    acting_user: OptionalUser,
) -> ReservationRead:
    return await controller.create(
        acting_user,
        payload.portal,
        payload.floor,
        payload.door,
        payload.reserved_on,
    )


@router.get(
    "/weekly-count",
    response_model=WeeklyCountRead,
    summary="Count a unit's reservations in a week",
)
async def weekly_count(
    controller: Controller,
    portal: Annotated[str, Query(min_length=1)],
    floor: Annotated[str, Query(min_length=1)],
    door: Annotated[str, Query(min_length=1)],
    reserved_on: date,
) -> WeeklyCountRead:
    portal, floor, door = portal.strip(), floor.strip(), door.strip()
    week_start, week_end = quota_service.week_bounds(reserved_on)
    return WeeklyCountRead(
        portal=portal,
        floor=floor,
        door=door,
        week_start=week_start,
        week_end=week_end,
        count=controller.weekly_count(portal, floor, door, reserved_on),
        limit=controller.weekly_limit,
    )


@router.get(
    "/history",
    response_model=list[AuditEventRead],
    summary="Recent reservation audit events",
)
async def reservation_history(
    controller: Controller,
    acting_user: OptionalUser,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
) -> list[AuditEventRead]:
    if acting_user is None:
        raise Unauthenticated()
    return list(await controller.history(limit=limit))


@router.get(
    "/{reservation_id}", response_model=ReservationRead, summary="Get reservation"
)
async def get_reservation(
    reservation_id: uuid.UUID,
    controller: Controller,
) -> ReservationRead:
    for reservation in controller.list_reservations():
        if reservation.id == reservation_id:
            return reservation
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND, detail="Reservation not found"
    )


@router.delete(
    "/{reservation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cancel reservation",
)
async def cancel_reservation(
    reservation_id: uuid.UUID,
    controller: Controller,
    acting_user: OptionalUser,
) -> Response:
    await controller.cancel(acting_user, reservation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
