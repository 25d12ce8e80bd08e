"""Pydantic schemas for reservations."""
from __future__ import annotations

import uuid
from datetime import UTC, date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from laundry_booking.models.reservation import ReservationStatus


def _coerce_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


class ReservationBase(BaseModel):
    """Shared reservation fields identifying the unit and the day."""

    portal: str = Field(min_length=1, max_length=32)
    floor: str = Field(min_length=1, max_length=16)
    door: str = Field(min_length=1, max_length=16)
    reserved_on: date


class ReservationCreate(ReservationBase):
    """Payload for creating reservations."""

    @field_validator("portal", "floor", "door", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value


class ReservationDraft(ReservationBase):
    """Admitted reservation handed to a store, before id and timestamp exist."""

    user_id: str
    status: ReservationStatus = ReservationStatus.CONFIRMED

    model_config = ConfigDict(frozen=True)


class ReservationRead(ReservationBase):
    """Serialized reservation representation."""

    id: uuid.UUID
    status: ReservationStatus
    user_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: datetime) -> datetime:
        return _coerce_utc(value)


class WeeklyCountRead(BaseModel):
    """Weekly usage for one unit."""

    portal: str
    floor: str
    door: str
    week_start: date
    week_end: date
    count: int
    limit: int
