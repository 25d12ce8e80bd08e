"""Audit trail schemas."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class AuditEventRead(BaseModel):
    """Serialized audit event."""

    id: uuid.UUID
    event_type: str
    reservation_id: uuid.UUID
    user_id: str
    payload: dict[str, Any] | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
