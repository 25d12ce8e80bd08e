"""Identity schemas."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ActingUser(BaseModel):
    """Resident on whose behalf a request runs.

    The id is the subject issued by the identity provider and is treated
    as an opaque string.
    """

    id: str = Field(min_length=1, max_length=128)

    model_config = ConfigDict(frozen=True)
