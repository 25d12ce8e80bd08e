"""Access token helpers."""

from datetime import timedelta

import pytest
from jose import JWTError

from laundry_booking.core.security import create_access_token, decode_access_token


def test_token_carries_only_subject_and_expiry() -> None:
    token = create_access_token("resident-x", expires_delta=timedelta(minutes=5))

    claims = decode_access_token(token)

    assert set(claims) == {"sub", "exp"}
    assert claims["sub"] == "resident-x"


def test_expired_token_is_rejected() -> None:
    token = create_access_token("resident-x", expires_delta=timedelta(minutes=-1))

    with pytest.raises(JWTError):
        decode_access_token(token)
