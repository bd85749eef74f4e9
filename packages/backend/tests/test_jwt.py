"""Session issuer tests — signed, expiring bearer tokens."""

from datetime import datetime, timedelta, timezone

import jwt as pyjwt
from jwt.utils import base64url_encode
import pytest

from messagely.auth.jwt import create_access_token, verify_token
from messagely.config import settings
from messagely.errors import InvalidTokenError


def test_token_round_trips_username():
    token = create_access_token("alice")
    assert verify_token(token) == "alice"


def test_token_carries_expiry():
    token = create_access_token("alice")
    payload = pyjwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    assert payload["sub"] == "alice"
    assert payload["type"] == "access"
    assert payload["exp"] > payload["iat"]


def test_expired_token_rejected():
    token = create_access_token("alice", expires_minutes=-1)
    with pytest.raises(InvalidTokenError, match="expired"):
        verify_token(token)


def test_tampered_token_rejected():
    token = create_access_token("alice")
    header, payload, signature = token.split(".")
    forged_payload = base64url_encode(
        b'{"sub":"mallory","type":"access","exp":9999999999}'
    ).decode()
    with pytest.raises(InvalidTokenError):
        verify_token(f"{header}.{forged_payload}.{signature}")


def test_token_signed_with_other_secret_rejected():
    token = pyjwt.encode(
        {"sub": "alice", "type": "access", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        "some-other-secret",
        algorithm="HS256",
    )
    with pytest.raises(InvalidTokenError):
        verify_token(token)


def test_token_without_expiry_rejected():
    token = pyjwt.encode(
        {"sub": "alice", "type": "access"},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(InvalidTokenError):
        verify_token(token)


def test_non_access_token_rejected():
    token = pyjwt.encode(
        {"sub": "alice", "type": "refresh", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(InvalidTokenError, match="Not an access token"):
        verify_token(token)


@pytest.mark.parametrize("garbage", ["", "invalid_token_here", "a.b.c"])
def test_malformed_token_rejected(garbage):
    with pytest.raises(InvalidTokenError):
        verify_token(garbage)


def test_zero_minute_expiry_is_honored():
    token = create_access_token("alice", expires_minutes=0)
    with pytest.raises(InvalidTokenError, match="expired"):
        verify_token(token)
