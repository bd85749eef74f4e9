"""JWT token creation and verification.

A login or registration mints one access token whose subject is the
username. Tokens always carry an expiry; verification refuses tokens
without one, so a leaked token stops working after
access_token_expire_minutes.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from messagely.config import settings
from messagely.errors import InvalidTokenError

ACCESS_TOKEN_TYPE = "access"


def create_access_token(
    username: str,
    expires_minutes: Optional[int] = None,
) -> str:
    """Create a signed JWT access token for a username."""
    if expires_minutes is None:
        expires_minutes = settings.access_token_expire_minutes
    now = datetime.now(timezone.utc)
    expires = now + timedelta(minutes=expires_minutes)
    payload = {
        "sub": username,
        "type": ACCESS_TOKEN_TYPE,
        "exp": expires,
        "iat": now,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> str:
    """Verify a JWT access token and return the username it carries.

    Raises InvalidTokenError on a bad signature, malformed token,
    expired token, missing claims, or a token that is not an access token.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise InvalidTokenError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError(f"Invalid token: {e}")

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise InvalidTokenError("Not an access token")

    username = payload["sub"]
    if not isinstance(username, str) or not username:
        raise InvalidTokenError("Invalid token: empty subject")
    return username
