"""FastAPI auth dependencies.

Used as Depends() in route handlers to extract and validate the
current identity from the Authorization: Bearer <jwt> header.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header

from messagely.auth.jwt import verify_token
from messagely.errors import InvalidTokenError


@dataclass(frozen=True)
class CurrentIdentity:
    """The authenticated user making the request."""

    username: str


async def get_current_user_optional(
    authorization: Optional[str] = Header(None),
) -> Optional[CurrentIdentity]:
    """Extract the current identity, or None when no bearer token is sent.

    A token that is present but invalid still raises: a bad credential
    is never treated as anonymous.
    """
    if not authorization:
        return None

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise InvalidTokenError("Malformed Authorization header")

    return CurrentIdentity(username=verify_token(token.strip()))


async def get_current_user(
    identity: Optional[CurrentIdentity] = Depends(get_current_user_optional),
) -> CurrentIdentity:
    """Extract the current identity (required — 401 if no auth)."""
    if identity is None:
        raise InvalidTokenError("Authentication required")
    return identity
