"""Password hashing utilities.

Uses bcrypt for password hashing. bcrypt salts automatically and is
deliberately slow; the work factor comes from settings (default 12,
~100ms per hash on modern hardware). Tests lower it to 4.

The *_async variants run the same work in a thread so a login or
registration does not stall the event loop for every other request.
"""

import asyncio
from typing import Optional

import bcrypt

from messagely.config import settings

# bcrypt only looks at the first 72 bytes. Longer passwords are refused
# outright so two passwords sharing a 72-byte prefix never collide.
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password with bcrypt.

    Every call draws a fresh salt, so hashing the same password twice
    gives two different strings that both verify. Raises ValueError for
    passwords longer than MAX_PASSWORD_BYTES.
    """
    if password_too_long(password):
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    if rounds is None:
        rounds = settings.bcrypt_work_factor
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash.

    Fails closed: a malformed or empty hash, or an over-long password,
    returns False instead of raising.
    """
    if not password_hash or password_too_long(password):
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False


async def hash_password_async(password: str, rounds: Optional[int] = None) -> str:
    return await asyncio.to_thread(hash_password, password, rounds)


async def verify_password_async(password: str, password_hash: str) -> bool:
    return await asyncio.to_thread(verify_password, password, password_hash)
