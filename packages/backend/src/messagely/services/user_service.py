"""User directory — registration, login checks, profile lookups.

Pure business logic with no HTTP dependencies. Raises domain errors
(messagely.errors) that the API layer maps to status codes.

Registration inserts directly; the username primary key rejects
duplicates and the resulting IntegrityError becomes ConflictError.
"""

from typing import Optional

import structlog
from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from messagely.auth.password import (
    MAX_PASSWORD_BYTES,
    hash_password_async,
    password_too_long,
    verify_password_async,
)
from messagely.db.models import USERNAME_MAX_LENGTH, Message, User, utcnow
from messagely.errors import ConflictError, NotFoundError, ValidationError

logger = structlog.get_logger()


def _require(**fields: Optional[str]) -> None:
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


class UserService:
    """Reads and writes user records through one database session."""

    def __init__(self, db: AsyncSession, work_factor: Optional[int] = None):
        self.db = db
        self.work_factor = work_factor

    async def register(
        self,
        username: str,
        password: str,
        first_name: str,
        last_name: str,
        phone: str,
    ) -> User:
        """Create a user with a hashed password.

        Raises:
            ValidationError: any field is empty or missing, the username is
                too long, or the password exceeds bcrypt's byte limit
            ConflictError: username already taken
        """
        _require(
            username=username,
            password=password,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
        )
        if len(username) > USERNAME_MAX_LENGTH:
            raise ValidationError(
                f"Username must be at most {USERNAME_MAX_LENGTH} characters"
            )
        if password_too_long(password):
            raise ValidationError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
            )
        password_hash = await hash_password_async(password, self.work_factor)
        now = utcnow()

        try:
            await self.db.execute(
                insert(User).values(
                    username=username,
                    password_hash=password_hash,
                    first_name=first_name,
                    last_name=last_name,
                    phone=phone,
                    joined_at=now,
                    last_login_at=now,
                )
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info("user.register_conflict", username=username)
            raise ConflictError(f"Username '{username}' is taken. Please pick another!")

        logger.info("user.registered", username=username)
        return await self.get(username)

    async def authenticate(self, username: str, password: str) -> bool:
        """Check a username/password pair. Does not record the login.

        Raises:
            ValidationError: username or password empty
            NotFoundError: no such user
        """
        _require(username=username, password=password)

        result = await self.db.execute(
            select(User.password_hash).where(User.username == username)
        )
        password_hash = result.scalar_one_or_none()
        if password_hash is None:
            raise NotFoundError(f"No user with username '{username}'")

        return await verify_password_async(password, password_hash)

    async def update_login_timestamp(self, username: str) -> None:
        """Stamp last_login_at. The caller must already have authenticated."""
        result = await self.db.execute(
            update(User)
            .where(User.username == username)
            .values(last_login_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise NotFoundError(f"No user with username '{username}'")
        await self.db.commit()

    async def get(self, username: str) -> User:
        """Full profile, including joined_at and last_login_at."""
        result = await self.db.execute(
            select(User)
            .where(User.username == username)
            .execution_options(populate_existing=True)
        )
        user = result.scalars().first()
        if user is None:
            raise NotFoundError(f"No user with username '{username}'")
        return user

    async def list_all(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.username))
        return list(result.scalars().all())

    async def exists(self, username: str) -> bool:
        result = await self.db.execute(
            select(User.username).where(User.username == username)
        )
        return result.scalar_one_or_none() is not None

    # ─── Mailboxes ────────────────────────────────────────

    async def messages_from(self, username: str) -> list[Message]:
        """Messages this user sent, each with the recipient loaded."""
        await self.get(username)
        result = await self.db.execute(
            select(Message)
            .where(Message.from_username == username)
            .options(selectinload(Message.to_user))
            .order_by(Message.sent_at, Message.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def messages_to(self, username: str) -> list[Message]:
        """Messages this user received, each with the sender loaded."""
        await self.get(username)
        result = await self.db.execute(
            select(Message)
            .where(Message.to_username == username)
            .options(selectinload(Message.from_user))
            .order_by(Message.sent_at, Message.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())
