"""Message ledger — send, fetch, and mark messages read.

Every message is addressed by username. Sender and recipient are
resolved through UserService before a message is stored, so a typo in
the recipient surfaces as NotFoundError instead of a dropped message.

Marking read is a conditional UPDATE (... WHERE read_at IS NULL), so the
database serializes concurrent calls and only the first one stamps
read_at. Later calls are no-ops that return the original timestamp.
Authorization is NOT checked here; see messagely.auth.access.
"""

from typing import Optional

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from messagely.db.models import MESSAGE_ID_MAX, Message, utcnow
from messagely.errors import NotFoundError, ValidationError
from messagely.services.user_service import UserService

logger = structlog.get_logger()


def _check_id(message_id: int) -> None:
    """Ids outside the INTEGER column's range cannot exist."""
    if not 1 <= message_id <= MESSAGE_ID_MAX:
        raise NotFoundError(f"No message with id {message_id}")


class MessageService:
    """Reads and writes message records through one database session."""

    def __init__(self, db: AsyncSession, users: Optional[UserService] = None):
        self.db = db
        self.users = users or UserService(db)

    async def create(self, from_username: str, to_username: str, body: str) -> Message:
        """Store a new unread message.

        Raises:
            ValidationError: empty body or missing username
            NotFoundError: sender or recipient does not exist
        """
        if not from_username or not to_username:
            raise ValidationError("Sender and recipient are required")
        if not body:
            raise ValidationError("Message body must not be empty")

        for username in (from_username, to_username):
            if not await self.users.exists(username):
                raise NotFoundError(f"No user with username '{username}'")

        message = Message(
            from_username=from_username,
            to_username=to_username,
            body=body,
            sent_at=utcnow(),
            read_at=None,
        )
        self.db.add(message)
        await self.db.commit()
        await self.db.refresh(message)

        logger.info(
            "message.sent",
            message_id=message.id,
            from_username=from_username,
            to_username=to_username,
        )
        return message

    async def get(self, message_id: int) -> Message:
        """Fetch a message with from_user and to_user loaded."""
        _check_id(message_id)
        result = await self.db.execute(
            select(Message)
            .where(Message.id == message_id)
            .options(selectinload(Message.from_user), selectinload(Message.to_user))
            .execution_options(populate_existing=True)
        )
        message = result.scalars().first()
        if message is None:
            raise NotFoundError(f"No message with id {message_id}")
        return message

    async def mark_read(self, message_id: int) -> Message:
        """Set read_at if it is still unset. Idempotent."""
        _check_id(message_id)
        result = await self.db.execute(
            update(Message)
            .where(Message.id == message_id, Message.read_at.is_(None))
            .values(read_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        stamped = result.rowcount > 0
        await self.db.commit()

        message = await self.get(message_id)
        if stamped:
            logger.info("message.read", message_id=message_id, to_username=message.to_username)
        return message
