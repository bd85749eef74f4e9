"""SQLAlchemy ORM models — single source of truth for the database schema.

Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Alembic migrations in db/migrations mirror these tables.

- users is keyed by username; the primary key doubles as the uniqueness
  constraint that registration relies on.
- messages reference users by username only. from_user / to_user are
  loaded at read time, never cached on the user side.
- Timestamps are set in Python (utcnow) so every backend stores the
  same values.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


USERNAME_MAX_LENGTH = 100
# messages.id is a 32-bit INTEGER on every backend.
MESSAGE_ID_MAX = 2**31 - 1


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """A registered person who can send and receive messages."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(USERNAME_MAX_LENGTH), primary_key=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str] = mapped_column(Text, nullable=False)
    phone: Mapped[str] = mapped_column(Text, nullable=False)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    last_login_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    def __repr__(self) -> str:
        return f"<User {self.username}>"


class Message(Base):
    """A directed text message from one user to another.

    read_at goes from NULL to a timestamp exactly once, set by the
    recipient. Nothing ever clears it.
    """

    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_from_username", "from_username"),
        Index("ix_messages_to_username", "to_username"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    from_username: Mapped[str] = mapped_column(
        String(USERNAME_MAX_LENGTH), ForeignKey("users.username"), nullable=False
    )
    to_username: Mapped[str] = mapped_column(
        String(USERNAME_MAX_LENGTH), ForeignKey("users.username"), nullable=False
    )
    body: Mapped[str] = mapped_column(Text, nullable=False)
    sent_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    read_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Relationships — loaded explicitly (selectinload) by MessageService
    from_user: Mapped["User"] = relationship(foreign_keys=[from_username], lazy="raise")
    to_user: Mapped["User"] = relationship(foreign_keys=[to_username], lazy="raise")

    @property
    def is_read(self) -> bool:
        return self.read_at is not None
