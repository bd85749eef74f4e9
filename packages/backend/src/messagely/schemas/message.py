"""Pydantic schemas for messages.

Response shapes differ by route: a freshly sent message carries bare
usernames, a fetched message carries both profile snippets, and the
mailbox listings carry only the other party.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from messagely.schemas.user import UserSummary


class MessageCreate(BaseModel):
    to_username: Optional[str] = None
    body: Optional[str] = None


class MessageSent(BaseModel):
    id: int
    from_username: str
    to_username: str
    body: str
    sent_at: datetime

    model_config = {"from_attributes": True}


class MessageDetail(BaseModel):
    id: int
    body: str
    sent_at: datetime
    read_at: Optional[datetime]
    from_user: UserSummary
    to_user: UserSummary

    model_config = {"from_attributes": True}


class MessageReadReceipt(BaseModel):
    id: int
    read_at: Optional[datetime]

    model_config = {"from_attributes": True}


class InboxMessage(BaseModel):
    id: int
    body: str
    sent_at: datetime
    read_at: Optional[datetime]
    from_user: UserSummary

    model_config = {"from_attributes": True}


class OutboxMessage(BaseModel):
    id: int
    body: str
    sent_at: datetime
    read_at: Optional[datetime]
    to_user: UserSummary

    model_config = {"from_attributes": True}


# ─── Envelopes ────────────────────────────────────────────


class MessageSentResponse(BaseModel):
    message: MessageSent


class MessageDetailResponse(BaseModel):
    message: MessageDetail


class MessageReadResponse(BaseModel):
    message: MessageReadReceipt


class InboxResponse(BaseModel):
    messages: list[InboxMessage]


class OutboxResponse(BaseModel):
    messages: list[OutboxMessage]
