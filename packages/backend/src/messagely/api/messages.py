"""Messages API — send, view, and mark read.

- POST /messages → send from the logged-in user
- GET /messages/:id → sender or recipient only
- POST /messages/:id/read → recipient only; repeat calls keep the first read_at

The message is loaded first and the access rules run on it, so an
unknown id is a 404 for everyone and a known id is a 403 for outsiders.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from messagely.auth.access import ensure_can_mark_read, ensure_can_read
from messagely.auth.dependencies import CurrentIdentity, get_current_user
from messagely.db.engine import get_db
from messagely.schemas.message import (
    MessageCreate,
    MessageDetail,
    MessageDetailResponse,
    MessageReadReceipt,
    MessageReadResponse,
    MessageSent,
    MessageSentResponse,
)
from messagely.services.message_service import MessageService

router = APIRouter(prefix="/messages")


@router.post("", response_model=MessageSentResponse, status_code=201)
async def send_message(
    body: MessageCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    message = await MessageService(db).create(
        from_username=identity.username,
        to_username=body.to_username,
        body=body.body,
    )
    return MessageSentResponse(message=MessageSent.model_validate(message))


@router.get("/{message_id}", response_model=MessageDetailResponse)
async def get_message(
    message_id: int,
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    message = await MessageService(db).get(message_id)
    ensure_can_read(message, identity.username)
    return MessageDetailResponse(message=MessageDetail.model_validate(message))


@router.post("/{message_id}/read", response_model=MessageReadResponse)
async def mark_read(
    message_id: int,
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    messages = MessageService(db)
    ensure_can_mark_read(await messages.get(message_id), identity.username)
    message = await messages.mark_read(message_id)
    return MessageReadResponse(message=MessageReadReceipt.model_validate(message))
