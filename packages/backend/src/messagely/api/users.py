"""Users API — directory listing, profiles, and mailboxes.

- GET /users → everyone's public info
- GET /users/:username → full profile (own account only)
- GET /users/:username/to → messages received (own account only)
- GET /users/:username/from → messages sent (own account only)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from messagely.auth.access import ensure_same_user
from messagely.auth.dependencies import CurrentIdentity, get_current_user
from messagely.db.engine import get_db
from messagely.schemas.message import (
    InboxMessage,
    InboxResponse,
    OutboxMessage,
    OutboxResponse,
)
from messagely.schemas.user import (
    UserDetail,
    UserDetailResponse,
    UserList,
    UserSummary,
)
from messagely.services.user_service import UserService

router = APIRouter(prefix="/users")


@router.get("", response_model=UserList)
async def list_users(db: AsyncSession = Depends(get_db)):
    users = await UserService(db).list_all()
    return UserList(users=[UserSummary.model_validate(u) for u in users])


@router.get("/{username}", response_model=UserDetailResponse)
async def get_user(
    username: str,
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    ensure_same_user(identity.username, username)
    user = await UserService(db).get(username)
    return UserDetailResponse(user=UserDetail.model_validate(user))


@router.get("/{username}/to", response_model=InboxResponse)
async def messages_to(
    username: str,
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    ensure_same_user(identity.username, username)
    messages = await UserService(db).messages_to(username)
    return InboxResponse(messages=[InboxMessage.model_validate(m) for m in messages])


@router.get("/{username}/from", response_model=OutboxResponse)
async def messages_from(
    username: str,
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    ensure_same_user(identity.username, username)
    messages = await UserService(db).messages_from(username)
    return OutboxResponse(messages=[OutboxMessage.model_validate(m) for m in messages])
