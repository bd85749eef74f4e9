"""Auth API — registration and login.

- POST /auth/register → create a user, return a bearer token
- POST /auth/login → username/password → bearer token, records the login

Both routes are open. Login answers an unknown username and a wrong
password with the same 401, so a login attempt never reveals whether a username exists.
"""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from messagely.auth.jwt import create_access_token
from messagely.db.engine import get_db
from messagely.errors import AuthenticationError, NotFoundError
from messagely.schemas.user import LoginRequest, RegisterRequest, TokenResponse
from messagely.services.user_service import UserService

logger = structlog.get_logger()

router = APIRouter(prefix="/auth")

INVALID_CREDENTIALS = "Invalid username/password"


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Register a new user and log them in."""
    user = await UserService(db).register(
        username=body.username,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        phone=body.phone,
    )
    return TokenResponse(token=create_access_token(user.username))


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Login with username and password → bearer token."""
    users = UserService(db)
    try:
        valid = await users.authenticate(body.username, body.password)
    except NotFoundError:
        valid = False

    if not valid:
        logger.info("user.login_failed", username=body.username)
        raise AuthenticationError(INVALID_CREDENTIALS)

    await users.update_login_timestamp(body.username)
    logger.info("user.logged_in", username=body.username)
    return TokenResponse(token=create_access_token(body.username))
