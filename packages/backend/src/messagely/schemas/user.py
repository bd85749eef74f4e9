"""Pydantic schemas for registration, login and user profiles.

Request fields are optional and default to None, so a missing or null
field reaches UserService and comes back as the same 400 ValidationError
as an empty one. password_hash never appears in any response model.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


# ─── Requests ─────────────────────────────────────────────


class RegisterRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"


# ─── Responses ────────────────────────────────────────────


class UserSummary(BaseModel):
    username: str
    first_name: str
    last_name: str
    phone: str

    model_config = {"from_attributes": True}


class UserDetail(UserSummary):
    joined_at: datetime
    last_login_at: datetime


class UserList(BaseModel):
    users: list[UserSummary]


class UserDetailResponse(BaseModel):
    user: UserDetail
