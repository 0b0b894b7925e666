# app/schemas/user.py
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import Field

from app.schemas.common import CamelModel, Envelope

# App-level roles. Anonymous callers have no role.
Role = Literal["user", "admin"]


def _strip_optional(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    return v or None


class UserRegister(CamelModel):
    """
    Payload for sign-up.

    Validation rules:
      - email must be a valid EmailStr
      - password at least 6 characters
      - role is only honored for admins creating admins
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=20)
    role: Role | None = None

    @field_validator("first_name", "last_name", "phone")
    @classmethod
    def normalize_text(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserRead(CamelModel):
    """Response schema returned to clients. Never carries the hash."""

    id: int
    email: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    role: Role
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UserRoleUpdate(CamelModel):
    """
    Admin-only role update schema.
    """

    model_config = ConfigDict(extra="forbid")
    role: Role


class AuthResponse(Envelope):
    user: UserRead
    token: str


class UserResponse(Envelope):
    user: UserRead


class UserListResponse(Envelope):
    users: list[UserRead]
