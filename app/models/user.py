# app/models/user.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Persistent user account.

    Role:
      - "user" | "admin"
      - admin is granted by another admin (or the startup bootstrap),
        never by self-registration.

    Accounts are never physically deleted: deactivation flips `is_active`
    and the auth guard chain rejects inactive accounts on the next request.
    """

    __tablename__ = "users"

    id: int | None = Field(
        default=None,
        primary_key=True,
    )

    email: str = Field(
        max_length=255,
        unique=True,
        index=True,
        description="Login email, stored as submitted",
    )

    password_hash: str = Field(
        max_length=255,
        description="passlib hash; the raw password is never stored",
    )

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=20)

    role: str = Field(
        default="user",
        index=True,
        description="Application role: user | admin",
    )

    is_active: bool = Field(
        default=True,
        description="Soft-deactivation flag",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Last mutation timestamp (UTC)",
    )
