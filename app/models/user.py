# app/models/user.py
import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class Role(str, enum.Enum):
    """Application roles. A user holds one or more of them."""

    CUSTOMER = "customer"
    ADMIN = "admin"
    SELLER = "seller"


class User(SQLModel, table=True):
    """
    Persistent user account.

    Identity:
      - email and username are both unique across all users
      - password_hash is a bcrypt hash, never returned to clients

    Roles:
      - stored as a JSON list of Role values, default ["customer"]
      - checked through has_role(), not by scanning strings
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Login email (stored lower-cased)",
    )

    username: str = Field(
        unique=True,
        index=True,
        max_length=50,
    )

    password_hash: str

    full_name: str | None = Field(default=None, max_length=100)

    roles: list[str] = Field(
        default_factory=lambda: [Role.CUSTOMER.value],
        sa_column=Column(JSON, nullable=False),
    )

    is_verified: bool = Field(
        default=False,
        description="Set once the email OTP has been confirmed",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class UserAddress(SQLModel, table=True):
    """
    Saved address for a user (at most 2 per user, enforced in UserService).
    """

    __tablename__ = "user_addresses"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    street_address: str
    city: str
    zip_code: str

    position: int = Field(default=0, ge=0)


class OTPCode(SQLModel, table=True):
    """
    One-time email verification code.

    The most recently created row for an email is the only one accepted.
    Rows are deleted once used.
    """

    __tablename__ = "otp_codes"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
    )

    email: str = Field(index=True)
    code: str = Field(min_length=6, max_length=6)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
    )


def has_role(user: User, role: Role) -> bool:
    """Capability predicate used by route guards."""
    return role.value in (user.roles or [])
