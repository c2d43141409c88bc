# app/schemas/user.py
import uuid
from datetime import datetime

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.models.user import Role

MAX_ADDRESSES = 2


class AddressBase(SQLModel):
    """
    Postal address fields shared by input and output.
    """

    street_address: str = Field(max_length=255)
    city: str = Field(max_length=100)
    zip_code: str = Field(max_length=20)

    @field_validator("street_address", "city", "zip_code")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class AddressIn(AddressBase):
    model_config = ConfigDict(extra="forbid")


class AddressRead(AddressBase):
    id: uuid.UUID


class UserRead(SQLModel):
    """Profile returned to clients (never includes the password hash)."""

    id: uuid.UUID
    email: EmailStr
    username: str
    full_name: str | None = None
    roles: list[Role]
    is_verified: bool
    addresses: list[AddressRead] = []
    created_at: datetime
    updated_at: datetime


class UserUpdate(SQLModel):
    """
    Partial profile update for authenticated users.

    - `addresses`, when given, replaces the whole list (max 2).
    - email/username uniqueness is checked only when the value changes.
    """

    model_config = ConfigDict(extra="forbid")

    username: str | None = Field(default=None, min_length=3, max_length=50)
    email: EmailStr | None = None
    full_name: str | None = Field(default=None, max_length=100)
    addresses: list[AddressIn] | None = None

    @field_validator("username", "full_name")
    @classmethod
    def normalize_text(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str | None) -> str | None:
        return v.lower() if v else v


class PasswordChange(SQLModel):
    model_config = ConfigDict(extra="forbid")

    old_password: str
    new_password: str = Field(min_length=6, max_length=72)
