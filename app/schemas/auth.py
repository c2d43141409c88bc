# app/schemas/auth.py
from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.schemas.user import UserRead


class RegisterRequest(SQLModel):
    """
    Payload for account creation.

    Validation rules:
      - email must be a valid EmailStr (stored lower-cased)
      - username 3-50 chars, no surrounding whitespace
      - password 6-72 chars (bcrypt limit)
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    username: str = Field(min_length=3, max_length=50)
    full_name: str | None = Field(default=None, max_length=100)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("username cannot be empty")
        return v

    @field_validator("full_name")
    @classmethod
    def normalize_full_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class LoginRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class SendOTPRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class VerifyOTPRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    otp: str = Field(min_length=6, max_length=6)

    @field_validator("otp")
    @classmethod
    def six_digits(cls, v: str) -> str:
        v = v.strip()
        if len(v) != 6 or not (v.isascii() and v.isdigit()):
            raise ValueError("otp must be 6 digits")
        return v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class AuthResponse(SQLModel):
    """Token issuance response (register, login, verify-otp)."""

    message: str
    token: str
    user: UserRead


class VerificationRequired(SQLModel):
    """Login response for accounts whose email is not verified yet."""

    requires_verification: bool = True
    email: EmailStr


class MessageResponse(SQLModel):
    message: str
