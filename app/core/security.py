# app/core/security.py
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable

import bcrypt
from jose import jwt

from app.core.config import get_settings

settings = get_settings()

# bcrypt only looks at the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Return a bcrypt hash (as text) for a plain password."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in the database
        return False


def create_access_token(
    user_id: uuid.UUID,
    roles: Iterable[str],
    expires_minutes: int | None = None,
) -> str:
    """
    Issue a bearer token (JWT) binding the user id and roles.

    Claims:
      - sub: user id (string UUID)
      - roles: list of role values at issue time
      - iat / exp: issue and expiry timestamps
    """
    now = datetime.now(timezone.utc)
    minutes = expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "roles": list(roles),
        "iat": now,
        "exp": now + timedelta(minutes=minutes),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a bearer token (signature + exp).

    Raises jose.JWTError on any failure; callers map it to 401.
    """
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])


def generate_otp() -> str:
    """6-digit numeric one-time code."""
    return f"{secrets.randbelow(900000) + 100000}"


def generate_transaction_id() -> str:
    """Unique payment reference, e.g. TXN_1717171717171_9f2c1a0b."""
    millis = int(datetime.now(timezone.utc).timestamp() * 1000)
    return f"TXN_{millis}_{secrets.token_hex(4)}"
