# app/core/auth.py
import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlmodel import Session

from app.core.security import decode_token
from app.database import get_session
from app.models.user import Role, User, has_role

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so we can return our own 401 message.
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """
    Resolve the current user from a bearer token.

    Flow:
      1. If no Authorization header => return None.
      2. Decode JWT => extract 'sub' (user id).
      3. Load the user row; roles are read from the row, not the token,
         so a role change takes effect immediately.

    Raises:
        HTTPException(401): if the token is invalid/expired or the user
        no longer exists.
    """
    if credentials is None:
        return None

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise _unauthorized("Invalid or expired token")

    sub = payload.get("sub")
    if not sub:
        raise _unauthorized("Token missing sub")

    try:
        user_id = uuid.UUID(sub)
    except ValueError:
        raise _unauthorized("Invalid sub in token")

    user = session.get(User, user_id)
    if user is None:
        raise _unauthorized("User not found for token")
    return user


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    """
    Enforce authentication.

    Returns:
        The authenticated User.

    Raises:
        HTTPException(401): if no token was sent.
    """
    if user is None:
        raise _unauthorized("Authentication required")
    return user


def require_role(role: Role):
    """
    Build a dependency that admits only users holding `role`.
    """

    def _guard(user: User = Depends(require_auth)) -> User:
        if not has_role(user, role):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied",
            )
        return user

    return _guard


require_admin = require_role(Role.ADMIN)
