# app/routers/users.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_auth
from app.database import get_session
from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.auth import MessageResponse
from app.schemas.user import PasswordChange, UserRead, UserUpdate
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

repo = UserRepository()
service = UserService(repo)


# -------- Self profile --------


@router.get("/profile", response_model=UserRead)
def read_profile(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Return the authenticated user's profile.
    """
    return service.get_profile(session, current_user)


@router.put("/profile", response_model=UserRead)
def update_profile(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Update the authenticated user's profile (partial update).

    - At most 2 addresses; a submitted list replaces the stored one.
    - A new email/username must not be used by another account.
    """
    return service.update_profile(session, current_user, payload)


@router.put("/change-password", response_model=MessageResponse)
def change_password(
    payload: PasswordChange,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Change the password after checking the current one.
    """
    service.change_password(session, current_user, payload)
    return MessageResponse(message="Password updated successfully")


@router.get(
    "/profile/{user_id}",
    response_model=UserRead,
    dependencies=[Depends(require_auth)],
)
def read_user_profile(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get another user's profile by id.
    """
    return service.get_public_profile(session, user_id)
