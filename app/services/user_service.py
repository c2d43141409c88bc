# app/services/user_service.py
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.security import hash_password, verify_password
from app.models.user import User, UserAddress
from app.repositories.user_repo import UserRepository
from app.schemas.user import (
    MAX_ADDRESSES,
    AddressRead,
    PasswordChange,
    UserRead,
    UserUpdate,
)


class UserService:
    """
    Business logic for User.

    Responsibilities:
      - profile reads (never exposing password_hash)
      - address ceiling and email/username uniqueness on update
      - password change with old-password check
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    # ----- Helpers -----

    def to_read(self, session: Session, user: User) -> UserRead:
        addresses = self.repo.list_addresses(session, user.id)
        return UserRead(
            id=user.id,
            email=user.email,
            username=user.username,
            full_name=user.full_name,
            roles=user.roles,
            is_verified=user.is_verified,
            addresses=[
                AddressRead(
                    id=a.id,
                    street_address=a.street_address,
                    city=a.city,
                    zip_code=a.zip_code,
                )
                for a in addresses
            ],
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def get_user(self, session: Session, user_id: uuid.UUID) -> User:
        """
        Raises:
            HTTPException(404): if not found.
        """
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )
        return user

    # ----- Self profile -----

    def get_profile(self, session: Session, current_user: User) -> UserRead:
        return self.to_read(session, current_user)

    def get_public_profile(self, session: Session, user_id: uuid.UUID) -> UserRead:
        return self.to_read(session, self.get_user(session, user_id))

    def update_profile(
        self,
        session: Session,
        current_user: User,
        payload: UserUpdate,
    ) -> UserRead:
        """
        Partial profile update.

        Rules:
          - at most MAX_ADDRESSES addresses
          - a changed email/username must not belong to another user
        """
        if payload.addresses is not None and len(payload.addresses) > MAX_ADDRESSES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Maximum of {MAX_ADDRESSES} addresses allowed",
            )

        new_email = payload.email if payload.email and payload.email != current_user.email else None
        new_username = (
            payload.username
            if payload.username and payload.username != current_user.username
            else None
        )
        if new_email or new_username:
            conflict = self.repo.find_conflict(
                session,
                email=new_email,
                username=new_username,
                exclude_id=current_user.id,
            )
            if conflict:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Email or username already exists",
                )

        if new_email:
            current_user.email = new_email
        if new_username:
            current_user.username = new_username
        if payload.full_name is not None:
            current_user.full_name = payload.full_name

        if payload.addresses is not None:
            self.repo.replace_addresses(
                session,
                current_user.id,
                [
                    UserAddress(
                        user_id=current_user.id,
                        street_address=a.street_address,
                        city=a.city,
                        zip_code=a.zip_code,
                        position=idx,
                    )
                    for idx, a in enumerate(payload.addresses)
                ],
            )

        current_user.updated_at = datetime.now(timezone.utc)
        user = self.repo.update(session, current_user)
        return self.to_read(session, user)

    def change_password(
        self,
        session: Session,
        current_user: User,
        payload: PasswordChange,
    ) -> None:
        if not verify_password(payload.old_password, current_user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Current password is incorrect",
            )

        current_user.password_hash = hash_password(payload.new_password)
        current_user.updated_at = datetime.now(timezone.utc)
        self.repo.update(session, current_user)
