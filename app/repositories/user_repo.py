# app/repositories/user_repo.py
import uuid

from sqlalchemy import delete, or_
from sqlmodel import Session, select

from app.models.user import OTPCode, User, UserAddress


class UserRepository:
    """
    Data access layer for User and UserAddress.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    # ----- Users -----

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        """Return a User by unique email, or None if not found."""
        stmt = select(User).where(User.email == email)
        return session.exec(stmt).first()

    def find_conflict(
        self,
        session: Session,
        *,
        email: str | None = None,
        username: str | None = None,
        exclude_id: uuid.UUID | None = None,
    ) -> User | None:
        """
        Return any user (other than `exclude_id`) already holding
        `email` or `username`.
        """
        conditions = []
        if email is not None:
            conditions.append(User.email == email)
        if username is not None:
            conditions.append(User.username == username)
        if not conditions:
            return None

        stmt = select(User).where(or_(*conditions))
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return session.exec(stmt).first()

    def create(self, session: Session, user: User) -> User:
        """Insert a new User and return the persisted row."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def update(self, session: Session, user: User) -> User:
        """Persist changes to an existing User."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    # ----- Addresses -----

    def list_addresses(self, session: Session, user_id: uuid.UUID) -> list[UserAddress]:
        stmt = (
            select(UserAddress)
            .where(UserAddress.user_id == user_id)
            .order_by(UserAddress.position)
        )
        return list(session.exec(stmt).all())

    def replace_addresses(
        self,
        session: Session,
        user_id: uuid.UUID,
        addresses: list[UserAddress],
    ) -> None:
        """
        Stage removal of the user's addresses and insertion of `addresses`.
        No commit: the caller commits together with the user row.
        """
        session.exec(delete(UserAddress).where(UserAddress.user_id == user_id))  # type: ignore[call-overload]
        session.add_all(addresses)


class OTPRepository:
    """
    Data access layer for verification codes.
    """

    def create(self, session: Session, otp: OTPCode) -> OTPCode:
        session.add(otp)
        session.commit()
        session.refresh(otp)
        return otp

    def latest_for_email(self, session: Session, email: str) -> OTPCode | None:
        stmt = (
            select(OTPCode)
            .where(OTPCode.email == email)
            .order_by(OTPCode.created_at.desc())
        )
        return session.exec(stmt).first()

    def delete_for_email(self, session: Session, email: str) -> None:
        session.exec(delete(OTPCode).where(OTPCode.email == email))  # type: ignore[call-overload]
        session.commit()

    def delete(self, session: Session, otp: OTPCode) -> None:
        session.delete(otp)
        session.commit()
