# app/services/auth_service.py
import logging
from typing import Callable

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.security import (
    create_access_token,
    generate_otp,
    hash_password,
    verify_password,
)
from app.models.user import OTPCode, User
from app.repositories.user_repo import OTPRepository, UserRepository
from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    VerificationRequired,
)
from app.services.user_service import UserService

logger = logging.getLogger(__name__)

OTPSender = Callable[[str, str], None]


class AuthService:
    """
    Registration, login and email verification.

    Flow:
      register -> unverified user + OTP sent + token
      login    -> token, or a fresh OTP when the email is not verified yet
      verify   -> latest OTP must match; marks verified, consumes the code
    """

    def __init__(
        self,
        user_repo: UserRepository,
        otp_repo: OTPRepository,
        user_service: UserService,
        otp_sender: OTPSender,
    ):
        self.user_repo = user_repo
        self.otp_repo = otp_repo
        self.user_service = user_service
        self.otp_sender = otp_sender

    # ---- internal helpers ----

    def _issue_otp(self, session: Session, email: str) -> None:
        code = generate_otp()
        self.otp_repo.create(session, OTPCode(email=email, code=code))
        self.otp_sender(email, code)

    def _auth_response(self, session: Session, user: User, message: str) -> AuthResponse:
        token = create_access_token(user.id, user.roles)
        return AuthResponse(
            message=message,
            token=token,
            user=self.user_service.to_read(session, user),
        )

    # ---- public operations ----

    def register(self, session: Session, payload: RegisterRequest) -> AuthResponse:
        """
        Create an unverified customer account.

        Fails with 400 (and writes nothing) when the email or username
        is already taken.
        """
        if self.user_repo.find_conflict(
            session, email=payload.email, username=payload.username
        ):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email or username already exists",
            )

        user = User(
            email=payload.email,
            username=payload.username,
            full_name=payload.full_name,
            password_hash=hash_password(payload.password),
            is_verified=False,
        )
        user = self.user_repo.create(session, user)
        logger.info("Registered user %s", user.id)

        self._issue_otp(session, user.email)

        return self._auth_response(
            session,
            user,
            "User registered successfully. Please verify your email.",
        )

    def login(
        self,
        session: Session,
        payload: LoginRequest,
    ) -> AuthResponse | VerificationRequired:
        user = self.user_repo.get_by_email(session, payload.email)
        if not user or not verify_password(payload.password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials",
            )

        if not user.is_verified:
            self._issue_otp(session, user.email)
            return VerificationRequired(email=user.email)

        return self._auth_response(session, user, "Login successful")

    def send_otp(self, session: Session, email: str) -> None:
        """
        Replace any pending codes for `email` with a fresh one.
        """
        user = self.user_repo.get_by_email(session, email)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )

        self.otp_repo.delete_for_email(session, email)
        self._issue_otp(session, email)

    def verify_otp(self, session: Session, email: str, otp: str) -> AuthResponse:
        """
        Check `otp` against the most recent code for `email`.
        The code is deleted after a successful match.
        """
        record = self.otp_repo.latest_for_email(session, email)
        if not record:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Verification code not found or expired",
            )

        if record.code != otp:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid verification code",
            )

        user = self.user_repo.get_by_email(session, email)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )

        user.is_verified = True
        user = self.user_repo.update(session, user)
        self.otp_repo.delete(session, record)

        return self._auth_response(session, user, "Email verified successfully")
