# app/routers/auth.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.database import get_session
from app.repositories.user_repo import OTPRepository, UserRepository
from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    SendOTPRequest,
    VerificationRequired,
    VerifyOTPRequest,
)
from app.services.auth_service import AuthService
from app.services.email_service import send_otp_email
from app.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])

user_repo = UserRepository()
otp_repo = OTPRepository()
service = AuthService(user_repo, otp_repo, UserService(user_repo), send_otp_email)


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(
    payload: RegisterRequest,
    session: Session = Depends(get_session),
):
    """
    Create an account and email a verification code.

    Returns a bearer token right away; the account stays unverified
    until /auth/verify-otp succeeds.
    """
    return service.register(session, payload)


@router.post("/login", response_model=AuthResponse | VerificationRequired)
def login(
    payload: LoginRequest,
    session: Session = Depends(get_session),
):
    """
    Exchange credentials for a bearer token.

    Unverified accounts get `requires_verification: true` and a new code
    by email instead of a token.
    """
    return service.login(session, payload)


@router.post("/send-otp", response_model=MessageResponse)
def send_otp(
    payload: SendOTPRequest,
    session: Session = Depends(get_session),
):
    """
    (Re)send a verification code, invalidating earlier ones.
    """
    service.send_otp(session, payload.email)
    return MessageResponse(message="Verification code sent successfully")


@router.post("/verify-otp", response_model=AuthResponse)
def verify_otp(
    payload: VerifyOTPRequest,
    session: Session = Depends(get_session),
):
    return service.verify_otp(session, payload.email, payload.otp)
