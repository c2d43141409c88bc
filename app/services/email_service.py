# app/services/email_service.py
import logging

from app.core.email_client import send_email, smtp_configured

logger = logging.getLogger(__name__)


def send_otp_email(email: str, otp: str) -> None:
    """
    Deliver a verification code by email.

    Without SMTP configuration (local development) the code is logged
    instead of sent.
    """
    if not smtp_configured():
        logger.warning("SMTP not configured; verification code for %s is %s", email, otp)
        return

    send_email(
        to_email=email,
        subject="Email Verification OTP",
        text_body=(
            f"Your verification code is: {otp}\n\n"
            "If you didn't request this code, please ignore this email."
        ),
        html_body=(
            "<div style=\"font-family: Arial, sans-serif;\">"
            "<h2>Email Verification</h2>"
            "<p>Your verification code is:</p>"
            f"<h1 style=\"letter-spacing: 4px;\">{otp}</h1>"
            "<p>If you didn't request this code, please ignore this email.</p>"
            "</div>"
        ),
    )
    logger.info("Verification code sent to %s", email)
