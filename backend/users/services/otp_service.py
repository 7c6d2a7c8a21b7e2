"""
Service for issuing and verifying email one-time passcodes.

The passcode is the second login factor: a correct email/password pair only
earns a code, and only a verified code earns a JWT pair.
"""

import logging
import secrets
from dataclasses import dataclass

from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.core.mail import send_mail
from django.db import transaction as db_transaction

from ..models import OneTimePasscode

logger = logging.getLogger(__name__)


class OTPDeliveryError(Exception):
    """Raised when the passcode email could not be sent."""


@dataclass(frozen=True)
class OTPVerification:
    valid: bool
    message: str


class OTPService:
    """
    Issues, stores and verifies passcodes.

    Codes are stored hashed with Django's password hashers; a fresh code
    replaces any previous one for the same email.
    """

    MSG_NOT_FOUND = "OTP not found or expired"
    MSG_TOO_MANY_ATTEMPTS = "Too many failed attempts. Please request a new OTP."
    MSG_EXPIRED = "OTP has expired"
    MSG_INVALID = "Invalid OTP"
    MSG_VERIFIED = "OTP verified successfully"

    @staticmethod
    def generate_code(length=None):
        """Return a random numeric code with no leading zero."""
        length = length or getattr(settings, "OTP_LENGTH", 6)
        lower = 10 ** (length - 1)
        return str(lower + secrets.randbelow(9 * lower))

    @staticmethod
    @db_transaction.atomic
    def issue(email):
        """
        Create, store and email a new passcode for ``email``.

        Returns:
            OneTimePasscode: The stored record (the plain code is never kept).

        Raises:
            OTPDeliveryError: If the email backend fails; the stored code is
                rolled back with it.
        """
        code = OTPService.generate_code()

        deleted, _ = OneTimePasscode.objects.filter(email__iexact=email).delete()
        record = OneTimePasscode.objects.create(
            email=email,
            code_hash=make_password(code),
            expires_at=OneTimePasscode.default_expiry(),
        )

        logger.info(
            "One-time passcode issued",
            extra={
                "email": email,
                "replaced_previous": bool(deleted),
                "expires_at": record.expires_at.isoformat(),
                "action": "otp_issued",
                "component": "OTPService",
            },
        )

        try:
            OTPService._send(email, code)
        except Exception as e:
            logger.error(
                "One-time passcode email delivery failed",
                extra={
                    "email": email,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "action": "otp_delivery_failed",
                    "component": "OTPService",
                    "severity": "high",
                },
                exc_info=True,
            )
            raise OTPDeliveryError("Failed to send OTP email") from e

        return record

    @staticmethod
    def _send(email, code):
        expiry_minutes = getattr(settings, "OTP_EXPIRY_MINUTES", 10)
        subject = getattr(settings, "OTP_EMAIL_SUBJECT", "Budget Buddy - OTP Verification")
        text_body = (
            f"Your OTP code for login is: {code}\n\n"
            f"This code will expire in {expiry_minutes} minutes.\n"
            "If you didn't request this code, please ignore this email."
        )
        html_body = (
            '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
            f"<h2>{subject}</h2>"
            "<p>Your OTP code for login is:</p>"
            f'<h1 style="letter-spacing: 5px;">{code}</h1>'
            f"<p>This code will expire in {expiry_minutes} minutes.</p>"
            '<p style="color: #666; font-size: 12px;">'
            "If you didn't request this code, please ignore this email.</p>"
            "</div>"
        )
        send_mail(
            subject,
            text_body,
            settings.DEFAULT_FROM_EMAIL,
            [email],
            html_message=html_body,
        )

    @staticmethod
    def verify(email, code):
        """
        Check ``code`` against the stored passcode for ``email``.

        A correct code deletes the record so it cannot be replayed. An expired
        code is deleted as well; a wrong code only bumps the attempt counter.
        """
        max_attempts = getattr(settings, "OTP_MAX_ATTEMPTS", 5)
        record = OneTimePasscode.objects.filter(email__iexact=email).first()

        if record is None:
            return OTPService._reject(email, OTPService.MSG_NOT_FOUND, "not_found")

        if record.attempts >= max_attempts:
            return OTPService._reject(
                email, OTPService.MSG_TOO_MANY_ATTEMPTS, "too_many_attempts"
            )

        if record.is_expired:
            record.delete()
            return OTPService._reject(email, OTPService.MSG_EXPIRED, "expired")

        if not check_password(code, record.code_hash):
            record.attempts += 1
            record.save(update_fields=["attempts"])
            return OTPService._reject(
                email, OTPService.MSG_INVALID, "mismatch", attempts=record.attempts
            )

        record.delete()
        logger.info(
            "One-time passcode verified",
            extra={
                "email": email,
                "action": "otp_verified",
                "component": "OTPService",
            },
        )
        return OTPVerification(valid=True, message=OTPService.MSG_VERIFIED)

    @staticmethod
    def _reject(email, message, reason, **context):
        logger.warning(
            "One-time passcode rejected",
            extra={
                "email": email,
                "reason": reason,
                **context,
                "action": "otp_rejected",
                "component": "OTPService",
                "severity": "medium",
            },
        )
        return OTPVerification(valid=False, message=message)
