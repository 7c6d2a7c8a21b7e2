# users/services/__init__.py
from .otp_service import OTPDeliveryError, OTPService, OTPVerification

__all__ = [
    "OTPService",
    "OTPVerification",
    "OTPDeliveryError",
]
