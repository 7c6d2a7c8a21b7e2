"""
Serializers for registration, two-step login and user management.

Login is split in two steps: ``LoginSerializer`` checks the email/password
pair (guarded by django-axes), ``VerifyOTPSerializer`` checks the emailed
passcode that the first step produced.
"""

import logging
import re

from axes.models import AccessAttempt
from django.conf import settings
from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed, PermissionDenied
from rest_framework.validators import UniqueValidator

# Get structured logger for this module
logger = logging.getLogger(__name__)
User = get_user_model()


class RegisterSerializer(serializers.ModelSerializer):
    """
    Creates a new account from username, email and password.

    Currency and monthly income are optional profile fields.
    """

    username = serializers.CharField(
        min_length=3,
        max_length=30,
        validators=[
            UniqueValidator(
                queryset=User.objects.all(),
                message="Username or email already exists",
            )
        ],
    )
    email = serializers.EmailField(
        validators=[
            UniqueValidator(
                queryset=User.objects.all(),
                message="Username or email already exists",
                lookup="iexact",
            )
        ],
    )
    password = serializers.CharField(
        write_only=True,
        min_length=6,
        validators=[validate_password],
        style={"input_type": "password"},
    )
    currency = serializers.RegexField(
        r"^[A-Za-z]{3}$",
        required=False,
        error_messages={"invalid": "Currency must be a 3-letter code."},
    )
    monthly_income = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False
    )

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "password",
            "first_name",
            "last_name",
            "role",
            "currency",
            "monthly_income",
            "date_joined",
        ]
        read_only_fields = ["id", "role", "date_joined"]

    def validate_username(self, value):
        value = value.strip()
        if not re.match(r"^[a-zA-Z0-9_\.]+$", value):
            raise serializers.ValidationError(
                "Username can only contain letters, numbers, underscores and dots."
            )
        return value

    def validate_email(self, value):
        return value.strip().lower()

    def validate_currency(self, value):
        return value.upper()

    def create(self, validated_data):
        password = validated_data.pop("password")
        user = User.objects.create_user(password=password, **validated_data)

        logger.info(
            "User registered",
            extra={
                "user_id": user.id,
                "username": user.username,
                "action": "user_registered",
                "component": "RegisterSerializer",
            },
        )
        return user


class LoginSerializer(serializers.Serializer):
    """
    First login step: email and password.

    Integrates with django-axes: a locked account is refused before the
    password is even checked, and every failed ``authenticate`` call is
    counted by axes towards the lockout.
    """

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={"input_type": "password"})

    def _check_account_lockout(self, username):
        """
        Raise PermissionDenied if axes already counts too many failures.

        Args:
            username (str): Username resolved from the submitted email
        """
        lockout_limit = getattr(settings, "AXES_FAILURE_LIMIT", 5)
        attempt = (
            AccessAttempt.objects.filter(username=username)
            .order_by("-failures_since_start")
            .first()
        )

        if attempt is None:
            logger.debug(
                "No lockout record found for user",
                extra={
                    "username": username,
                    "action": "lockout_check_passed",
                    "component": "LoginSerializer",
                },
            )
            return

        if attempt.failures_since_start >= lockout_limit:
            logger.warning(
                "Account lockout triggered - denying authentication",
                extra={
                    "username": username,
                    "failure_count": attempt.failures_since_start,
                    "lockout_limit": lockout_limit,
                    "action": "account_lockout_enforced",
                    "component": "LoginSerializer",
                    "severity": "high",
                },
            )
            raise PermissionDenied(
                {
                    "detail": "Too many login attempts. Account temporarily locked for 15 minutes.",
                    "locked": True,
                    "retry_after": "15 minutes",
                }
            )

    def validate(self, attrs):
        email = attrs["email"].strip().lower()
        password = attrs["password"]
        request = self.context.get("request")

        logger.info(
            "Email authentication attempt",
            extra={
                "email": email,
                "action": "authentication_attempt",
                "component": "LoginSerializer",
            },
        )

        user_obj = User.objects.filter(email__iexact=email).first()
        if user_obj is None:
            logger.warning(
                "Authentication failed - email not found in system",
                extra={
                    "email": email,
                    "action": "authentication_failure",
                    "component": "LoginSerializer",
                    "reason": "email_not_found",
                },
            )
            raise AuthenticationFailed("Invalid email or password")

        self._check_account_lockout(user_obj.username)

        # AxesStandaloneBackend needs the request to record the attempt
        user = authenticate(request=request, username=user_obj.username, password=password)

        if not user:
            logger.warning(
                "Authentication failed - invalid credentials",
                extra={
                    "email": email,
                    "action": "authentication_failure",
                    "component": "LoginSerializer",
                    "reason": "invalid_credentials",
                    "severity": "medium",
                },
            )
            raise AuthenticationFailed("Invalid email or password")

        logger.info(
            "Password step successful, passcode required",
            extra={
                "user_id": user.id,
                "action": "authentication_success",
                "component": "LoginSerializer",
            },
        )
        attrs["email"] = user.email
        attrs["user"] = user
        return attrs


class VerifyOTPSerializer(serializers.Serializer):
    """Second login step: the emailed passcode."""

    email = serializers.EmailField()
    otp = serializers.CharField()

    def validate_email(self, value):
        return value.strip().lower()

    def validate_otp(self, value):
        value = value.strip()
        length = getattr(settings, "OTP_LENGTH", 6)
        if not value.isdigit() or len(value) != length:
            raise serializers.ValidationError(f"OTP must be {length} digits.")
        return value


class UserSerializer(serializers.ModelSerializer):
    """
    Read/update representation of a user.

    Passwords are write-only and hashed on save. Only elevated callers may
    change a role.
    """

    password = serializers.CharField(
        write_only=True,
        required=False,
        min_length=6,
        validators=[validate_password],
        style={"input_type": "password"},
    )
    email = serializers.EmailField(
        validators=[UniqueValidator(queryset=User.objects.all(), lookup="iexact")]
    )
    username = serializers.CharField(
        min_length=3,
        max_length=30,
        validators=[UniqueValidator(queryset=User.objects.all())],
    )
    currency = serializers.RegexField(r"^[A-Za-z]{3}$", required=False)
    monthly_income = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False
    )

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "password",
            "first_name",
            "last_name",
            "role",
            "currency",
            "monthly_income",
            "is_active",
            "date_joined",
        ]
        read_only_fields = ["id", "is_active", "date_joined"]

    def validate_currency(self, value):
        return value.upper()

    def validate_role(self, value):
        request = self.context.get("request")
        caller = getattr(request, "user", None)
        current = self.instance.role if self.instance else User.ROLE_USER

        if value != current and not (caller and caller.is_elevated):
            logger.warning(
                "Role change denied for non-elevated caller",
                extra={
                    "user_id": getattr(caller, "id", None),
                    "requested_role": value,
                    "action": "role_change_denied",
                    "component": "UserSerializer",
                    "severity": "high",
                },
            )
            raise PermissionDenied("Only managers and admins can change roles.")
        return value

    def update(self, instance, validated_data):
        password = validated_data.pop("password", None)
        instance = super().update(instance, validated_data)
        if password:
            instance.set_password(password)
            instance.save(update_fields=["password"])
            logger.info(
                "User password changed",
                extra={
                    "user_id": instance.id,
                    "action": "password_changed",
                    "component": "UserSerializer",
                },
            )
        return instance
