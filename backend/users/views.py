"""
Views for registration, two-step login, logout and user management.

This module provides API views for email/password login followed by an
emailed one-time passcode, JWT issuance and blacklisting, and the user
administration endpoints.
"""

import logging

from django.contrib.auth import get_user_model
from rest_framework import generics, mixins, permissions, status, viewsets
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from finance.mixins import ListQueryMixin, OwnerScopedQuerysetMixin
from finance.permissions import IsOwnerOrElevated

from .serializers import (LoginSerializer, RegisterSerializer, UserSerializer,
                          VerifyOTPSerializer)
from .services import OTPDeliveryError, OTPService

# Get logger for this module
logger = logging.getLogger(__name__)
User = get_user_model()


class RegisterView(generics.CreateAPIView):
    """Open registration endpoint."""

    serializer_class = RegisterSerializer
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(
            {"success": True, "data": UserSerializer(user).data},
            status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    """
    First login step.

    A correct email/password pair does not log the user in: it issues a
    passcode and tells the client to continue at ``verify-otp``.
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get_authenticate_header(self, request):
        # DRF only answers 401 when a WWW-Authenticate header is available
        return 'Bearer realm="api"'

    def post(self, request):
        serializer = LoginSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]

        try:
            OTPService.issue(email)
        except OTPDeliveryError:
            return Response(
                {"success": False, "message": "Failed to send OTP email. Please try again."},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        return Response(
            {
                "success": True,
                "message": "OTP sent to your email",
                "otp_required": True,
                "email": email,
            },
            status=status.HTTP_200_OK,
        )


class VerifyOTPView(APIView):
    """Second login step: exchanges a valid passcode for a JWT pair."""

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = VerifyOTPSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]

        result = OTPService.verify(email, serializer.validated_data["otp"])
        if not result.valid:
            return Response(
                {"success": False, "message": result.message},
                status=status.HTTP_400_BAD_REQUEST,
            )

        user = User.objects.filter(email__iexact=email, is_active=True).first()
        if user is None:
            logger.warning(
                "Passcode verified for missing or inactive user",
                extra={
                    "email": email,
                    "action": "otp_user_missing",
                    "component": "VerifyOTPView",
                    "severity": "medium",
                },
            )
            return Response(
                {"success": False, "message": "User not found"},
                status=status.HTTP_404_NOT_FOUND,
            )

        refresh = RefreshToken.for_user(user)
        logger.info(
            "Login completed",
            extra={
                "user_id": user.id,
                "action": "login_completed",
                "component": "VerifyOTPView",
            },
        )
        return Response(
            {
                "success": True,
                "message": "Login successful",
                "access": str(refresh.access_token),
                "refresh": str(refresh),
                "user": UserSerializer(user).data,
            },
            status=status.HTTP_200_OK,
        )


class LogoutView(APIView):
    """
    Logout view that blacklists refresh tokens.

    Always answers 200 so the response does not reveal whether the token
    was valid.
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        refresh_token = request.data.get("refresh", "")

        if refresh_token and isinstance(refresh_token, str) and "." in refresh_token:
            try:
                RefreshToken(refresh_token).blacklist()
                logger.info(
                    "Refresh token blacklisted",
                    extra={"action": "logout_blacklisted", "component": "LogoutView"},
                )
            except TokenError as e:
                # Invalid or already blacklisted
                logger.warning(
                    "Token blacklisting failed",
                    extra={
                        "error_message": str(e),
                        "action": "logout_blacklist_failed",
                        "component": "LogoutView",
                    },
                )

        return Response({"detail": "Successfully logged out."}, status=status.HTTP_200_OK)


class UserViewSet(
    OwnerScopedQuerysetMixin,
    ListQueryMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    User administration.

    Managers and admins see and edit everyone; other users only themselves.
    """

    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated, IsOwnerOrElevated]
    owner_lookup = "pk"
    search_fields = ["username", "email", "first_name", "last_name"]
    ordering_fields = ["username", "email", "date_joined", "role"]
    default_ordering = "username"

    def get_queryset(self):
        return self.filter_list_queryset(self.scope_queryset(User.objects.all()))

    def retrieve(self, request, *args, **kwargs):
        return Response({"success": True, "data": self.get_serializer(self.get_object()).data})

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(
            {"success": True, "message": "User updated successfully", "data": serializer.data}
        )

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()
        logger.info(
            "User deleted",
            extra={
                "user_id": request.user.id,
                "deleted_user_id": user.id,
                "action": "user_deleted",
                "component": "UserViewSet",
            },
        )
        user.delete()
        return Response({"success": True, "message": "User deleted successfully"})
