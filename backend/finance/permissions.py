# permissions.py
import logging

from django.contrib.auth import get_user_model
from rest_framework import permissions

from .mixins.owner_scope import is_elevated

logger = logging.getLogger(__name__)


class IsOwnerOrElevated(permissions.BasePermission):
    """
    Object-level ownership check.

    Authorization granted to:
    - The record's owner (for user records: the user themselves)
    - Managers, admins and superusers

    Everyone else gets 403, which is logged as an access violation.
    """

    message = "Access denied. You can only access your own records."

    def has_object_permission(self, request, view, obj):
        if isinstance(obj, get_user_model()):
            owner_id = obj.pk
        else:
            owner_id = obj.user_id

        if owner_id == request.user.id:
            return True

        if is_elevated(request.user):
            logger.debug(
                "Elevated access to another user's record granted",
                extra={
                    "user_id": request.user.id,
                    "owner_id": owner_id,
                    "object_type": type(obj).__name__,
                    "action": "elevated_object_access",
                    "component": "IsOwnerOrElevated",
                },
            )
            return True

        logger.warning(
            "Object access denied - not owner",
            extra={
                "user_id": request.user.id,
                "owner_id": owner_id,
                "object_type": type(obj).__name__,
                "object_id": str(obj.pk),
                "action": "object_access_denied",
                "component": "IsOwnerOrElevated",
                "severity": "medium",
            },
        )
        return False
