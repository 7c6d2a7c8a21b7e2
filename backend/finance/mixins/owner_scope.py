# finance/mixins/owner_scope.py
"""
Owner scoping for views and serializers.

Ordinary users only ever read and write their own records. Managers, admins
and superusers ("elevated" callers) see everyone's records and may narrow a
list with ``?user_id=``.
"""

import logging

from rest_framework.exceptions import ValidationError

logger = logging.getLogger(__name__)


def is_elevated(user):
    return bool(getattr(user, "is_elevated", False) or getattr(user, "is_superuser", False))


def requested_owner_id(request):
    """The ``?user_id=`` narrowing parameter, or ``None`` when absent."""
    value = request.query_params.get("user_id", "").strip()
    if not value:
        return None
    if not value.isdigit():
        raise ValidationError({"user_id": "user_id must be an integer."})
    return int(value)


class OwnerScopedQuerysetMixin:
    """
    View mixin restricting list querysets to the caller's records.

    Detail actions are not narrowed: the object is loaded unscoped and
    ``IsOwnerOrElevated`` answers 403 for someone else's record.
    """

    owner_lookup = "user"

    def scope_queryset(self, queryset):
        user = self.request.user
        if self.action != "list":
            return queryset

        if is_elevated(user):
            requested_user_id = requested_owner_id(self.request)
            if requested_user_id is not None:
                logger.debug(
                    "Elevated list narrowed to one owner",
                    extra={
                        "user_id": user.id,
                        "requested_user_id": requested_user_id,
                        "action": "owner_scope_narrowed",
                        "component": type(self).__name__,
                    },
                )
                return queryset.filter(**{self.owner_lookup: requested_user_id})
            return queryset

        return queryset.filter(**{self.owner_lookup: user.pk})


class OwnerAssignmentMixin:
    """
    Serializer mixin that assigns the requesting user as owner on create.

    ``user`` is never accepted from the payload.
    """

    def validate(self, attrs):
        attrs = super().validate(attrs)
        request = self.context.get("request")

        if request is not None and self.instance is None:
            attrs["user"] = request.user
            logger.debug(
                "Owner assignment from request completed",
                extra={
                    "user_id": request.user.id,
                    "action": "owner_assignment",
                    "component": "OwnerAssignmentMixin",
                },
            )
        return attrs
