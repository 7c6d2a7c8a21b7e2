"""
Callables plugged into django-axes.

Login attempts are tracked per username; the login form posts an email, so
both identifiers are accepted when axes asks who is trying to log in.
"""

from django.http import JsonResponse
from rest_framework import status


def get_axes_username(request, credentials):
    """
    AXES_USERNAME_CALLABLE: identifier used to count failed attempts.

    Returns:
        str or None: ``username`` from the credentials, else ``email``
    """
    if not credentials:
        return None
    return credentials.get("username") or credentials.get("email")


def custom_lockout_response(request, credentials, *args, **kwargs):
    """AXES_LOCKOUT_CALLABLE: JSON 403 in the same shape as the login view."""
    return JsonResponse(
        {
            "success": False,
            "detail": "Too many login attempts. Account temporarily locked for 15 minutes.",
            "locked": True,
        },
        status=status.HTTP_403_FORBIDDEN,
    )
