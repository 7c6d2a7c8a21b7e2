from django.apps import AppConfig


class UsersConfig(AppConfig):
    """Accounts, roles and the one-time passcode login factor."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "users"
