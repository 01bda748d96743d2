"""App configuration for accounts and credentials."""

from django.apps import AppConfig


class AuthenticationConfig(AppConfig):
    """Holds the User model, the credential store, and the token service."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"
    verbose_name = "Accounts"
