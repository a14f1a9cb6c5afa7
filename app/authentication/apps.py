"""
Django app configuration for authentication.
"""

from django.apps import AppConfig


class AuthenticationConfig(AppConfig):
    """Accounts and JWT authentication."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"
    verbose_name = "Accounts"

    def ready(self):
        """Connect account lifecycle receivers (see signals.py)."""
        from authentication import signals  # noqa: F401
