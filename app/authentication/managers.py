"""
User manager for email-based accounts.

Related files:
    - models.py: User model that uses this manager
    - services.py: AccountService.register / login

Emails are stored lowercased and looked up case-insensitively, so
"Alice@Example.com" and "alice@example.com" are the same account both at
registration and at login.
"""

from django.contrib.auth.models import BaseUserManager


class UserManager(BaseUserManager):
    """
    Manager for User.

    Usage:
        user = User.objects.create_user(email="a@example.com", password="...")
        admin = User.objects.create_superuser(email="root@example.com", password="...")

    Note:
        Soft-deleted users stay visible through this manager: memberships and
        messages still point at them. Login rejects them in AccountService.
    """

    @classmethod
    def normalize_email(cls, email):
        return super().normalize_email(email).lower()

    def get_by_natural_key(self, email):
        # Used by ModelBackend.authenticate()
        return self.get(email__iexact=email)

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("An email address is required")

        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)

        user = self.model(email=self.normalize_email(email), **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """
        Create a staff superuser.

        Raises:
            ValueError: If is_staff or is_superuser is explicitly False
        """
        for flag in ("is_staff", "is_superuser"):
            extra_fields.setdefault(flag, True)
            if extra_fields[flag] is not True:
                raise ValueError(f"Superuser must have {flag}=True.")

        return self.create_user(email, password, **extra_fields)
