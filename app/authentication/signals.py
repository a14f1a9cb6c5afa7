"""
Django signals for authentication.

This module defines:
- profile_updated: Custom signal sent after a user's public profile changes
- Logging of account lifecycle events

Related files:
    - services.py: AccountService.update_profile sends profile_updated
    - chat/signals.py: Fans profile changes out to chat subscribers
    - apps.py: Signal import in ready()
"""

import logging

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import Signal, receiver

logger = logging.getLogger(__name__)

# Sent with sender=User, user=<User>, fields=<list of changed field names>.
profile_updated = Signal()


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def log_user_created(sender, instance, created, **kwargs):
    """Log newly created accounts."""
    if created:
        logger.info(f"User created: {instance.id}")
