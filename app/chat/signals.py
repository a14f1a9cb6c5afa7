"""
Signal receivers for the chat app.

Related files:
    - authentication/signals.py: profile_updated definition
    - services.py: ChatUserService.notify_profile_updated
"""

import logging

from django.dispatch import receiver

from authentication.signals import profile_updated
from chat.services import ChatUserService

logger = logging.getLogger(__name__)


@receiver(profile_updated)
def publish_chat_user_updated(sender, user, fields=None, **kwargs):
    """Tell every chat the user is in that their profile changed."""
    notified = ChatUserService.notify_profile_updated(user)
    logger.debug(f"Profile change of user {user.id} published to {notified} chats")
