"""
Authentication signal receivers.
"""

import logging

from django.contrib.auth.signals import user_logged_in, user_logged_out, user_login_failed
from django.dispatch import receiver

from .repositories import UserRepository
from .security import get_client_ip

logger = logging.getLogger(__name__)


@receiver(user_logged_in)
def record_login(sender, request, user, **kwargs):
    UserRepository(logger=logger).touch_last_seen(user)
    logger.info(f"User {user.username} logged in from {get_client_ip(request) if request else 'unknown'}")


@receiver(user_logged_out)
def record_logout(sender, request, user, **kwargs):
    if user is not None:
        logger.info(f"User {user.username} logged out")


@receiver(user_login_failed)
def record_login_failure(sender, credentials, request=None, **kwargs):
    # Credentials are already scrubbed of the password by Django
    logger.warning(
        f"Login failed for {credentials.get('username', '')!r}"
        f" from {get_client_ip(request) if request else 'unknown'}"
    )
