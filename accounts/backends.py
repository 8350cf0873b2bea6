"""
Authentication backend for username or email login.
"""

import logging

from django.contrib.auth.backends import ModelBackend

from .models import User
from .repositories import UserRepository

logger = logging.getLogger(__name__)


class UsernameOrEmailBackend(ModelBackend):
    """
    Authenticate against a username or an email address.
    Soft-deleted users are never returned.
    """

    def __init__(self):
        super().__init__()
        self.repository = UserRepository(logger=logger)

    def authenticate(self, request, username=None, password=None, **kwargs):
        if username is None:
            username = kwargs.get(User.USERNAME_FIELD)
        if username is None or password is None:
            return None

        user = self.repository.load_user_by_identifier(username)
        if user is None:
            # Unknown accounts cost one hash like known ones
            User().set_password(password)
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user

        return None

    def get_user(self, user_id):
        try:
            user = self.repository.find(user_id)
        except ValueError:
            return None

        if user is None or not self.user_can_authenticate(user):
            return None
        return user
