from typing import Optional

from django.utils import timezone

from core.models import IncludeDeleted
from core.repositories import BaseEntityRepository

from .models import User


class UserRepository(BaseEntityRepository):
    """Repository for User accounts"""

    model = User

    def load_user_by_identifier(self, identifier: Optional[str], include_deleted=IncludeDeleted.NO):
        """
        Load a user by username or email address.

        Args:
            identifier: Username, or email address (case-insensitive)
            include_deleted: Soft delete option

        Returns:
            User instance, or None if not found
        """
        identifier = (identifier or '').strip()
        if not identifier:
            return None

        queryset = self.get_queryset(include_deleted)

        user = queryset.filter(username=identifier).first()
        if user is None:
            user = queryset.filter(email__iexact=identifier).first()

        return user

    def touch_last_seen(self, user: User, when=None) -> User:
        """Record user activity without counting it as a modification"""
        when = when or timezone.now()
        self.model._default_manager.filter(pk=user.pk).update(time_stamp_last_seen=when)
        user.time_stamp_last_seen = when
        if getattr(user, '_loaded_values', None) is not None:
            user._loaded_values['time_stamp_last_seen'] = when
        return user
