from email.utils import formataddr
from enum import Enum
from typing import List

from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.contrib.auth.validators import UnicodeUsernameValidator
from django.db import models
from django.db.models.functions import Lower
from django.utils.translation import gettext_lazy as _

from core.models import BaseEntity, BaseEntityQuerySet
from core.timezones import ZonedTimestamp

EMAIL_TAKEN_MESSAGE = _("A user with this email address already exists.")


class RoleType(str, Enum):
    """Enum for user roles"""
    USER = "user"
    ADMIN = "admin"


class UserManager(BaseUserManager.from_queryset(BaseEntityQuerySet)):
    """Manager for User, soft delete aware through BaseEntityQuerySet"""

    def _create_user(self, username, email, password, **extra_fields):
        if not username:
            raise ValueError("The username must be set")

        email = self.normalize_email(email) or None
        user = self.model(username=username, email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault('roles', [RoleType.USER.value])
        return self._create_user(username, email, password, **extra_fields)

    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault('roles', [RoleType.USER.value, RoleType.ADMIN.value])
        if RoleType.ADMIN.value not in extra_fields['roles']:
            raise ValueError("Superuser must have the admin role.")
        return self._create_user(username, email, password, **extra_fields)


class User(AbstractBaseUser, BaseEntity):
    """
    User account.
    Inherits audit timestamps and soft delete from BaseEntity.
    A soft-deleted user is inactive and cannot log in.
    """

    username_validator = UnicodeUsernameValidator()

    username = models.CharField(
        max_length=200,
        unique=True,
        validators=[username_validator],
        help_text="Required. Letters, digits and @/./+/-/_ only."
    )
    # Null once credentials have been erased
    password = models.CharField(_("password"), max_length=128, null=True, blank=True)
    first_name = models.CharField(max_length=200, null=True, blank=True)
    last_name = models.CharField(max_length=200, null=True, blank=True)
    display_name = models.CharField(max_length=200, null=True, blank=True)
    email = models.EmailField(max_length=256, unique=True, null=True, blank=True)
    time_stamp_last_seen = models.DateTimeField(null=True, blank=True, editable=False)
    roles = models.JSONField(default=list, blank=True)

    # Replaced by time_stamp_last_seen
    last_login = None

    last_seen = ZonedTimestamp('time_stamp_last_seen')

    objects = UserManager()

    USERNAME_FIELD = 'username'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = ['email']

    class Meta:
        ordering = ['username']
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        constraints = [
            models.UniqueConstraint(
                Lower('email'),
                name='accounts_user_email_ci_unique',
                violation_error_message=EMAIL_TAKEN_MESSAGE,
            ),
        ]

    def __str__(self):
        return self.display_name or self.name or str(self.id)

    @property
    def name(self) -> str:
        """Get user's full name"""
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @property
    def mailer_address(self) -> str:
        """Address suitable for an email To: header"""
        return formataddr((str(self), self.email or ''))

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    def get_roles(self) -> List[str]:
        if not isinstance(self.roles, list):
            return []
        return sorted(set(self.roles))

    def has_role(self, role) -> bool:
        role = (role.value if isinstance(role, RoleType) else str(role or '')).strip()
        if not role:
            raise ValueError("Role not specified.")
        return role in self.get_roles()

    def add_role(self, role):
        role = role.value if isinstance(role, RoleType) else role
        if not self.has_role(role):
            self.roles = self.get_roles() + [role]
        return self

    def remove_role(self, role):
        role = role.value if isinstance(role, RoleType) else role
        self.roles = [r for r in self.get_roles() if r != role]
        return self

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return not self.is_deleted

    @property
    def is_staff(self) -> bool:
        return self.has_role(RoleType.ADMIN)

    @property
    def is_superuser(self) -> bool:
        return self.has_role(RoleType.ADMIN)

    def has_perm(self, perm, obj=None) -> bool:
        return self.is_active and self.is_staff

    def has_perms(self, perm_list, obj=None) -> bool:
        return all(self.has_perm(perm, obj) for perm in perm_list)

    def has_module_perms(self, app_label) -> bool:
        return self.is_active and self.is_staff

    def erase_credentials(self):
        """Forget the password hash entirely"""
        self.password = None
        self._password = None
        return self

    def is_equal_to(self, other) -> bool:
        """Same account: same username and same role set"""
        if not isinstance(other, User):
            return False
        return self.username == other.username and self.get_roles() == other.get_roles()

    def serializers(self):
        return {
            **super().serializers(),
            'username': lambda: self.username,
            'first_name': lambda: self.first_name,
            'last_name': lambda: self.last_name,
            'display_name': lambda: self.display_name,
            'name': lambda: self.name,
            'email': lambda: self.email,
            'last_seen': lambda: self.last_seen,
            'roles': lambda: self.get_roles(),
        }
