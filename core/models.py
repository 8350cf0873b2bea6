import copy
import uuid
from datetime import datetime
from enum import IntEnum
from typing import Any, Callable, Dict, Iterable, Optional

from django.conf import settings
from django.db import models
from django.utils import timezone

from .timezones import ZonedTimestamp, to_working_zone

DELETER_COMMENT_MAX_LENGTH = 200


class IncludeDeleted(IntEnum):
    """How soft-deleted entities are treated by a query"""
    NO = 0
    YES = 1
    EXCLUSIVE = 2


class BaseEntityQuerySet(models.QuerySet):
    """
    QuerySet aware of soft-deleted rows.
    Every collection query should pass through filter_deleted() first.
    """

    def filter_deleted(self, include_deleted=IncludeDeleted.NO):
        """
        Apply the soft delete predicate.

        Raises:
            ValueError: If include_deleted is not a valid option
        """
        include_deleted = IncludeDeleted(include_deleted)

        if include_deleted is IncludeDeleted.NO:
            return self.filter(time_stamp_deleted__isnull=True)
        if include_deleted is IncludeDeleted.EXCLUSIVE:
            return self.filter(time_stamp_deleted__isnull=False)
        return self.all()

    def alive(self):
        return self.filter_deleted(IncludeDeleted.NO)

    def dead(self):
        return self.filter_deleted(IncludeDeleted.EXCLUSIVE)


class BaseEntity(models.Model):
    """
    Abstract base model for every persisted record.

    Provides audit timestamps (created, modified, accessed, deleted),
    creator/owner/deleter attribution and soft delete. Timestamps are stored
    in UTC; the created/modified/accessed/deleted accessors read and write
    them in the working timezone.

    Entity methods only change state in memory. Saving is the job of a
    repository (see core.repositories).
    """

    # Fields whose change alone does not count as a modification
    AUDIT_EXEMPT_FIELDS = ('time_stamp_modified', 'time_stamp_accessed')

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    time_stamp_created = models.DateTimeField(default=timezone.now, editable=False, db_index=True)
    time_stamp_modified = models.DateTimeField(null=True, blank=True, editable=False)
    time_stamp_accessed = models.DateTimeField(null=True, blank=True, editable=False)
    time_stamp_deleted = models.DateTimeField(null=True, blank=True, editable=False, db_index=True)

    creator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    deleter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    deleter_comment = models.CharField(max_length=DELETER_COMMENT_MAX_LENGTH, null=True, blank=True)

    created = ZonedTimestamp('time_stamp_created')
    modified = ZonedTimestamp('time_stamp_modified')
    accessed = ZonedTimestamp('time_stamp_accessed')
    deleted = ZonedTimestamp('time_stamp_deleted')

    objects = BaseEntityQuerySet.as_manager()

    class Meta:
        abstract = True
        ordering = ['-time_stamp_created']

    def __str__(self):
        return str(self.id)

    # ------------------------------------------------------------------
    # Life cycle
    # ------------------------------------------------------------------

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._loaded_values = instance._snapshot()
        instance.on_access()
        return instance

    def refresh_from_db(self, *args, **kwargs):
        super().refresh_from_db(*args, **kwargs)
        self._loaded_values = self._snapshot()

    def save(self, *args, **kwargs):
        """Stamp created/modified before writing"""
        if self._state.adding:
            self.on_create()
        elif self.get_changed_fields():
            self.on_modify()
            update_fields = kwargs.get('update_fields')
            if update_fields is not None:
                kwargs['update_fields'] = set(update_fields) | {'time_stamp_modified'}

        super().save(*args, **kwargs)
        self._loaded_values = self._snapshot()

    def on_create(self):
        if self.time_stamp_created is None:
            self.time_stamp_created = timezone.now()

    def on_access(self):
        self.time_stamp_accessed = timezone.now()

    def on_modify(self):
        self.time_stamp_modified = timezone.now()

    def on_delete(self, default_comment: str):
        """Hard delete hook: make sure deletion metadata is present"""
        if self.time_stamp_deleted is None:
            self.time_stamp_deleted = timezone.now()
        if not self.deleter_comment:
            self.deleter_comment = default_comment

    def _snapshot(self) -> Dict[str, Any]:
        deferred = self.get_deferred_fields()
        return {
            field.attname: copy.deepcopy(getattr(self, field.attname))
            for field in self._meta.concrete_fields
            if field.attname not in deferred and field.attname not in self.AUDIT_EXEMPT_FIELDS
        }

    def get_changed_fields(self) -> list:
        """Names of persisted fields changed since load or last save"""
        loaded = getattr(self, '_loaded_values', None)
        if loaded is None:
            return []

        return [
            attname for attname, value in self._snapshot().items()
            if attname in loaded and loaded[attname] != value
        ]

    # ------------------------------------------------------------------
    # Soft delete
    # ------------------------------------------------------------------

    def soft_delete(self, user=None, comment: Optional[str] = None):
        """
        Mark this entity as deleted without removing it.

        Args:
            user: User who deleted the entity
            comment: Optional reason for deletion

        Raises:
            ValueError: If the comment is too long
        """
        comment = comment.strip() if comment else None
        if comment and len(comment) > DELETER_COMMENT_MAX_LENGTH:
            raise ValueError(
                f"Deletion comment must be at most {DELETER_COMMENT_MAX_LENGTH} characters."
            )

        self.time_stamp_deleted = timezone.now()
        self.deleter = user
        self.deleter_comment = comment or None
        return self

    def undelete(self):
        """Restore a soft-deleted entity"""
        self.time_stamp_deleted = None
        self.deleter = None
        self.deleter_comment = None
        return self

    @property
    def is_deleted(self) -> bool:
        return self.time_stamp_deleted is not None

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def serializers(self) -> Dict[str, Callable[[], Any]]:
        """
        Field name to accessor mapping used by serialize().
        Subclasses extend this with their own fields.
        """
        return {
            'id': lambda: self.id,
            'created': lambda: self.created,
            'modified': lambda: self.modified,
            'accessed': lambda: self.accessed,
            'deleted': lambda: self.deleted,
            'creator': lambda: self.creator_id,
            'owner': lambda: self.owner_id,
            'deleter': lambda: self.deleter_id,
            'deleter_comment': lambda: self.deleter_comment,
        }

    def serialize(self, fields: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """
        Serialize this entity to a JSON friendly dictionary.

        Args:
            fields: Field names to include (defaults to all)

        Raises:
            ValueError: If a field has no serializer
        """
        serializers = self.serializers()
        fields = list(serializers) if fields is None else list(fields)

        unknown = [field for field in fields if field not in serializers]
        if unknown:
            raise ValueError(
                f"Fields not serializable on {type(self).__name__}: {', '.join(unknown)}"
            )

        return {field: _serialize_value(serializers[field]()) for field in fields}


def _serialize_value(value):
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, datetime):
        return to_working_zone(value).isoformat()
    if isinstance(value, BaseEntity):
        return str(value.pk)
    if isinstance(value, (list, tuple, set)):
        return [_serialize_value(item) for item in value]
    return value
