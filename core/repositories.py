"""
Repository base for audited entities.

Every read applies the soft delete predicate (IncludeDeleted) before any
other filtering. Persistence operations are logged through the logger the
repository is constructed with.
"""

import logging
import uuid
from typing import Dict, List, Optional

from django.core.exceptions import ImproperlyConfigured
from django.db.models import Q

from .models import BaseEntity, IncludeDeleted
from .uuids import is_uuid, short_uuid

logger = logging.getLogger(__name__)

ORDER_DIRECTIONS = ('ASC', 'DESC')


class BaseEntityRepository:
    """
    Query and persist one BaseEntity subclass.
    Subclasses must set `model`.
    """

    model = None

    def __init__(self, logger: Optional[logging.Logger] = None):
        if self.model is None:
            raise ImproperlyConfigured(f"{type(self).__name__} does not define a model.")

        if not issubclass(self.model, BaseEntity):
            raise ImproperlyConfigured(
                f"{type(self).__name__}.model must be a BaseEntity subclass."
            )

        self.logger = logger or logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def get_queryset(self, include_deleted=IncludeDeleted.NO):
        return self.model._default_manager.all().filter_deleted(include_deleted)

    @staticmethod
    def validate_criteria(criteria: Optional[Dict]) -> Dict:
        """
        Validate a {field: value} search dictionary.

        Raises:
            ValueError: If a field name is not a non-blank string
        """
        if criteria is None:
            return {}

        validated = {}
        for field, value in criteria.items():
            if not isinstance(field, str):
                raise ValueError("Field must be a string.")
            field = field.strip()
            if not field:
                raise ValueError("Field not specified.")
            validated[field] = value

        return validated

    @staticmethod
    def validate_order_by(order_by: Optional[Dict]) -> List[str]:
        """
        Validate a {field: "ASC"|"DESC"} ordering dictionary.

        Returns:
            Arguments for QuerySet.order_by()

        Raises:
            ValueError: If a field or direction is invalid
        """
        if not order_by:
            return []

        ordering = []
        for field, direction in order_by.items():
            if not isinstance(field, str):
                raise ValueError("Field must be a string.")
            field = field.strip()
            if not field:
                raise ValueError("Field not specified.")

            if not isinstance(direction, str):
                raise ValueError("Order must be a string.")
            direction = direction.strip().upper()
            if not direction:
                raise ValueError("Order not specified.")
            if direction not in ORDER_DIRECTIONS:
                raise ValueError(f'Order "{direction}" invalid.')

            ordering.append(f'-{field}' if direction == 'DESC' else field)

        return ordering

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find(self, pk, include_deleted=IncludeDeleted.NO):
        """
        Find an entity by its id.

        Returns:
            Entity instance, or None if not found

        Raises:
            ValueError: If pk is a malformed UUID string
        """
        if isinstance(pk, str):
            if not is_uuid(pk):
                raise ValueError(f"Entity id invalid: {pk}")
            pk = uuid.UUID(pk)

        return self.get_queryset(include_deleted).filter(pk=pk).first()

    def find_all(self, order_by: Optional[Dict] = None, include_deleted=IncludeDeleted.NO):
        queryset = self.get_queryset(include_deleted)
        ordering = self.validate_order_by(order_by)
        if ordering:
            queryset = queryset.order_by(*ordering)
        return queryset

    def find_by(
        self,
        criteria: Dict,
        order_by: Optional[Dict] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        include_deleted=IncludeDeleted.NO
    ):
        """Find entities matching every {field: value} pair in criteria"""
        criteria = self.validate_criteria(criteria)
        ordering = self.validate_order_by(order_by)

        queryset = self.get_queryset(include_deleted).filter(**criteria)
        if ordering:
            queryset = queryset.order_by(*ordering)

        start = int(offset or 0)
        if limit:
            return queryset[start:start + int(limit)]
        if start:
            return queryset[start:]
        return queryset

    def find_one_by(
        self,
        criteria: Dict,
        order_by: Optional[Dict] = None,
        include_deleted=IncludeDeleted.NO
    ):
        """
        Find the single entity matching criteria.

        Returns:
            Entity instance, or None if nothing matches

        Raises:
            MultipleObjectsReturned: If more than one entity matches
        """
        queryset = self.find_by(criteria, order_by=order_by, include_deleted=include_deleted)
        try:
            return queryset.get()
        except self.model.DoesNotExist:
            return None

    def matching(self, q: Q, include_deleted=IncludeDeleted.NO):
        """Find entities matching an arbitrary Q expression"""
        return self.get_queryset(include_deleted).filter(q)

    def count(self, criteria: Optional[Dict] = None, include_deleted=IncludeDeleted.NO) -> int:
        criteria = self.validate_criteria(criteria)
        return self.get_queryset(include_deleted).filter(**criteria).count()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, entity):
        creating = entity._state.adding
        entity.save()
        self.logger.debug(
            f"{'Created' if creating else 'Saved'} {self._label()} {short_uuid(entity.pk)}"
        )
        return entity

    def soft_delete(self, entity, user=None, comment: Optional[str] = None):
        entity.soft_delete(user=user, comment=comment)
        entity.save()
        self.logger.info(
            f"Soft deleted {self._label()} {short_uuid(entity.pk)}"
            f" by {user if user is not None else 'system'}"
        )
        return entity

    def undelete(self, entity):
        entity.undelete()
        entity.save()
        self.logger.info(f"Restored {self._label()} {short_uuid(entity.pk)}")
        return entity

    def shred(self, entity):
        """Hard delete an entity. This cannot be undone."""
        pk = entity.pk
        entity.delete()
        self.logger.warning(f"Shredded {self._label()} {short_uuid(pk)}")

    def _label(self) -> str:
        return self.model._meta.verbose_name
