"""
Model signal receivers for audited entities.
"""

import logging

from django.db.models.signals import pre_delete
from django.dispatch import receiver

from .models import BaseEntity
from .uuids import short_uuid

logger = logging.getLogger(__name__)

SHRED_PENDING_COMMENT = "Entity shred pending."


@receiver(pre_delete)
def stamp_entity_before_shred(sender, instance, **kwargs):
    """Stamp deletion metadata on entities about to be hard deleted"""
    if not isinstance(instance, BaseEntity):
        return

    instance.on_delete(SHRED_PENDING_COMMENT)

    logger.info(
        f"Shredding {sender._meta.label} {short_uuid(instance.pk)}: {instance.deleter_comment}"
    )
