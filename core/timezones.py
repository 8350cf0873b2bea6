"""
Timezone conversion between the storage zone and the working zone.

Timestamps are always stored in UTC. Reads are converted to the working
zone (settings.TIME_ZONE, or whatever zone is active for the current
request), writes are converted back to UTC.
"""

from datetime import datetime, timezone as dt_timezone
from typing import Optional

from django.utils import timezone

STORAGE_TIMEZONE = dt_timezone.utc


def get_working_timezone():
    """Get the zone timestamps are displayed and entered in"""
    return timezone.get_current_timezone()


def to_working_zone(value: Optional[datetime], zone=None) -> Optional[datetime]:
    """
    Convert a stored timestamp to the working zone.

    Args:
        value: Timestamp read from storage. Naive values are taken as UTC.
        zone: Target zone (defaults to the active working zone)

    Returns:
        Aware datetime in the working zone, or None
    """
    if value is None:
        return None

    zone = zone or get_working_timezone()

    if timezone.is_naive(value):
        value = timezone.make_aware(value, STORAGE_TIMEZONE)

    if value.tzinfo == zone:
        return value

    return value.astimezone(zone)


def to_storage_zone(value: Optional[datetime], zone=None) -> Optional[datetime]:
    """
    Convert a working zone timestamp to the storage zone.

    Args:
        value: Timestamp to store. Naive values are taken as working zone time.
        zone: Zone naive values are interpreted in (defaults to the working zone)

    Returns:
        Aware datetime in UTC, or None
    """
    if value is None:
        return None

    if timezone.is_naive(value):
        value = timezone.make_aware(value, zone or get_working_timezone())

    if value.tzinfo == STORAGE_TIMEZONE:
        return value

    return value.astimezone(STORAGE_TIMEZONE)


class ZonedTimestamp:
    """
    Descriptor exposing a stored DateTimeField in the working zone.

    Usage:
        created = ZonedTimestamp('time_stamp_created')
    """

    def __init__(self, attname: str):
        self.attname = attname

    def __set_name__(self, owner, name):
        self.name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return to_working_zone(getattr(instance, self.attname))

    def __set__(self, instance, value):
        setattr(instance, self.attname, to_storage_zone(value))
