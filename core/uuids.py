"""
Utility functions for entity identifiers.
"""

import re
import uuid

UUID_PATTERN = re.compile(
    r'^([a-f0-9]{8})-([a-f0-9]{4})-([a-f0-9]{4})-([a-f0-9]{4})-([a-f0-9]{12})$',
    re.IGNORECASE
)


def is_uuid(value: str) -> bool:
    """Check if a string is a UUID in its canonical 36 character form"""
    if not isinstance(value, str) or len(value) != 36:
        return False

    return UUID_PATTERN.match(value) is not None


def short_uuid(value, raise_on_bad: bool = False) -> str:
    """
    Get a shorter representation of a UUID.

    Args:
        value: UUID string or uuid.UUID instance
        raise_on_bad: Raise instead of returning an invalid string unchanged

    Returns:
        First and third groups of the UUID, e.g. "1ec9414c-a5a7"

    Raises:
        TypeError: If value is neither a string nor a UUID
        ValueError: If value is not a valid UUID and raise_on_bad is set
    """
    if isinstance(value, uuid.UUID):
        value = str(value)

    if not isinstance(value, str):
        raise TypeError("UUID is not a string.")

    match = UUID_PATTERN.match(value) if len(value) == 36 else None
    if match is None:
        if raise_on_bad:
            raise ValueError(f"UUID invalid: {value}")
        return value

    return f"{match.group(1)}-{match.group(3)}"
