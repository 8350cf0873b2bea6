"""
User-facing alerts.

An alert handler is any callable taking an Alert. Web views flash it through
django.contrib.messages, management commands write it to stderr.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error."
DEFAULT_ERROR_PREFIX = "Error"


class AlertIcon(str, Enum):
    """Enum for alert icons"""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    QUESTION = "question"


def string_to_alert_icon(s) -> AlertIcon:
    """
    Cast a string to an AlertIcon.
    Bootstrap's "danger" is accepted as an alias for error.

    Raises:
        ValueError: If the string is not a known icon
    """
    if isinstance(s, AlertIcon):
        return s
    if s == "danger":
        return AlertIcon.ERROR
    try:
        return AlertIcon(s)
    except ValueError:
        raise ValueError(f"Alert icon invalid: {s}")


@dataclass
class Alert:
    message: str
    title: Optional[str] = None
    icon: AlertIcon = AlertIcon.INFO

    def __post_init__(self):
        if not self.message:
            raise ValueError("Message not specified.")
        self.icon = string_to_alert_icon(self.icon or AlertIcon.INFO)


AlertHandler = Callable[[Alert], None]


def error_message(
    message: Optional[str],
    icon="error",
    no_alert: bool = False,
    prefix: Optional[str] = None,
    alert: Optional[AlertHandler] = None
) -> str:
    """
    Log an error and show it to the user.

    Args:
        message: Error message, blank becomes "Unknown error."
        icon: Alert icon name
        no_alert: Only log, never alert
        prefix: Title of the alert and log prefix, blank becomes "Error"
        alert: Alert handler

    Returns:
        The message that was reported
    """
    message = str(message or '').strip() or UNKNOWN_ERROR
    prefix = str(prefix or '').strip() or DEFAULT_ERROR_PREFIX
    icon = string_to_alert_icon(icon or AlertIcon.ERROR)

    logger.error(f"{prefix}: {message}")

    if not no_alert and alert is not None:
        alert(Alert(message=message, title=prefix, icon=icon))

    return message
