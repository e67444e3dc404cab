"""Notification service for admin-facing messages.

Replaces browser toasts: the request-list controller reports outcomes
(success, info, error) through a ``Notifier`` and the surface in use
decides how to show them. Backends provided here log them or keep them in
memory; the CLI installs one that prints to the console.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal

logger = logging.getLogger(__name__)

NotificationLevel = Literal["success", "info", "error"]


@dataclass(frozen=True)
class Notification:
    """A single admin-facing message."""

    level: NotificationLevel
    message: str


class Notifier(ABC):
    """Abstract base class for notification backends."""

    @abstractmethod
    def notify(self, notification: Notification) -> None:
        """Deliver a notification.

        Args:
            notification: Notification to deliver
        """

    def success(self, message: str) -> None:
        self.notify(Notification("success", message))

    def info(self, message: str) -> None:
        self.notify(Notification("info", message))

    def error(self, message: str) -> None:
        self.notify(Notification("error", message))


class LoggingNotifier(Notifier):
    """Notifier that writes to the application log."""

    _LEVELS = {
        "success": logging.INFO,
        "info": logging.INFO,
        "error": logging.ERROR,
    }

    def notify(self, notification: Notification) -> None:
        logger.log(
            self._LEVELS[notification.level],
            notification.message,
            extra={"operation": f"notify:{notification.level}"},
        )


class MemoryNotifier(Notifier):
    """Notifier that keeps messages in memory.

    Used in tests and by callers that render notifications after an
    operation completes.
    """

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def messages(self, level: NotificationLevel | None = None) -> list[str]:
        """Messages in delivery order, optionally filtered by level."""
        return [n.message for n in self.notifications if level is None or n.level == level]

    def clear(self) -> None:
        """Clear all stored notifications."""
        self.notifications.clear()
