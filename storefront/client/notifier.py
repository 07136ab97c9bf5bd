"""Transient user notifications and the sign-in prompt signal."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass
class Notification:
    level: NotificationLevel
    message: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class Notifier:
    """Collects notifications for display and fans out auth-required prompts."""

    def __init__(self) -> None:
        self.history: list[Notification] = []
        self.auth_required_count = 0
        self._auth_listeners: list[Callable[[], None]] = []

    def _push(self, level: NotificationLevel, message: str) -> Notification:
        note = Notification(level, message)
        self.history.append(note)
        logger.log(logging.WARNING if level == NotificationLevel.ERROR else logging.INFO,
                   "[%s] %s", level.value, message)
        return note

    def success(self, message: str) -> Notification:
        return self._push(NotificationLevel.SUCCESS, message)

    def error(self, message: str) -> Notification:
        return self._push(NotificationLevel.ERROR, message)

    def info(self, message: str) -> Notification:
        return self._push(NotificationLevel.INFO, message)

    def on_auth_required(self, listener: Callable[[], None]) -> None:
        self._auth_listeners.append(listener)

    def auth_required(self, message: str) -> None:
        """Ask the user to sign in instead of attempting the request."""
        self.auth_required_count += 1
        self.error(message)
        for listener in self._auth_listeners:
            listener()

    @property
    def last(self) -> Optional[Notification]:
        return self.history[-1] if self.history else None

    def messages(self, level: Optional[NotificationLevel] = None) -> list[str]:
        return [n.message for n in self.history if level is None or n.level == level]
