# Notifications — transient, auto-dismissing messages for the user.
# Created: 2026-10-19

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


_LOG_LEVELS = {
    NotificationLevel.SUCCESS: logging.INFO,
    NotificationLevel.INFO: logging.INFO,
    NotificationLevel.WARNING: logging.WARNING,
    NotificationLevel.ERROR: logging.ERROR,
}


@dataclass
class Notification:
    title: str
    description: str
    level: NotificationLevel
    created_at: float
    ttl: float

    def expired(self, now: float) -> bool:
        return now - self.created_at >= self.ttl


@dataclass
class Notifier:
    """Collects notifications and drops them once their ttl has passed.

    Every notification is also logged. ``on_notify`` lets a front end show
    it right away (the CLI prints it).
    """

    default_ttl: float = 5.0
    on_notify: Callable[[Notification], None] | None = None
    clock: Callable[[], float] = time.monotonic
    _items: list[Notification] = field(default_factory=list)

    def notify(
        self,
        title: str,
        description: str = "",
        level: NotificationLevel = NotificationLevel.INFO,
        ttl: float | None = None,
    ) -> Notification:
        note = Notification(
            title=title,
            description=description,
            level=level,
            created_at=self.clock(),
            ttl=self.default_ttl if ttl is None else ttl,
        )
        self._items.append(note)
        logger.log(_LOG_LEVELS[level], "%s: %s", title, description)
        if self.on_notify is not None:
            self.on_notify(note)
        return note

    def success(self, title: str, description: str = "") -> Notification:
        return self.notify(title, description, NotificationLevel.SUCCESS)

    def error(self, title: str, description: str = "") -> Notification:
        return self.notify(title, description, NotificationLevel.ERROR)

    def active(self) -> list[Notification]:
        """Notifications still on screen; expired ones are dropped."""
        now = self.clock()
        self._items = [n for n in self._items if not n.expired(now)]
        return list(self._items)

    def dismiss(self, note: Notification) -> None:
        if note in self._items:
            self._items.remove(note)
