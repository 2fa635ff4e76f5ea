from __future__ import annotations

import itertools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)

SUCCESS_TTL_SECONDS = 4.0
ERROR_TTL_SECONDS = 8.0
MAX_VISIBLE = 3


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    id: int
    level: NotificationLevel
    message: str
    expires_at: float


class Notifier(Protocol):
    def success(self, message: str) -> None:
        """Show a transient success notice."""

    def error(self, message: str) -> None:
        """Show a transient error notice."""


class NotificationCenter(Notifier):
    """
    Transient notices. Each one hides itself after its level's lifetime
    (errors stay longer than successes) or when dismissed; only the newest
    ``max_visible`` are kept.
    """

    def __init__(
        self,
        max_visible: int = MAX_VISIBLE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ids = itertools.count(1)
        self._active: dict[int, Notification] = {}
        self._max_visible = max_visible
        self._clock = clock

    @property
    def active(self) -> list[Notification]:
        self._prune()
        return list(self._active.values())

    def success(self, message: str) -> None:
        self._push(NotificationLevel.SUCCESS, message, SUCCESS_TTL_SECONDS)

    def error(self, message: str) -> None:
        logger.warning(message)
        self._push(NotificationLevel.ERROR, message, ERROR_TTL_SECONDS)

    def dismiss(self, notification_id: int) -> None:
        self._active.pop(notification_id, None)

    def _push(self, level: NotificationLevel, message: str, ttl: float) -> Notification:
        notification = Notification(
            id=next(self._ids),
            level=level,
            message=message,
            expires_at=self._clock() + ttl,
        )
        self._active[notification.id] = notification
        self._prune()
        return notification

    def _prune(self) -> None:
        now = self._clock()
        for notification_id, notification in list(self._active.items()):
            if notification.expires_at <= now:
                del self._active[notification_id]
        # dicts keep insertion order, so the oldest notices come first
        while len(self._active) > self._max_visible:
            del self._active[next(iter(self._active))]
