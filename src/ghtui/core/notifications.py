"""Ephemeral user-facing notifications with a fixed time-to-live.

Each notification expires TTL seconds after its own creation, independent of
any other entry. The queue is only mutated by push() and expire().
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum

NOTIFICATION_TTL_SECONDS = 5.0


class NotificationLevel(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    text: str
    created_at: float = field(default_factory=time.monotonic)

    @classmethod
    def info(cls, text: str, **kwargs) -> Notification:
        return cls(NotificationLevel.INFO, text, **kwargs)

    @classmethod
    def warning(cls, text: str, **kwargs) -> Notification:
        return cls(NotificationLevel.WARNING, text, **kwargs)

    @classmethod
    def error(cls, text: str, **kwargs) -> Notification:
        return cls(NotificationLevel.ERROR, text, **kwargs)

    def age(self, now: float) -> float:
        return now - self.created_at

    def is_expired(self, now: float, ttl: float = NOTIFICATION_TTL_SECONDS) -> bool:
        return self.age(now) > ttl


class NotificationQueue:
    """Ordered notifications, oldest first."""

    def __init__(self, ttl: float = NOTIFICATION_TTL_SECONDS):
        self.ttl = ttl
        self._entries: list[Notification] = []

    def push(self, notification: Notification) -> None:
        self._entries.append(notification)

    def expire(self, now: float | None = None) -> int:
        """Drop entries older than the TTL. Returns how many were removed."""
        now = time.monotonic() if now is None else now
        before = len(self._entries)
        self._entries = [n for n in self._entries if not n.is_expired(now, self.ttl)]
        return before - len(self._entries)

    def snapshot(self) -> tuple[Notification, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
