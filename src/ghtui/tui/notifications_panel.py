"""Notification toasts: pushed on Notify, expired on Tick."""

from __future__ import annotations

import time
from typing import Callable

from ghtui.core.commands import Command, Notify, Tick
from ghtui.core.component import REGION_NOTIFICATIONS, Component
from ghtui.core.notifications import NOTIFICATION_TTL_SECONDS, NotificationQueue
from ghtui.tui import renderers


class NotificationsPanel(Component):
    region = REGION_NOTIFICATIONS

    def __init__(self, ttl: float = NOTIFICATION_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        super().__init__()
        self.queue = NotificationQueue(ttl)
        self._clock = clock

    def apply_command(self, command: Command) -> None:
        if isinstance(command, Notify):
            self.queue.push(command.notification)
        elif isinstance(command, Tick):
            self.queue.expire(self._clock())

    def render(self, area: tuple[int, int]):
        entries = self.queue.snapshot()
        if not entries:
            return None
        return renderers.render_notifications(entries)
