"""Sliding-window rate monitor over dispatched commands.

Detects infinite command feedback loops (a component re-emitting the same
command forever). Tracking is per command kind, not per payload.

// [LAW:single-enforcer] Only the dispatcher owns and mutates a breaker.
"""

from __future__ import annotations

import time
from collections import deque
from typing import Callable

from ghtui.core.commands import Command, CommandKind
from ghtui.core.errors import CircuitBreakerTripped

MAX_COMMANDS_PER_WINDOW = 50
WINDOW_SECONDS = 2.0

# High-frequency kinds that legitimately repeat.
DEFAULT_EXEMPT_KINDS = frozenset({
    CommandKind.RENDER,
    CommandKind.TICK,
    CommandKind.UP,
    CommandKind.DOWN,
    CommandKind.LEFT,
    CommandKind.RIGHT,
})


class CircuitBreaker:
    def __init__(
        self,
        *,
        threshold: int = MAX_COMMANDS_PER_WINDOW,
        window_seconds: float = WINDOW_SECONDS,
        exempt_kinds=DEFAULT_EXEMPT_KINDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.threshold = threshold
        self.window_seconds = window_seconds
        self._clock = clock
        self._exempt: set[CommandKind] = set(exempt_kinds)
        self._timestamps: dict[CommandKind, deque[float]] = {}

    def exempt(self, kind: CommandKind) -> None:
        self._exempt.add(kind)

    def include(self, kind: CommandKind) -> None:
        self._exempt.discard(kind)

    def is_exempt(self, kind: CommandKind) -> bool:
        return kind in self._exempt

    def count(self, kind: CommandKind) -> int:
        return len(self._timestamps.get(kind, ()))

    def check(self, command: Command) -> None:
        """Record one dispatch; raise CircuitBreakerTripped past the threshold."""
        now = self._clock()
        self._purge(now)

        kind = command.kind
        if kind in self._exempt:
            return

        stamps = self._timestamps.setdefault(kind, deque())
        stamps.append(now)
        if len(stamps) > self.threshold:
            raise CircuitBreakerTripped(kind.value, len(stamps), self.window_seconds)

    def _purge(self, now: float) -> None:
        cutoff = now - self.window_seconds
        for kind in list(self._timestamps):
            stamps = self._timestamps[kind]
            while stamps and stamps[0] < cutoff:
                stamps.popleft()
            if not stamps:
                del self._timestamps[kind]
