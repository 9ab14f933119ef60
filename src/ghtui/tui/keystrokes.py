"""Echo of the keys pressed during the last second."""

from __future__ import annotations

import time
from typing import Callable

from ghtui.core.commands import Command, Tick
from ghtui.core.component import REGION_KEYSTROKES, Component
from ghtui.core.keybindings import format_sequence
from ghtui.core.terminal import KeyInput
from ghtui.tui import renderers

KEYSTROKE_COOLDOWN_SECONDS = 1.0


class Keystrokes(Component):
    region = REGION_KEYSTROKES

    def __init__(self, cooldown: float = KEYSTROKE_COOLDOWN_SECONDS, clock: Callable[[], float] = time.monotonic):
        super().__init__()
        self.cooldown = cooldown
        self._clock = clock
        self._keys: list[tuple[str, float]] = []

    @property
    def keys(self) -> list[str]:
        return [key for key, _ in self._keys]

    def handle_key_event(self, key: KeyInput) -> Command | None:
        self._keys.append((format_sequence((key.key,)), self._clock()))
        return None

    def apply_command(self, command: Command) -> None:
        if isinstance(command, Tick):
            self._expire()

    def _expire(self) -> None:
        cutoff = self._clock() - self.cooldown
        self._keys = [(key, at) for key, at in self._keys if at >= cutoff]

    def render(self, area: tuple[int, int]):
        self._expire()
        if not self._keys:
            return None
        return renderers.render_keystrokes(self.keys)
