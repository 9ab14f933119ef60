"""Modal text input for ':' commands and '/' searches.

While active the palette receives every key press (the dispatcher routes
keys only to the active overlay in COMMAND/SEARCH mode). It leaves modal
mode only by sending ChangeMode(NORMAL).
"""

from __future__ import annotations

import logging

from ghtui.core.commands import (
    ChangeMode,
    Command,
    Escape,
    ExecuteCommand,
    ExecuteSearch,
    Render,
)
from ghtui.core.component import REGION_PALETTE, Component
from ghtui.core.events import PaletteClosed, PaletteOpened
from ghtui.core.mode import Mode
from ghtui.core.palette_commands import interpret
from ghtui.core.terminal import KeyInput
from ghtui.tui import renderers

logger = logging.getLogger(__name__)

_CANCEL_KEYS = ("escape", "ctrl+c")


class CommandPalette(Component):
    region = REGION_PALETTE

    def __init__(self, provider_commands=()):
        super().__init__()
        self.provider_commands = tuple(provider_commands)
        self.active = False
        self.mode = Mode.NORMAL
        self.buffer = ""
        self.cursor = 0

    def is_active(self) -> bool:
        return self.active

    # ─── Mode transitions ─────────────────────────────────────────────────

    def apply_command(self, command: Command) -> None:
        if isinstance(command, ChangeMode):
            if command.mode.is_modal:
                self._open(command.mode)
            elif self.active:
                self._close()
        elif isinstance(command, Escape) and self.active:
            self._cancel()
        elif isinstance(command, ExecuteCommand):
            for follow_up in interpret(command.text, self.provider_commands):
                self.send(follow_up)

    def _open(self, mode: Mode) -> None:
        self.active = True
        self.mode = mode
        self.buffer = ""
        self.cursor = 0
        self.emit(PaletteOpened(mode))

    def _close(self) -> None:
        self.active = False
        self.mode = Mode.NORMAL
        self.buffer = ""
        self.cursor = 0
        self.emit(PaletteClosed())

    def _cancel(self) -> None:
        self.buffer = ""
        self.cursor = 0
        self.send(ChangeMode(Mode.NORMAL))
        self.send(Render())

    # ─── Key handling ─────────────────────────────────────────────────────

    def handle_key_event(self, key: KeyInput) -> Command | None:
        if not self.active:
            return None
        name = key.key

        if name in _CANCEL_KEYS:
            self._cancel()
            return None

        if name == "enter":
            self._submit()
            return None

        if name == "backspace":
            if self.cursor > 0:
                self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor :]
                self.cursor -= 1
                self._edited()
            return None

        if name == "delete":
            if self.cursor < len(self.buffer):
                self.buffer = self.buffer[: self.cursor] + self.buffer[self.cursor + 1 :]
                self._edited()
            return None

        if name == "left":
            self.cursor = max(0, self.cursor - 1)
            return Render()
        if name == "right":
            self.cursor = min(len(self.buffer), self.cursor + 1)
            return Render()
        if name == "home":
            self.cursor = 0
            return Render()
        if name == "end":
            self.cursor = len(self.buffer)
            return Render()

        char = key.character
        if char and len(char) == 1 and char.isprintable():
            self.buffer = self.buffer[: self.cursor] + char + self.buffer[self.cursor :]
            self.cursor += 1
            self._edited()
        return None

    def _edited(self) -> None:
        if self.mode is Mode.SEARCH_ENTRY:
            self.send(ExecuteSearch(self.buffer))
        self.send(Render())

    def _submit(self) -> None:
        text = self.buffer.strip()
        logger.debug("palette submit (%s): %r", self.mode.value, text)
        if self.mode is Mode.SEARCH_ENTRY:
            self.send(ExecuteSearch(text, committed=True))
        elif text:
            self.send(ExecuteCommand(text))
        self.send(ChangeMode(Mode.NORMAL))
        self.send(Render())

    # ─── Render ───────────────────────────────────────────────────────────

    def render(self, area: tuple[int, int]):
        if not self.active:
            return None
        return renderers.render_palette(self.mode, self.buffer, self.cursor)
