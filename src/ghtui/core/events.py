"""System events: low-frequency structural signals.

Kept apart from commands so components interested in rare notices do not
have to filter the Tick/Render stream. Components subscribe by listing event
classes in their event_interest.
"""

from __future__ import annotations

from dataclasses import dataclass

from ghtui.core.mode import Mode


@dataclass(frozen=True)
class SystemEvent:
    """Base class for all system events."""


@dataclass(frozen=True)
class UserIdentified(SystemEvent):
    name: str


@dataclass(frozen=True)
class ProviderReturnedResult(SystemEvent):
    """The shared item list changed; readers should take a fresh snapshot."""


@dataclass(frozen=True)
class ProviderError(SystemEvent):
    message: str
    generation: int | None = None


@dataclass(frozen=True)
class PaletteOpened(SystemEvent):
    mode: Mode


@dataclass(frozen=True)
class PaletteClosed(SystemEvent):
    pass


@dataclass(frozen=True)
class ModeChanged(SystemEvent):
    mode: Mode


@dataclass(frozen=True)
class Quit(SystemEvent):
    pass
