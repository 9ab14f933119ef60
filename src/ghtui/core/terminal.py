"""Terminal-side inputs and the driver contract.

The dispatcher never talks to a real terminal. A driver feeds it the
inputs below and receives finished frames back.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class TerminalInput:
    """Base class for all terminal-side inputs."""


@dataclass(frozen=True)
class KeyInput(TerminalInput):
    """A key press. key is a Textual key name; character is the printable text."""

    key: str
    character: str | None = None


@dataclass(frozen=True)
class TickInput(TerminalInput):
    pass


@dataclass(frozen=True)
class RenderInput(TerminalInput):
    pass


@dataclass(frozen=True)
class ResizeInput(TerminalInput):
    width: int
    height: int


@dataclass(frozen=True)
class QuitInput(TerminalInput):
    """The terminal itself is going away (window closed, SIGTERM)."""


# region name -> rich renderable (None means the region is empty this frame)
Frame = dict


class TerminalDriver(Protocol):
    def size(self) -> tuple[int, int]: ...

    def draw(self, frame: Frame) -> None: ...

    def suspend(self) -> bool:
        """Release the terminal. Returns False when suspension is unsupported."""
        ...

    def resume(self) -> None: ...

    def stop(self) -> None: ...
