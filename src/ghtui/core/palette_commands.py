"""Interpretation of text typed into the command palette."""

from __future__ import annotations

from ghtui.core.commands import Command, Help, Notify, Open, Quit, Refresh, Sort
from ghtui.core.notifications import Notification
from ghtui.core.things import COLUMNS, column_index

QUIT_WORDS = ("q", "quit")
REFRESH_WORDS = ("r", "refresh")


def interpret(text: str, provider_commands=()) -> list[Command]:
    """Map palette text to commands. Unknown input yields a warning notification.

    provider_commands are extra words that refresh the active provider
    ("pr", "pull-request", ...).
    """
    words = text.strip().split()
    if not words:
        return []
    head, args = words[0].lower(), words[1:]

    if head in QUIT_WORDS:
        return [Quit()]
    if head in REFRESH_WORDS or head in {c.lower() for c in provider_commands}:
        return [Refresh()]
    if head == "open":
        return [Open()]
    if head == "help":
        return [Help()]
    if head == "sort":
        wanted = " ".join(args)
        idx = column_index(wanted) if wanted else None
        if idx is None:
            names = ", ".join(c.header for c in COLUMNS)
            return [Notify(Notification.warning(f"Unknown column {wanted!r}. Columns: {names}"))]
        return [Sort(idx)]
    return [Notify(Notification.warning(f"Unknown command: {text.strip()}"))]
