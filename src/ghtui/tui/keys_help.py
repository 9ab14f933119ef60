"""Overlay listing the NORMAL-mode key bindings, toggled by Help."""

from __future__ import annotations

from ghtui.core.commands import Back, Command, CommandKind, Escape, Help, Sort
from ghtui.core.component import REGION_OVERLAY, Component
from ghtui.core.keybindings import KeyBindings, default_keybindings, format_sequence
from ghtui.core.mode import Mode
from ghtui.core.things import COLUMNS
from ghtui.tui import renderers

# [LAW:one-source-of-truth] Group order and descriptions; keys come from the live table.
KEY_GROUPS: tuple[tuple[str, tuple[tuple[CommandKind, str], ...]], ...] = (
    ("Navigation", (
        (CommandKind.UP, "previous row"),
        (CommandKind.DOWN, "next row"),
        (CommandKind.PAGE_UP, "page up"),
        (CommandKind.PAGE_DOWN, "page down"),
        (CommandKind.LEFT, "previous sort column"),
        (CommandKind.RIGHT, "next sort column"),
        (CommandKind.SORT, "sort by column"),
    )),
    ("Pull requests", (
        (CommandKind.REFRESH, "refresh"),
        (CommandKind.ENTER, "toggle details"),
        (CommandKind.OPEN, "open in browser"),
        (CommandKind.ENTER_SEARCH_MODE, "filter"),
        (CommandKind.ENTER_COMMAND_MODE, "command"),
    )),
    ("App", (
        (CommandKind.ESCAPE, "close overlay"),
        (CommandKind.HELP, "this help"),
        (CommandKind.SUSPEND, "suspend"),
        (CommandKind.QUIT, "quit"),
    )),
)


def key_groups(table: KeyBindings) -> list[tuple[str, list[tuple[str, str]]]]:
    """Resolve KEY_GROUPS against a binding table; unbound entries are omitted."""
    by_kind: dict[CommandKind, list[tuple[tuple[str, ...], Command]]] = {}
    for sequence, command in table.get(Mode.NORMAL, {}).items():
        by_kind.setdefault(command.kind, []).append((sequence, command))

    groups = []
    for title, entries in KEY_GROUPS:
        rows = []
        for kind, description in entries:
            bound = sorted(by_kind.get(kind, ()), key=lambda pair: (len(pair[0]), pair[0]))
            if not bound:
                continue
            if kind is CommandKind.SORT:
                for sequence, command in bound:
                    assert isinstance(command, Sort)
                    rows.append((format_sequence(sequence), f"sort by {COLUMNS[command.column].header}"))
                continue
            keys = "/".join(format_sequence(sequence) for sequence, _ in bound)
            rows.append((keys, description))
        if rows:
            groups.append((title, rows))
    return groups


class KeysHelpOverlay(Component):
    region = REGION_OVERLAY

    def __init__(self):
        super().__init__()
        self.visible = False

    def is_active(self) -> bool:
        return self.visible

    def apply_command(self, command: Command) -> None:
        if isinstance(command, Help):
            self.visible = not self.visible
        elif isinstance(command, (Escape, Back)):
            self.visible = False

    def render(self, area: tuple[int, int]):
        if not self.visible:
            return None
        table = self.config.keybindings if self.config is not None else default_keybindings()
        return renderers.render_keys_help(key_groups(table))
