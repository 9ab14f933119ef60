"""Keybinding table, config parsing, and the multi-key resolver.

Key descriptors are Textual key names ("j", "R", "ctrl+c", "slash").
A sequence is written space-separated in config: "g r".

Resolution policy (per key press, NORMAL mode only):
  1. Append the key to the pending buffer.
  2. If the whole buffer is bound, dispatch it and clear the buffer.
  3. Else if the newest key alone is a one-key binding, dispatch it and clear.
     A one-key binding therefore pre-empts any longer sequence sharing it as
     a prefix.
  4. Else keep the longest buffer suffix that is still a prefix of some bound
     sequence and wait for more keys.
The buffer is cleared on every Tick; that is the only multi-key timeout.
"""

from __future__ import annotations

import logging
import re
from typing import Mapping

from ghtui.core.commands import (
    BINDABLE_COMMANDS,
    ChangeMode,
    Command,
    Sort,
)
from ghtui.core.mode import Mode
from ghtui.core.things import COLUMNS

logger = logging.getLogger(__name__)

KeySequence = tuple[str, ...]
KeyBindings = dict[Mode, dict[KeySequence, Command]]


# [LAW:one-source-of-truth] Default bindings, in config syntax.
DEFAULT_KEYBINDINGS: dict[str, dict[str, str]] = {
    "Normal": {
        "q": "Quit",
        "ctrl+c": "Quit",
        "ctrl+d": "Quit",
        "ctrl+z": "Suspend",
        "R": "Refresh",
        "g r": "Refresh",
        "up": "Up",
        "k": "Up",
        "down": "Down",
        "j": "Down",
        "left": "Left",
        "h": "Left",
        "right": "Right",
        "l": "Right",
        "enter": "Enter",
        "o": "Open",
        "g o": "Open",
        "escape": "Escape",
        "backspace": "Back",
        "pageup": "PageUp",
        "ctrl+b": "PageUp",
        "pagedown": "PageDown",
        "ctrl+f": "PageDown",
        ":": "EnterCommandMode",
        "/": "EnterSearchMode",
        "?": "Help",
        **{str(i + 1): f"Sort({i})" for i in range(len(COLUMNS))},
    },
    # Modal modes: every key goes to the command palette.
    "Command": {},
    "Search": {},
}

# Printable characters accepted in config, mapped to Textual key names.
_KEY_ALIASES = {
    ":": "colon",
    "/": "slash",
    "?": "question_mark",
    " ": "space",
    "!": "exclamation_mark",
    "@": "at",
    "#": "number_sign",
    "$": "dollar_sign",
    "%": "percent_sign",
    "^": "circumflex_accent",
    "&": "ampersand",
    "*": "asterisk",
    "-": "minus",
    "+": "plus",
    "=": "equals_sign",
    ",": "comma",
    ".": "full_stop",
    "[": "left_square_bracket",
    "]": "right_square_bracket",
    "esc": "escape",
    "return": "enter",
    "pgup": "pageup",
    "pgdn": "pagedown",
}

_MODIFIERS = ("ctrl", "alt", "shift", "meta", "super")

_COMMAND_RE = re.compile(r"^\s*([A-Za-z]+)\s*(?:\((.*)\))?\s*$")


# ─── Parsing ──────────────────────────────────────────────────────────────────


def normalize_key(descriptor: str) -> str:
    """Normalize one key descriptor to a Textual key name."""
    raw = descriptor.strip()
    if raw.startswith("<") and raw.endswith(">") and len(raw) > 2:
        raw = raw[1:-1]
    if raw in _KEY_ALIASES:
        return _KEY_ALIASES[raw]
    lowered = raw.lower()
    if lowered in _KEY_ALIASES:
        return _KEY_ALIASES[lowered]
    for mod in _MODIFIERS:
        if lowered.startswith(mod + "-") and len(raw) > len(mod) + 1:
            raw = raw[: len(mod)] + "+" + raw[len(mod) + 1 :]
            lowered = raw.lower()
            break
    if "+" in raw and len(raw) > 1:
        *mods, key = raw.split("+")
        return "+".join([m.lower() for m in mods] + [key.lower()])
    # Single characters keep their case ("R" is distinct from "r").
    return raw if len(raw) == 1 else lowered


def parse_sequence(text: str) -> KeySequence:
    """Parse "g r" or "<g><r>" into ("g", "r")."""
    stripped = text.strip()
    if stripped.startswith("<") and stripped.endswith(">") and "><" in stripped:
        parts = stripped[1:-1].split("><")
    elif stripped in (" ", ""):
        parts = [text] if text == " " else []
    else:
        parts = stripped.split()
    return tuple(normalize_key(p) for p in parts if p.strip() or p == " ")


def parse_command(name: str) -> Command | None:
    """Parse a bindable command name. Returns None when not recognised."""
    match = _COMMAND_RE.match(str(name))
    if match is None:
        return None
    head, arg = match.group(1), match.group(2)
    if head == "Sort":
        if arg is None or not arg.strip().isdigit():
            return None
        column = int(arg.strip())
        return Sort(column) if 0 <= column < len(COLUMNS) else None
    if head == "ChangeMode":
        mode = Mode.from_name(arg) if arg is not None else None
        return ChangeMode(mode) if mode is not None else None
    if arg is not None and arg.strip():
        return None
    cls = BINDABLE_COMMANDS.get(head)
    return cls() if cls is not None else None


def parse_keybindings(raw: Mapping | None) -> KeyBindings:
    """Parse a {mode: {sequence: command}} mapping.

    Malformed entries are logged and skipped; they never raise.
    """
    table: KeyBindings = {mode: {} for mode in Mode}
    if not isinstance(raw, Mapping):
        if raw is not None:
            logger.warning("keybindings must be a mapping, got %s", type(raw).__name__)
        return table

    for mode_name, entries in raw.items():
        mode = Mode.from_name(str(mode_name))
        if mode is None:
            logger.warning("keybindings: unknown mode %r ignored", mode_name)
            continue
        if not isinstance(entries, Mapping):
            logger.warning("keybindings: entries for %s must be a mapping", mode.value)
            continue
        for seq_text, command_name in entries.items():
            sequence = parse_sequence(str(seq_text))
            if not sequence:
                logger.warning("keybindings: empty key sequence for %r ignored", command_name)
                continue
            command = parse_command(str(command_name))
            if command is None:
                logger.warning(
                    "keybindings: unknown command %r for %r in %s ignored",
                    command_name, seq_text, mode.value,
                )
                continue
            table[mode][sequence] = command
    return table


def merge_keybindings(base: KeyBindings, override: KeyBindings) -> KeyBindings:
    """Per-sequence merge; override wins."""
    merged: KeyBindings = {mode: dict(base.get(mode, {})) for mode in Mode}
    for mode, entries in override.items():
        merged.setdefault(mode, {}).update(entries)
    return merged


def default_keybindings() -> KeyBindings:
    return parse_keybindings(DEFAULT_KEYBINDINGS)


def bindings_for_command(table: KeyBindings, mode: Mode, command: Command) -> KeySequence | None:
    """First (shortest) key sequence bound to command in mode."""
    matches = [seq for seq, bound in table.get(mode, {}).items() if bound == command]
    if not matches:
        return None
    return min(matches, key=len)


def format_sequence(sequence: KeySequence) -> str:
    reverse = {v: k for k, v in _KEY_ALIASES.items() if len(k) == 1}
    return " ".join(reverse.get(key, key) for key in sequence)


# ─── Resolver ─────────────────────────────────────────────────────────────────


class KeyBindingResolver:
    """Maps key presses to commands, accumulating multi-key sequences."""

    def __init__(self, bindings: KeyBindings):
        self._bindings = bindings
        self._buffer: list[str] = []
        self._prefixes: dict[Mode, set[KeySequence]] = {
            mode: {seq[:i] for seq in entries for i in range(1, len(seq))}
            for mode, entries in bindings.items()
        }

    @property
    def bindings(self) -> KeyBindings:
        return self._bindings

    @property
    def pending(self) -> KeySequence:
        return tuple(self._buffer)

    def clear(self) -> None:
        self._buffer.clear()

    def resolve(self, mode: Mode, key: str) -> Command | None:
        table = self._bindings.get(mode, {})
        self._buffer.append(key)

        command = table.get(tuple(self._buffer))
        if command is None and len(self._buffer) > 1:
            command = table.get((key,))
        if command is not None:
            self._buffer.clear()
            return command

        self._trim_to_prefix(mode)
        return None

    def _trim_to_prefix(self, mode: Mode) -> None:
        prefixes = self._prefixes.get(mode, set())
        while self._buffer and tuple(self._buffer) not in prefixes:
            self._buffer.pop(0)
