"""Command vocabulary flowing through the dispatch loop.

// [LAW:one-source-of-truth] kind is set by the subclass, never by the caller.

Commands are frozen and carry only values (strings, ints, tuples of frozen
items). Nothing here may hold a lock or a reference to shared mutable state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ghtui.core.mode import Mode
from ghtui.core.notifications import Notification
from ghtui.core.things import PullRequest


class CommandKind(Enum):
    """Discriminator for commands."""

    # lifecycle
    TICK = "Tick"
    RENDER = "Render"
    RESIZE = "Resize"
    SUSPEND = "Suspend"
    RESUME = "Resume"
    QUIT = "Quit"
    # navigation
    UP = "Up"
    DOWN = "Down"
    LEFT = "Left"
    RIGHT = "Right"
    ENTER = "Enter"
    OPEN = "Open"
    ESCAPE = "Escape"
    BACK = "Back"
    PAGE_UP = "PageUp"
    PAGE_DOWN = "PageDown"
    SORT = "Sort"
    HELP = "Help"
    # mode control
    CHANGE_MODE = "ChangeMode"
    ENTER_COMMAND_MODE = "EnterCommandMode"
    ENTER_SEARCH_MODE = "EnterSearchMode"
    EXECUTE_COMMAND = "ExecuteCommand"
    EXECUTE_SEARCH = "ExecuteSearch"
    # data lifecycle
    REFRESH = "Refresh"
    LOAD_MORE_RESULT = "LoadMoreResult"
    FETCH_ITEM_DETAIL = "FetchItemDetail"
    ITEM_DETAIL_LOADED = "ItemDetailLoaded"
    ITEM_DETAIL_LOAD_ERROR = "ItemDetailLoadError"
    # feedback
    ERROR = "Error"
    NOTIFY = "Notify"


@dataclass(frozen=True)
class Command:
    """Base class for all commands."""

    kind: CommandKind = field(init=False)


# ─── Lifecycle ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Tick(Command):
    kind: CommandKind = field(default=CommandKind.TICK, init=False)


@dataclass(frozen=True)
class Render(Command):
    kind: CommandKind = field(default=CommandKind.RENDER, init=False)


@dataclass(frozen=True)
class Resize(Command):
    width: int
    height: int
    kind: CommandKind = field(default=CommandKind.RESIZE, init=False)


@dataclass(frozen=True)
class Suspend(Command):
    kind: CommandKind = field(default=CommandKind.SUSPEND, init=False)


@dataclass(frozen=True)
class Resume(Command):
    kind: CommandKind = field(default=CommandKind.RESUME, init=False)


@dataclass(frozen=True)
class Quit(Command):
    kind: CommandKind = field(default=CommandKind.QUIT, init=False)


# ─── Navigation ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Up(Command):
    kind: CommandKind = field(default=CommandKind.UP, init=False)


@dataclass(frozen=True)
class Down(Command):
    kind: CommandKind = field(default=CommandKind.DOWN, init=False)


@dataclass(frozen=True)
class Left(Command):
    kind: CommandKind = field(default=CommandKind.LEFT, init=False)


@dataclass(frozen=True)
class Right(Command):
    kind: CommandKind = field(default=CommandKind.RIGHT, init=False)


@dataclass(frozen=True)
class Enter(Command):
    kind: CommandKind = field(default=CommandKind.ENTER, init=False)


@dataclass(frozen=True)
class Open(Command):
    kind: CommandKind = field(default=CommandKind.OPEN, init=False)


@dataclass(frozen=True)
class Escape(Command):
    kind: CommandKind = field(default=CommandKind.ESCAPE, init=False)


@dataclass(frozen=True)
class Back(Command):
    kind: CommandKind = field(default=CommandKind.BACK, init=False)


@dataclass(frozen=True)
class PageUp(Command):
    kind: CommandKind = field(default=CommandKind.PAGE_UP, init=False)


@dataclass(frozen=True)
class PageDown(Command):
    kind: CommandKind = field(default=CommandKind.PAGE_DOWN, init=False)


@dataclass(frozen=True)
class Sort(Command):
    column: int
    kind: CommandKind = field(default=CommandKind.SORT, init=False)


@dataclass(frozen=True)
class Help(Command):
    kind: CommandKind = field(default=CommandKind.HELP, init=False)


# ─── Mode control ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ChangeMode(Command):
    mode: Mode
    kind: CommandKind = field(default=CommandKind.CHANGE_MODE, init=False)


@dataclass(frozen=True)
class EnterCommandMode(Command):
    kind: CommandKind = field(default=CommandKind.ENTER_COMMAND_MODE, init=False)


@dataclass(frozen=True)
class EnterSearchMode(Command):
    kind: CommandKind = field(default=CommandKind.ENTER_SEARCH_MODE, init=False)


@dataclass(frozen=True)
class ExecuteCommand(Command):
    text: str
    kind: CommandKind = field(default=CommandKind.EXECUTE_COMMAND, init=False)


@dataclass(frozen=True)
class ExecuteSearch(Command):
    """Search text. committed is True only for the Enter-time emission."""

    text: str
    committed: bool = False
    kind: CommandKind = field(default=CommandKind.EXECUTE_SEARCH, init=False)


# ─── Data lifecycle ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Refresh(Command):
    kind: CommandKind = field(default=CommandKind.REFRESH, init=False)


@dataclass(frozen=True)
class LoadMoreResult(Command):
    """One merged page. generation identifies the fetch sequence."""

    items: tuple[PullRequest, ...]
    has_more: bool
    cursor: str | None
    generation: int = 0
    kind: CommandKind = field(default=CommandKind.LOAD_MORE_RESULT, init=False)


@dataclass(frozen=True)
class FetchItemDetail(Command):
    repository: str
    number: int
    kind: CommandKind = field(default=CommandKind.FETCH_ITEM_DETAIL, init=False)


@dataclass(frozen=True)
class ItemDetailLoaded(Command):
    item: PullRequest
    generation: int = 0
    kind: CommandKind = field(default=CommandKind.ITEM_DETAIL_LOADED, init=False)


@dataclass(frozen=True)
class ItemDetailLoadError(Command):
    message: str
    kind: CommandKind = field(default=CommandKind.ITEM_DETAIL_LOAD_ERROR, init=False)


# ─── Feedback ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Error(Command):
    message: str
    kind: CommandKind = field(default=CommandKind.ERROR, init=False)


@dataclass(frozen=True)
class Notify(Command):
    notification: Notification
    kind: CommandKind = field(default=CommandKind.NOTIFY, init=False)


# ─── Name lookup (keybinding config) ──────────────────────────────────────────

# [LAW:dataflow-not-control-flow] Commands a key may be bound to, by config name.
# Only argument-free commands plus Sort(n) are bindable.
BINDABLE_COMMANDS: dict[str, type[Command]] = {
    cls.__name__: cls
    for cls in (
        Tick, Render, Suspend, Resume, Quit,
        Up, Down, Left, Right, Enter, Open, Escape, Back, PageUp, PageDown, Help,
        EnterCommandMode, EnterSearchMode, Refresh,
    )
}


def command_label(command: Command) -> str:
    """Short human label: 'Refresh', 'Sort(3)', 'ChangeMode(Search)'."""
    if isinstance(command, Sort):
        return f"Sort({command.column})"
    if isinstance(command, ChangeMode):
        return f"ChangeMode({command.mode.value})"
    return command.kind.value
