"""Pull request list: filtering, column sort, selection and the table view.

The list never reads the shared store except through snapshot(), and only
when a ProviderReturnedResult says the store changed.
"""

from __future__ import annotations

import logging
import os
import uuid
import webbrowser

from ghtui.core.commands import (
    ChangeMode,
    Command,
    Down,
    ExecuteSearch,
    Left,
    Notify,
    Open,
    PageDown,
    PageUp,
    Refresh,
    Resize,
    Right,
    Sort,
    Up,
)
from ghtui.core.component import REGION_BODY, Component
from ghtui.core.events import ProviderReturnedResult, UserIdentified
from ghtui.core.keybindings import bindings_for_command, default_keybindings, format_sequence
from ghtui.core.mode import Mode
from ghtui.core.notifications import Notification
from ghtui.core.pagination import SharedItemList
from ghtui.core.things import COLUMNS, DEFAULT_SORT_COLUMN, PullRequest, matches_filter, sort_items
from ghtui.tui import renderers

logger = logging.getLogger(__name__)

# Table title, header and border rows.
_TABLE_CHROME_ROWS = 5

# Commands that act on the table; ignored while the detail overlay covers it.
_TABLE_ACTIONS = (Up, Down, PageUp, PageDown, Left, Right, Sort, Open)


class PullRequestList(Component):
    region = REGION_BODY
    event_interest = (ProviderReturnedResult, UserIdentified)

    def __init__(
        self,
        shared: SharedItemList,
        *,
        credential_env: str | None = "GITHUB_TOKEN",
        environ=None,
        open_url=webbrowser.open,
    ):
        super().__init__()
        self.shared = shared
        self.credential_env = credential_env
        self._environ = os.environ if environ is None else environ
        self._open_url = open_url

        self.items: tuple[PullRequest, ...] = ()
        # All items in display order; rows is this list filtered.
        self._ordered: list[PullRequest] = []
        self.rows: list[PullRequest] = []
        self.sort_column = DEFAULT_SORT_COLUMN
        self.filter = ""
        self.selected_index: int | None = None
        self._selected_uuid: uuid.UUID | None = None
        self._offset = 0
        self.identity: str | None = None
        # Set by wiring; while it is active it owns the table actions.
        self.detail_overlay: Component | None = None

        # Filter to restore if a search is abandoned with Escape.
        self._search_origin: str | None = None
        self._search_committed = False

    # ─── Queries ──────────────────────────────────────────────────────────

    @property
    def selected(self) -> PullRequest | None:
        if self.selected_index is None:
            return None
        return self.rows[self.selected_index]

    def _page_size(self) -> int:
        return max(1, self.size[1] - _TABLE_CHROME_ROWS)

    # ─── Commands ─────────────────────────────────────────────────────────

    def apply_command(self, command: Command) -> None:
        if isinstance(command, _TABLE_ACTIONS) and self._covered():
            return
        if isinstance(command, Up):
            self._move(-1)
        elif isinstance(command, Down):
            self._move(1)
        elif isinstance(command, PageUp):
            self._move(-self._page_size())
        elif isinstance(command, PageDown):
            self._move(self._page_size())
        elif isinstance(command, Left):
            self._set_sort((self.sort_column - 1) % len(COLUMNS))
        elif isinstance(command, Right):
            self._set_sort((self.sort_column + 1) % len(COLUMNS))
        elif isinstance(command, Sort):
            self._set_sort(command.column % len(COLUMNS))
        elif isinstance(command, Open):
            self.open_item(self.selected)
        elif isinstance(command, ExecuteSearch):
            self._set_filter(command.text)
            if command.committed:
                self._search_committed = True
        elif isinstance(command, ChangeMode):
            self._on_mode(command.mode)
        elif isinstance(command, Resize):
            self.size = (command.width, command.height)

    def apply_event(self, event) -> None:
        if isinstance(event, ProviderReturnedResult):
            self.items = self.shared.snapshot()
            self._ordered = sort_items(self.items, self.sort_column)
            self._rebuild()
        elif isinstance(event, UserIdentified):
            self.identity = event.name

    def _covered(self) -> bool:
        return self.detail_overlay is not None and self.detail_overlay.is_active()

    def _on_mode(self, mode: Mode) -> None:
        if mode is Mode.SEARCH_ENTRY:
            self._search_origin = self.filter
            self._search_committed = False
        elif mode is Mode.NORMAL and self._search_origin is not None:
            if not self._search_committed:
                self._set_filter(self._search_origin)
            self._search_origin = None

    def _move(self, delta: int) -> None:
        if not self.rows:
            return
        current = 0 if self.selected_index is None else self.selected_index
        self._select(max(0, min(len(self.rows) - 1, current + delta)))

    def _select(self, index: int | None) -> None:
        self.selected_index = index
        self._selected_uuid = None if index is None else self.rows[index].uuid

    def _set_sort(self, column: int) -> None:
        self.sort_column = column
        # Sort the current order, not the snapshot: ties keep the previous sort's order.
        self._ordered = sort_items(self._ordered, column)
        self._rebuild()

    def _set_filter(self, text: str) -> None:
        self.filter = text
        self._rebuild()

    def _rebuild(self) -> None:
        """Re-derive visible rows; keep the selection by uuid."""
        self.rows = [pr for pr in self._ordered if matches_filter(pr, self.filter)]
        if not self.rows:
            self.selected_index = None
            return
        for idx, pr in enumerate(self.rows):
            if pr.uuid == self._selected_uuid:
                self.selected_index = idx
                return
        fallback = 0 if self.selected_index is None else min(self.selected_index, len(self.rows) - 1)
        self._select(fallback)

    def open_item(self, pr: PullRequest | None) -> None:
        if pr is None or not pr.url:
            return
        logger.info("opening %s", pr.url)
        if not self._open_url(pr.url):
            self.send(Notify(Notification.warning(f"Could not open {pr.url}")))

    # ─── Render ───────────────────────────────────────────────────────────

    def _refresh_hint(self) -> str:
        table = self.config.keybindings if self.config is not None else default_keybindings()
        sequence = bindings_for_command(table, Mode.NORMAL, Refresh())
        key = format_sequence(sequence) if sequence else ":refresh"
        return f"Press '{key}' to refresh"

    def _scroll_offset(self) -> int:
        height = self._page_size()
        if self.selected_index is None:
            return 0
        if self.selected_index < self._offset:
            self._offset = self.selected_index
        elif self.selected_index >= self._offset + height:
            self._offset = self.selected_index - height + 1
        return self._offset

    def render(self, area: tuple[int, int]):
        self.size = area
        if self.credential_env and not self._environ.get(self.credential_env):
            return renderers.render_token_error(self.credential_env)
        if not self.items:
            return renderers.render_placeholder(self._refresh_hint())
        if not self.rows:
            return renderers.render_placeholder(f"No pull requests match '{self.filter}'")
        offset = self._scroll_offset()
        visible = self.rows[: offset + self._page_size()]
        return renderers.render_pull_request_table(
            visible,
            selected=self.selected_index,
            sort_column=self.sort_column,
            offset=offset,
            title=f"Pull Requests ({len(self.rows)}/{len(self.items)})",
        )
