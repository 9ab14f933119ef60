"""Detail overlay for the selected pull request."""

from __future__ import annotations

from ghtui.core.commands import (
    Back,
    Command,
    Enter,
    Escape,
    FetchItemDetail,
    ItemDetailLoaded,
    ItemDetailLoadError,
    Open,
    Refresh,
)
from ghtui.core.component import REGION_OVERLAY, Component
from ghtui.core.things import PullRequest, item_key
from ghtui.tui import renderers


class PullRequestInfoOverlay(Component):
    """Enter toggles the overlay for the list's selection and requests details.

    While visible, Open targets the shown item and the list ignores its
    table actions.
    """

    region = REGION_OVERLAY

    def __init__(self, item_list):
        super().__init__()
        self._list = item_list
        self.visible = False
        self.item: PullRequest | None = None
        self.loading = False

    def is_active(self) -> bool:
        return self.visible

    def apply_command(self, command: Command) -> None:
        if isinstance(command, Enter):
            if self.visible:
                self.hide()
            else:
                self._show_selected()
        elif isinstance(command, Open):
            if self.visible:
                self._list.open_item(self.item)
        elif isinstance(command, (Escape, Back, Refresh)):
            self.hide()
        elif isinstance(command, ItemDetailLoaded):
            if self.item is not None and item_key(command.item) == item_key(self.item):
                self.item = command.item
                self.loading = False
        elif isinstance(command, ItemDetailLoadError):
            self.loading = False

    def _show_selected(self) -> None:
        selected = self._list.selected
        if selected is None:
            return
        self.visible = True
        self.item = selected
        self.loading = True
        self.send(FetchItemDetail(selected.repository, selected.number))

    def hide(self) -> None:
        self.visible = False
        self.item = None
        self.loading = False

    def render(self, area: tuple[int, int]):
        if not self.visible or self.item is None:
            return None
        return renderers.render_pull_request_info(self.item, loading=self.loading)
