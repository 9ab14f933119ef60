"""One-line header: user, item count, loading state, filter, mode."""

from __future__ import annotations

from ghtui.core.commands import Command, LoadMoreResult, Refresh
from ghtui.core.component import REGION_HEADER, Component
from ghtui.core.events import ModeChanged, ProviderError, UserIdentified
from ghtui.core.mode import Mode
from ghtui.tui import renderers


class StatusHeader(Component):
    region = REGION_HEADER
    event_interest = (UserIdentified, ProviderError, ModeChanged)

    def __init__(self, item_list):
        super().__init__()
        self._list = item_list
        self.identity: str | None = None
        self.mode = Mode.NORMAL
        self.loading = False

    def apply_command(self, command: Command) -> None:
        if isinstance(command, Refresh):
            self.loading = True
        elif isinstance(command, LoadMoreResult):
            self.loading = command.has_more

    def apply_event(self, event) -> None:
        if isinstance(event, UserIdentified):
            self.identity = event.name
        elif isinstance(event, ProviderError):
            self.loading = False
        elif isinstance(event, ModeChanged):
            self.mode = event.mode

    def render(self, area: tuple[int, int]):
        return renderers.render_header(
            identity=self.identity,
            count=len(self._list.items),
            loading=self.loading,
            mode=self.mode,
            search=self._list.filter,
        )
