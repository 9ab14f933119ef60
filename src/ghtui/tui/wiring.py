"""Builds the dispatcher and its components for one run.

// [LAW:one-source-of-truth] Component registration order lives here only.
"""

from __future__ import annotations

from concurrent.futures import Executor
from dataclasses import dataclass

from ghtui.core.config import AppConfig
from ghtui.core.dispatcher import Dispatcher
from ghtui.core.pagination import PaginationEngine, SharedItemList
from ghtui.core.terminal import TerminalDriver
from ghtui.tui.command_palette import CommandPalette
from ghtui.tui.info_overlay import PullRequestInfoOverlay
from ghtui.tui.item_list import PullRequestList
from ghtui.tui.keys_help import KeysHelpOverlay
from ghtui.tui.keystrokes import Keystrokes
from ghtui.tui.notifications_panel import NotificationsPanel
from ghtui.tui.status_header import StatusHeader


@dataclass
class Runtime:
    dispatcher: Dispatcher
    shared: SharedItemList
    engine: PaginationEngine
    item_list: PullRequestList
    palette: CommandPalette
    info: PullRequestInfoOverlay
    keys_help: KeysHelpOverlay
    notifications: NotificationsPanel
    keystrokes: Keystrokes
    header: StatusHeader


def build_runtime(
    config: AppConfig,
    provider,
    executor: Executor,
    driver: TerminalDriver,
    *,
    environ=None,
    open_url=None,
    breaker=None,
) -> Runtime:
    """Wire the standard component set. The dispatcher is not started."""
    shared = SharedItemList()
    dispatcher = Dispatcher(config.keybindings, driver, breaker=breaker, config=config)

    engine = PaginationEngine(
        provider,
        shared,
        executor,
        initial_page_size=config.initial_page_size,
        page_size=config.page_size,
    )
    list_kwargs = {"credential_env": getattr(provider, "credential_env", None), "environ": environ}
    if open_url is not None:
        list_kwargs["open_url"] = open_url
    item_list = PullRequestList(shared, **list_kwargs)
    palette = CommandPalette(getattr(provider, "commands", ()))
    info = PullRequestInfoOverlay(item_list)
    item_list.detail_overlay = info
    keys_help = KeysHelpOverlay()
    notifications = NotificationsPanel()
    keystrokes = Keystrokes()
    header = StatusHeader(item_list)

    # Order matters: the engine sees Refresh before views react to it, and the
    # list applies a command before overlays that read its selection.
    for component in (engine, header, item_list, info, keys_help, notifications, keystrokes):
        dispatcher.register(component)
    dispatcher.register(palette, modal=True)

    return Runtime(
        dispatcher=dispatcher,
        shared=shared,
        engine=engine,
        item_list=item_list,
        palette=palette,
        info=info,
        keys_help=keys_help,
        notifications=notifications,
        keystrokes=keystrokes,
        header=header,
    )
