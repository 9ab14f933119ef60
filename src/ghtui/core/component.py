"""Component contract for UI building blocks driven by the dispatcher.

A component is a plain object with a fixed set of hooks. The dispatcher
calls them in this order:

1. init(size) once, then register_command_channel / register_event_channel /
   register_config.
2. Per cycle: handle_key_event(key) (NORMAL mode, or when the component is
   the active overlay), apply_command(command), apply_event(event) for types
   listed in event_interest, and render(area) during a redraw pass.
3. teardown() once, after Quit.

render(area) returns a rich renderable, or None when the component has
nothing to show. region names the screen area the renderable is placed in.

Components never touch the terminal and never block. Background work is
submitted elsewhere and comes back as a Command through the send channel.
"""

from __future__ import annotations

import logging
from typing import Callable

from ghtui.core.commands import Command
from ghtui.core.events import SystemEvent
from ghtui.core.terminal import KeyInput

logger = logging.getLogger(__name__)

SendCommand = Callable[[Command], None]
EmitEvent = Callable[[SystemEvent], None]

# Screen regions, in paint order.
REGION_HEADER = "header"
REGION_BODY = "body"
REGION_OVERLAY = "overlay"
REGION_PALETTE = "palette"
REGION_NOTIFICATIONS = "notifications"
REGION_KEYSTROKES = "keystrokes"

REGIONS = (
    REGION_HEADER,
    REGION_BODY,
    REGION_OVERLAY,
    REGION_PALETTE,
    REGION_NOTIFICATIONS,
    REGION_KEYSTROKES,
)


class Component:
    """Base class with no-op hooks. Subclasses override what they need."""

    region: str | None = None
    event_interest: tuple[type[SystemEvent], ...] = ()

    def __init__(self):
        self.size: tuple[int, int] = (0, 0)
        self.config = None
        self._send: SendCommand | None = None
        self._emit: EmitEvent | None = None

    # ─── Lifecycle ────────────────────────────────────────────────────────

    def init(self, size: tuple[int, int]) -> None:
        self.size = size

    def register_command_channel(self, send: SendCommand) -> None:
        self._send = send

    def register_event_channel(self, emit: EmitEvent) -> None:
        self._emit = emit

    def register_config(self, config) -> None:
        self.config = config

    def teardown(self) -> None:
        pass

    # ─── Channels ─────────────────────────────────────────────────────────

    def send(self, command: Command) -> None:
        if self._send is None:
            raise RuntimeError(f"{type(self).__name__} has no command channel")
        self._send(command)

    def emit(self, event: SystemEvent) -> None:
        if self._emit is None:
            raise RuntimeError(f"{type(self).__name__} has no event channel")
        self._emit(event)

    # ─── Per-cycle hooks ──────────────────────────────────────────────────

    def handle_key_event(self, key: KeyInput) -> Command | None:
        return None

    def apply_command(self, command: Command) -> None:
        pass

    def apply_event(self, event: SystemEvent) -> None:
        pass

    def render(self, area: tuple[int, int]):
        return None

    def is_active(self) -> bool:
        """True while the component captures input or is shown as an overlay."""
        return False


_REQUIRED_METHODS = (
    "init",
    "register_command_channel",
    "register_event_channel",
    "register_config",
    "handle_key_event",
    "apply_command",
    "apply_event",
    "render",
    "is_active",
    "teardown",
)


def validate_component(component) -> None:
    """Check that an object satisfies the component contract.

    Raises:
        TypeError: If a hook is missing or not callable, or region is unknown.
    """
    name = type(component).__name__
    for method_name in _REQUIRED_METHODS:
        if not hasattr(component, method_name):
            raise TypeError(
                f"Component {name} does not implement the component contract: "
                f"missing method '{method_name}()'"
            )
        if not callable(getattr(component, method_name)):
            raise TypeError(
                f"Component {name} does not implement the component contract: "
                f"'{method_name}' exists but is not callable"
            )
    region = getattr(component, "region", None)
    if region is not None and region not in REGIONS:
        raise TypeError(f"Component {name} declares unknown region {region!r}")
    if not isinstance(getattr(component, "event_interest", ()), tuple):
        raise TypeError(f"Component {name}: event_interest must be a tuple of event types")
