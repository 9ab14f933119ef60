"""Single-threaded dispatch loop unifying input, timers and background results.

// [LAW:single-enforcer] Every command passes through _dispatch(), which is
// the only place the circuit breaker is consulted and the only place mode
// changes.

Three thread-safe channels feed the loop:

- terminal inputs (keys, ticks, render requests, resizes), from the driver
- commands, from components and background workers
- system events, from components and background workers

step() services exactly one item, preferring terminal input, then commands,
then events, so a backlog of background results never delays a key press.
Any thread may enqueue; the loop itself only ever runs on the driver's thread.
"""

from __future__ import annotations

import logging
import queue
from typing import Callable

from ghtui.core import commands as cmd
from ghtui.core import events as ev
from ghtui.core.circuit_breaker import CircuitBreaker
from ghtui.core.component import REGIONS, validate_component
from ghtui.core.errors import CircuitBreakerTripped
from ghtui.core.keybindings import KeyBindingResolver, KeyBindings
from ghtui.core.mode import Mode
from ghtui.core.notifications import Notification
from ghtui.core.terminal import (
    KeyInput,
    QuitInput,
    RenderInput,
    ResizeInput,
    TerminalDriver,
    TerminalInput,
    TickInput,
)

logger = logging.getLogger(__name__)

DEFAULT_PUMP_LIMIT = 1000


class Dispatcher:
    """Owns mode, the keybinding resolver, the breaker and the component list."""

    def __init__(
        self,
        bindings: KeyBindings,
        driver: TerminalDriver,
        *,
        breaker: CircuitBreaker | None = None,
        config=None,
        wake: Callable[[], None] | None = None,
    ):
        self.mode = Mode.NORMAL
        self.resolver = KeyBindingResolver(bindings)
        self.driver = driver
        self.config = config
        self._breaker = breaker if breaker is not None else CircuitBreaker()
        self._wake = wake

        self._terminal: queue.SimpleQueue[TerminalInput] = queue.SimpleQueue()
        self._commands: queue.SimpleQueue[cmd.Command] = queue.SimpleQueue()
        self._events: queue.SimpleQueue[ev.SystemEvent] = queue.SimpleQueue()

        self._components: list = []
        self._modal = None
        # [LAW:one-source-of-truth] The overlay that captures keys in modal modes.
        self._active_overlay = None

        self.shutdown = False
        self.stopped = False
        self._started = False

    # ─── Setup ────────────────────────────────────────────────────────────

    @property
    def components(self) -> tuple:
        return tuple(self._components)

    @property
    def active_overlay(self):
        return self._active_overlay

    @property
    def started(self) -> bool:
        return self._started

    def set_wake(self, wake: Callable[[], None] | None) -> None:
        self._wake = wake

    def register(self, component, *, modal: bool = False) -> None:
        """Add a component. modal marks the one that owns COMMAND/SEARCH input."""
        validate_component(component)
        if modal:
            if self._modal is not None:
                raise ValueError("a modal input component is already registered")
            self._modal = component
        self._components.append(component)
        if self._started:
            self._attach(component)

    def start(self) -> None:
        """Initialise every registered component and request the first frame."""
        if self._started:
            return
        self._started = True
        for component in self._components:
            self._attach(component)
        logger.info("dispatcher started with %d components", len(self._components))
        self.send(cmd.Render())

    def _attach(self, component) -> None:
        component.init(self.driver.size())
        component.register_command_channel(self.send)
        component.register_event_channel(self.emit)
        component.register_config(self.config)

    # ─── Channels (any thread) ────────────────────────────────────────────

    def feed(self, item: TerminalInput) -> None:
        if self.stopped:
            return
        self._terminal.put(item)
        self._notify_wake()

    def send(self, command: cmd.Command) -> None:
        if self.shutdown:
            logger.debug("dropping %s after quit", cmd.command_label(command))
            return
        self._commands.put(command)
        self._notify_wake()

    def emit(self, event: ev.SystemEvent) -> None:
        if self.stopped:
            return
        self._events.put(event)
        self._notify_wake()

    def _notify_wake(self) -> None:
        if self._wake is not None:
            self._wake()

    def has_pending(self) -> bool:
        return not (
            self._terminal.empty() and self._commands.empty() and self._events.empty()
        )

    # ─── Loop (driver thread only) ────────────────────────────────────────

    def step(self) -> bool:
        """Service one ready item. Returns False when nothing was ready.

        Raises:
            CircuitBreakerTripped: a command kind exceeded the dispatch rate.
        """
        if self.stopped:
            return False
        handled = self._step_once()
        if self.shutdown and not self.stopped:
            self._finish()
        return handled

    def _step_once(self) -> bool:
        try:
            self._handle_terminal(self._terminal.get_nowait())
            return True
        except queue.Empty:
            pass
        if not self.shutdown:
            try:
                self._dispatch(self._commands.get_nowait())
                return True
            except queue.Empty:
                pass
        try:
            self._deliver(self._events.get_nowait())
            return True
        except queue.Empty:
            return False

    def run_pending(self, limit: int = DEFAULT_PUMP_LIMIT) -> int:
        """Step until idle, stopped or limit items. Returns items serviced."""
        serviced = 0
        while serviced < limit and self.step():
            serviced += 1
        return serviced

    # ─── Terminal input ───────────────────────────────────────────────────

    def _handle_terminal(self, item: TerminalInput) -> None:
        if isinstance(item, KeyInput):
            self._handle_key(item)
        elif isinstance(item, TickInput):
            self.send(cmd.Tick())
        elif isinstance(item, RenderInput):
            self.send(cmd.Render())
        elif isinstance(item, ResizeInput):
            self.send(cmd.Resize(item.width, item.height))
        elif isinstance(item, QuitInput):
            self.send(cmd.Quit())
        else:
            logger.warning("unknown terminal input %r", item)

    def _handle_key(self, key: KeyInput) -> None:
        if self.shutdown:
            return
        if self.mode.is_modal:
            overlay = self._active_overlay
            if overlay is None or not overlay.is_active():
                logger.warning("key %s in %s mode with no active overlay", key.key, self.mode.value)
                return
            self._send_optional(overlay.handle_key_event(key))
            return

        resolved = self.resolver.resolve(self.mode, key.key)
        for component in self._components:
            self._send_optional(component.handle_key_event(key))
        self._send_optional(resolved)

    def _send_optional(self, command: cmd.Command | None) -> None:
        if command is not None:
            self.send(command)

    # ─── Commands ─────────────────────────────────────────────────────────

    def _dispatch(self, command: cmd.Command) -> None:
        self._breaker.check(command)
        if command.kind not in (cmd.CommandKind.TICK, cmd.CommandKind.RENDER):
            logger.debug("dispatch %s", cmd.command_label(command))

        if isinstance(command, cmd.Tick):
            self.resolver.clear()
        elif isinstance(command, cmd.Quit):
            self.shutdown = True
            logger.info("quit requested")
        elif isinstance(command, cmd.ChangeMode):
            self._change_mode(command.mode)
        elif isinstance(command, cmd.EnterCommandMode):
            self.send(cmd.ChangeMode(Mode.COMMAND_ENTRY))
            self.send(cmd.Render())
        elif isinstance(command, cmd.EnterSearchMode):
            self.send(cmd.ChangeMode(Mode.SEARCH_ENTRY))
            self.send(cmd.Render())
        elif isinstance(command, cmd.Error):
            logger.warning("error: %s", command.message)
            self.send(cmd.Notify(Notification.error(f"Error: {command.message}")))
        elif isinstance(command, cmd.Suspend):
            self._suspend()
        elif isinstance(command, cmd.Resume):
            self.driver.resume()
            self.send(cmd.Render())

        for component in self._components:
            self._apply(component, command)

        if isinstance(command, cmd.Resize):
            # The driver may still report the old size while its resize is in flight.
            self.redraw((command.width, command.height))
        elif isinstance(command, cmd.Render):
            self.redraw()

    def _apply(self, component, command: cmd.Command) -> None:
        try:
            component.apply_command(command)
        except CircuitBreakerTripped:
            raise
        except Exception as exc:
            logger.exception(
                "%s failed applying %s", type(component).__name__, cmd.command_label(command)
            )
            # Feedback commands must not feed back into themselves.
            if not isinstance(command, (cmd.Error, cmd.Notify)):
                self.send(cmd.Error(f"{type(component).__name__}: {exc}"))

    def _change_mode(self, mode: Mode) -> None:
        previous = self.mode
        self.mode = mode
        self.resolver.clear()
        self._active_overlay = self._modal if mode.is_modal else None
        logger.debug("mode %s -> %s", previous.value, mode.value)
        self.emit(ev.ModeChanged(mode))

    def _suspend(self) -> None:
        if self.driver.suspend():
            self.send(cmd.Resume())
        else:
            self.send(cmd.Notify(Notification.warning("Suspend is not supported here")))

    # ─── Events ───────────────────────────────────────────────────────────

    def _deliver(self, event: ev.SystemEvent) -> None:
        if isinstance(event, ev.Quit):
            self.shutdown = True
        for component in self._components:
            if not isinstance(event, component.event_interest):
                continue
            try:
                component.apply_event(event)
            except CircuitBreakerTripped:
                raise
            except Exception as exc:
                logger.exception("%s failed applying %s", type(component).__name__, type(event).__name__)
                self.send(cmd.Error(f"{type(component).__name__}: {exc}"))

    # ─── Rendering & shutdown ─────────────────────────────────────────────

    def redraw(self, area: tuple[int, int] | None = None) -> None:
        """Collect every component's renderable and hand the frame to the driver."""
        if area is None:
            area = self.driver.size()
        frame: dict[str, list] = {region: [] for region in REGIONS}
        for component in self._components:
            if component.region is None:
                continue
            try:
                renderable = component.render(area)
            except Exception:
                logger.exception("%s failed to render", type(component).__name__)
                continue
            if renderable is not None:
                frame[component.region].append(renderable)
        self.driver.draw(frame)

    def _finish(self) -> None:
        self.redraw()
        for component in self._components:
            try:
                component.teardown()
            except Exception:
                logger.exception("%s failed during teardown", type(component).__name__)
        self.driver.stop()
        self.stopped = True
        logger.info("dispatcher stopped")
