"""Textual application acting as the terminal driver for the dispatcher.

The app owns no pull request state. It turns Textual input into terminal
inputs for the dispatcher, pumps the dispatcher on its own thread, and
paints the frames the dispatcher hands back into one Static per region.

// [LAW:single-enforcer] on_key is the sole key entry point; every key goes
// to the dispatcher and Textual's own bindings are disabled.
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal

from rich.console import Group
from textual.app import App, ComposeResult, SuspendNotSupported
from textual.message import Message
from textual.widgets import Static

from ghtui.core.commands import Refresh
from ghtui.core.component import REGION_BODY, REGION_HEADER, REGIONS
from ghtui.core.config import AppConfig
from ghtui.core.dispatcher import DEFAULT_PUMP_LIMIT, Dispatcher
from ghtui.core.errors import CircuitBreakerTripped
from ghtui.core.terminal import KeyInput, QuitInput, RenderInput, ResizeInput, TickInput

logger = logging.getLogger(__name__)

# EX_SOFTWARE: internal software error.
EXIT_LOOP_DETECTED = 70

# Regions that stay mounted even when empty.
_ALWAYS_SHOWN = (REGION_HEADER, REGION_BODY)

# Signals that mean the terminal is going away.
_QUIT_SIGNALS = ("SIGTERM", "SIGHUP")


class _Wake(Message):
    """Posted (from any thread) when the dispatcher has queued work."""


class TextualTerminal:
    """TerminalDriver backed by a running GhtuiApp."""

    def __init__(self, app: GhtuiApp):
        self._app = app
        self._suspension = None

    def size(self) -> tuple[int, int]:
        return (self._app.size.width, self._app.size.height)

    def draw(self, frame) -> None:
        self._app.paint(frame)

    def suspend(self) -> bool:
        suspension = self._app.suspend()
        try:
            suspension.__enter__()
        except SuspendNotSupported:
            logger.info("suspend not supported by this terminal driver")
            return False
        self._suspension = suspension
        if hasattr(signal, "SIGTSTP"):
            # Blocks here until the shell sends SIGCONT.
            os.kill(os.getpid(), signal.SIGTSTP)
        return True

    def resume(self) -> None:
        suspension, self._suspension = self._suspension, None
        if suspension is not None:
            suspension.__exit__(None, None, None)
        self._app.refresh()

    def stop(self) -> None:
        self._app.exit(return_code=0)


class GhtuiApp(App, inherit_bindings=False):
    """TUI application for ghtui."""

    ENABLE_COMMAND_PALETTE = False

    CSS = """
    Screen {
        layers: base overlay toast;
    }
    #header {
        dock: top;
        height: 1;
    }
    #body {
        height: 1fr;
    }
    #palette {
        dock: bottom;
        height: 1;
    }
    #overlay {
        layer: overlay;
        dock: right;
        width: 60%;
        height: 100%;
        overflow-y: auto;
    }
    #notifications {
        layer: toast;
        dock: top;
        offset: 0 1;
        width: 100%;
        height: auto;
        content-align: right top;
    }
    #keystrokes {
        layer: toast;
        dock: bottom;
        height: 1;
        width: 100%;
    }
    """

    def __init__(self, config: AppConfig, *, auto_refresh: bool = True, pump_limit: int = DEFAULT_PUMP_LIMIT):
        super().__init__()
        self.config = config
        self.terminal = TextualTerminal(self)
        self.dispatcher: Dispatcher | None = None
        self.fatal_error: str | None = None
        self._auto_refresh = auto_refresh
        self._pump_limit = pump_limit
        self._wake_pending = False
        self.last_frame = None
        self.handled_signals: list[int] = []

    def attach(self, dispatcher: Dispatcher) -> None:
        self.dispatcher = dispatcher
        dispatcher.set_wake(self.wake)

    def compose(self) -> ComposeResult:
        for region in REGIONS:
            yield Static("", id=region)

    def on_mount(self) -> None:
        if self.dispatcher is None:
            raise RuntimeError("GhtuiApp started without a dispatcher")
        for region in REGIONS:
            if region not in _ALWAYS_SHOWN:
                self.query_one(f"#{region}", Static).display = False
        self._install_signal_handlers()
        self.dispatcher.start()
        self.set_interval(self.config.tick_interval, self._on_tick_timer)
        self.set_interval(self.config.frame_interval, self._on_frame_timer)
        if self._auto_refresh:
            self.dispatcher.send(Refresh())
        self.pump()

    def on_unmount(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in self.handled_signals:
            loop.remove_signal_handler(sig)
        self.handled_signals = []

    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for name in _QUIT_SIGNALS:
            sig = getattr(signal, name, None)
            if sig is None:
                continue
            try:
                loop.add_signal_handler(sig, self.request_quit)
            except (NotImplementedError, RuntimeError, ValueError) as exc:
                # No loop signal support (Windows) or not on the main thread.
                logger.debug("cannot handle %s: %s", name, exc)
                continue
            self.handled_signals.append(sig)

    def request_quit(self) -> None:
        """Shut down through the dispatcher: final frame, teardown, exit."""
        logger.info("terminal quit requested")
        self._feed(QuitInput())

    # ─── Dispatcher bridge ────────────────────────────────────────────────

    def wake(self) -> None:
        """Thread-safe: ask the app thread to pump the dispatcher."""
        if self._wake_pending:
            return
        self._wake_pending = True
        self.post_message(_Wake())

    def on__wake(self, message: _Wake) -> None:
        self._wake_pending = False
        self.pump()

    def pump(self) -> None:
        dispatcher = self.dispatcher
        if dispatcher is None or not dispatcher.started or dispatcher.stopped or self.fatal_error is not None:
            return
        try:
            dispatcher.run_pending(self._pump_limit)
        except CircuitBreakerTripped as exc:
            self.fatal_error = str(exc)
            logger.critical("%s", exc)
            self.exit(return_code=EXIT_LOOP_DETECTED, message=self.fatal_error)
            return
        if not dispatcher.stopped and dispatcher.has_pending():
            self.wake()

    def _feed(self, item) -> None:
        if self.dispatcher is None:
            return
        self.dispatcher.feed(item)
        self.pump()

    # ─── Textual input ────────────────────────────────────────────────────

    async def on_key(self, event) -> None:
        event.prevent_default()
        event.stop()
        self._feed(KeyInput(event.key, event.character))

    def on_resize(self, event) -> None:
        self._feed(ResizeInput(event.size.width, event.size.height))

    def _on_tick_timer(self) -> None:
        self._feed(TickInput())

    def _on_frame_timer(self) -> None:
        self._feed(RenderInput())

    # ─── Painting ─────────────────────────────────────────────────────────

    def paint(self, frame) -> None:
        self.last_frame = frame
        for region in REGIONS:
            renderables = frame.get(region) or []
            widget = self.query_one(f"#{region}", Static)
            if len(renderables) == 1:
                widget.update(renderables[0])
            else:
                widget.update(Group(*renderables))
            if region not in _ALWAYS_SHOWN:
                widget.display = bool(renderables)
