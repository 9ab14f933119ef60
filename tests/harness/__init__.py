"""Test harness for ghtui.

Re-exports all public API for convenient imports:
    from tests.harness import run_app, press_and_settle, make_pr, ...
"""

from tests.harness.app_runner import run_app
from tests.harness.interactions import (
    press_and_settle,
    press_sequence,
    tick_and_settle,
    render_and_settle,
    resize_and_settle,
    feed_keys,
    type_text,
)
from tests.harness.messages import MessageCapture
from tests.harness.driver import NullDriver
from tests.harness.builders import (
    make_pr,
    make_page,
    make_runtime,
    InlineExecutor,
    DeferredExecutor,
    ManualClock,
)
from tests.harness.assertions import (
    notification_texts,
    row_numbers,
    selected_number,
    refresh,
    send,
)
from tests.harness.content import (
    renderable_text,
    frame_text,
    region_text,
    region_shown,
)

__all__ = [
    "run_app",
    "press_and_settle",
    "press_sequence",
    "tick_and_settle",
    "render_and_settle",
    "resize_and_settle",
    "feed_keys",
    "type_text",
    "MessageCapture",
    "NullDriver",
    "make_pr",
    "make_page",
    "make_runtime",
    "InlineExecutor",
    "DeferredExecutor",
    "ManualClock",
    "notification_texts",
    "row_numbers",
    "selected_number",
    "refresh",
    "send",
    "renderable_text",
    "frame_text",
    "region_text",
    "region_shown",
]
