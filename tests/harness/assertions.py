"""State query helpers for ghtui tests.

Pure functions that return values; tests compose with assert.
No internal assertions.
"""

from ghtui.core import commands as cmd


def notification_texts(runtime) -> list[str]:
    """Texts of the live notifications, oldest first."""
    return [n.text for n in runtime.notifications.queue.snapshot()]


def row_numbers(runtime) -> list[int]:
    """Pull request numbers in the list's display order."""
    return [pr.number for pr in runtime.item_list.rows]


def selected_number(runtime) -> int | None:
    selected = runtime.item_list.selected
    return None if selected is None else selected.number


def refresh(runtime) -> None:
    """Headless: send Refresh and drain the dispatcher."""
    runtime.dispatcher.send(cmd.Refresh())
    runtime.dispatcher.run_pending()


def send(runtime, *commands) -> None:
    """Headless: send commands and drain the dispatcher."""
    for command in commands:
        runtime.dispatcher.send(command)
    runtime.dispatcher.run_pending()
