"""Pilot wrappers with settling for Textual in-process tests.

Thin wrappers that add await pilot.pause() after each interaction,
waiting for CPU idle instead of fixed sleeps.
"""

from textual.pilot import Pilot

from ghtui.core.terminal import KeyInput, RenderInput, TickInput


async def press_and_settle(pilot: Pilot, *keys: str) -> None:
    """Press keys and wait for app to settle."""
    await pilot.press(*keys)
    await pilot.pause()


async def press_sequence(pilot: Pilot, keys: list[str]) -> None:
    """Press keys one at a time, settling after each."""
    for key in keys:
        await pilot.press(key)
        await pilot.pause()


async def tick_and_settle(pilot: Pilot) -> None:
    """Feed one timer tick to the app's dispatcher and settle."""
    pilot.app._feed(TickInput())
    await pilot.pause()


async def resize_and_settle(pilot: Pilot, width: int, height: int) -> None:
    """Resize terminal and wait for app to settle."""
    await pilot.resize_terminal(width, height)
    await pilot.pause()


def feed_keys(dispatcher, *keys: str) -> None:
    """Headless: feed key presses to a dispatcher and drain it.

    Single printable characters are sent with a matching character.
    """
    for key in keys:
        character = key if len(key) == 1 else None
        dispatcher.feed(KeyInput(key, character))
        dispatcher.run_pending()


def type_text(dispatcher, text: str) -> None:
    """Headless: type printable text into whatever currently has the keys."""
    for char in text:
        name = "space" if char == " " else char
        dispatcher.feed(KeyInput(name, char))
        dispatcher.run_pending()


async def render_and_settle(pilot: Pilot) -> None:
    """Feed one frame-timer render request and settle."""
    pilot.app._feed(RenderInput())
    await pilot.pause()
