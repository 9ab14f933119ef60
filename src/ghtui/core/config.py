"""Runtime configuration assembled once at startup.

// [LAW:one-source-of-truth] Defaults live here; settings file values and CLI
// overrides are layered on top in that order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ghtui.core.keybindings import (
    KeyBindings,
    default_keybindings,
    merge_keybindings,
    parse_keybindings,
)
from ghtui.core.pagination import INITIAL_PAGE_SIZE, PAGE_SIZE

logger = logging.getLogger(__name__)

DEFAULT_TICK_RATE = 1.0
DEFAULT_FRAME_RATE = 10.0


@dataclass(frozen=True)
class AppConfig:
    keybindings: KeyBindings = field(default_factory=default_keybindings)
    tick_rate: float = DEFAULT_TICK_RATE
    frame_rate: float = DEFAULT_FRAME_RATE
    initial_page_size: int = INITIAL_PAGE_SIZE
    page_size: int = PAGE_SIZE

    @property
    def tick_interval(self) -> float:
        return 1.0 / self.tick_rate

    @property
    def frame_interval(self) -> float:
        return 1.0 / self.frame_rate


def _positive(settings: dict, key: str, default, cast):
    raw = settings.get(key)
    if raw is None:
        return default
    try:
        value = cast(raw)
    except (TypeError, ValueError):
        logger.warning("config: %s=%r is not a number; using %s", key, raw, default)
        return default
    if value <= 0:
        logger.warning("config: %s=%r must be positive; using %s", key, raw, default)
        return default
    return value


def load_config(settings: dict | None = None, **overrides) -> AppConfig:
    """Build an AppConfig from a settings dict plus non-None overrides.

    Bad values log a warning and fall back to the default. Keybindings from
    settings merge over the defaults per key sequence.
    """
    settings = settings or {}
    bindings = merge_keybindings(
        default_keybindings(), parse_keybindings(settings.get("keybindings"))
    )
    values = {
        "keybindings": bindings,
        "tick_rate": _positive(settings, "tick_rate", DEFAULT_TICK_RATE, float),
        "frame_rate": _positive(settings, "frame_rate", DEFAULT_FRAME_RATE, float),
        "initial_page_size": _positive(settings, "initial_page_size", INITIAL_PAGE_SIZE, int),
        "page_size": _positive(settings, "page_size", PAGE_SIZE, int),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return AppConfig(**values)
