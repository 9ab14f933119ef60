"""Color roles used by the renderers.

// [LAW:one-source-of-truth] Renderers refer to roles, never to raw hex values.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Palette:
    text: str = "#CDD6F4"
    subtle: str = "#7F849C"
    accent: str = "#89B4FA"
    selected_bg: str = "#313244"
    info: str = "#89DCEB"
    success: str = "#A6E3A1"
    warning: str = "#F9E2AF"
    error: str = "#F38BA8"
    highlight: str = "#FAB387"
    merged: str = "#CBA6F7"


PALETTE = Palette()
