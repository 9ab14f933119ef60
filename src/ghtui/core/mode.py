"""Input modes for key dispatch.

Exactly one mode is active. NORMAL routes keys through the keybinding
resolver; the two entry modes hand every key to the command palette.
"""

from enum import Enum


class Mode(Enum):
    NORMAL = "Normal"
    COMMAND_ENTRY = "Command"
    SEARCH_ENTRY = "Search"

    @property
    def is_modal(self) -> bool:
        return self is not Mode.NORMAL

    @classmethod
    def from_name(cls, name: str) -> "Mode | None":
        """Resolve a config name ("Normal", "command", "SEARCH") to a Mode."""
        wanted = str(name).strip().lower()
        for mode in cls:
            if mode.value.lower() == wanted or mode.name.lower() == wanted:
                return mode
        return None
