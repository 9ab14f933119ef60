"""Exception types for the two error tiers.

ProviderFailure is recoverable: it becomes an Error command, a notification,
and the affected fetch stops. CircuitBreakerTripped is fatal: it signals a
wiring defect in the dispatch loop and is never handled in place.
"""


class ProviderFailure(Exception):
    """A provider call failed. The message is shown to the user as-is."""


class CircuitBreakerTripped(RuntimeError):
    """A command kind exceeded the dispatch rate threshold."""

    def __init__(self, kind: str, count: int, window_seconds: float):
        self.kind = kind
        self.count = count
        self.window_seconds = window_seconds
        super().__init__(
            "INFINITE COMMAND LOOP DETECTED!\n"
            f"Command '{kind}' was dispatched {count} times in the last "
            f"{window_seconds:g} seconds.\n"
            "This indicates a bug in a component's command handling or in the "
            "dispatch wiring."
        )
