"""ghtui: terminal dashboard for pull requests."""

__version__ = "0.3.0"
