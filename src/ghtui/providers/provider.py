"""Provider contract consumed by the pagination engine.

Providers are called from worker threads only. Every call either returns a
value or raises; the exception message is shown to the user verbatim, so
implementations should raise ProviderFailure with a readable message.
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass
from typing import Protocol, Sequence, runtime_checkable

from ghtui.core.errors import ProviderFailure
from ghtui.core.things import PullRequest

__all__ = ["Page", "Provider", "ProviderFailure", "resolve_provider_factory", "create_provider"]


@dataclass(frozen=True)
class Page:
    items: Sequence[PullRequest]
    has_more: bool
    next_cursor: str | None = None


@runtime_checkable
class Provider(Protocol):
    # Environment variable holding the credential; None when none is needed.
    credential_env: str | None
    # Palette words that refresh this provider.
    commands: tuple[str, ...]

    def resolve_current_user(self) -> str: ...

    def fetch_items_page(self, identity: str, page_size: int, cursor: str | None) -> Page: ...

    def fetch_item_detail(self, owner: str, repo: str, number: int) -> PullRequest: ...


def resolve_provider_factory(path: str):
    """Resolve 'package.module:factory' (or 'package.module.factory') to a callable.

    Raises:
        ValueError: path is malformed or does not name a callable.
        ImportError: the module cannot be imported.
    """
    if ":" in path:
        module_path, _, attr = path.partition(":")
    else:
        module_path, _, attr = path.rpartition(".")
    if not module_path or not attr:
        raise ValueError(f"provider path must look like 'module:factory', got {path!r}")
    module = importlib.import_module(module_path)
    try:
        factory = getattr(module, attr)
    except AttributeError:
        raise ValueError(f"module {module_path!r} has no attribute {attr!r}") from None
    if not callable(factory):
        raise ValueError(f"{path!r} is not callable")
    return factory


def create_provider(path: str | None = None) -> Provider:
    """Instantiate the provider at path, or the demo provider by default."""
    if path is None:
        from ghtui.providers.demo import DemoProvider

        return DemoProvider()
    provider = resolve_provider_factory(path)()
    if not isinstance(provider, Provider):
        raise ValueError(f"{path!r} did not return a provider")
    return provider
