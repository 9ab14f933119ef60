"""Tests for the provider contract, factory resolution and the demo provider."""

import pytest

from ghtui.core.errors import ProviderFailure
from ghtui.providers.demo import DemoProvider, generate_pull_requests
from ghtui.providers.provider import (
    Page,
    Provider,
    create_provider,
    resolve_provider_factory,
)


def make_demo():
    return DemoProvider(total=3)


def not_a_provider():
    return object()


NOT_CALLABLE = 42


class TestFactory:
    def test_default_is_demo(self):
        provider = create_provider()
        assert isinstance(provider, DemoProvider)
        assert isinstance(provider, Provider)

    @pytest.mark.parametrize("path", ["tests.test_providers:make_demo", "tests.test_providers.make_demo"])
    def test_resolve_both_path_forms(self, path):
        provider = create_provider(path)
        assert isinstance(provider, DemoProvider)

    def test_class_path_works(self):
        assert isinstance(create_provider("ghtui.providers.demo:DemoProvider"), DemoProvider)

    @pytest.mark.parametrize("path", ["nomodule", ":attr", "tests.test_providers:missing", "tests.test_providers:NOT_CALLABLE"])
    def test_bad_paths_raise_value_error(self, path):
        with pytest.raises(ValueError):
            resolve_provider_factory(path)

    def test_missing_module_raises_import_error(self):
        with pytest.raises(ImportError):
            resolve_provider_factory("ghtui_no_such_module:factory")

    def test_non_provider_result_rejected(self):
        with pytest.raises(ValueError, match="did not return a provider"):
            create_provider("tests.test_providers:not_a_provider")


class TestDemoProvider:
    def test_generation_is_deterministic(self):
        a = generate_pull_requests(10, seed=3)
        b = generate_pull_requests(10, seed=3)
        assert [(p.key, p.title, p.author) for p in a] == [(p.key, p.title, p.author) for p in b]

    def test_identity(self):
        provider = DemoProvider(identity="mona")
        assert provider.resolve_current_user() == "mona"
        assert provider.user_requests == 1

    def test_pages_overlap_and_end(self):
        provider = DemoProvider(total=25, overlap=2)
        first = provider.fetch_items_page("mona", 10, None)
        assert isinstance(first, Page)
        assert len(first.items) == 10
        assert first.has_more and first.next_cursor == "10"

        second = provider.fetch_items_page("mona", 20, first.next_cursor)
        assert second.items[0].key == first.items[8].key
        assert not second.has_more
        assert second.next_cursor is None
        assert provider.page_requests == [(10, None), (20, "10")]

    def test_bad_cursor(self):
        with pytest.raises(ProviderFailure, match="bad cursor"):
            DemoProvider().fetch_items_page("mona", 10, "abc")

    def test_simulated_failure(self):
        provider = DemoProvider(fail_after_pages=1)
        provider.fetch_items_page("mona", 10, None)
        with pytest.raises(ProviderFailure):
            provider.fetch_items_page("mona", 10, "10")

    def test_detail(self):
        provider = DemoProvider(total=5)
        item = provider.fetch_items_page("mona", 5, None).items[2]
        detail = provider.fetch_item_detail(item.owner, item.repo_name, item.number)
        assert detail.key == item.key
        assert detail.base_branch == "main"
        assert item.title in detail.body

    def test_detail_not_found(self):
        with pytest.raises(ProviderFailure, match="not found"):
            DemoProvider(total=2).fetch_item_detail("octo-org", "nothing", 1)

    def test_commands(self):
        assert "pr" in DemoProvider.commands
        assert DemoProvider().credential_env is None
