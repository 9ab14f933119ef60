"""Tests for the detail overlay, key help, status header and keystroke echo."""

from ghtui.core import commands as cmd
from ghtui.core.component import REGION_HEADER, REGION_KEYSTROKES, REGION_OVERLAY
from ghtui.core.errors import ProviderFailure
from ghtui.core.keybindings import default_keybindings, parse_keybindings
from ghtui.core.mode import Mode
from ghtui.core.terminal import KeyInput
from ghtui.providers.demo import DemoProvider
from ghtui.tui.keys_help import key_groups
from ghtui.tui.keystrokes import Keystrokes
from tests.harness import (
    DeferredExecutor,
    feed_keys,
    frame_text,
    make_runtime,
    notification_texts,
    refresh,
    send,
)


def loaded(**kwargs):
    runtime, driver = make_runtime(provider=kwargs.pop("provider", DemoProvider(total=25)), **kwargs)
    refresh(runtime)
    return runtime, driver


class TestInfoOverlay:
    def test_enter_shows_details_for_selection(self):
        runtime, driver = loaded()
        selected = runtime.item_list.selected
        feed_keys(runtime.dispatcher, "enter")

        info = runtime.info
        assert info.visible
        assert info.item.key == selected.key
        assert not info.loading
        assert info.item.base_branch == "main"
        send(runtime, cmd.Render())
        assert f"{selected.repository}#{selected.number}" in frame_text(driver.last_frame, REGION_OVERLAY)

    def test_loading_until_detail_arrives(self):
        executor = DeferredExecutor()
        runtime, _ = make_runtime(provider=DemoProvider(total=5), executor=executor)
        refresh(runtime)
        executor.run_all()
        runtime.dispatcher.run_pending()
        executor.run_all()
        runtime.dispatcher.run_pending()

        send(runtime, cmd.Enter())
        assert runtime.info.loading
        executor.run_all()
        runtime.dispatcher.run_pending()
        assert not runtime.info.loading
        assert runtime.info.item.body

    def test_enter_again_and_escape_hide(self):
        runtime, _ = loaded()
        send(runtime, cmd.Enter())
        send(runtime, cmd.Enter())
        assert not runtime.info.visible
        send(runtime, cmd.Enter())
        feed_keys(runtime.dispatcher, "escape")
        assert not runtime.info.visible
        assert runtime.info.item is None

    def test_enter_with_no_rows_does_nothing(self):
        runtime, _ = make_runtime()
        send(runtime, cmd.Enter())
        assert not runtime.info.visible

    def test_detail_failure_clears_loading(self):
        class Flaky(DemoProvider):
            def fetch_item_detail(self, owner, repo, number):
                raise ProviderFailure("detail unavailable")

        runtime, _ = loaded(provider=Flaky(total=5))
        send(runtime, cmd.Enter())
        assert runtime.info.visible
        assert not runtime.info.loading
        assert "Error: detail unavailable" in notification_texts(runtime)


class TestKeysHelp:
    def test_question_mark_toggles(self):
        runtime, driver = make_runtime()
        feed_keys(runtime.dispatcher, "question_mark")
        assert runtime.keys_help.visible
        send(runtime, cmd.Render())
        text = frame_text(driver.last_frame, REGION_OVERLAY)
        assert "Navigation" in text
        assert "refresh" in text
        feed_keys(runtime.dispatcher, "question_mark")
        assert not runtime.keys_help.visible

    def test_key_groups_reflect_table(self):
        groups = dict(key_groups(default_keybindings()))
        pr_rows = dict(groups["Pull requests"])
        assert pr_rows["R/g r"] == "refresh"
        assert ("5", "sort by Created") in groups["Navigation"]

    def test_unbound_commands_are_omitted(self):
        groups = key_groups(parse_keybindings({"Normal": {"q": "Quit"}}))
        assert groups == [("App", [("q", "quit")])]


class TestStatusHeader:
    def test_header_tracks_user_count_and_loading(self):
        executor = DeferredExecutor()
        runtime, driver = make_runtime(provider=DemoProvider(total=25), executor=executor)
        send(runtime, cmd.Refresh())
        assert runtime.header.loading

        while executor.pending:
            executor.run_all()
            runtime.dispatcher.run_pending()

        header = runtime.header
        assert header.identity == "demo-user"
        assert not header.loading
        send(runtime, cmd.Render())
        text = frame_text(driver.last_frame, REGION_HEADER)
        assert "user: demo-user" in text
        assert "25 pull requests" in text
        assert "NORMAL" in text

    def test_header_shows_mode(self):
        runtime, _ = make_runtime()
        feed_keys(runtime.dispatcher, "slash")
        assert runtime.header.mode is Mode.SEARCH_ENTRY

    def test_provider_error_stops_loading(self):
        runtime, _ = make_runtime(provider=DemoProvider(total=25, fail_after_pages=0))
        send(runtime, cmd.Refresh())
        assert not runtime.header.loading


class TestKeystrokes:
    def test_keys_echo_then_expire(self, clock):
        strokes = Keystrokes(clock=clock)
        strokes.handle_key_event(KeyInput("g"))
        strokes.handle_key_event(KeyInput("colon"))
        assert strokes.keys == ["g", ":"]
        clock.advance(0.5)
        strokes.apply_command(cmd.Tick())
        assert strokes.keys == ["g", ":"]
        clock.advance(0.6)
        strokes.apply_command(cmd.Tick())
        assert strokes.keys == []
        assert strokes.render((80, 24)) is None

    def test_keystrokes_region_in_frame(self):
        runtime, driver = make_runtime()
        feed_keys(runtime.dispatcher, "j")
        send(runtime, cmd.Render())
        assert "j" in frame_text(driver.last_frame, REGION_KEYSTROKES)
