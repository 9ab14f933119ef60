"""Tests for keybinding parsing and the multi-key resolver."""

import logging

import pytest

from ghtui.core import commands as cmd
from ghtui.core.keybindings import (
    DEFAULT_KEYBINDINGS,
    KeyBindingResolver,
    bindings_for_command,
    default_keybindings,
    format_sequence,
    merge_keybindings,
    normalize_key,
    parse_command,
    parse_keybindings,
    parse_sequence,
)
from ghtui.core.mode import Mode


def resolver_for(bindings: dict) -> KeyBindingResolver:
    return KeyBindingResolver(parse_keybindings({"Normal": bindings}))


class TestResolverPrecedence:
    def test_single_key_binding_preempts_longer_sequence(self):
        resolver = resolver_for({"g": "Refresh", "g g": "Enter"})
        assert resolver.resolve(Mode.NORMAL, "g") == cmd.Refresh()
        assert resolver.pending == ()

    def test_two_key_sequence_completes_without_single_binding(self):
        resolver = resolver_for({"g g": "Enter"})
        assert resolver.resolve(Mode.NORMAL, "g") is None
        assert resolver.pending == ("g",)
        assert resolver.resolve(Mode.NORMAL, "g") == cmd.Enter()
        assert resolver.pending == ()

    def test_tick_between_presses_resets_sequence(self):
        resolver = resolver_for({"g g": "Enter"})
        assert resolver.resolve(Mode.NORMAL, "g") is None
        resolver.clear()  # tick
        assert resolver.resolve(Mode.NORMAL, "g") is None
        assert resolver.pending == ("g",)

    def test_unbound_key_leaves_no_pending_state(self):
        resolver = resolver_for({"g r": "Refresh"})
        assert resolver.resolve(Mode.NORMAL, "x") is None
        assert resolver.pending == ()

    def test_single_binding_fires_after_dead_prefix(self):
        resolver = resolver_for({"g r": "Refresh", "q": "Quit"})
        assert resolver.resolve(Mode.NORMAL, "g") is None
        assert resolver.resolve(Mode.NORMAL, "q") == cmd.Quit()
        assert resolver.pending == ()

    def test_broken_sequence_restarts_from_suffix(self):
        resolver = resolver_for({"g r": "Refresh"})
        resolver.resolve(Mode.NORMAL, "g")
        assert resolver.resolve(Mode.NORMAL, "g") is None
        assert resolver.pending == ("g",)
        assert resolver.resolve(Mode.NORMAL, "r") == cmd.Refresh()

    def test_three_key_sequence(self):
        resolver = resolver_for({"a b c": "Help"})
        assert resolver.resolve(Mode.NORMAL, "a") is None
        assert resolver.resolve(Mode.NORMAL, "b") is None
        assert resolver.resolve(Mode.NORMAL, "c") == cmd.Help()

    def test_modal_modes_have_no_bindings_by_default(self):
        resolver = KeyBindingResolver(default_keybindings())
        assert resolver.resolve(Mode.COMMAND_ENTRY, "q") is None
        assert resolver.resolve(Mode.SEARCH_ENTRY, "R") is None


class TestDefaults:
    def test_required_bindings_present(self):
        table = default_keybindings()[Mode.NORMAL]
        bound = {command.kind for command in table.values()}
        for kind in (
            cmd.CommandKind.REFRESH,
            cmd.CommandKind.QUIT,
            cmd.CommandKind.UP,
            cmd.CommandKind.DOWN,
            cmd.CommandKind.LEFT,
            cmd.CommandKind.RIGHT,
        ):
            assert kind in bound

    def test_defaults_parse_without_loss(self):
        table = default_keybindings()
        assert len(table[Mode.NORMAL]) == len(DEFAULT_KEYBINDINGS["Normal"])

    def test_refresh_prefers_single_key(self):
        sequence = bindings_for_command(default_keybindings(), Mode.NORMAL, cmd.Refresh())
        assert sequence == ("R",)
        assert format_sequence(sequence) == "R"

    def test_unbound_command_has_no_sequence(self):
        assert bindings_for_command(default_keybindings(), Mode.NORMAL, cmd.Resume()) is None

    def test_number_keys_sort_columns(self):
        table = default_keybindings()[Mode.NORMAL]
        assert table[("1",)] == cmd.Sort(0)
        assert table[("8",)] == cmd.Sort(7)


class TestParsing:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("j", "j"),
            ("R", "R"),
            (":", "colon"),
            ("/", "slash"),
            ("?", "question_mark"),
            ("<esc>", "escape"),
            ("Ctrl-C", "ctrl+c"),
            ("ctrl+d", "ctrl+d"),
            ("PageDown", "pagedown"),
        ],
    )
    def test_normalize_key(self, raw, expected):
        assert normalize_key(raw) == expected

    def test_parse_sequence_forms(self):
        assert parse_sequence("g r") == ("g", "r")
        assert parse_sequence("<g><r>") == ("g", "r")
        assert parse_sequence("") == ()

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Refresh", cmd.Refresh()),
            ("Quit", cmd.Quit()),
            ("Sort(3)", cmd.Sort(3)),
            ("ChangeMode(Search)", cmd.ChangeMode(Mode.SEARCH_ENTRY)),
            ("EnterCommandMode", cmd.EnterCommandMode()),
        ],
    )
    def test_parse_command(self, name, expected):
        assert parse_command(name) == expected

    @pytest.mark.parametrize("name", ["Bogus", "Sort", "Sort(x)", "Sort(99)", "Refresh(1)", "ExecuteCommand", ""])
    def test_parse_command_rejects(self, name):
        assert parse_command(name) is None

    def test_malformed_entries_are_skipped_with_warning(self, caplog):
        raw = {
            "Normal": {"x": "NoSuchCommand", "": "Quit", "y": "Help"},
            "Weird": {"z": "Quit"},
            "Search": ["not", "a", "mapping"],
        }
        with caplog.at_level(logging.WARNING, logger="ghtui.core.keybindings"):
            table = parse_keybindings(raw)
        assert table[Mode.NORMAL] == {("y",): cmd.Help()}
        assert table[Mode.SEARCH_ENTRY] == {}
        messages = " ".join(r.getMessage() for r in caplog.records)
        assert "NoSuchCommand" in messages
        assert "Weird" in messages

    def test_non_mapping_config_yields_empty_table(self):
        table = parse_keybindings(["q", "Quit"])
        assert all(entries == {} for entries in table.values())

    def test_merge_overrides_per_sequence(self):
        merged = merge_keybindings(
            default_keybindings(), parse_keybindings({"Normal": {"q": "Help", "z z": "Refresh"}})
        )
        normal = merged[Mode.NORMAL]
        assert normal[("q",)] == cmd.Help()
        assert normal[("z", "z")] == cmd.Refresh()
        assert normal[("ctrl+c",)] == cmd.Quit()
