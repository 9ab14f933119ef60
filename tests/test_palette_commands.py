"""Tests for palette text interpretation."""

import pytest

from ghtui.core import commands as cmd
from ghtui.core.notifications import NotificationLevel
from ghtui.core.palette_commands import interpret
from ghtui.providers.demo import PULL_REQUEST_COMMANDS


@pytest.mark.parametrize(
    "text, expected",
    [
        ("q", [cmd.Quit()]),
        ("quit", [cmd.Quit()]),
        ("  QUIT  ", [cmd.Quit()]),
        ("r", [cmd.Refresh()]),
        ("refresh", [cmd.Refresh()]),
        ("open", [cmd.Open()]),
        ("help", [cmd.Help()]),
        ("sort title", [cmd.Sort(2)]),
        ("sort 4", [cmd.Sort(4)]),
        ("", []),
        ("   ", []),
    ],
)
def test_known_commands(text, expected):
    assert interpret(text) == expected


@pytest.mark.parametrize("word", PULL_REQUEST_COMMANDS)
def test_provider_words_refresh(word):
    assert interpret(word, PULL_REQUEST_COMMANDS) == [cmd.Refresh()]


def test_provider_words_need_a_provider():
    (result,) = interpret("pr")
    assert isinstance(result, cmd.Notify)


def test_unknown_command_warns():
    (result,) = interpret("frobnicate now")
    assert isinstance(result, cmd.Notify)
    assert result.notification.level is NotificationLevel.WARNING
    assert result.notification.text == "Unknown command: frobnicate now"


def test_unknown_sort_column_lists_columns():
    (result,) = interpret("sort nowhere")
    assert isinstance(result, cmd.Notify)
    assert "Repository" in result.notification.text
    assert "'nowhere'" in result.notification.text
