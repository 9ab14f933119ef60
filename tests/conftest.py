"""Pytest configuration and shared fixtures for ghtui tests."""

import pytest

import ghtui.io.logging_setup
from tests.harness.builders import ManualClock


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep settings and logs inside the test's tmp dir."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.delenv("GHTUI_CONFIG", raising=False)
    monkeypatch.setenv("GHTUI_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("GHTUI_LOG_FILE", raising=False)
    monkeypatch.delenv("GHTUI_LOG_LEVEL", raising=False)
    yield
    ghtui.io.logging_setup.reset()


@pytest.fixture
def clock():
    return ManualClock()
