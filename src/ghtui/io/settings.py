"""The ghtui settings file.

One JSON object. Recognised top-level keys are listed in SETTINGS_KEYS;
values are validated later by ghtui.core.config.load_config, so this
module only deals with locating, reading and writing the file.

Path resolution, first match wins:
    1. an explicit path (the --config flag)
    2. $GHTUI_CONFIG
    3. $XDG_CONFIG_HOME/ghtui/config.json (XDG_CONFIG_HOME defaults to ~/.config)
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from ghtui.core.keybindings import DEFAULT_KEYBINDINGS

logger = logging.getLogger(__name__)

SETTINGS_KEYS = ("keybindings", "tick_rate", "frame_rate", "initial_page_size", "page_size")


def get_config_path(path: str | os.PathLike | None = None) -> Path:
    if path is not None:
        return Path(path)
    override = os.environ.get("GHTUI_CONFIG")
    if override:
        return Path(override)
    config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.expanduser("~/.config")
    return Path(config_home) / "ghtui" / "config.json"


def load_settings(path: str | os.PathLike | None = None) -> dict:
    """Read the settings object. A missing, unreadable or non-object file reads as {}."""
    path = get_config_path(path)
    # [LAW:dataflow-not-control-flow] Always attempt read; empty dict is the "no data" value.
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("no settings file at %s", path)
        return {}
    except OSError as exc:
        logger.warning("cannot read settings %s: %s", path, exc)
        return {}

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("ignoring corrupt settings %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("ignoring settings %s: top level is %s, not an object", path, type(data).__name__)
        return {}

    unknown = sorted(set(data) - set(SETTINGS_KEYS))
    if unknown:
        logger.warning("settings %s: unrecognised keys %s", path, ", ".join(unknown))
    return data


def save_settings(data: dict, path: str | os.PathLike | None = None) -> Path:
    """Replace the settings file with data. Returns the path written.

    The new content goes to a sibling temp file that is renamed over the
    target, so a crash mid-write leaves the previous file intact.
    """
    path = get_config_path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.{os.getpid()}.tmp")
    try:
        tmp.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise
    logger.info("wrote settings %s", path)
    return path


def write_default_config(path: str | os.PathLike | None = None) -> Path:
    """Store the default keybindings, keeping every other key already in the file."""
    data = load_settings(path)
    data["keybindings"] = {mode: dict(table) for mode, table in DEFAULT_KEYBINDINGS.items()}
    return save_settings(data, path)
