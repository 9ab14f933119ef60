"""Logging bootstrap for ghtui.

// [LAW:single-enforcer] Handlers are attached to the "ghtui" logger here and
// nowhere else; modules only call logging.getLogger(__name__).

The TUI owns stdout and stderr while it runs, so records go to a rotating
file. Environment:

    GHTUI_LOG_DIR    directory for per-run files (~/.local/share/ghtui/logs)
    GHTUI_LOG_FILE   exact file to use instead of a per-run file
    GHTUI_LOG_LEVEL  level name or number (INFO)
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Mapping

ROOT_LOGGER = "ghtui"
DEFAULT_LOG_DIR = "~/.local/share/ghtui/logs"
MAX_BYTES = 20 * 1024 * 1024
BACKUP_COUNT = 5

FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s [%(threadName)s] %(message)s"
STDERR_FORMAT = "ghtui: %(levelname)s %(message)s"

# Chatty libraries that only matter at WARNING and above.
_QUIET_LOGGERS = ("asyncio", "textual", "markdown_it")


@dataclass(frozen=True)
class LoggingRuntime:
    level_name: str
    level: int
    file_path: str
    stderr: bool


_RUNTIME: LoggingRuntime | None = None


def parse_level(raw: str | None) -> int:
    """Level from a name ("debug") or a number ("10"). Unknown values mean INFO."""
    text = (raw or "").strip()
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    return level if isinstance(level, int) else logging.INFO


def _run_file_name(run_name: str) -> str:
    stem = re.sub(r"[^A-Za-z0-9_-]+", "-", run_name).strip("-_") or "ghtui"
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    return f"{stem}-{stamp}-{os.getpid()}.log"


def resolve_runtime(run_name: str, *, stderr: bool = False, environ: Mapping[str, str] | None = None) -> LoggingRuntime:
    """Work out level and file from the environment without touching the disk."""
    env = os.environ if environ is None else environ
    level = parse_level(env.get("GHTUI_LOG_LEVEL"))
    file_path = env.get("GHTUI_LOG_FILE")
    if not file_path:
        log_dir = Path(os.path.expanduser(env.get("GHTUI_LOG_DIR") or DEFAULT_LOG_DIR))
        file_path = str(log_dir / _run_file_name(run_name))
    return LoggingRuntime(
        level_name=logging.getLevelName(level),
        level=level,
        file_path=file_path,
        stderr=stderr,
    )


def configure(run_name: str = "ghtui", *, stderr: bool = False) -> LoggingRuntime:
    """Attach handlers to the ghtui logger. Later calls return the first runtime."""
    global _RUNTIME
    if _RUNTIME is not None:
        return _RUNTIME

    runtime = resolve_runtime(run_name, stderr=stderr)
    Path(runtime.file_path).parent.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        runtime.file_path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(runtime.level)
    logger.propagate = False
    logger.handlers.clear()
    logger.addHandler(file_handler)
    if stderr:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter(STDERR_FORMAT))
        logger.addHandler(stream_handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.captureWarnings(True)

    _RUNTIME = runtime
    return runtime


def get_runtime() -> LoggingRuntime | None:
    return _RUNTIME


def reset() -> None:
    """Detach and close ghtui handlers so configure() can run again."""
    global _RUNTIME
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    logging.captureWarnings(False)
    _RUNTIME = None
