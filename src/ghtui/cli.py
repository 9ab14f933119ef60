"""CLI entry point for ghtui."""

import argparse
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import ghtui
import ghtui.io.logging_setup
import ghtui.io.settings
from ghtui.core.config import load_config
from ghtui.providers.provider import create_provider
from ghtui.tui.app import EXIT_LOOP_DETECTED, GhtuiApp
from ghtui.tui.wiring import build_runtime

logger = logging.getLogger(__name__)

WORKER_THREADS = 4


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ghtui",
        description="Terminal UI for browsing your pull requests",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {ghtui.__version__}")
    parser.add_argument(
        "--tick-rate",
        type=float,
        default=None,
        help="Ticks per second; one tick is also the multi-key timeout (default: 1.0)",
    )
    parser.add_argument(
        "--frame-rate",
        type=float,
        default=None,
        help="Redraws per second (default: 10.0)",
    )
    parser.add_argument(
        "--provider",
        type=str,
        default=None,
        help="Provider factory as 'module:callable' (default: built-in demo provider)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings JSON file (default: $GHTUI_CONFIG, else $XDG_CONFIG_HOME/ghtui/config.json)",
    )
    parser.add_argument(
        "--no-refresh",
        action="store_true",
        help="Do not fetch on startup; wait for Refresh",
    )
    parser.add_argument(
        "--write-default-config",
        action="store_true",
        help="Write the default keybindings to the settings file and exit",
    )
    return parser


def _positive_or_none(parser: argparse.ArgumentParser, name: str, value):
    if value is not None and value <= 0:
        parser.error(f"{name} must be positive")
    return value


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    tick_rate = _positive_or_none(parser, "--tick-rate", args.tick_rate)
    frame_rate = _positive_or_none(parser, "--frame-rate", args.frame_rate)

    runtime = ghtui.io.logging_setup.configure("ghtui")
    logger.info("ghtui %s starting; log file %s", ghtui.__version__, runtime.file_path)

    if args.write_default_config:
        path = ghtui.io.settings.write_default_config(args.config)
        print(f"Wrote {path}")
        return 0

    settings = ghtui.io.settings.load_settings(args.config)
    config = load_config(settings, tick_rate=tick_rate, frame_rate=frame_rate)

    try:
        provider = create_provider(args.provider)
    except (ImportError, ValueError) as exc:
        parser.error(f"--provider: {exc}")

    app = GhtuiApp(config, auto_refresh=not args.no_refresh)
    executor = ThreadPoolExecutor(max_workers=WORKER_THREADS, thread_name_prefix="ghtui-worker")
    wired = build_runtime(config, provider, executor, app.terminal)
    app.attach(wired.dispatcher)
    try:
        app.run()
    finally:
        # In-flight fetches are abandoned, never awaited.
        executor.shutdown(wait=False, cancel_futures=True)

    if app.fatal_error is not None:
        logger.critical("exiting after fatal error")
        return EXIT_LOOP_DETECTED
    logger.info("ghtui stopped")
    return app.return_code or 0


if __name__ == "__main__":
    sys.exit(main())
