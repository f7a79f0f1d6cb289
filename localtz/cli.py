#!/usr/bin/env python3
"""CLI entrypoint for following the local timezone."""

import argparse
import math
from datetime import datetime, tzinfo
from typing import List, Optional

from .config import get_settings
from .logging_config import configure_logging
from .models import WatcherState
from .services import LocalTimezoneWatcher, system_default, zone_name

TIME_FORMAT = "%Y-%m-%d %H:%M:%S %Z"


def _describe(location: Optional[tzinfo]) -> str:
    if location is None:
        return zone_name(None)
    return f"{zone_name(location)}\t{datetime.now(location).strftime(TIME_FORMAT)}"


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    default_path = settings.watched_path
    default_interval = settings.poll_interval_seconds

    parser = argparse.ArgumentParser(description="Print the local timezone and follow its changes")
    parser.add_argument("--path", default=default_path, help=f"Symlink to watch (default: {default_path})")
    parser.add_argument(
        "--interval",
        type=float,
        default=default_interval,
        help=f"Seconds between checks (default: {default_interval})",
    )
    parser.add_argument("--once", action="store_true", help="Print the current timezone and exit")
    parser.add_argument("--status", action="store_true", help="Print watcher status as JSON and exit")
    parser.add_argument("--count", type=int, default=0, help="Exit after this many changes (default: run forever)")
    parser.add_argument("--log-level", default=settings.log_level, help=f"Log level (default: {settings.log_level})")
    args = parser.parse_args(argv)

    if not 0 < args.interval < math.inf:
        parser.error("--interval must be positive")
    if args.count < 0:
        parser.error("--count must not be negative")

    configure_logging(args.log_level)

    watcher = LocalTimezoneWatcher(
        args.path,
        poll_interval_seconds=args.interval,
        max_retry_interval_seconds=settings.max_retry_interval_seconds,
        max_consecutive_errors=settings.max_consecutive_errors,
        use_fs_events=settings.use_fs_events,
        default=system_default(settings.default_timezone),
    )
    watcher.start()

    try:
        if args.status:
            print(watcher.status().model_dump_json())
            return 0

        handle = watcher.next_change()
        print(_describe(watcher.get()), flush=True)
        if args.once:
            return 0

        changes = 0
        while not args.count or changes < args.count:
            if not handle.wait(timeout=1.0):
                if watcher.state is WatcherState.PERMANENTLY_FAILED:
                    return 1
                continue
            handle = watcher.next_change()
            print(_describe(watcher.get()), flush=True)
            changes += 1
        return 0
    except KeyboardInterrupt:
        return 0
    finally:
        watcher.stop(timeout=1.0)


if __name__ == "__main__":  # pragma: no cover - CLI invocation guard
    raise SystemExit(main())
