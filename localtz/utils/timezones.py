"""Shared helpers for working with the watched local timezone."""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Optional

from ..services.notifier import NotifierHandle
from ..services.watcher import get_timezone_watcher

UTC = timezone.utc


def get() -> Optional[tzinfo]:
    """Return the current local timezone, starting the watcher on first use."""

    watcher = get_timezone_watcher()
    watcher.start()
    return watcher.get()


def next_change() -> NotifierHandle:
    """Return a handle that is signaled the next time the timezone changes."""

    watcher = get_timezone_watcher()
    watcher.start()
    return watcher.next_change()


def set_for_test(location: Optional[tzinfo]) -> None:
    """Publish *location* and ignore the real link from now on.

    Intended for tests of code that formats local time. ``None`` publishes the
    unset value.
    """

    get_timezone_watcher().set_for_test(location)


def now_local(fmt: Optional[str] = None) -> datetime | str:
    """Return the current time in the local timezone.

    When *fmt* is provided, the result is formatted using ``datetime.strftime``;
    otherwise the aware ``datetime`` object is returned. UTC is used while the
    timezone is unset.
    """

    current = datetime.now(get() or UTC)
    if fmt is None:
        return current
    return current.strftime(fmt)


def convert_to_local(dt: datetime) -> datetime:
    """Convert *dt* into the local timezone, treating naive values as UTC."""

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(get() or UTC)


__all__ = [
    "UTC",
    "convert_to_local",
    "get",
    "next_change",
    "now_local",
    "set_for_test",
]
