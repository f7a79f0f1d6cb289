"""Assertion helpers for change handles and zoneinfo links."""

from __future__ import annotations

import os
from pathlib import Path

from zoneinfo import ZoneInfo

from localtz.services.notifier import NotifierHandle

ZONEINFO_ROOT = "/usr/share/zoneinfo"

#: Stand-in for the host zone, distinct from every zone the tests link to.
DEFAULT_ZONE = ZoneInfo("UTC")


def assert_signaled(handle: NotifierHandle, message: str = "", timeout: float = 2.0) -> None:
    assert handle.wait(timeout), f"expected a change signal: {message}"


def assert_no_update(handle: NotifierHandle, message: str = "", timeout: float = 0.3) -> None:
    assert not handle.wait(timeout), f"unexpected change signal: {message}"


def link_zone(path: Path, zone: str) -> None:
    """Point *path* at *zone* under the system zoneinfo tree.

    Only the link text matters, so the target does not need to exist.
    """
    os.symlink(f"{ZONEINFO_ROOT}/{zone}", path)


def replace_link(path: Path, target: str) -> None:
    """Swap the link for one pointing at *target*, removing it first."""
    if path.is_symlink() or path.exists():
        path.unlink()
    os.symlink(target, path)
