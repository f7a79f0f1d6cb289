"""Pytest configuration and fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List

import pytest

from localtz.config import get_settings
from localtz.services import watcher as watcher_module
from localtz.services.watcher import LocalTimezoneWatcher

from .helpers import DEFAULT_ZONE


@pytest.fixture
def link_path(tmp_path: Path) -> Path:
    """Path of a not-yet-created localtime link inside a temp directory."""
    return tmp_path / "localtime"


@pytest.fixture
def make_watcher(link_path: Path) -> Callable[..., LocalTimezoneWatcher]:
    """Build watchers on ``link_path`` and stop them after the test.

    Defaults suit deterministic stepping via ``check()``; pass ``start=True``
    to run the real loop at a short interval.
    """
    created: List[LocalTimezoneWatcher] = []

    def factory(start: bool = False, **overrides) -> LocalTimezoneWatcher:
        options = {
            "poll_interval_seconds": 0.02,
            "max_retry_interval_seconds": 0.05,
            "max_consecutive_errors": 3,
            "use_fs_events": False,
            "default": DEFAULT_ZONE,
        }
        path = overrides.pop("path", link_path)
        options.update(overrides)
        watcher = LocalTimezoneWatcher(path, **options)
        created.append(watcher)
        if start:
            watcher.start()
        return watcher

    yield factory

    for watcher in created:
        watcher.stop(timeout=2.0)


@pytest.fixture
def clean_settings(monkeypatch):
    """Clear LOCALTZ_* env vars and the settings cache around a test."""
    for name in (
        "LOCALTZ_PATH",
        "LOCALTZ_DEFAULT",
        "LOCALTZ_POLL_INTERVAL",
        "LOCALTZ_MAX_RETRY_INTERVAL",
        "LOCALTZ_MAX_ERRORS",
        "LOCALTZ_FS_EVENTS",
        "LOCALTZ_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


@pytest.fixture
def process_watcher(clean_settings, link_path: Path):
    """Point the process-wide watcher at ``link_path`` for one test."""
    clean_settings.setenv("LOCALTZ_PATH", str(link_path))
    clean_settings.setenv("LOCALTZ_DEFAULT", "UTC")
    clean_settings.setenv("LOCALTZ_POLL_INTERVAL", "0.02")
    clean_settings.setenv("LOCALTZ_FS_EVENTS", "0")
    clean_settings.setattr(watcher_module, "_watcher_instance", None)
    yield
    instance = watcher_module._watcher_instance
    if instance is not None:
        instance.stop(timeout=2.0)
