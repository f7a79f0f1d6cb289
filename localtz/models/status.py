from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class WatcherState(str, Enum):
    """Lifecycle of the local timezone watcher."""

    INIT = "init"  # No observation made yet.
    STEADY = "steady"  # Last observation resolved, or the link is absent.
    ERROR_STREAK = "error_streak"  # Consecutive failed observations.
    PERMANENTLY_FAILED = "permanently_failed"  # Pinned to the default, no longer watching.
    TEST_OVERRIDE = "test_override"  # Published value set explicitly; watching suspended.

    @property
    def retired(self) -> bool:
        return self in {WatcherState.PERMANENTLY_FAILED, WatcherState.TEST_OVERRIDE}


class WatcherStatus(BaseModel):
    path: str
    state: WatcherState
    timezone: Optional[str]
    error_streak: int
    running: bool
    fs_events: bool
