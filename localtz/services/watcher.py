"""Background watcher that keeps the process-wide local timezone current."""

from __future__ import annotations

import math
import threading
from datetime import tzinfo
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..config import (
    DEFAULT_WATCHED_PATH,
    DEFAULT_MAX_CONSECUTIVE_ERRORS,
    DEFAULT_MAX_RETRY_INTERVAL_SECONDS,
    DEFAULT_POLL_INTERVAL_SECONDS,
    get_settings,
)
from ..errors import PathLike, TimezoneResolutionError
from ..logging_config import logger
from ..models import WatcherState, WatcherStatus
from .fs_events import LinkEventWatcher
from .notifier import Notifier, NotifierHandle
from .resolver import resolve_timezone, system_default, zone_name


class LocalTimezoneWatcher:
    """Watch a zoneinfo symlink and publish the timezone it names.

    A single daemon thread observes the link, and it is the only writer of the
    published location outside of :meth:`set_for_test`. Readers use
    :meth:`get` for the current value and :meth:`next_change` for a handle
    that is signaled on the next publish. The location, error streak, state
    and notifier generation all live behind one lock, so a reader never sees
    a new location without its signal or the other way round.

    An absent link leaves the published value alone. A link that is present
    but broken publishes the default and counts toward the error streak; once
    the streak exceeds ``max_consecutive_errors`` the watcher stops for good.
    """

    def __init__(
        self,
        path: PathLike,
        *,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        max_retry_interval_seconds: float = DEFAULT_MAX_RETRY_INTERVAL_SECONDS,
        max_consecutive_errors: int = DEFAULT_MAX_CONSECUTIVE_ERRORS,
        use_fs_events: bool = True,
        default: Optional[tzinfo] = None,
    ) -> None:
        for name, value in (
            ("poll_interval_seconds", poll_interval_seconds),
            ("max_retry_interval_seconds", max_retry_interval_seconds),
        ):
            if not (0 < value < math.inf):
                raise ValueError(f"{name} must be a positive finite number, got {value!r}")
        if max_consecutive_errors < 0:
            raise ValueError(f"max_consecutive_errors must not be negative, got {max_consecutive_errors!r}")

        self._path = Path(path)
        self._poll_interval = poll_interval_seconds
        self._max_retry_interval = max_retry_interval_seconds
        self._max_errors = max_consecutive_errors
        self._use_fs_events = use_fs_events
        self._default = default if default is not None else system_default()

        self._lock = threading.RLock()
        self._notifier = Notifier(self._lock)
        self._location: Optional[tzinfo] = self._default
        self._state = WatcherState.INIT
        self._error_streak = 0
        self._started = False
        self._ready = threading.Event()
        self._stopping = False

        self._wake = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._events: Optional[LinkEventWatcher] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def path(self) -> Path:
        return self._path

    @property
    def default(self) -> tzinfo:
        return self._default

    @property
    def state(self) -> WatcherState:
        with self._lock:
            return self._state

    @property
    def error_streak(self) -> int:
        with self._lock:
            return self._error_streak

    @property
    def running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def get(self) -> Optional[tzinfo]:
        """Return the published location (``None`` only under a test override)."""
        with self._lock:
            return self._location

    def next_change(self) -> NotifierHandle:
        return self._notifier.next()

    def set_for_test(self, location: Optional[tzinfo]) -> None:
        """Publish ``location`` and stop reacting to the real link."""
        with self._lock:
            if self._state is not WatcherState.TEST_OVERRIDE:
                logger.info("Local timezone watcher entering test override", extra={"path": str(self._path)})
                self._state = WatcherState.TEST_OVERRIDE
            if location != self._location:
                self._publish(location)
        self._wake.set()

    def status(self) -> WatcherStatus:
        with self._lock:
            return WatcherStatus(
                path=str(self._path),
                state=self._state,
                timezone=None if self._location is None else zone_name(self._location),
                error_streak=self._error_streak,
                running=self.running,
                fs_events=self._events is not None and self._events.active,
            )

    # Start the background watch thread
    def start(self) -> None:
        """Make the first observation and launch the watch thread.

        Concurrent callers block until the first observation is published,
        so nobody reads the pre-startup default once start() returns.
        """
        with self._lock:
            first = not self._started
            self._started = True
        if not first:
            self._ready.wait()
            return

        try:
            observing = self.check()
        finally:
            self._ready.set()
        if not observing:
            return

        if self._use_fs_events:
            self._events = LinkEventWatcher(self._path, self._wake.set)
            if not self._events.start():
                self._events = None

        self._thread = threading.Thread(target=self._run, name="localtz-watcher", daemon=True)
        self._thread.start()
        logger.info(
            "Local timezone watcher started",
            extra={
                "path": str(self._path),
                "interval_seconds": self._poll_interval,
                "fs_events": self._events is not None,
            },
        )

    # Stop the background watch thread; the published value is kept
    def stop(self, timeout: Optional[float] = None) -> None:
        with self._lock:
            self._stopping = True
        self._wake.set()
        self.join(timeout)

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the watch thread to exit. Returns True once it has."""
        thread = self._thread
        if thread is None or thread is threading.current_thread():
            return thread is None
        thread.join(timeout)
        return not thread.is_alive()

    def check(self) -> bool:
        """Run one observation cycle.

        Returns False once the watcher has retired (permanent failure, test
        override or stop) and no further cycles should run.
        """
        with self._lock:
            if not self._observing():
                return False

        try:
            location = resolve_timezone(self._path)
        except TimezoneResolutionError as exc:
            return self._record_failure(exc)

        if location is None:
            return self._record_absent()
        return self._record_success(location)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _observing(self) -> bool:
        return not self._stopping and not self._state.retired

    def _publish(self, location: Optional[tzinfo]) -> None:
        self._location = location
        self._notifier.signal()

    def _record_absent(self) -> bool:
        with self._lock:
            if not self._observing():
                return False
            if self._state is WatcherState.INIT:
                self._state = WatcherState.STEADY
        logger.debug("Local timezone link absent; keeping current value", extra={"path": str(self._path)})
        return True

    def _record_success(self, location: tzinfo) -> bool:
        with self._lock:
            if not self._observing():
                return False
            self._error_streak = 0
            self._state = WatcherState.STEADY
            if location == self._location:
                return True
            self._publish(location)
            logger.info(
                "Local timezone changed",
                extra={"path": str(self._path), "timezone": zone_name(location)},
            )
        return True

    def _record_failure(self, exc: TimezoneResolutionError) -> bool:
        with self._lock:
            if not self._observing():
                return False
            self._error_streak += 1
            streak = self._error_streak
            self._state = WatcherState.ERROR_STREAK
            if self._location != self._default:
                self._publish(self._default)
            if streak > self._max_errors:
                self._state = WatcherState.PERMANENTLY_FAILED
                logger.error(
                    "Local timezone watcher giving up; using %s until restart",
                    zone_name(self._default),
                    extra={"path": str(self._path), "error": str(exc), "error_streak": streak},
                )
                return False

        logger.warning(
            "Failed to resolve local timezone; using %s",
            zone_name(self._default),
            extra={"path": str(self._path), "error": str(exc), "error_streak": streak},
        )
        return True

    def _next_delay(self) -> float:
        with self._lock:
            streak = self._error_streak
        if not streak:
            return min(self._poll_interval, threading.TIMEOUT_MAX)
        return min(self._poll_interval * 2 ** min(streak, 32), self._max_retry_interval, threading.TIMEOUT_MAX)

    def _run(self) -> None:
        try:
            while True:
                self._wake.wait(self._next_delay())
                self._wake.clear()
                if not self.check():
                    break
        except Exception as exc:  # pragma: no cover - defensive
            logger.exception("Local timezone watcher loop crashed", extra={"error": str(exc)})
        finally:
            if self._events is not None:
                self._events.stop()
            logger.info(
                "Local timezone watcher exited",
                extra={"path": str(self._path), "state": self.state.value},
            )


_watcher_instance: Optional[LocalTimezoneWatcher] = None
_watcher_lock = threading.Lock()


def get_timezone_watcher() -> LocalTimezoneWatcher:
    global _watcher_instance
    with _watcher_lock:
        if _watcher_instance is None:
            try:
                settings = get_settings()
            except ValidationError as exc:
                logger.error(
                    "Invalid localtz settings; watching %s with defaults",
                    DEFAULT_WATCHED_PATH,
                    extra={"error": str(exc)},
                )
                _watcher_instance = LocalTimezoneWatcher(DEFAULT_WATCHED_PATH)
                return _watcher_instance
            _watcher_instance = LocalTimezoneWatcher(
                settings.watched_path,
                poll_interval_seconds=settings.poll_interval_seconds,
                max_retry_interval_seconds=settings.max_retry_interval_seconds,
                max_consecutive_errors=settings.max_consecutive_errors,
                use_fs_events=settings.use_fs_events,
                default=system_default(settings.default_timezone),
            )
        return _watcher_instance


__all__ = ["LocalTimezoneWatcher", "get_timezone_watcher"]
