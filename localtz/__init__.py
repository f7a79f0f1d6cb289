"""Process-wide local timezone, kept current by watching a zoneinfo symlink."""

from .errors import NotASymlinkError, TimezoneResolutionError, UnreadableLinkError, UnresolvableZoneError
from .models import WatcherState, WatcherStatus
from .services import LocalTimezoneWatcher, NotifierHandle, get_timezone_watcher
from .utils import convert_to_local, get, next_change, now_local, set_for_test

__all__ = [
    "NotASymlinkError",
    "TimezoneResolutionError",
    "UnreadableLinkError",
    "UnresolvableZoneError",
    "WatcherState",
    "WatcherStatus",
    "LocalTimezoneWatcher",
    "NotifierHandle",
    "get_timezone_watcher",
    "convert_to_local",
    "get",
    "next_change",
    "now_local",
    "set_for_test",
]
