"""Service layer components."""

from .notifier import Notifier, NotifierHandle
from .resolver import load_location, resolve_timezone, system_default, zone_key_from_target, zone_name
from .watcher import LocalTimezoneWatcher, get_timezone_watcher


__all__ = [
    "Notifier",
    "NotifierHandle",
    "load_location",
    "resolve_timezone",
    "system_default",
    "zone_key_from_target",
    "zone_name",
    "LocalTimezoneWatcher",
    "get_timezone_watcher",
]
