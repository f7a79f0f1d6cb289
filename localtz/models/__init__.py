from .status import WatcherState, WatcherStatus

__all__ = [
    "WatcherState",
    "WatcherStatus",
]
