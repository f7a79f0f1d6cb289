"""Wake the watch loop when the watched link changes on disk.

watchdog cannot watch a symlink itself, so the parent directory is observed
and events are filtered down to the one path. Polling keeps running either
way; events only shorten the time until the next observation.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ..logging_config import logger


class LinkEventAdapter(FileSystemEventHandler):
    """Forwards events that touch a single path."""

    def __init__(self, path: Path, handler: Callable[[], None]) -> None:
        self._path = os.path.abspath(path)
        self._handler = handler

    def on_any_event(self, event: FileSystemEvent) -> None:
        for candidate in (event.src_path, getattr(event, "dest_path", "")):
            if candidate and os.path.abspath(os.fsdecode(candidate)) == self._path:
                self._handler()
                return


class LinkEventWatcher:
    """Runs a watchdog observer on the watched link's directory."""

    def __init__(self, path: Path, handler: Callable[[], None]) -> None:
        self._path = Path(path)
        self._handler = handler
        self._observer: Optional[Observer] = None

    @property
    def active(self) -> bool:
        return self._observer is not None

    def start(self) -> bool:
        if self._observer is not None:
            return True
        observer = Observer()
        directory = str(self._path.parent)
        try:
            observer.schedule(LinkEventAdapter(self._path, self._handler), directory, recursive=False)
            observer.start()
        except OSError as exc:
            logger.warning(
                "Filesystem events unavailable; polling only",
                extra={"path": directory, "error": str(exc)},
            )
            return False
        self._observer = observer
        return True

    def stop(self) -> None:
        observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        observer.join(timeout=1.0)


__all__ = ["LinkEventAdapter", "LinkEventWatcher"]
