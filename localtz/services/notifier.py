"""Broadcast change signal with one-shot handles.

Every call to :meth:`Notifier.signal` ends the current generation and starts
a new one. A :class:`NotifierHandle` remembers the generation it was issued
in and counts as signaled once that generation has ended, so any number of
observers holding handles from the same generation all see the same signal,
and a handle requested after a signal waits for the following one.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Any, Optional


class Notifier:
    """Generation counter behind a broadcast condition."""

    def __init__(self, lock: Optional[Any] = None) -> None:
        # Sharing the owner's lock lets state writes and signals happen in one
        # critical section.
        self._cond = threading.Condition(lock)
        self._generation = 0

    @property
    def generation(self) -> int:
        with self._cond:
            return self._generation

    def next(self) -> "NotifierHandle":
        """Return a handle that is signaled by the next call to :meth:`signal`."""
        with self._cond:
            return NotifierHandle(self, self._generation)

    def signal(self) -> None:
        with self._cond:
            self._generation += 1
            self._cond.notify_all()

    def _is_signaled(self, generation: int) -> bool:
        with self._cond:
            return self._generation > generation

    def _wait(self, generation: int, timeout: Optional[float]) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: self._generation > generation, timeout)


class NotifierHandle:
    """Waitable token for the next change after it was issued."""

    __slots__ = ("_notifier", "_generation")

    def __init__(self, notifier: Notifier, generation: int) -> None:
        self._notifier = notifier
        self._generation = generation

    @property
    def generation(self) -> int:
        return self._generation

    def is_signaled(self) -> bool:
        return self._notifier._is_signaled(self._generation)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until signaled or until ``timeout`` seconds pass.

        Returns True if the handle was signaled. Once signaled, every later
        call returns True immediately.
        """
        return self._notifier._wait(self._generation, timeout)

    async def wait_async(self, timeout: Optional[float] = None) -> bool:
        """Await the signal from asyncio code without blocking the event loop."""
        if self.is_signaled():
            return True
        return await asyncio.to_thread(self.wait, timeout)

    def __repr__(self) -> str:
        state = "signaled" if self.is_signaled() else "pending"
        return f"<NotifierHandle generation={self._generation} {state}>"


__all__ = ["Notifier", "NotifierHandle"]
