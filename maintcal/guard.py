"""Reentrancy and debounce control for full-year recomputes."""

import asyncio
import logging
import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator

logger = logging.getLogger(__name__)


class RecomputeGuard:
    """
    Admits at most one recompute at a time.

    A request that arrives while a pass is running is dropped, not queued.
    Callers that were admitted must call exit() on every path; admitted()
    does that for them.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._in_progress = False
        self._holders = 0
        self.max_holders = 0
        self.dropped = 0

    @property
    def in_progress(self) -> bool:
        return self._in_progress

    def try_enter(self) -> bool:
        with self._lock:
            if self._in_progress:
                self.dropped += 1
                return False
            self._in_progress = True
            self._holders += 1
            self.max_holders = max(self.max_holders, self._holders)
            return True

    def exit(self) -> None:
        with self._lock:
            if not self._in_progress:
                raise RuntimeError("RecomputeGuard.exit() called without a matching try_enter()")
            self._in_progress = False
            self._holders -= 1

    @contextmanager
    def admitted(self) -> Iterator[bool]:
        """Yield whether admission succeeded; release on exit if it did."""
        entered = self.try_enter()
        try:
            yield entered
        finally:
            if entered:
                self.exit()


class Debouncer:
    """Collapses a burst of calls with the same key into the last one after a quiet period."""

    def __init__(self, quiet_seconds: float = 0.0):
        self.quiet_seconds = quiet_seconds
        self._generations: Dict[Hashable, int] = {}

    async def settle(self, key: Hashable = None) -> bool:
        """
        Wait out the quiet period.

        Returns True only for the last call of a burst with the same key;
        earlier calls return False as soon as the period ends. Calls with
        different keys never supersede each other. Always True when
        disabled (0s).
        """
        if self.quiet_seconds <= 0:
            return True
        generation = self._generations.get(key, 0) + 1
        self._generations[key] = generation
        await asyncio.sleep(self.quiet_seconds)
        if generation != self._generations.get(key):
            logger.debug("Change notification for %s superseded during quiet period", key)
            return False
        del self._generations[key]
        return True
