"""ChangeNotificationBridge: turns upstream change events into guarded recomputes."""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

from .board import WeekBoard
from .guard import Debouncer, RecomputeGuard
from .populator import CancellationToken, ConcurrentPopulator, PopulationResult

logger = logging.getLogger(__name__)


class ChangeKind(Enum):
    SCHEDULE_CHANGED = "schedule"
    TRACKING_CHANGED = "tracking"
    EQUIPMENT_CHANGED = "equipment"


@dataclass(frozen=True)
class ChangeEvent:
    kind: ChangeKind
    year: int
    equipment_code: Optional[str] = None


PassListener = Callable[[ChangeEvent, PopulationResult], None]


class ChangeNotificationBridge:
    """Sole trigger surface for recomputes; the engine never polls."""

    def __init__(
        self,
        populator: ConcurrentPopulator,
        board: Optional[WeekBoard] = None,
        guard: Optional[RecomputeGuard] = None,
        debounce_seconds: Optional[float] = None,
    ):
        self.populator = populator
        self.board = board or WeekBoard()
        self.guard = guard or RecomputeGuard()
        if debounce_seconds is None:
            debounce_seconds = populator.config.debounce_seconds
        self.debouncer = Debouncer(debounce_seconds)
        self.cancel_token: Optional[CancellationToken] = None
        self._listeners: List[PassListener] = []
        self._deferred_lock = threading.Lock()
        self._deferred: Dict[int, ChangeEvent] = {}
        self._running_year: Optional[int] = None

    def subscribe(self, listener: PassListener) -> None:
        self._listeners.append(listener)

    def cancel(self) -> None:
        """Cancel the pass in progress, if any."""
        if self.cancel_token is not None:
            self.cancel_token.cancel()

    async def notify(self, event: ChangeEvent) -> bool:
        """
        Recompute `event.year` unless a pass is already running.

        A change for the year being recomputed is dropped. A change for
        another year is deferred and recomputed by the running pass once it
        finishes, so the guard still admits one pass at a time.

        Returns True if this event ran or deferred a pass. PopulationError
        from a pass that could not start propagates to the caller.
        """
        if not await self.debouncer.settle(event.year):
            return False
        while not self.guard.try_enter():
            with self._deferred_lock:
                if self.guard.in_progress:
                    if event.year == self._running_year:
                        logger.debug(
                            "Recompute of %d in progress; dropping %s change",
                            event.year,
                            event.kind.value,
                        )
                        return False
                    self._deferred[event.year] = event
                    logger.debug(
                        "Recompute in progress; deferring %s change for %d",
                        event.kind.value,
                        event.year,
                    )
                    return True
            # The running pass released the guard in between; try again

        released = False
        try:
            while True:
                await self._run_pass(event)
                with self._deferred_lock:
                    if not self._deferred:
                        self._release()
                        released = True
                        break
                    event = self._deferred.pop(next(iter(self._deferred)))
        finally:
            if not released:
                with self._deferred_lock:
                    self._release()
        return True

    def _release(self) -> None:
        # Caller holds _deferred_lock
        self._running_year = None
        self.cancel_token = None
        self.guard.exit()

    async def _run_pass(self, event: ChangeEvent) -> None:
        with self._deferred_lock:
            self._running_year = event.year
            self._deferred.pop(event.year, None)
        logger.info(
            "Recompute %d triggered by %s change%s",
            event.year,
            event.kind.value,
            f" ({event.equipment_code})" if event.equipment_code else "",
        )
        self.cancel_token = CancellationToken()
        result = await self.populator.populate(event.year, self.board, self.cancel_token)
        for listener in list(self._listeners):
            listener(event, result)

    async def on_schedule_changed(self, year: int, equipment_code: Optional[str] = None) -> bool:
        return await self.notify(ChangeEvent(ChangeKind.SCHEDULE_CHANGED, year, equipment_code))

    async def on_tracking_changed(self, year: int, equipment_code: Optional[str] = None) -> bool:
        return await self.notify(ChangeEvent(ChangeKind.TRACKING_CHANGED, year, equipment_code))

    async def on_equipment_changed(self, year: int, equipment_code: Optional[str] = None) -> bool:
        return await self.notify(ChangeEvent(ChangeKind.EQUIPMENT_CHANGED, year, equipment_code))
