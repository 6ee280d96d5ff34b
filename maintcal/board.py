"""
WeekBoard: the incremental results sink of a population pass.

Per-week tasks publish into the board concurrently, so the week map is
guarded by a lock. Listeners are called outside the lock and may call back
into the board.
"""

import threading
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Callable, Dict, List, Optional

from .week_calendar import first_date_of_week
from .week_status import EquipmentWeekStatus


class BoardEventKind(Enum):
    STARTED = "started"  # Skeleton of empty week placeholders
    WEEK = "week"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass
class WeekResult:
    """Status rows of one week; `loaded` is False for skeleton placeholders."""

    year: int
    week: int
    start: date
    statuses: List[EquipmentWeekStatus] = field(default_factory=list)
    loaded: bool = False
    failed: bool = False


@dataclass
class BoardEvent:
    kind: BoardEventKind
    year: int
    week: Optional[int] = None
    result: Optional[WeekResult] = None


Listener = Callable[[BoardEvent], None]


class WeekBoard:
    """Concurrent-safe map of week number to its latest published result."""

    def __init__(self):
        self._lock = threading.Lock()
        self._weeks: Dict[int, WeekResult] = {}
        self._listeners: List[Listener] = []
        self.year: Optional[int] = None
        self.state: Optional[BoardEventKind] = None

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _emit(self, event: BoardEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    def start(self, year: int, weeks: int) -> None:
        with self._lock:
            self.year = year
            self.state = BoardEventKind.STARTED
            self._weeks = {
                week: WeekResult(year, week, first_date_of_week(year, week))
                for week in range(1, weeks + 1)
            }
        self._emit(BoardEvent(BoardEventKind.STARTED, year))

    def publish(self, result: WeekResult) -> None:
        with self._lock:
            if result.year != self.year:
                return
            self._weeks[result.week] = result
        self._emit(BoardEvent(BoardEventKind.WEEK, result.year, result.week, result))

    def _finish(self, kind: BoardEventKind) -> None:
        with self._lock:
            self.state = kind
            year = self.year
        self._emit(BoardEvent(kind, year))

    def complete(self) -> None:
        self._finish(BoardEventKind.COMPLETED)

    def cancel(self) -> None:
        self._finish(BoardEventKind.CANCELLED)

    def fail(self) -> None:
        self._finish(BoardEventKind.FAILED)

    @property
    def is_complete(self) -> bool:
        return self.state is BoardEventKind.COMPLETED

    def get(self, week: int) -> Optional[WeekResult]:
        with self._lock:
            return self._weeks.get(week)

    def snapshot(self) -> List[WeekResult]:
        """All weeks in week order."""
        with self._lock:
            return [self._weeks[week] for week in sorted(self._weeks)]

    @property
    def loaded_weeks(self) -> List[int]:
        with self._lock:
            return sorted(week for week, result in self._weeks.items() if result.loaded)
