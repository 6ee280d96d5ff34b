"""
Maintenance status state machine.

States: PENDING, COMPLETED_ON_TIME, COMPLETED_LATE, OVERDUE, NOT_PERFORMED.

- A scheduled week with no finalized record is PENDING.
- PENDING becomes OVERDUE once today is past the week's late end. This is
  re-derived on every call and never stored.
- COMPLETED_ON_TIME, COMPLETED_LATE and NOT_PERFORMED are terminal once
  registered and are returned as-is.
"""

from datetime import date, datetime, timedelta
from typing import Callable, Optional

from .status import Status
from .tracking_record import TrackingRecord
from .week_calendar import WeekWindow, due_window, iso_week_of

Clock = Callable[[], date]


class StatusResolver:
    """Derives week statuses relative to an injected clock."""

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or date.today

    def today(self) -> date:
        return self._clock()

    def resolve(
        self, window: WeekWindow, record: Optional[TrackingRecord] = None
    ) -> Status:
        """Status of a scheduled week given its window and optional tracking record."""
        if record is not None:
            if record.status.is_terminal:
                return record.status
            if record.completed_at is not None:
                return self.classify_completion(window, record.completed_at)
        if self.today() > window.late_end:
            return Status.OVERDUE
        return Status.PENDING

    @staticmethod
    def classify_completion(window: WeekWindow, completed_on: date) -> Status:
        """Completion on or before the Monday after the week counts as on time."""
        if isinstance(completed_on, datetime):
            completed_on = completed_on.date()
        if completed_on <= window.on_time_end:
            return Status.COMPLETED_ON_TIME
        return Status.COMPLETED_LATE

    def status_on_registration(
        self, year: int, week: int, performed: bool = True
    ) -> Status:
        """
        Status to store when a user registers the week today.

        A "not performed" registration is kept as NOT_PERFORMED. Completions
        past the late end are still accepted as COMPLETED_LATE.
        """
        if not performed:
            return Status.NOT_PERFORMED
        on_time_end, _ = due_window(year, week)
        if self.today() <= on_time_end:
            return Status.COMPLETED_ON_TIME
        return Status.COMPLETED_LATE

    def can_register(self, year: int, week: int) -> bool:
        """Only the current or previous ISO week, and only until its late end."""
        today = self.today()
        current = iso_week_of(today)
        previous = iso_week_of(today - timedelta(weeks=1))
        if (year, week) not in (current, previous):
            return False
        return today <= due_window(year, week).late_end
