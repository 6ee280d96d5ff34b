"""
ISO-8601 week arithmetic.

Week 1 of a year is the week containing that year's first Thursday, so the
Monday of week 1 may fall in late December of the previous year. A year has
53 weeks when it starts or ends on a Thursday, otherwise 52.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import NamedTuple, Tuple

from .errors import OutOfRangeError

MIN_YEAR = 1
MAX_YEAR = 9998  # Week 52/53 windows of 9999 run past date.max

THURSDAY = 3
ON_TIME_OFFSET = timedelta(days=7)  # Monday of the following week
LATE_OFFSET = timedelta(days=11)  # Friday of the following week


class DueWindow(NamedTuple):
    on_time_end: date
    late_end: date


@dataclass(frozen=True)
class WeekWindow:
    """Calendar bounds and due window of one ISO week."""

    year: int
    week: int
    start: date
    end: date
    on_time_end: date
    late_end: date


def _check_year(year: int) -> None:
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise OutOfRangeError(f"Year {year} out of range ({MIN_YEAR}..{MAX_YEAR})")


def weeks_in_year(year: int) -> int:
    """Number of ISO weeks in the year (52 or 53)."""
    _check_year(year)
    jan1 = date(year, 1, 1).weekday()
    dec31 = date(year, 12, 31).weekday()
    return 53 if THURSDAY in (jan1, dec31) else 52


def first_date_of_week(year: int, week: int) -> date:
    """Monday starting ISO week `week` of `year`."""
    total = weeks_in_year(year)
    if not 1 <= week <= total:
        raise OutOfRangeError(f"Week {week} out of range for {year} (1..{total})")
    jan1 = date(year, 1, 1)
    first_thursday = jan1 + timedelta(days=(THURSDAY - jan1.weekday()) % 7)
    week1_monday = first_thursday - timedelta(days=THURSDAY)
    return week1_monday + timedelta(weeks=week - 1)


def due_window(year: int, week: int) -> DueWindow:
    """
    Deadlines for maintenance due in the given week.

    - on_time_end: Monday of the following week
    - late_end: Friday of the following week (on_time_end + 4 days)
    """
    monday = first_date_of_week(year, week)
    return DueWindow(monday + ON_TIME_OFFSET, monday + LATE_OFFSET)


def week_window(year: int, week: int) -> WeekWindow:
    start = first_date_of_week(year, week)
    return WeekWindow(
        year=year,
        week=week,
        start=start,
        end=start + timedelta(days=6),
        on_time_end=start + ON_TIME_OFFSET,
        late_end=start + LATE_OFFSET,
    )


def iso_week_of(day: date) -> Tuple[int, int]:
    """(ISO year, ISO week) containing the given date."""
    iso = day.isocalendar()
    return iso[0], iso[1]
