"""ScheduleEntry class and weekly schedule generation."""

from datetime import timedelta
from enum import Enum
from typing import Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from .week_calendar import first_date_of_week, iso_week_of, weeks_in_year


class Frequency(Enum):
    """Preventive maintenance frequency as (days, months) step."""

    WEEKLY = (7, 0)
    BIWEEKLY = (14, 0)
    MONTHLY = (0, 1)
    BIMONTHLY = (0, 2)
    QUARTERLY = (0, 3)
    FOUR_MONTHLY = (0, 4)
    SEMIANNUAL = (0, 6)
    ANNUAL = (0, 12)

    def __init__(self, days: int, months: int):
        self.days = days
        self.months = months

    @classmethod
    def parse(cls, value: str) -> "Frequency":
        """Look up a frequency by name, case-insensitive ('monthly', 'FOUR-MONTHLY')."""
        return cls[value.strip().upper().replace("-", "_")]


class ScheduleEntry:
    """Which weeks of one year require preventive maintenance for a piece of equipment."""

    def __init__(
        self,
        code: str,
        year: int,
        weeks: List[bool],
        frequency: Optional[Frequency] = None,
        name: Optional[str] = None,
        site: Optional[str] = None,
    ):
        self.code = code
        self.year = year
        self.weeks = list(weeks)
        self.frequency = frequency
        self.name = name
        self.site = site

    def is_scheduled(self, week: int) -> bool:
        """True if the bitmap marks the week. Weeks past the bitmap are not scheduled."""
        return 1 <= week <= len(self.weeks) and self.weeks[week - 1]

    @property
    def scheduled_weeks(self) -> List[int]:
        return [i + 1 for i, due in enumerate(self.weeks) if due]


def bitmap_from_week_numbers(weeks: Iterable[int], length: int) -> List[bool]:
    """Build a bitmap of `length` slots with the given 1-based weeks set."""
    bitmap = [False] * length
    for week in weeks:
        if 1 <= week <= length:
            bitmap[week - 1] = True
    return bitmap


def generate_weeks(
    start_week: int, frequency: Optional[Frequency], year: int
) -> List[bool]:
    """
    Generate a schedule bitmap sized to the ISO weeks of `year`.

    Starting at the Monday of `start_week`, steps forward by the frequency and
    marks every ISO week of the year that is hit. Month steps are taken from
    the start date (start + k months) so day-of-month never drifts.
    """
    total = weeks_in_year(year)
    bitmap = [False] * total
    if frequency is None or not 1 <= start_week <= total:
        return bitmap

    start = first_date_of_week(year, start_week)
    last_day = first_date_of_week(year, total) + timedelta(days=6)
    step = 0
    while True:
        if frequency.months:
            current = start + relativedelta(months=frequency.months * step)
        else:
            current = start + timedelta(days=frequency.days * step)
        if current > last_day:
            break
        iso_year, iso_week = iso_week_of(current)
        if iso_year == year:
            bitmap[iso_week - 1] = True
        step += 1
    return bitmap
