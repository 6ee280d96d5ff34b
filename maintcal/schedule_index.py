"""ScheduleIndex: lookup of scheduled weeks per equipment for one year."""

import logging
from typing import Dict, Iterable, List, Optional, Set

from .schedule_entry import ScheduleEntry
from .week_calendar import weeks_in_year

logger = logging.getLogger(__name__)


class ScheduleIndex:
    """Read-only view of one year's schedule entries, keyed by equipment code."""

    def __init__(self, year: int, entries: Iterable[ScheduleEntry]):
        self.year = year
        self.weeks_in_year = weeks_in_year(year)
        self._entries: Dict[str, ScheduleEntry] = {}
        for entry in entries:
            if entry.year != year:
                continue
            if entry.code in self._entries:
                logger.warning(
                    "Duplicate schedule for %s in %d; keeping the last one",
                    entry.code,
                    year,
                )
            self._entries[entry.code] = entry

        self.short_bitmaps: List[str] = sorted(
            code
            for code, entry in self._entries.items()
            if len(entry.weeks) < self.weeks_in_year
        )
        for code in self.short_bitmaps:
            logger.warning(
                "Data quality: schedule for %s in %d has %d week slots, expected %d; "
                "missing weeks treated as not scheduled",
                code,
                year,
                len(self._entries[code].weeks),
                self.weeks_in_year,
            )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, code: str) -> bool:
        return code in self._entries

    def get(self, code: str) -> Optional[ScheduleEntry]:
        return self._entries.get(code)

    def is_scheduled(self, code: str, week: int) -> bool:
        entry = self._entries.get(code)
        return entry is not None and entry.is_scheduled(week)

    def scheduled_equipment_codes(self, week: int) -> Set[str]:
        return {code for code, entry in self._entries.items() if entry.is_scheduled(week)}
