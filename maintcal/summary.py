"""Week-level summaries of status rows."""

from enum import Enum
from typing import Dict, Iterable

from .status import Status
from .week_status import EquipmentWeekStatus


class WeekHealth(Enum):
    EMPTY = "empty"
    UNKNOWN = "unknown"
    NOT_PERFORMED = "not performed"
    ATTENTION = "attention"
    PENDING = "pending"
    DONE = "done"


def summarize_week(statuses: Iterable[EquipmentWeekStatus]) -> WeekHealth:
    """Overall health of a week, worst case first."""
    found = [s.status for s in statuses]
    if not found:
        return WeekHealth.EMPTY
    if Status.UNKNOWN in found:
        return WeekHealth.UNKNOWN
    if Status.NOT_PERFORMED in found:
        return WeekHealth.NOT_PERFORMED
    if Status.OVERDUE in found:
        return WeekHealth.ATTENTION
    if all(s is Status.PENDING for s in found):
        return WeekHealth.PENDING
    if all(s.is_completed for s in found):
        return WeekHealth.DONE
    return WeekHealth.ATTENTION


def count_by_status(statuses: Iterable[EquipmentWeekStatus]) -> Dict[Status, int]:
    counts = {status: 0 for status in Status}
    for row in statuses:
        counts[row.status] += 1
    return counts
