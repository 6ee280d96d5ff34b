"""Status enum for weekly maintenance states."""

from enum import Enum


class Status(Enum):
    """Maintenance status of one (equipment, week). Lower value = more urgent."""

    NOT_PERFORMED = 1
    OVERDUE = 2  # Derived from the due window, never stored
    PENDING = 3
    COMPLETED_LATE = 4
    COMPLETED_ON_TIME = 5
    UNKNOWN = 6  # Week's tracking data could not be fetched

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def is_completed(self) -> bool:
        return self in (Status.COMPLETED_ON_TIME, Status.COMPLETED_LATE)

    @property
    def is_terminal(self) -> bool:
        """Final once registered; never reclassified by the resolver."""
        return self.is_completed or self is Status.NOT_PERFORMED


_LABELS = {
    Status.NOT_PERFORMED: "Not performed",
    Status.OVERDUE: "Overdue",
    Status.PENDING: "Pending",
    Status.COMPLETED_LATE: "Completed late",
    Status.COMPLETED_ON_TIME: "Completed on time",
    Status.UNKNOWN: "Unknown",
}
