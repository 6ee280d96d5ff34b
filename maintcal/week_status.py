"""EquipmentWeekStatus dataclass, the engine's output unit."""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from .status import Status

if TYPE_CHECKING:
    from .tracking_record import TrackingRecord


@dataclass
class EquipmentWeekStatus:
    """Resolved maintenance status of one equipment code in one week."""

    code: str
    week: int
    year: int
    status: Status
    scheduled: bool
    registrable: bool = False
    record: Optional["TrackingRecord"] = None
    name: Optional[str] = None
    site: Optional[str] = None

    @property
    def is_corrective(self) -> bool:
        return self.record is not None and self.record.is_corrective

    @property
    def needs_action(self) -> bool:
        return self.status in (Status.PENDING, Status.OVERDUE)
