"""TrackingRecord class for registered maintenance events."""

from datetime import date, datetime
from enum import Enum
from typing import Optional, Union

from .status import Status


class MaintenanceType(Enum):
    PREVENTIVE = "preventive"
    CORRECTIVE = "corrective"
    PREDICTIVE = "predictive"
    OTHER = "other"


class TrackingRecord:
    """A maintenance event registered against an equipment code and ISO week."""

    def __init__(
        self,
        code: str,
        year: int,
        week: int,
        maintenance_type: MaintenanceType = MaintenanceType.PREVENTIVE,
        status: Status = Status.PENDING,
        registered_at: Optional[datetime] = None,
        completed_at: Optional[Union[date, datetime]] = None,
        cost: Optional[float] = None,
        responsible: Optional[str] = None,
        notes: Optional[str] = None,
        name: Optional[str] = None,
        site: Optional[str] = None,
    ):
        self.code = code
        self.year = year
        self.week = week
        self.maintenance_type = maintenance_type
        self.status = status
        self.registered_at = registered_at
        self.completed_at = completed_at
        self.cost = cost
        self.responsible = responsible
        self.notes = notes
        self.name = name
        self.site = site

    @property
    def is_corrective(self) -> bool:
        return self.maintenance_type is MaintenanceType.CORRECTIVE
