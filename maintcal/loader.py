"""Data source contract and the YAML file implementation of it."""

import asyncio
import json
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

import yaml

from .schedule_entry import (
    Frequency,
    ScheduleEntry,
    bitmap_from_week_numbers,
    generate_weeks,
)
from .status import Status
from .tracking_record import MaintenanceType, TrackingRecord
from .week_calendar import weeks_in_year


class DataSource(Protocol):
    """Storage collaborator the engine reads schedules and tracking records from."""

    async def get_schedules(self, year: int) -> List[ScheduleEntry]:
        ...

    async def get_tracking_records(
        self, year: int, week: Optional[int] = None
    ) -> List[TrackingRecord]:
        ...

    async def save_tracking_record(self, record: TrackingRecord) -> TrackingRecord:
        ...


@dataclass
class CalendarData:
    """Contents of a data file."""

    schedules: List[ScheduleEntry] = field(default_factory=list)
    tracking: List[TrackingRecord] = field(default_factory=list)


def _parse_date(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    return date.fromisoformat(str(value)[:10])


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromisoformat(str(value))


def _parse_object(dct: Dict[str, Any]) -> Union[ScheduleEntry, TrackingRecord, CalendarData, dict]:
    """Parse dictionary into appropriate object type."""
    # Tracking record
    if "code" in dct and "week" in dct:
        return TrackingRecord(
            dct["code"],
            dct["year"],
            dct["week"],
            MaintenanceType(dct.get("type", "preventive")),
            Status[dct.get("status", "pending").upper()],
            _parse_datetime(dct.get("registeredAt")),
            _parse_date(dct.get("completedAt")),
            dct.get("cost"),
            dct.get("responsible"),
            dct.get("notes"),
            dct.get("name"),
            dct.get("site"),
        )
    # Schedule entry: explicit week numbers, or generated from start week + frequency
    elif "code" in dct and "year" in dct:
        year = dct["year"]
        frequency = Frequency.parse(dct["frequency"]) if dct.get("frequency") else None
        if "weeks" in dct:
            slots = dct.get("weekSlots") or weeks_in_year(year)
            weeks = bitmap_from_week_numbers(dct["weeks"], slots)
        else:
            weeks = generate_weeks(dct.get("startWeek", 1), frequency, year)
        return ScheduleEntry(
            dct["code"],
            year,
            weeks,
            frequency,
            dct.get("name"),
            dct.get("site"),
        )
    # Top-level data file
    elif "schedules" in dct or "tracking" in dct:
        return CalendarData(dct.get("schedules") or [], dct.get("tracking") or [])
    else:
        return dct


def load_data(filename: Union[str, Path]) -> CalendarData:
    """Load schedules and tracking records from a YAML file."""
    with open(filename, "rb") as fp:
        json_data = json.dumps(
            yaml.load(fp, Loader=yaml.SafeLoader) or {}, indent=4, default=str
        )
        data = json.loads(json_data, object_hook=_parse_object)
    if isinstance(data, dict):
        return CalendarData()
    return data


def _record_to_dict(record: TrackingRecord) -> Dict[str, Any]:
    """Serialize a TrackingRecord to the YAML dict format (camelCase keys)."""
    d: Dict[str, Any] = {
        "code": record.code,
        "year": record.year,
        "week": record.week,
        "type": record.maintenance_type.value,
        "status": record.status.name.lower(),
    }
    if record.registered_at is not None:
        d["registeredAt"] = record.registered_at.isoformat(timespec="seconds")
    if record.completed_at is not None:
        d["completedAt"] = record.completed_at.isoformat()
    if record.cost is not None:
        d["cost"] = record.cost
    if record.responsible is not None:
        d["responsible"] = record.responsible
    if record.notes is not None:
        d["notes"] = record.notes
    if record.name is not None:
        d["name"] = record.name
    if record.site is not None:
        d["site"] = record.site
    return d


def save_tracking_record(filename: Union[str, Path], record: TrackingRecord) -> None:
    """
    Store a tracking record in a data file.

    A non-corrective record replaces the existing non-corrective record for
    the same code and week. Corrective records are always appended.
    """
    with open(filename, "r") as fp:
        data = yaml.load(fp, Loader=yaml.SafeLoader) or {}

    if data.get("tracking") is None:
        data["tracking"] = []
    tracking = data["tracking"]

    entry = _record_to_dict(record)
    replaced = False
    if not record.is_corrective:
        for i, existing in enumerate(tracking):
            if (
                existing.get("code") == record.code
                and existing.get("year") == record.year
                and existing.get("week") == record.week
                and existing.get("type", "preventive") != MaintenanceType.CORRECTIVE.value
            ):
                tracking[i] = entry
                replaced = True
                break
    if not replaced:
        tracking.append(entry)

    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


class YamlDataSource:
    """DataSource backed by a YAML file; file I/O runs in a worker thread."""

    def __init__(self, filename: Union[str, Path]):
        self.filename = Path(filename)

    async def get_schedules(self, year: int) -> List[ScheduleEntry]:
        data = await asyncio.to_thread(load_data, self.filename)
        return [s for s in data.schedules if s.year == year]

    async def get_tracking_records(
        self, year: int, week: Optional[int] = None
    ) -> List[TrackingRecord]:
        data = await asyncio.to_thread(load_data, self.filename)
        return [
            r
            for r in data.tracking
            if r.year == year and (week is None or r.week == week)
        ]

    async def save_tracking_record(self, record: TrackingRecord) -> TrackingRecord:
        await asyncio.to_thread(save_tracking_record, self.filename, record)
        return record
