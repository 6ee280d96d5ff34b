"""WeeklyAggregator: merges scheduled entries with tracking records for one week."""

from datetime import datetime
from typing import Dict, Iterable, List

from .schedule_index import ScheduleIndex
from .status import Status
from .status_resolver import StatusResolver
from .tracking_record import TrackingRecord
from .week_calendar import week_window
from .week_status import EquipmentWeekStatus


def _registered_key(record: TrackingRecord) -> datetime:
    return record.registered_at or datetime.min


class WeeklyAggregator:
    """Builds the full status list of one week."""

    def __init__(self, resolver: StatusResolver):
        self.resolver = resolver

    def aggregate(
        self, index: ScheduleIndex, week: int, records: Iterable[TrackingRecord]
    ) -> List[EquipmentWeekStatus]:
        """
        Status rows for one week.

        Logic:
        - One row per scheduled code, resolved against its latest
          non-corrective record in the week
        - Every corrective record is an extra row, even when the same code is
          scheduled (the two coexist, never merged)
        - Non-corrective records for codes not scheduled that week are kept as
          unscheduled rows
        - Every row goes through the resolver, so a pending record of any
          kind turns overdue once its window has elapsed
        - Rows are grouped by site; order is otherwise stable
        """
        year = index.year
        window = week_window(year, week)
        can_register = self.resolver.can_register(year, week)
        week_records = [r for r in records if r.year == year and r.week == week]

        latest: Dict[str, TrackingRecord] = {}
        for record in week_records:
            if record.is_corrective:
                continue
            current = latest.get(record.code)
            if current is None or _registered_key(record) >= _registered_key(current):
                latest[record.code] = record

        scheduled_codes = index.scheduled_equipment_codes(week)
        rows: List[EquipmentWeekStatus] = []
        for code in sorted(scheduled_codes):
            entry = index.get(code)
            record = latest.get(code)
            status = self.resolver.resolve(window, record)
            rows.append(
                EquipmentWeekStatus(
                    code=code,
                    week=week,
                    year=year,
                    status=status,
                    scheduled=True,
                    registrable=can_register and not status.is_completed,
                    record=record,
                    name=entry.name or (record.name if record else None),
                    site=entry.site or (record.site if record else None),
                )
            )

        for record in week_records:
            if not record.is_corrective and (
                record.code in scheduled_codes or latest.get(record.code) is not record
            ):
                continue
            entry = index.get(record.code)
            status = self.resolver.resolve(window, record)
            rows.append(
                EquipmentWeekStatus(
                    code=record.code,
                    week=week,
                    year=year,
                    status=status,
                    scheduled=False,
                    registrable=can_register and not status.is_completed,
                    record=record,
                    name=record.name or (entry.name if entry else None),
                    site=record.site or (entry.site if entry else None),
                )
            )

        return sorted(rows, key=lambda row: row.site or "")

    def unknown_week(self, index: ScheduleIndex, week: int) -> List[EquipmentWeekStatus]:
        """Placeholder rows for a week whose tracking data could not be fetched."""
        rows = []
        for code in sorted(index.scheduled_equipment_codes(week)):
            entry = index.get(code)
            rows.append(
                EquipmentWeekStatus(
                    code=code,
                    week=week,
                    year=index.year,
                    status=Status.UNKNOWN,
                    scheduled=True,
                    name=entry.name,
                    site=entry.site,
                )
            )
        return sorted(rows, key=lambda row: row.site or "")
