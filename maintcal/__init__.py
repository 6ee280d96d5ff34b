"""
Maintenance calendar engine.

This package computes a year's weekly maintenance status board:
- week_calendar: ISO-8601 week dates and due windows
- ScheduleEntry / ScheduleIndex: which weeks each equipment is due
- TrackingRecord: registered maintenance events
- StatusResolver: per-week status state machine
- WeeklyAggregator: merges scheduled rows with corrective events
- ConcurrentPopulator: fills a WeekBoard for all weeks, bounded and cancellable
- RecomputeGuard / ChangeNotificationBridge: guarded recompute on change events
"""

from .errors import MaintCalError, OutOfRangeError, PopulationError, ConfigError
from .status import Status
from .week_calendar import (
    DueWindow,
    WeekWindow,
    weeks_in_year,
    first_date_of_week,
    due_window,
    week_window,
    iso_week_of,
)
from .schedule_entry import Frequency, ScheduleEntry, generate_weeks, bitmap_from_week_numbers
from .tracking_record import MaintenanceType, TrackingRecord
from .week_status import EquipmentWeekStatus
from .schedule_index import ScheduleIndex
from .status_resolver import StatusResolver
from .aggregator import WeeklyAggregator
from .board import BoardEvent, BoardEventKind, WeekBoard, WeekResult
from .config import EngineConfig, load_config, setup_logging
from .loader import DataSource, YamlDataSource, load_data, save_tracking_record
from .populator import CancellationToken, ConcurrentPopulator, PopulationResult
from .guard import Debouncer, RecomputeGuard
from .bridge import ChangeEvent, ChangeKind, ChangeNotificationBridge
from .summary import WeekHealth, summarize_week, count_by_status

__all__ = [
    "MaintCalError",
    "OutOfRangeError",
    "PopulationError",
    "ConfigError",
    "Status",
    "DueWindow",
    "WeekWindow",
    "weeks_in_year",
    "first_date_of_week",
    "due_window",
    "week_window",
    "iso_week_of",
    "Frequency",
    "ScheduleEntry",
    "generate_weeks",
    "bitmap_from_week_numbers",
    "MaintenanceType",
    "TrackingRecord",
    "EquipmentWeekStatus",
    "ScheduleIndex",
    "StatusResolver",
    "WeeklyAggregator",
    "BoardEvent",
    "BoardEventKind",
    "WeekBoard",
    "WeekResult",
    "EngineConfig",
    "load_config",
    "setup_logging",
    "DataSource",
    "YamlDataSource",
    "load_data",
    "save_tracking_record",
    "CancellationToken",
    "ConcurrentPopulator",
    "PopulationResult",
    "Debouncer",
    "RecomputeGuard",
    "ChangeEvent",
    "ChangeKind",
    "ChangeNotificationBridge",
    "WeekHealth",
    "summarize_week",
    "count_by_status",
]
