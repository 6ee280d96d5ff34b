#!/usr/bin/env python3
"""
Unified CLI for the maintenance calendar.

Commands:
  board      - Weekly status board for a year
  week       - Status rows of a single week
  schedules  - List the preventive schedules of a year
  register   - Register a completion (or non-completion) for a week
"""

import argparse
import asyncio
import sys
from datetime import date, datetime
from pathlib import Path
from tabulate import tabulate
from typing import Iterable, List, Optional

from maintcal import (
    ChangeNotificationBridge,
    ConcurrentPopulator,
    EquipmentWeekStatus,
    MaintenanceType,
    MaintCalError,
    ScheduleEntry,
    Status,
    StatusResolver,
    TrackingRecord,
    WeekBoard,
    WeekResult,
    YamlDataSource,
    count_by_status,
    load_config,
    setup_logging,
    summarize_week,
    week_window,
)

# =============================================================================
# Formatting helpers
# =============================================================================


def format_cost(cost: Optional[float]) -> str:
    """Format cost for display."""
    return f"${cost:,.2f}" if cost is not None else "-"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def format_date_range(start: date, end: date) -> str:
    """Format a week's dates as 'dd/mm - dd/mm'."""
    return f"{start:%d/%m} - {end:%d/%m}"


def format_weeks(weeks: Iterable[int]) -> str:
    """Compress week numbers into ranges (e.g., '2, 6-9, 14')."""
    parts = []
    run: List[int] = []
    for week in sorted(weeks):
        if run and week == run[-1] + 1:
            run.append(week)
            continue
        if run:
            parts.append(_format_run(run))
        run = [week]
    if run:
        parts.append(_format_run(run))
    return ", ".join(parts) if parts else "-"


def _format_run(run: List[int]) -> str:
    if len(run) == 1:
        return str(run[0])
    return f"{run[0]}-{run[-1]}"


# =============================================================================
# Table builders
# =============================================================================


def make_board_table(results: List[WeekResult]) -> List[List[str]]:
    """One row per week with status counts and overall health."""
    rows = []
    for result in results:
        window = week_window(result.year, result.week)
        if not result.loaded:
            rows.append([result.week, format_date_range(window.start, window.end)] + ["..."] * 7)
            continue
        counts = count_by_status(result.statuses)
        rows.append(
            [
                result.week,
                format_date_range(window.start, window.end),
                len(result.statuses),
                counts[Status.COMPLETED_ON_TIME] + counts[Status.COMPLETED_LATE],
                counts[Status.PENDING],
                counts[Status.OVERDUE],
                counts[Status.NOT_PERFORMED],
                counts[Status.UNKNOWN],
                summarize_week(result.statuses).value,
            ]
        )
    return rows


def make_week_table(statuses: List[EquipmentWeekStatus]) -> List[List[str]]:
    """Convert a week's status rows to table rows."""
    rows = []
    for row in statuses:
        record = row.record
        if row.is_corrective:
            kind = "corrective"
        elif row.scheduled:
            kind = "scheduled"
        else:
            kind = record.maintenance_type.value if record else "-"
        rows.append(
            [
                row.code,
                row.name or "-",
                row.site or "-",
                kind,
                row.status.label,
                "yes" if row.registrable else "no",
                record.completed_at.isoformat() if record and record.completed_at else "-",
                (record.responsible if record else None) or "-",
                format_cost(record.cost if record else None),
                truncate(record.notes if record else None),
            ]
        )
    return rows


def make_schedule_table(entries: List[ScheduleEntry]) -> List[List[str]]:
    rows = []
    for entry in sorted(entries, key=lambda e: (e.site or "", e.code)):
        rows.append(
            [
                entry.code,
                entry.name or "-",
                entry.site or "-",
                entry.frequency.name.lower() if entry.frequency else "-",
                format_weeks(entry.scheduled_weeks),
            ]
        )
    return rows


# =============================================================================
# Engine wiring
# =============================================================================


def build_resolver(args) -> StatusResolver:
    """Resolver whose clock is pinned by --today when given."""
    if args.today:
        today = date.fromisoformat(args.today)
        return StatusResolver(clock=lambda: today)
    return StatusResolver()


def build_bridge(args) -> ChangeNotificationBridge:
    config = load_config(args.config)
    if args.concurrency:
        config.concurrency_limit = args.concurrency
    populator = ConcurrentPopulator(
        YamlDataSource(args.data_file), build_resolver(args), config
    )
    return ChangeNotificationBridge(populator, WeekBoard(), debounce_seconds=0)


def populate(args, year: int) -> WeekBoard:
    bridge = build_bridge(args)
    asyncio.run(bridge.on_tracking_changed(year))
    return bridge.board


# =============================================================================
# Commands
# =============================================================================


def cmd_board(args):
    """Weekly status board for a year."""
    board = populate(args, args.year)
    results = board.snapshot()
    if args.only_due:
        results = [r for r in results if r.statuses]

    print(f"Year: {args.year}")
    print(f"Weeks: {len(board.snapshot())}")
    print()
    headers = [
        "Week",
        "Dates",
        "Rows",
        "Done",
        "Pending",
        "Overdue",
        "Not done",
        "Unknown",
        "Health",
    ]
    print(tabulate(make_board_table(results), headers=headers, tablefmt="simple"))
    return 0


def cmd_week(args):
    """Status rows of a single week."""
    board = populate(args, args.year)
    result = board.get(args.week)
    if result is None:
        print(f"Error: Week {args.week} does not exist in {args.year}")
        return 1

    window = week_window(args.year, args.week)
    print(f"Week {args.week}, {args.year}: {format_date_range(window.start, window.end)}")
    print(f"On time until: {window.on_time_end}  Late until: {window.late_end}")
    if result.failed:
        print("Tracking data unavailable; statuses unknown")
    print(f"Health: {summarize_week(result.statuses).value}")
    print()

    if not result.statuses:
        print("No maintenance this week.")
        return 0

    headers = [
        "Code",
        "Name",
        "Site",
        "Kind",
        "Status",
        "Registrable",
        "Completed",
        "Responsible",
        "Cost",
        "Notes",
    ]
    print(tabulate(make_week_table(result.statuses), headers=headers, tablefmt="simple"))
    return 0


def cmd_schedules(args):
    """List the preventive schedules of a year."""
    entries = asyncio.run(YamlDataSource(args.data_file).get_schedules(args.year))
    print(f"Year: {args.year}")
    print(f"Schedules: {len(entries)}")
    print()
    headers = ["Code", "Name", "Site", "Frequency", "Weeks"]
    print(tabulate(make_schedule_table(entries), headers=headers, tablefmt="simple"))
    return 0


def cmd_register(args):
    """Register a completion (or non-completion) for a week."""
    resolver = build_resolver(args)
    if not args.force and not resolver.can_register(args.year, args.week):
        print(
            f"Error: Week {args.week} of {args.year} is no longer registrable "
            "(only the current and previous week, until Friday of the following week)"
        )
        return 1

    maintenance_type = MaintenanceType(args.type)
    performed = not args.not_performed
    status = resolver.status_on_registration(args.year, args.week, performed=performed)
    record = TrackingRecord(
        code=args.code,
        year=args.year,
        week=args.week,
        maintenance_type=maintenance_type,
        status=status,
        registered_at=datetime.combine(resolver.today(), datetime.now().time()).replace(microsecond=0),
        completed_at=resolver.today() if performed else None,
        cost=args.cost,
        responsible=args.by,
        notes=args.notes,
    )

    print(f"Registering maintenance in {args.data_file}:")
    print(f"  Equipment: {record.code}")
    print(f"  Week:      {record.week}, {record.year}")
    print(f"  Type:      {record.maintenance_type.value}")
    print(f"  Status:    {record.status.label}")
    if record.responsible:
        print(f"  By:        {record.responsible}")
    if record.cost is not None:
        print(f"  Cost:      {format_cost(record.cost)}")
    if record.notes:
        print(f"  Notes:     {record.notes}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    bridge = build_bridge(args)
    asyncio.run(bridge.populator.source.save_tracking_record(record))
    asyncio.run(bridge.on_tracking_changed(args.year, args.code))
    print("Entry saved.")
    result = bridge.board.get(args.week)
    if result is not None:
        print(f"Week {args.week} health: {summarize_week(result.statuses).value}")
    return 0


# =============================================================================
# Main
# =============================================================================


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Maintenance calendar",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/plant.yaml board 2025
  %(prog)s data/plant.yaml board 2025 --only-due --today 2025-03-12
  %(prog)s data/plant.yaml week 2025 10
  %(prog)s data/plant.yaml schedules 2025
  %(prog)s data/plant.yaml register CMP-001 2025 11 --by "J. Perez" --cost 80
  %(prog)s data/plant.yaml register PMP-009 2025 11 --type corrective \\
      --notes "Seal replaced"
""",
    )
    parser.add_argument(
        "data_file",
        type=Path,
        help="Path to the schedules/tracking YAML file",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Engine configuration YAML (default: $MAINTCAL_CONFIG)",
    )
    parser.add_argument(
        "--today",
        type=str,
        help="Evaluate statuses as of this date (YYYY-MM-DD, default: today)",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        help="Maximum weeks fetched at once (overrides configuration)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for engine messages (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Board subcommand
    board_parser = subparsers.add_parser("board", help="Weekly status board for a year")
    board_parser.add_argument("year", type=int, help="Calendar year")
    board_parser.add_argument(
        "--only-due",
        action="store_true",
        help="Hide weeks with no maintenance",
    )

    # Week subcommand
    week_parser = subparsers.add_parser("week", help="Status rows of a single week")
    week_parser.add_argument("year", type=int, help="Calendar year")
    week_parser.add_argument("week", type=int, help="ISO week number")

    # Schedules subcommand
    schedules_parser = subparsers.add_parser(
        "schedules", help="List the preventive schedules of a year"
    )
    schedules_parser.add_argument("year", type=int, help="Calendar year")

    # Register subcommand
    register_parser = subparsers.add_parser(
        "register", help="Register maintenance for an equipment and week"
    )
    register_parser.add_argument("code", type=str, help="Equipment code")
    register_parser.add_argument("year", type=int, help="Calendar year")
    register_parser.add_argument("week", type=int, help="ISO week number")
    register_parser.add_argument(
        "--type",
        choices=[t.value for t in MaintenanceType],
        default=MaintenanceType.PREVENTIVE.value,
        help="Maintenance type (default: preventive)",
    )
    register_parser.add_argument(
        "--not-performed",
        action="store_true",
        help="Record that the maintenance was not performed",
    )
    register_parser.add_argument("--by", type=str, help="Responsible party")
    register_parser.add_argument("--cost", type=float, help="Cost of the work")
    register_parser.add_argument("--notes", type=str, help="Notes")
    register_parser.add_argument(
        "--force",
        action="store_true",
        help="Register even outside the registration window",
    )
    register_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be registered without saving",
    )

    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    # Validate data file exists
    if not args.data_file.exists():
        print(f"Error: File not found: {args.data_file}")
        return 1

    # Dispatch to command handler
    try:
        if args.command == "board":
            return cmd_board(args)
        elif args.command == "week":
            return cmd_week(args)
        elif args.command == "schedules":
            return cmd_schedules(args)
        elif args.command == "register":
            return cmd_register(args)
    except MaintCalError as e:
        print(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
