"""Flask JSON application for the maintenance calendar."""

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Optional

from flask import Flask, abort, jsonify, request

from maintcal import (
    ChangeKind,
    ChangeNotificationBridge,
    ConcurrentPopulator,
    EngineConfig,
    EquipmentWeekStatus,
    MaintenanceType,
    MaintCalError,
    OutOfRangeError,
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
    weeks_in_year,
)
from maintcal.status_resolver import Clock

# Default data file (relative to project root)
DEFAULT_DATA_FILE = Path(__file__).parent.parent / "data" / "plant.yaml"


def status_color(status: Status) -> str:
    """Get Tailwind color classes for a status badge."""
    colors = {
        Status.NOT_PERFORMED: "bg-red-500 text-white",
        Status.OVERDUE: "bg-orange-500 text-white",
        Status.PENDING: "bg-yellow-500 text-white",
        Status.COMPLETED_LATE: "bg-blue-500 text-white",
        Status.COMPLETED_ON_TIME: "bg-green-500 text-white",
        Status.UNKNOWN: "bg-purple-500 text-white",
    }
    return colors.get(status, "bg-gray-500 text-white")


def status_to_dict(row: EquipmentWeekStatus) -> dict:
    record = row.record
    return {
        "code": row.code,
        "name": row.name,
        "site": row.site,
        "week": row.week,
        "year": row.year,
        "scheduled": row.scheduled,
        "corrective": row.is_corrective,
        "registrable": row.registrable,
        "status": row.status.name.lower(),
        "label": row.status.label,
        "color": status_color(row.status),
        "completedAt": record.completed_at.isoformat() if record and record.completed_at else None,
        "responsible": record.responsible if record else None,
        "cost": record.cost if record else None,
        "notes": record.notes if record else None,
    }


def week_to_dict(result: WeekResult, rows: bool = True) -> dict:
    window = week_window(result.year, result.week)
    d = {
        "year": result.year,
        "week": result.week,
        "start": window.start.isoformat(),
        "end": window.end.isoformat(),
        "onTimeEnd": window.on_time_end.isoformat(),
        "lateEnd": window.late_end.isoformat(),
        "loaded": result.loaded,
        "failed": result.failed,
        "health": summarize_week(result.statuses).value,
        "counts": {
            status.name.lower(): count
            for status, count in count_by_status(result.statuses).items()
        },
    }
    if rows:
        d["statuses"] = [status_to_dict(row) for row in result.statuses]
    return d


def create_app(
    data_file: Optional[Path] = None,
    config: Optional[EngineConfig] = None,
    clock: Optional[Clock] = None,
) -> Flask:
    """
    Build the application around one shared board and recompute bridge.

    The data file comes from the argument, then the configuration's dataFile,
    then data/plant.yaml.
    """
    config = config or load_config()
    data_file = Path(data_file or config.data_file or DEFAULT_DATA_FILE)
    resolver = StatusResolver(clock)
    source = YamlDataSource(data_file)
    bridge = ChangeNotificationBridge(
        ConcurrentPopulator(source, resolver, config), WeekBoard()
    )

    app = Flask(__name__)
    app.config["DATA_FILE"] = data_file
    app.extensions["maintcal"] = bridge

    def ensure_board(year: int) -> Optional[WeekBoard]:
        """
        Recompute the year unless the board already holds it.

        Returns None when another year's recompute holds the board.
        """
        board = bridge.board
        refresh = request.args.get("refresh", "").lower() == "true"
        if refresh or board.year != year or not board.is_complete:
            asyncio.run(bridge.on_schedule_changed(year))
        if board.year != year:
            return None
        return board

    def recompute_in_progress(year: int):
        return jsonify(error=f"Recompute in progress; {year} is not available yet"), 409

    @app.errorhandler(OutOfRangeError)
    def out_of_range(e):
        return jsonify(error=str(e)), 404

    @app.errorhandler(MaintCalError)
    def engine_error(e):
        return jsonify(error=str(e)), 500

    @app.route("/years/<int:year>/board")
    def year_board(year: int):
        """All weeks of a year with counts and health, without rows."""
        weeks_in_year(year)
        board = ensure_board(year)
        if board is None:
            return recompute_in_progress(year)
        return jsonify(
            year=year,
            state=board.state.value if board.state else None,
            weeks=[week_to_dict(result, rows=False) for result in board.snapshot()],
        )

    @app.route("/years/<int:year>/weeks/<int:week>")
    def year_week(year: int, week: int):
        """Status rows of one week."""
        week_window(year, week)
        board = ensure_board(year)
        if board is None:
            return recompute_in_progress(year)
        result = board.get(week)
        if result is None:
            abort(404)
        return jsonify(week_to_dict(result))

    @app.route("/years/<int:year>/weeks/<int:week>/records", methods=["POST"])
    def register(year: int, week: int):
        """Register maintenance for an equipment code in a week."""
        week_window(year, week)
        payload = request.get_json(silent=True) or {}
        code = payload.get("code")
        if not code:
            return jsonify(error="Missing equipment code"), 400
        try:
            maintenance_type = MaintenanceType(payload.get("type", "preventive"))
        except ValueError:
            return jsonify(error=f"Unknown maintenance type: {payload.get('type')}"), 400
        if not resolver.can_register(year, week):
            return jsonify(error=f"Week {week} of {year} is no longer registrable"), 409

        performed = payload.get("performed", True)
        today = resolver.today()
        record = TrackingRecord(
            code=code,
            year=year,
            week=week,
            maintenance_type=maintenance_type,
            status=resolver.status_on_registration(year, week, performed=performed),
            registered_at=datetime.now().replace(microsecond=0),
            completed_at=today if performed else None,
            cost=payload.get("cost"),
            responsible=payload.get("responsible"),
            notes=payload.get("notes"),
            name=payload.get("name"),
            site=payload.get("site"),
        )
        asyncio.run(source.save_tracking_record(record))
        admitted = asyncio.run(bridge.on_tracking_changed(year, code))
        return (
            jsonify(
                code=record.code,
                status=record.status.name.lower(),
                label=record.status.label,
                recomputed=admitted,
            ),
            201,
        )

    @app.route("/years/<int:year>/changes/<kind>", methods=["POST"])
    def change(year: int, kind: str):
        """Change notification from an upstream system."""
        weeks_in_year(year)
        try:
            change_kind = ChangeKind(kind)
        except ValueError:
            return jsonify(error=f"Unknown change kind: {kind}"), 400
        payload = request.get_json(silent=True) or {}
        handlers = {
            ChangeKind.SCHEDULE_CHANGED: bridge.on_schedule_changed,
            ChangeKind.TRACKING_CHANGED: bridge.on_tracking_changed,
            ChangeKind.EQUIPMENT_CHANGED: bridge.on_equipment_changed,
        }
        admitted = asyncio.run(handlers[change_kind](year, payload.get("code")))
        return jsonify(admitted=admitted, dropped=bridge.guard.dropped)

    @app.route("/cancel", methods=["POST"])
    def cancel():
        """Cancel the recompute in progress, if any."""
        running = bridge.guard.in_progress
        bridge.cancel()
        return jsonify(cancelled=running)

    return app


if __name__ == "__main__":
    config = load_config()
    setup_logging(config.log_level)
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    create_app(config=config).run(debug=True, host="0.0.0.0", port=5001)
