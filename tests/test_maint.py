#!/usr/bin/env python3
"""Tests for maint CLI formatting, table helpers and commands."""

import shutil
from datetime import date
from pathlib import Path

import yaml

from maint import (
    format_cost,
    format_date_range,
    format_weeks,
    main,
    make_board_table,
    make_schedule_table,
    make_week_table,
    truncate,
)
from maintcal import (
    EquipmentWeekStatus,
    Frequency,
    MaintenanceType,
    ScheduleEntry,
    Status,
    TrackingRecord,
    WeekResult,
    bitmap_from_week_numbers,
)

SAMPLE_DATA = Path(__file__).parent.parent / "data" / "plant.yaml"


class TestFormatCost:
    """Tests for format_cost."""

    def test_formats_number(self):
        assert format_cost(75.50) == "$75.50"
        assert format_cost(1240) == "$1,240.00"

    def test_none_returns_dash(self):
        assert format_cost(None) == "-"


class TestTruncate:
    """Tests for truncate."""

    def test_none_returns_dash(self):
        assert truncate(None) == "-"

    def test_short_text_unchanged(self):
        assert truncate("short", 10) == "short"

    def test_long_text_truncated(self):
        assert truncate("a" * 20, 10) == "aaaaaaa..."


class TestFormatWeeks:
    """Tests for format_weeks and format_date_range."""

    def test_compresses_runs(self):
        assert format_weeks([2, 6, 7, 8, 9, 14]) == "2, 6-9, 14"

    def test_unsorted_input(self):
        assert format_weeks([11, 10]) == "10-11"

    def test_empty(self):
        assert format_weeks([]) == "-"

    def test_date_range(self):
        assert format_date_range(date(2025, 3, 3), date(2025, 3, 9)) == "03/03 - 09/03"


class TestTables:
    """Tests for table builders."""

    def test_board_table(self):
        statuses = [
            EquipmentWeekStatus("EQ-1", 10, 2025, Status.COMPLETED_ON_TIME, True),
            EquipmentWeekStatus("EQ-2", 10, 2025, Status.OVERDUE, True),
        ]
        rows = make_board_table(
            [
                WeekResult(2025, 10, date(2025, 3, 3), statuses, loaded=True),
                WeekResult(2025, 11, date(2025, 3, 10)),
            ]
        )
        assert rows[0] == [10, "03/03 - 09/03", 2, 1, 0, 1, 0, 0, "attention"]
        assert rows[1][2] == "..."

    def test_week_table(self):
        record = TrackingRecord(
            "EQ-2",
            2025,
            10,
            MaintenanceType.CORRECTIVE,
            Status.COMPLETED_ON_TIME,
            completed_at=date(2025, 3, 5),
            cost=240.0,
            responsible="M. Ruiz",
        )
        rows = make_week_table(
            [
                EquipmentWeekStatus("EQ-1", 10, 2025, Status.PENDING, True, registrable=True),
                EquipmentWeekStatus(
                    "EQ-2", 10, 2025, Status.COMPLETED_ON_TIME, False, record=record
                ),
            ]
        )
        assert rows[0][3:6] == ["scheduled", "Pending", "yes"]
        assert rows[1][3] == "corrective"
        assert rows[1][6:9] == ["2025-03-05", "M. Ruiz", "$240.00"]

    def test_schedule_table(self):
        entries = [
            ScheduleEntry("B", 2025, bitmap_from_week_numbers([1], 52), site="Taller"),
            ScheduleEntry(
                "A",
                2025,
                bitmap_from_week_numbers([2, 3], 52),
                Frequency.MONTHLY,
                site="Bayunca",
            ),
        ]
        rows = make_schedule_table(entries)
        assert rows[0] == ["A", "-", "Bayunca", "monthly", "2-3"]
        assert rows[1][0] == "B"


class TestCommands:
    """End-to-end runs of the CLI against a copy of the sample data."""

    def data_copy(self, tmp_path):
        path = tmp_path / "plant.yaml"
        shutil.copy(SAMPLE_DATA, path)
        return path

    def test_board(self, tmp_path, capsys):
        path = self.data_copy(tmp_path)
        assert main([str(path), "--today", "2025-03-12", "board", "2025"]) == 0
        out = capsys.readouterr().out
        assert "Weeks: 52" in out
        assert "Health" in out

    def test_week(self, tmp_path, capsys):
        path = self.data_copy(tmp_path)
        assert main([str(path), "--today", "2025-03-12", "week", "2025", "10"]) == 0
        out = capsys.readouterr().out
        assert "GEN-002" in out
        assert "LFT-003" in out
        assert "corrective" in out

    def test_week_out_of_range(self, tmp_path, capsys):
        path = self.data_copy(tmp_path)
        assert main([str(path), "week", "2025", "53"]) == 1
        assert "Error" in capsys.readouterr().out

    def test_schedules(self, tmp_path, capsys):
        path = self.data_copy(tmp_path)
        assert main([str(path), "schedules", "2025"]) == 0
        out = capsys.readouterr().out
        assert "Schedules: 3" in out
        assert "10-13" in out

    def test_register_saves(self, tmp_path, capsys):
        path = self.data_copy(tmp_path)
        code = main(
            [str(path), "--today", "2025-03-12", "register", "LFT-003", "2025", "11", "--by", "J. Perez"]
        )
        assert code == 0
        assert "Entry saved." in capsys.readouterr().out
        with open(path) as f:
            tracking = yaml.safe_load(f)["tracking"]
        assert tracking[-1]["code"] == "LFT-003"
        assert tracking[-1]["status"] == "completed_on_time"
        assert tracking[-1]["responsible"] == "J. Perez"

    def test_register_late(self, tmp_path, capsys):
        path = self.data_copy(tmp_path)
        main([str(path), "--today", "2025-03-12", "register", "LFT-003", "2025", "10"])
        with open(path) as f:
            tracking = yaml.safe_load(f)["tracking"]
        assert tracking[-1]["status"] == "completed_late"

    def test_register_closed_week(self, tmp_path, capsys):
        path = self.data_copy(tmp_path)
        before = path.read_text()
        assert main([str(path), "--today", "2025-03-20", "register", "LFT-003", "2025", "10"]) == 1
        assert "no longer registrable" in capsys.readouterr().out
        assert path.read_text() == before

    def test_register_dry_run(self, tmp_path, capsys):
        path = self.data_copy(tmp_path)
        before = path.read_text()
        args = [str(path), "--today", "2025-03-12", "register", "LFT-003", "2025", "11", "--dry-run"]
        assert main(args) == 0
        assert "dry run" in capsys.readouterr().out
        assert path.read_text() == before

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.yaml"), "board", "2025"]) == 1
        assert "File not found" in capsys.readouterr().out
