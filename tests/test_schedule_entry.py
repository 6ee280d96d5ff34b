#!/usr/bin/env python3
"""Tests for ScheduleEntry and schedule generation."""

import pytest

from maintcal import Frequency, ScheduleEntry, bitmap_from_week_numbers, generate_weeks


class TestFrequency:
    """Tests for Frequency parsing and steps."""

    def test_parse_case_insensitive(self):
        assert Frequency.parse("monthly") is Frequency.MONTHLY
        assert Frequency.parse(" Quarterly ") is Frequency.QUARTERLY

    def test_parse_dash(self):
        assert Frequency.parse("four-monthly") is Frequency.FOUR_MONTHLY

    def test_parse_unknown(self):
        with pytest.raises(KeyError):
            Frequency.parse("hourly")

    def test_steps(self):
        assert Frequency.WEEKLY.days == 7
        assert Frequency.WEEKLY.months == 0
        assert Frequency.SEMIANNUAL.months == 6


class TestScheduleEntry:
    """Tests for ScheduleEntry."""

    def test_is_scheduled(self):
        entry = ScheduleEntry("EQ-1", 2025, bitmap_from_week_numbers([3, 7], 52))
        assert entry.is_scheduled(3)
        assert entry.is_scheduled(7)
        assert not entry.is_scheduled(4)

    def test_week_outside_bitmap_not_scheduled(self):
        entry = ScheduleEntry("EQ-1", 2026, [True] * 52)
        assert entry.is_scheduled(52)
        assert not entry.is_scheduled(53)
        assert not entry.is_scheduled(0)

    def test_scheduled_weeks(self):
        entry = ScheduleEntry("EQ-1", 2025, bitmap_from_week_numbers([10, 2], 52))
        assert entry.scheduled_weeks == [2, 10]


class TestBitmapFromWeekNumbers:
    """Tests for bitmap_from_week_numbers."""

    def test_sets_weeks(self):
        bitmap = bitmap_from_week_numbers([1, 3], 4)
        assert bitmap == [True, False, True, False]

    def test_ignores_weeks_outside_length(self):
        bitmap = bitmap_from_week_numbers([0, 5, 53], 5)
        assert bitmap == [False, False, False, False, True]


class TestGenerateWeeks:
    """Tests for generate_weeks."""

    def test_sized_to_year(self):
        assert len(generate_weeks(1, Frequency.MONTHLY, 2025)) == 52
        assert len(generate_weeks(1, Frequency.MONTHLY, 2026)) == 53

    def test_weekly_marks_every_week(self):
        bitmap = generate_weeks(1, Frequency.WEEKLY, 2026)
        assert all(bitmap)
        assert bitmap[52]  # Week 53

    def test_biweekly(self):
        entry = ScheduleEntry("EQ-1", 2025, generate_weeks(2, Frequency.BIWEEKLY, 2025))
        assert entry.scheduled_weeks[:4] == [2, 4, 6, 8]
        assert len(entry.scheduled_weeks) == 26

    def test_monthly_from_start_week(self):
        # Week 2 of 2025 starts 2025-01-06; monthly steps land on the 6th
        entry = ScheduleEntry("EQ-1", 2025, generate_weeks(2, Frequency.MONTHLY, 2025))
        assert entry.scheduled_weeks[:3] == [2, 6, 10]
        assert len(entry.scheduled_weeks) == 12

    def test_quarterly(self):
        # 2025-03-03, 06-03, 09-03, 12-03
        entry = ScheduleEntry("EQ-1", 2025, generate_weeks(10, Frequency.QUARTERLY, 2025))
        assert entry.scheduled_weeks == [10, 23, 36, 49]

    def test_annual_marks_start_only(self):
        entry = ScheduleEntry("EQ-1", 2025, generate_weeks(20, Frequency.ANNUAL, 2025))
        assert entry.scheduled_weeks == [20]

    def test_no_frequency(self):
        assert not any(generate_weeks(1, None, 2025))

    def test_start_week_out_of_range(self):
        assert not any(generate_weeks(53, Frequency.WEEKLY, 2025))
