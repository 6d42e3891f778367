"""Tests for daily attendance and weekly availability aggregation."""

from datetime import date
from decimal import Decimal

import pytest

from capacity.availability import (
    AttendanceStatus,
    Calculated,
    Overridden,
    aggregate_attendance,
    attendance_grid,
    blend_weekly_percents,
    percent_of,
    resolve_availability,
    validate_percent,
)
from capacity.errors import ValidationError

MONDAY = date(2024, 1, 1)
FRIDAY = date(2024, 1, 5)
SUNDAY = date(2024, 1, 7)


class TestAggregateAttendance:
    def test_one_absence(self):
        summary = aggregate_attendance(["P", "P", "P", "P", "A"])

        assert summary.days_present == 4
        assert summary.days_total == 5
        assert summary.calculated_percent == 80

    def test_toggle_back_to_present(self):
        statuses = [AttendanceStatus.PRESENT] * 4 + [AttendanceStatus.ABSENT]
        statuses[-1] = statuses[-1].toggled()

        assert aggregate_attendance(statuses).calculated_percent == 100

    def test_no_business_days(self):
        summary = aggregate_attendance([])

        assert (summary.days_present, summary.days_total) == (0, 0)
        assert summary.calculated_percent == 100

    def test_unknown_status(self):
        with pytest.raises(ValidationError):
            aggregate_attendance(["P", "X"])


class TestPercentOf:
    def test_rounds_half_up(self):
        assert percent_of(1, 8) == 13

    def test_rounds_to_nearest(self):
        assert percent_of(2, 3) == 67
        assert percent_of(1, 3) == 33


class TestAttendanceStatus:
    @pytest.mark.parametrize("raw", ["P", "p", "present", " Present "])
    def test_parse_present(self, raw):
        assert AttendanceStatus.parse(raw) is AttendanceStatus.PRESENT

    def test_toggled(self):
        assert AttendanceStatus.PRESENT.toggled() is AttendanceStatus.ABSENT
        assert AttendanceStatus.ABSENT.toggled() is AttendanceStatus.PRESENT


class TestResolveAvailability:
    def test_calculated_without_override(self):
        availability = resolve_availability(80, None)

        assert availability == Calculated(80)
        assert availability.value == 80
        assert not availability.is_override

    def test_override_wins(self):
        availability = resolve_availability(80, 60)

        assert availability == Overridden(value=60, original_calculated=80)
        assert availability.value == 60
        assert availability.is_override

    def test_zero_override_is_an_override(self):
        assert resolve_availability(100, 0).value == 0


class TestAttendanceGrid:
    def test_missing_days_default_present(self):
        grid = attendance_grid(MONDAY, SUNDAY, {date(2024, 1, 3): "A"})

        assert list(grid) == [date(2024, 1, d) for d in range(1, 6)]
        assert grid[date(2024, 1, 3)] is AttendanceStatus.ABSENT
        assert grid[MONDAY] is AttendanceStatus.PRESENT

    def test_weekend_rejected(self):
        with pytest.raises(ValidationError, match="not a business day"):
            attendance_grid(MONDAY, SUNDAY, {date(2024, 1, 6): "A"})

    def test_outside_week_rejected(self):
        with pytest.raises(ValidationError, match="outside week"):
            attendance_grid(MONDAY, FRIDAY, {date(2024, 1, 8): "P"})


class TestBlendWeeklyPercents:
    def test_weighted_by_business_days(self):
        assert blend_weekly_percents([(100, 5), (50, 5)]) == Decimal("75.00")
        assert blend_weekly_percents([(100, 4), (50, 1)]) == Decimal("90.00")

    def test_weeks_without_business_days_ignored(self):
        assert blend_weekly_percents([(80, 5), (0, 0)]) == Decimal("80.00")

    def test_empty(self):
        assert blend_weekly_percents([]) is None


class TestValidatePercent:
    def test_accepts_numeric_text(self):
        assert validate_percent("70") == 70

    @pytest.mark.parametrize("value", [-1, 101, 50.5, "abc", True, None])
    def test_rejects(self, value):
        with pytest.raises(ValidationError):
            validate_percent(value)
