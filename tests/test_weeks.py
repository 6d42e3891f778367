"""Tests for iteration week generation."""

from datetime import date, datetime, timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st

from capacity.errors import ValidationError
from capacity.weeks import (
    business_days,
    count_business_days,
    count_weeks,
    generate_weeks,
    parse_date,
    span_days,
)


class TestGenerateWeeks:
    def test_two_full_weeks(self):
        weeks = generate_weeks(date(2024, 1, 1), date(2024, 1, 14))

        assert [w.index for w in weeks] == [1, 2]
        assert weeks[0].start == date(2024, 1, 1)
        assert weeks[0].end == date(2024, 1, 7)
        assert weeks[1].start == date(2024, 1, 8)
        assert weeks[1].end == date(2024, 1, 14)
        assert [w.days for w in weeks] == [7, 7]

    def test_last_week_is_clamped(self):
        weeks = generate_weeks(date(2024, 1, 1), date(2024, 1, 10))

        assert len(weeks) == 2
        assert weeks[1].start == date(2024, 1, 8)
        assert weeks[1].end == date(2024, 1, 10)
        assert weeks[1].days == 3

    def test_eight_day_range_covers_last_day(self):
        weeks = generate_weeks(date(2024, 1, 1), date(2024, 1, 8))

        assert len(weeks) == 2
        assert weeks[-1].start == weeks[-1].end == date(2024, 1, 8)

    def test_short_range_is_one_week(self):
        weeks = generate_weeks(date(2024, 1, 1), date(2024, 1, 5))

        assert len(weeks) == 1
        assert weeks[0].end == date(2024, 1, 5)

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationError):
            generate_weeks(date(2024, 1, 10), date(2024, 1, 1))

    def test_same_day_rejected(self):
        with pytest.raises(ValidationError):
            generate_weeks(date(2024, 1, 1), date(2024, 1, 1))

    def test_matching_weeks_count_accepted(self):
        assert len(generate_weeks(date(2024, 1, 1), date(2024, 1, 14), 2)) == 2

    def test_mismatched_weeks_count_rejected(self):
        with pytest.raises(ValidationError, match="weeks_count"):
            generate_weeks(date(2024, 1, 1), date(2024, 1, 14), 3)

    def test_to_dict(self):
        week = generate_weeks(date(2024, 1, 1), date(2024, 1, 14))[1]
        assert week.to_dict() == {
            "week_index": 2,
            "week_start": "2024-01-08",
            "week_end": "2024-01-14",
            "days": 7,
            "business_days": 5,
        }


@given(
    start=st.dates(min_value=date(2000, 1, 1), max_value=date(2100, 1, 1)),
    length=st.integers(min_value=1, max_value=400),
)
def test_weeks_partition_range(start, length):
    """Weeks are contiguous, non-overlapping and cover the range exactly."""
    end = start + timedelta(days=length)
    weeks = generate_weeks(start, end)

    assert weeks[0].start == start
    assert weeks[-1].end == end
    assert [w.index for w in weeks] == list(range(1, len(weeks) + 1))
    for previous, current in zip(weeks, weeks[1:]):
        assert current.start == previous.end + timedelta(days=1)
    assert all(1 <= w.days <= 7 for w in weeks)
    assert all(w.days == 7 for w in weeks[:-1])
    assert sum(w.days for w in weeks) == span_days(start, end)
    assert len(weeks) == count_weeks(start, end)


class TestSpans:
    def test_span_is_inclusive(self):
        assert span_days(date(2024, 1, 1), date(2024, 1, 14)) == 14

    def test_count_weeks_rounds_up(self):
        assert count_weeks(date(2024, 1, 1), date(2024, 1, 15)) == 3


class TestBusinessDays:
    def test_full_week(self):
        days = business_days(date(2024, 1, 1), date(2024, 1, 7))
        assert days == [date(2024, 1, d) for d in range(1, 6)]

    def test_weekend_only(self):
        # 2024-01-06 is a Saturday
        assert count_business_days(date(2024, 1, 6), date(2024, 1, 7)) == 0

    def test_two_weeks(self):
        assert count_business_days(date(2024, 1, 1), date(2024, 1, 14)) == 10


class TestParseDate:
    def test_iso_string(self):
        assert parse_date("2024-01-08") == date(2024, 1, 8)

    def test_datetime(self):
        assert parse_date(datetime(2024, 1, 8, 9, 30)) == date(2024, 1, 8)

    @pytest.mark.parametrize("value", ["08/01/2024", "", None, "2024-13-01"])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            parse_date(value, "start_date")
