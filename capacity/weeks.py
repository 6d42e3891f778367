"""Iteration week generation.

An iteration's date range is split into consecutive 7-day buckets starting on
the iteration start date. The final bucket is clamped to the iteration end
date, so it may be shorter than a week.

Interval length convention: every span in this module is INCLUSIVE of both
end points, ``span_days = (end - start).days + 1``. A 2024-01-01..2024-01-14
iteration is 14 days long and has 2 weeks. The exclusive form
(``end - start``) is never used; it drops the last day whenever the exclusive
span is a multiple of 7 (e.g. an 8-day iteration would get a single week).
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from capacity.errors import ValidationError

DAYS_PER_WEEK = 7

# Monday=0 .. Friday=4
BUSINESS_WEEKDAYS = frozenset(range(5))

DAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


@dataclass(frozen=True)
class WeekRange:
    """One generated week of an iteration."""

    index: int  # 1-based
    start: date
    end: date

    @property
    def days(self) -> int:
        return span_days(self.start, self.end)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def to_dict(self) -> dict:
        return {
            "week_index": self.index,
            "week_start": self.start.isoformat(),
            "week_end": self.end.isoformat(),
            "days": self.days,
            "business_days": count_business_days(self.start, self.end),
        }


def parse_date(value, field: str = "date") -> date:
    """Accept a date, datetime or ISO "YYYY-MM-DD" string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD)") from None


def validate_range(start_date: date, end_date: date) -> None:
    """Reject ranges whose end is not strictly after their start."""
    if start_date is None or end_date is None:
        raise ValidationError("start_date and end_date are required")
    if end_date <= start_date:
        raise ValidationError(
            f"end_date {end_date.isoformat()} must be after "
            f"start_date {start_date.isoformat()}"
        )


def span_days(start_date: date, end_date: date) -> int:
    """Inclusive number of calendar days between two dates."""
    return (end_date - start_date).days + 1


def count_weeks(start_date: date, end_date: date) -> int:
    """Number of weekly buckets needed to cover the range."""
    validate_range(start_date, end_date)
    return -(-span_days(start_date, end_date) // DAYS_PER_WEEK)


def generate_weeks(
    start_date: date,
    end_date: date,
    weeks_count: int | None = None,
) -> list[WeekRange]:
    """Split an iteration range into 1-indexed, non-overlapping weeks.

    Args:
        start_date: First day of the iteration.
        end_date: Last day of the iteration (inclusive), after start_date.
        weeks_count: Optional explicit count. It must match the count derived
            from the range; a mismatch means the caller used a different
            interval convention.

    Returns:
        WeekRange objects covering [start_date, end_date] exactly.

    Raises:
        ValidationError: On an invalid range or a mismatched weeks_count.
    """
    derived = count_weeks(start_date, end_date)
    if weeks_count is not None and weeks_count != derived:
        raise ValidationError(
            f"weeks_count {weeks_count} does not match the {derived} week(s) "
            f"spanned by {start_date.isoformat()}..{end_date.isoformat()}"
        )

    weeks = []
    for i in range(derived):
        week_start = start_date + timedelta(days=DAYS_PER_WEEK * i)
        week_end = min(week_start + timedelta(days=DAYS_PER_WEEK - 1), end_date)
        weeks.append(WeekRange(index=i + 1, start=week_start, end=week_end))
    return weeks


def is_business_day(day: date) -> bool:
    return day.weekday() in BUSINESS_WEEKDAYS


def day_name(day: date) -> str:
    return DAY_NAMES[day.weekday()]


def business_days(start_date: date, end_date: date) -> list[date]:
    """Monday-Friday dates within an inclusive range."""
    days = []
    current = start_date
    while current <= end_date:
        if is_business_day(current):
            days.append(current)
        current += timedelta(days=1)
    return days


def count_business_days(start_date: date, end_date: date) -> int:
    return len(business_days(start_date, end_date))
