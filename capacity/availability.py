"""Daily attendance to weekly availability aggregation."""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, Mapping

from capacity.errors import ValidationError
from capacity.weeks import business_days, is_business_day

PERCENT_QUANTUM = Decimal("0.01")


class AttendanceStatus(str, Enum):
    PRESENT = "P"
    ABSENT = "A"

    @classmethod
    def parse(cls, value: "str | AttendanceStatus") -> "AttendanceStatus":
        if isinstance(value, AttendanceStatus):
            return value
        key = str(value or "").strip().lower()
        if key in ("p", "present"):
            return cls.PRESENT
        if key in ("a", "absent"):
            return cls.ABSENT
        raise ValidationError(f"Unknown attendance status: {value!r}")

    def toggled(self) -> "AttendanceStatus":
        if self is AttendanceStatus.PRESENT:
            return AttendanceStatus.ABSENT
        return AttendanceStatus.PRESENT


@dataclass(frozen=True)
class Calculated:
    """Availability derived from daily attendance."""

    value: int

    @property
    def is_override(self) -> bool:
        return False


@dataclass(frozen=True)
class Overridden:
    """Planner-entered availability; the calculated value is kept alongside."""

    value: int
    original_calculated: int

    @property
    def is_override(self) -> bool:
        return True


Availability = Calculated | Overridden


def resolve_availability(calculated: int, override: int | None) -> Availability:
    """Build the availability value consumers should read.

    The override takes precedence whenever one is set.
    """
    if override is None:
        return Calculated(calculated)
    return Overridden(value=override, original_calculated=calculated)


@dataclass(frozen=True)
class WeekAttendance:
    days_present: int
    days_total: int
    calculated_percent: int


def validate_percent(value, field: str = "availability_percent") -> int:
    """Coerce to int and check 0..100."""
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        number = Decimal(str(value))
    except (ArithmeticError, ValueError):
        raise ValidationError(f"{field} must be a number") from None
    if number != number.to_integral_value():
        raise ValidationError(f"{field} must be a whole number")
    if number < 0 or number > 100:
        raise ValidationError(f"{field} must be between 0 and 100")
    return int(number)


def percent_of(part: int, whole: int) -> int:
    """round(part / whole * 100), rounding halves up."""
    if whole <= 0:
        return 100
    ratio = Decimal(part) * 100 / Decimal(whole)
    return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def aggregate_attendance(statuses: Iterable["AttendanceStatus | str"]) -> WeekAttendance:
    """Summarize one week of business-day statuses.

    A week with no business days is reported as 100% with 0 of 0 days.
    """
    parsed = [AttendanceStatus.parse(s) for s in statuses]
    present = sum(1 for s in parsed if s is AttendanceStatus.PRESENT)
    total = len(parsed)
    return WeekAttendance(
        days_present=present,
        days_total=total,
        calculated_percent=percent_of(present, total),
    )


def attendance_grid(
    week_start: date,
    week_end: date,
    entries: Mapping[date, "AttendanceStatus | str"] | None = None,
) -> dict[date, AttendanceStatus]:
    """Full business-day grid for a week.

    Days missing from ``entries`` default to Present. Weekend days and days
    outside the week are not part of the grid and are rejected.
    """
    entries = entries or {}
    for day in entries:
        if not week_start <= day <= week_end:
            raise ValidationError(
                f"{day.isoformat()} is outside week "
                f"{week_start.isoformat()}..{week_end.isoformat()}"
            )
        if not is_business_day(day):
            raise ValidationError(f"{day.isoformat()} is not a business day")

    return {
        day: AttendanceStatus.parse(entries.get(day, AttendanceStatus.PRESENT))
        for day in business_days(week_start, week_end)
    }


def blend_weekly_percents(cells: Iterable[tuple[int, int]]) -> Decimal | None:
    """Business-day weighted mean of weekly effective percents.

    Args:
        cells: (effective_percent, days_total) per week.

    Returns:
        Percent quantized to 0.01, or None when no week has business days.
    """
    weighted = Decimal(0)
    total_days = 0
    for percent, days_total in cells:
        if days_total <= 0:
            continue
        weighted += Decimal(percent) * days_total
        total_days += days_total
    if total_days == 0:
        return None
    return (weighted / total_days).quantize(PERCENT_QUANTUM, rounding=ROUND_HALF_UP)
