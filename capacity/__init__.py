"""Team capacity planning core: pure functions over plain records."""

from capacity.availability import (
    AttendanceStatus,
    Calculated,
    Overridden,
    aggregate_attendance,
    attendance_grid,
    blend_weekly_percents,
    resolve_availability,
)
from capacity.effective import (
    DEFAULT_WEIGHTS,
    ModeWeights,
    WorkMode,
    effective_capacity_days,
)
from capacity.errors import CapacityError, NotFoundError, ValidationError
from capacity.rollup import MemberCapacity, rollup_iteration, rollup_project
from capacity.weeks import (
    WeekRange,
    business_days,
    count_business_days,
    count_weeks,
    generate_weeks,
    parse_date,
    span_days,
)

__all__ = [
    "AttendanceStatus",
    "Calculated",
    "Overridden",
    "aggregate_attendance",
    "attendance_grid",
    "blend_weekly_percents",
    "resolve_availability",
    "DEFAULT_WEIGHTS",
    "ModeWeights",
    "WorkMode",
    "effective_capacity_days",
    "CapacityError",
    "NotFoundError",
    "ValidationError",
    "MemberCapacity",
    "rollup_iteration",
    "rollup_project",
    "WeekRange",
    "business_days",
    "count_business_days",
    "count_weeks",
    "generate_weeks",
    "parse_date",
    "span_days",
]
