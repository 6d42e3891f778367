"""Effective capacity calculation.

effective_capacity_days = (working_days - leaves)
                          * (availability_percent / 100)
                          * mode_weight

All arithmetic is done in Decimal so that repeated recomputation of the same
row never drifts. Negative results (leaves exceeding working days) are
returned unchanged; no floor is applied.
"""

from dataclasses import dataclass, fields
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Mapping

from capacity.errors import ValidationError

HUNDRED = Decimal(100)

# Stored scale of capacity inputs (leaves, percents), and of derived days and weights
INPUT_PLACES = Decimal("0.01")
CAPACITY_PLACES = Decimal("0.0001")


class WorkMode(str, Enum):
    """Attendance modality of a member."""

    OFFICE = "office"
    REMOTE_HOME = "wfh"
    HYBRID = "hybrid"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: "str | WorkMode | None") -> "WorkMode":
        """Map a free-text work mode to a known mode, or UNKNOWN."""
        if isinstance(value, WorkMode):
            return value
        if not value:
            return cls.UNKNOWN
        key = str(value).strip().lower().replace("_", "-")
        return _ALIASES.get(key, cls.UNKNOWN)


_ALIASES = {
    "office": WorkMode.OFFICE,
    "onsite": WorkMode.OFFICE,
    "on-site": WorkMode.OFFICE,
    "wfh": WorkMode.REMOTE_HOME,
    "work-from-home": WorkMode.REMOTE_HOME,
    "remote": WorkMode.REMOTE_HOME,
    "home": WorkMode.REMOTE_HOME,
    "hybrid": WorkMode.HYBRID,
}


def to_decimal(value) -> Decimal:
    """Convert an int/float/str/Decimal to Decimal via its string form."""
    if isinstance(value, Decimal):
        number = value
    else:
        try:
            number = Decimal(str(value))
        except InvalidOperation:
            raise ValidationError(f"{value!r} is not a number") from None
    if not number.is_finite():
        raise ValidationError(f"{value!r} is not a finite number")
    return number


def quantize(value, places: Decimal = INPUT_PLACES) -> Decimal:
    """Round half-up to ``places`` (e.g. Decimal("0.01"))."""
    return to_decimal(value).quantize(places, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class ModeWeights:
    """Productivity weight per work mode."""

    office: Decimal = Decimal("1.0")
    wfh: Decimal = Decimal("0.9")
    hybrid: Decimal = Decimal("0.95")

    @classmethod
    def from_mapping(
        cls,
        overrides: Mapping | None = None,
        base: "ModeWeights | None" = None,
    ) -> "ModeWeights":
        """Overlay non-null entries of ``overrides`` on ``base`` (or defaults).

        Keys may be mode names ("office", "wfh", "hybrid") or any alias
        accepted by WorkMode.parse. Unknown keys are ignored.
        """
        base = base or cls()
        values = {f.name: getattr(base, f.name) for f in fields(cls)}
        for key, weight in (overrides or {}).items():
            if weight is None:
                continue
            mode = WorkMode.parse(key)
            if mode is WorkMode.UNKNOWN:
                continue
            weight = to_decimal(weight)
            if weight < 0:
                raise ValidationError(f"Weight for {mode.value} must not be negative")
            values[_FIELD_FOR_MODE[mode]] = weight
        return cls(**values)

    def weight_for(self, mode: "WorkMode | str | None") -> Decimal:
        """Weight for a mode; unrecognized modes weigh 1.0."""
        mode = WorkMode.parse(mode)
        if mode is WorkMode.UNKNOWN:
            return UNKNOWN_MODE_WEIGHT
        return getattr(self, _FIELD_FOR_MODE[mode])

    def to_dict(self) -> dict:
        return {f.name: float(getattr(self, f.name)) for f in fields(self)}


_FIELD_FOR_MODE = {
    WorkMode.OFFICE: "office",
    WorkMode.REMOTE_HOME: "wfh",
    WorkMode.HYBRID: "hybrid",
}

UNKNOWN_MODE_WEIGHT = Decimal("1.0")

DEFAULT_WEIGHTS = ModeWeights()


def validate_capacity_inputs(working_days, leaves, availability_percent) -> None:
    """Range checks for capacity inputs. Leaves may exceed working days."""
    if to_decimal(working_days) < 0:
        raise ValidationError("working_days must be >= 0")
    if to_decimal(leaves) < 0:
        raise ValidationError("leaves must be >= 0")
    percent = to_decimal(availability_percent)
    if percent < 0 or percent > HUNDRED:
        raise ValidationError("availability_percent must be between 0 and 100")


def effective_capacity_days(
    working_days,
    leaves,
    availability_percent,
    work_mode: "WorkMode | str | None",
    weights: ModeWeights | None = None,
) -> Decimal:
    """Compute a member's effective capacity in person-days.

    Args:
        working_days: Working days in the period.
        leaves: Days of leave within the period.
        availability_percent: 0-100.
        work_mode: WorkMode or free text; unknown modes weigh 1.0.
        weights: Mode weights, defaults to DEFAULT_WEIGHTS.

    Returns:
        Unrounded Decimal. May be negative when leaves > working_days.
    """
    weights = weights or DEFAULT_WEIGHTS
    mode_weight = weights.weight_for(work_mode)
    return (
        (to_decimal(working_days) - to_decimal(leaves))
        * (to_decimal(availability_percent) / HUNDRED)
        * mode_weight
    )
