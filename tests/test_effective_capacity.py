"""Tests for the effective capacity calculator."""

from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from capacity.effective import (
    DEFAULT_WEIGHTS,
    ModeWeights,
    WorkMode,
    effective_capacity_days,
    quantize,
    to_decimal,
    validate_capacity_inputs,
)
from capacity.errors import ValidationError

MODES = ["office", "wfh", "hybrid", "remote", "on-site", "contractor", None]


class TestEffectiveCapacity:
    def test_hybrid_example(self):
        # (5 - 1) * 0.80 * 0.95
        assert effective_capacity_days(5, 1, 80, "hybrid") == Decimal("3.04")

    def test_office_full_availability(self):
        assert effective_capacity_days(10, 0, 100, "office") == Decimal("10")

    def test_wfh_weight(self):
        assert effective_capacity_days(10, 0, 100, WorkMode.REMOTE_HOME) == Decimal("9")

    def test_unknown_mode_weighs_one(self):
        assert effective_capacity_days(4, 0, 50, "contractor") == Decimal("2")
        assert effective_capacity_days(4, 0, 50, None) == Decimal("2")

    def test_negative_result_is_not_clamped(self):
        assert effective_capacity_days(2, 5, 100, "office") == Decimal("-3")

    def test_zero_availability(self):
        assert effective_capacity_days(10, 2, 0, "hybrid") == 0

    def test_custom_weights(self):
        weights = ModeWeights.from_mapping({"wfh": "0.8"})
        assert effective_capacity_days(10, 0, 100, "wfh", weights) == Decimal("8")

    def test_string_and_float_inputs(self):
        assert effective_capacity_days("5", 1.5, "80", "office") == Decimal("2.8")


@given(
    working_days=st.integers(min_value=0, max_value=120),
    leaves=st.decimals(min_value=0, max_value=120, places=1),
    percent=st.integers(min_value=0, max_value=100),
    mode=st.sampled_from(MODES),
)
def test_matches_closed_form(working_days, leaves, percent, mode):
    """Result is (working_days - leaves) * percent/100 * weight, exactly."""
    expected = (
        (Decimal(working_days) - leaves)
        * (Decimal(percent) / Decimal(100))
        * DEFAULT_WEIGHTS.weight_for(mode)
    )

    first = effective_capacity_days(working_days, leaves, percent, mode)
    second = effective_capacity_days(working_days, leaves, percent, mode)

    assert first == expected
    assert first == second


class TestWorkMode:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("office", WorkMode.OFFICE),
            (" Office ", WorkMode.OFFICE),
            ("WFH", WorkMode.REMOTE_HOME),
            ("work_from_home", WorkMode.REMOTE_HOME),
            ("remote", WorkMode.REMOTE_HOME),
            ("hybrid", WorkMode.HYBRID),
            ("field", WorkMode.UNKNOWN),
            ("", WorkMode.UNKNOWN),
            (None, WorkMode.UNKNOWN),
        ],
    )
    def test_parse(self, raw, expected):
        assert WorkMode.parse(raw) is expected


class TestModeWeights:
    def test_defaults(self):
        assert DEFAULT_WEIGHTS.to_dict() == {"office": 1.0, "wfh": 0.9, "hybrid": 0.95}

    def test_overlay_keeps_unset_values(self):
        base = ModeWeights.from_mapping({"office": 0.9})
        weights = ModeWeights.from_mapping({"hybrid": 0.85, "wfh": None}, base=base)

        assert weights.office == Decimal("0.9")
        assert weights.wfh == Decimal("0.9")
        assert weights.hybrid == Decimal("0.85")

    def test_unknown_keys_ignored(self):
        assert ModeWeights.from_mapping({"contractor": 0.5}) == DEFAULT_WEIGHTS

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            ModeWeights.from_mapping({"office": -0.1})

    def test_unknown_mode_weight(self):
        assert ModeWeights(office=Decimal("0.5")).weight_for("contractor") == Decimal("1.0")


class TestValidation:
    @pytest.mark.parametrize(
        "working_days, leaves, percent",
        [(-1, 0, 100), (5, -1, 100), (5, 0, -1), (5, 0, 101)],
    )
    def test_out_of_range(self, working_days, leaves, percent):
        with pytest.raises(ValidationError):
            validate_capacity_inputs(working_days, leaves, percent)

    def test_leaves_may_exceed_working_days(self):
        validate_capacity_inputs(2, 5, 100)

    def test_non_numeric(self):
        with pytest.raises(ValidationError):
            to_decimal("lots")

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), "NaN", "-Infinity"])
    def test_non_finite(self, value):
        with pytest.raises(ValidationError):
            to_decimal(value)

    @pytest.mark.parametrize(
        "working_days, leaves, percent",
        [
            (5, float("nan"), 100),
            (5, float("inf"), 100),
            (float("inf"), 0, 100),
            (5, 0, float("nan")),
        ],
    )
    def test_non_finite_inputs_rejected(self, working_days, leaves, percent):
        with pytest.raises(ValidationError):
            validate_capacity_inputs(working_days, leaves, percent)


class TestQuantize:
    def test_rounds_half_up_to_two_places(self):
        assert quantize("0.005") == Decimal("0.01")
        assert quantize("33.335") == Decimal("33.34")
        assert quantize(2) == Decimal("2.00")

    def test_custom_places(self):
        assert quantize("1.66505", Decimal("0.0001")) == Decimal("1.6651")
