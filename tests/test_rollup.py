"""Tests for iteration and project capacity rollups."""

from decimal import Decimal

from capacity.rollup import MemberCapacity, rollup_iteration, rollup_project


def _member(member_id, capacity, percent=100, team_id=1, team_name="Core"):
    return MemberCapacity(
        member_id=member_id,
        display_name=f"Member {member_id}",
        effective_capacity_days=Decimal(capacity),
        availability_percent=Decimal(percent),
        team_id=team_id,
        team_name=team_name,
    )


class TestRollupIteration:
    def test_totals(self):
        summary = rollup_iteration(
            7,
            [
                _member(1, "3.04", 80),
                _member(2, "5", 100),
                _member(3, "4.5", 90, team_id=2, team_name="Edge"),
            ],
        )

        assert summary.total_effective_capacity == Decimal("12.54")
        assert summary.total_members == 3
        assert summary.average_availability_percent == Decimal("90.00")
        assert [(t.team_name, t.total_members) for t in summary.teams] == [
            ("Core", 2),
            ("Edge", 1),
        ]
        assert summary.teams[0].total_effective_capacity == Decimal("8.04")

    def test_negative_capacity_is_summed(self):
        summary = rollup_iteration(1, [_member(1, "-3"), _member(2, "5")])
        assert summary.total_effective_capacity == Decimal("2")

    def test_empty_iteration(self):
        summary = rollup_iteration(1, [])

        assert summary.total_effective_capacity == 0
        assert summary.total_members == 0
        assert summary.average_availability_percent is None
        assert summary.teams == []

    def test_to_dict(self):
        data = rollup_iteration(7, [_member(1, "3.04", 80)]).to_dict()

        assert data == {
            "iterationId": 7,
            "totalEffectiveCapacity": 3.04,
            "totalMembers": 1,
            "averageAvailabilityPercent": 80.0,
            "teams": [
                {
                    "teamId": 1,
                    "teamName": "Core",
                    "totalEffectiveCapacity": 3.04,
                    "totalMembers": 1,
                }
            ],
        }


class TestRollupProject:
    def test_rounds_to_one_decimal(self):
        result = rollup_project(3, [Decimal("3.04"), Decimal("4.01")])
        assert result == {"projectId": 3, "totalIterations": 2, "totalCapacity": 7.1}

    def test_no_iterations(self):
        assert rollup_project(3, []) == {
            "projectId": 3,
            "totalIterations": 0,
            "totalCapacity": 0.0,
        }
