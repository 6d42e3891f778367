"""Iteration and project level capacity aggregation."""

from collections import OrderedDict
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from capacity.availability import PERCENT_QUANTUM


@dataclass(frozen=True)
class MemberCapacity:
    """Snapshot of one member's capacity inside an iteration."""

    member_id: int
    display_name: str
    effective_capacity_days: Decimal
    availability_percent: Decimal
    team_id: int | None = None
    team_name: str | None = None
    work_mode: str | None = None


@dataclass
class TeamCapacity:
    team_id: int | None
    team_name: str | None
    total_effective_capacity: Decimal = Decimal(0)
    total_members: int = 0

    def to_dict(self) -> dict:
        return {
            "teamId": self.team_id,
            "teamName": self.team_name,
            "totalEffectiveCapacity": float(self.total_effective_capacity),
            "totalMembers": self.total_members,
        }


@dataclass
class IterationCapacitySummary:
    iteration_id: int
    total_effective_capacity: Decimal
    total_members: int
    average_availability_percent: Decimal | None = None
    teams: list[TeamCapacity] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "iterationId": self.iteration_id,
            "totalEffectiveCapacity": float(self.total_effective_capacity),
            "totalMembers": self.total_members,
            "averageAvailabilityPercent": (
                float(self.average_availability_percent)
                if self.average_availability_percent is not None
                else None
            ),
            "teams": [t.to_dict() for t in self.teams],
        }


def rollup_iteration(
    iteration_id: int, members: Iterable[MemberCapacity]
) -> IterationCapacitySummary:
    """Sum member capacity for an iteration, grouped by team.

    Negative member capacity is summed as-is.
    """
    members = list(members)
    teams: "OrderedDict[int | None, TeamCapacity]" = OrderedDict()
    total = Decimal(0)
    availability_sum = Decimal(0)

    for member in members:
        total += member.effective_capacity_days
        availability_sum += member.availability_percent

        team = teams.get(member.team_id)
        if team is None:
            team = TeamCapacity(team_id=member.team_id, team_name=member.team_name)
            teams[member.team_id] = team
        team.total_effective_capacity += member.effective_capacity_days
        team.total_members += 1

    average = None
    if members:
        average = (availability_sum / len(members)).quantize(
            PERCENT_QUANTUM, rounding=ROUND_HALF_UP
        )

    return IterationCapacitySummary(
        iteration_id=iteration_id,
        total_effective_capacity=total,
        total_members=len(members),
        average_availability_percent=average,
        teams=list(teams.values()),
    )


def rollup_project(project_id: int, iteration_totals: Iterable[Decimal]) -> dict:
    """Project summary: iteration count and capacity rounded to 0.1 day."""
    totals = list(iteration_totals)
    capacity = sum(totals, Decimal(0)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return {
        "projectId": project_id,
        "totalIterations": len(totals),
        "totalCapacity": float(capacity),
    }
