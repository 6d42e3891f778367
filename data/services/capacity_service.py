"""Member capacity persistence and rollups."""

import logging
from decimal import Decimal

from flask import current_app
from sqlalchemy import func

from app.extensions import db
from capacity.availability import blend_weekly_percents
from capacity.effective import (
    CAPACITY_PLACES,
    ModeWeights,
    effective_capacity_days,
    quantize,
    to_decimal,
    validate_capacity_inputs,
)
from capacity.errors import NotFoundError, ValidationError
from capacity.rollup import (
    IterationCapacitySummary,
    MemberCapacity,
    rollup_iteration,
    rollup_project,
)
from capacity.weeks import count_business_days
from data.services.base import get_or_raise, transaction

logger = logging.getLogger(__name__)


def normalize_work_mode(value) -> str:
    """Store work modes as trimmed lower-case text; parsing happens on use."""
    text = str(value).strip().lower()
    if not text:
        raise ValidationError("work_mode must not be empty")
    return text


class CapacityService:
    """Keeps CapacityMember rows and their derived capacity consistent.

    Methods that do not open a transaction themselves (``recompute_member``,
    ``recompute_iteration``, ``sync_from_weekly``) are meant to be called from
    inside another service's transaction so the derived value is written
    together with the change that triggered it.
    """

    def weights_for(self, project) -> ModeWeights:
        """Project weights over app-configured weights over built-in defaults."""
        configured = ModeWeights.from_mapping(
            current_app.config.get("CAPACITY_DEFAULT_WEIGHTS")
        )
        if project is None:
            return configured
        return ModeWeights.from_mapping(project.weight_overrides, base=configured)

    def work_mode_for(self, iteration, team_member) -> str:
        """Work mode of a member within an iteration (entry first, then default)."""
        entry = self._find_entry(iteration.id, team_member.id)
        if entry is not None:
            return entry.work_mode
        return team_member.work_mode

    def recompute_member(self, entry) -> Decimal:
        """Recompute and assign effective_capacity_days. Does not commit."""
        iteration = entry.iteration
        value = effective_capacity_days(
            iteration.working_days,
            entry.leaves,
            entry.availability_percent,
            entry.work_mode,
            self.weights_for(iteration.project),
        )
        value = quantize(value, CAPACITY_PLACES)
        entry.effective_capacity_days = value
        logger.debug(
            f"Recomputed capacity for member {entry.team_member_id} in iteration "
            f"{iteration.id}: {value}"
        )
        return value

    def recompute_iteration(self, iteration) -> None:
        """Recompute every capacity row of an iteration. Does not commit."""
        for entry in iteration.capacity_members:
            self.recompute_member(entry)

    def upsert_member_capacity(
        self,
        iteration_id: int,
        team_member_id: int,
        leaves=None,
        availability_percent=None,
        work_mode: str | None = None,
    ):
        """Create or update a member's capacity entry for an iteration.

        Fields left as None keep their stored value, or take the member's
        defaults on creation. Leaves and availability are stored rounded
        half-up to two decimal places, and the derived capacity is recomputed
        from the rounded values in the same transaction.

        An availability set here is replaced by the blend of weekly
        availability (see ``sync_from_weekly``) on the next attendance or
        override edit for this member in the iteration.

        Raises:
            NotFoundError: Unknown iteration or member.
            ValidationError: Out-of-range inputs or a member from another project.
        """
        from app.models import CapacityMember, Iteration, TeamMember

        with transaction() as session:
            iteration = get_or_raise(Iteration, iteration_id, "Iteration")
            member = get_or_raise(TeamMember, team_member_id, "Team member")
            self._check_same_project(iteration, member)

            entry = self._find_entry(iteration.id, member.id)
            created = entry is None

            # The row must not reach the database before its derived value is set
            with session.no_autoflush:
                if created:
                    entry = CapacityMember(
                        iteration=iteration,
                        team_member=member,
                        leaves=Decimal(0),
                        availability_percent=Decimal(member.default_availability_percent),
                        work_mode=member.work_mode,
                    )
                    session.add(entry)

                if leaves is not None:
                    entry.leaves = quantize(leaves)
                if availability_percent is not None:
                    entry.availability_percent = quantize(availability_percent)
                if work_mode is not None:
                    entry.work_mode = normalize_work_mode(work_mode)

                validate_capacity_inputs(
                    iteration.working_days, entry.leaves, entry.availability_percent
                )
                self.recompute_member(entry)
            session.flush()

        logger.info(
            f"{'Created' if created else 'Updated'} capacity for member "
            f"{team_member_id} in iteration {iteration_id}"
        )
        return entry

    def sync_from_weekly(self, iteration, team_member):
        """Carry weekly availability into the member's iteration capacity.

        The member's iteration availability becomes the business-day weighted
        mean of the weekly effective percents; weeks without a row count at the
        member's default availability. Creates the capacity entry from member
        defaults when missing. Does not commit.
        """
        from app.models import CapacityMember, IterationWeek, WeeklyAvailability

        rows = {
            row.iteration_week_id: row
            for row in WeeklyAvailability.query.join(IterationWeek).filter(
                IterationWeek.iteration_id == iteration.id,
                WeeklyAvailability.team_member_id == team_member.id,
            )
        }

        cells = []
        for week in iteration.weeks:
            row = rows.get(week.id)
            if row is None:
                cells.append(
                    (
                        team_member.default_availability_percent,
                        count_business_days(week.week_start, week.week_end),
                    )
                )
            else:
                cells.append((row.effective_percent, row.days_total))

        percent = blend_weekly_percents(cells)
        if percent is None:
            percent = Decimal(team_member.default_availability_percent)

        entry = self._find_entry(iteration.id, team_member.id)
        with db.session.no_autoflush:
            if entry is None:
                entry = CapacityMember(
                    iteration=iteration,
                    team_member=team_member,
                    leaves=Decimal(0),
                    work_mode=team_member.work_mode,
                )
                db.session.add(entry)
                logger.info(
                    f"Created capacity entry for member {team_member.id} in iteration "
                    f"{iteration.id} from weekly availability"
                )

            entry.availability_percent = percent
            self.recompute_member(entry)
        return entry

    def remove_member(self, iteration_id: int, team_member_id: int) -> None:
        with transaction() as session:
            entry = self._find_entry(iteration_id, team_member_id)
            if entry is None:
                raise NotFoundError(
                    "Capacity entry", f"{iteration_id}/{team_member_id}"
                )
            session.delete(entry)
        logger.info(
            f"Removed member {team_member_id} from iteration {iteration_id} capacity"
        )

    def list_members(self, iteration_id: int) -> list:
        from app.models import Iteration

        iteration = get_or_raise(Iteration, iteration_id, "Iteration")
        return sorted(
            iteration.capacity_members, key=lambda e: e.team_member.display_name
        )

    def iteration_summary(self, iteration_id: int) -> IterationCapacitySummary:
        """Rollup of stored per-member capacity for one iteration."""
        members = [
            MemberCapacity(
                member_id=entry.team_member_id,
                display_name=entry.team_member.display_name,
                effective_capacity_days=to_decimal(entry.effective_capacity_days),
                availability_percent=to_decimal(entry.availability_percent),
                team_id=entry.team_member.team_id,
                team_name=entry.team_member.team.name,
                work_mode=entry.work_mode,
            )
            for entry in self.list_members(iteration_id)
        ]
        return rollup_iteration(iteration_id, members)

    def project_summary(self, project_id: int) -> dict:
        """Iteration count and total capacity for a project."""
        from app.models import CapacityMember, Iteration, Project

        project = get_or_raise(Project, project_id, "Project")
        totals = (
            db.session.query(
                Iteration.id,
                func.coalesce(func.sum(CapacityMember.effective_capacity_days), 0),
            )
            .outerjoin(CapacityMember, CapacityMember.iteration_id == Iteration.id)
            .filter(Iteration.project_id == project.id)
            .group_by(Iteration.id)
            .all()
        )
        return rollup_project(project.id, [to_decimal(total) for _, total in totals])

    def global_stats(self) -> dict:
        from app.models import CapacityMember, Iteration

        total_iterations = db.session.query(func.count(Iteration.id)).scalar()
        total_members = db.session.query(func.count(CapacityMember.id)).scalar()
        avg_capacity = db.session.query(
            func.avg(CapacityMember.effective_capacity_days)
        ).scalar()
        total_projects = db.session.query(
            func.count(func.distinct(Iteration.project_id))
        ).scalar()
        return {
            "totalIterations": total_iterations or 0,
            "totalMembers": total_members or 0,
            "avgCapacity": round(float(avg_capacity), 2) if avg_capacity is not None else 0,
            "totalProjects": total_projects or 0,
        }

    def _find_entry(self, iteration_id: int, team_member_id: int):
        from app.models import CapacityMember

        return CapacityMember.query.filter_by(
            iteration_id=iteration_id, team_member_id=team_member_id
        ).first()

    def _check_same_project(self, iteration, team_member) -> None:
        if team_member.team.project_id != iteration.project_id:
            raise ValidationError(
                f"Team member {team_member.id} does not belong to project "
                f"{iteration.project_id}"
            )
