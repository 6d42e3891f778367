"""Iteration lifecycle: creation, week generation and date changes."""

import logging

from capacity.effective import to_decimal
from capacity.errors import ValidationError
from capacity.weeks import count_business_days, generate_weeks, parse_date
from data.services.availability_service import AvailabilityService
from data.services.base import get_or_raise, transaction
from data.services.capacity_service import CapacityService

logger = logging.getLogger(__name__)

ITERATION_KINDS = ("iteration", "sprint", "cycle")

UPDATABLE_FIELDS = frozenset(
    {"name", "kind", "type", "start_date", "end_date", "working_days", "weeks_count"}
)


def normalize_kind(value) -> str:
    kind = str(value or "").strip().lower()
    if kind not in ITERATION_KINDS:
        raise ValidationError(
            f"type must be one of {', '.join(ITERATION_KINDS)}, got {value!r}"
        )
    return kind


def normalize_name(value) -> str:
    name = str(value or "").strip()
    if not name:
        raise ValidationError("name is required")
    return name


def resolve_working_days(value, start_date, end_date) -> int:
    """Declared working days, or the business days in the range when omitted."""
    if value is None:
        return count_business_days(start_date, end_date)
    if isinstance(value, bool):
        raise ValidationError("working_days must be a whole number")
    try:
        number = to_decimal(value)
    except (ArithmeticError, ValueError):
        raise ValidationError("working_days must be a whole number") from None
    if number != number.to_integral_value():
        raise ValidationError("working_days must be a whole number")
    if number < 0:
        raise ValidationError("working_days must be >= 0")
    return int(number)


class IterationService:
    """Creates iterations with their weeks and keeps dependents in step."""

    def __init__(
        self,
        capacity_service: CapacityService | None = None,
        availability_service: AvailabilityService | None = None,
    ):
        self.capacity = capacity_service or CapacityService()
        self.availability = availability_service or AvailabilityService(self.capacity)

    def create_iteration(
        self,
        project_id: int,
        team_id: int,
        name: str,
        start_date,
        end_date,
        working_days=None,
        weeks_count=None,
        kind: str = "iteration",
    ):
        """
        Create an iteration and persist its generated weeks.

        Args:
            start_date, end_date: Inclusive range; dates or ISO strings.
            working_days: Declared working days; defaults to the business
                days in the range.
            weeks_count: Optional, must match the weeks the range spans.

        Raises:
            NotFoundError: Unknown project or team.
            ValidationError: Bad range, mismatched weeks_count, a team from
                another project, or invalid name/type.
        """
        from app.models import Iteration, IterationWeek, Project, Team

        start = parse_date(start_date, "start_date")
        end = parse_date(end_date, "end_date")
        weeks = generate_weeks(start, end, weeks_count)

        with transaction() as session:
            project = get_or_raise(Project, project_id, "Project")
            team = get_or_raise(Team, team_id, "Team")
            if team.project_id != project.id:
                raise ValidationError(
                    f"Team {team.id} does not belong to project {project.id}"
                )

            iteration = Iteration(
                project=project,
                team=team,
                name=normalize_name(name),
                kind=normalize_kind(kind),
                start_date=start,
                end_date=end,
                weeks_count=len(weeks),
                working_days=resolve_working_days(working_days, start, end),
            )
            for week in weeks:
                iteration.weeks.append(
                    IterationWeek(
                        week_index=week.index, week_start=week.start, week_end=week.end
                    )
                )
            session.add(iteration)
            session.flush()

        logger.info(
            f"Created {iteration.kind} '{iteration.name}' ({iteration.id}) "
            f"{start.isoformat()}..{end.isoformat()} with {len(weeks)} week(s)"
        )
        return iteration

    def update_iteration(self, iteration_id: int, **changes):
        """
        Update name, type, dates or working days of an iteration.

        A date change reconciles weeks by index: existing weeks take their new
        dates, surplus weeks are deleted (with their availability) and missing
        weeks are appended. Attendance grids of moved weeks are re-derived,
        members with weekly availability are re-synced and every capacity row
        is recomputed. When dates change and ``working_days`` is not given it
        is re-derived from the new range.
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

        with transaction() as session:
            iteration = self.get_iteration(iteration_id)

            if "name" in changes:
                iteration.name = normalize_name(changes["name"])
            kind = changes.get("kind", changes.get("type"))
            if kind is not None:
                iteration.kind = normalize_kind(kind)

            start = parse_date(changes.get("start_date", iteration.start_date), "start_date")
            end = parse_date(changes.get("end_date", iteration.end_date), "end_date")
            dates_changed = (start, end) != (iteration.start_date, iteration.end_date)

            member_ids = set()
            if dates_changed or changes.get("weeks_count") is not None:
                ranges = generate_weeks(start, end, changes.get("weeks_count"))
                member_ids = self._members_with_weekly_rows(iteration)

                iteration.start_date = start
                iteration.end_date = end
                iteration.weeks_count = len(ranges)
                for week in self._reconcile_weeks(iteration, ranges):
                    member_ids |= self.availability.refresh_week(week)

                if "working_days" not in changes:
                    iteration.working_days = count_business_days(start, end)

            working_days_changed = "working_days" in changes
            if working_days_changed:
                iteration.working_days = resolve_working_days(
                    changes["working_days"], start, end
                )

            if dates_changed:
                from app.models import TeamMember

                for member_id in sorted(member_ids):
                    self.capacity.sync_from_weekly(
                        iteration, get_or_raise(TeamMember, member_id, "Team member")
                    )
            if dates_changed or working_days_changed:
                self.capacity.recompute_iteration(iteration)

            session.flush()

        logger.info(f"Updated iteration {iteration_id}: {', '.join(sorted(changes))}")
        return iteration

    def delete_iteration(self, iteration_id: int) -> None:
        with transaction() as session:
            iteration = self.get_iteration(iteration_id)
            session.delete(iteration)
        logger.info(f"Deleted iteration {iteration_id}")

    def get_iteration(self, iteration_id: int):
        from app.models import Iteration

        return get_or_raise(Iteration, iteration_id, "Iteration")

    def list_iterations(self, project_id: int) -> list:
        from app.models import Iteration, Project

        project = get_or_raise(Project, project_id, "Project")
        return project.iterations.order_by(Iteration.start_date, Iteration.id).all()

    def preview_weeks(self, start_date, end_date, weeks_count=None) -> list:
        """Weeks a range would generate, without persisting anything."""
        return generate_weeks(
            parse_date(start_date, "start_date"),
            parse_date(end_date, "end_date"),
            weeks_count,
        )

    def _reconcile_weeks(self, iteration, ranges) -> list:
        """Match stored weeks to ``ranges`` by index; return weeks whose dates moved."""
        from app.models import IterationWeek

        existing = {week.week_index: week for week in iteration.weeks}
        moved = []
        for week_range in ranges:
            week = existing.pop(week_range.index, None)
            if week is None:
                iteration.weeks.append(
                    IterationWeek(
                        week_index=week_range.index,
                        week_start=week_range.start,
                        week_end=week_range.end,
                    )
                )
            elif (week.week_start, week.week_end) != (week_range.start, week_range.end):
                week.week_start = week_range.start
                week.week_end = week_range.end
                moved.append(week)

        for surplus in existing.values():
            iteration.weeks.remove(surplus)
        if existing:
            logger.debug(
                f"Removed {len(existing)} surplus week(s) from iteration {iteration.id}"
            )
        return moved

    def _members_with_weekly_rows(self, iteration) -> set:
        from app.models import IterationWeek, WeeklyAvailability

        rows = (
            WeeklyAvailability.query.join(IterationWeek)
            .filter(IterationWeek.iteration_id == iteration.id)
            .with_entities(WeeklyAvailability.team_member_id)
            .distinct()
        )
        return {member_id for (member_id,) in rows}
