"""Weekly availability and daily attendance persistence."""

import logging

from capacity.availability import (
    AttendanceStatus,
    aggregate_attendance,
    attendance_grid,
    validate_percent,
)
from capacity.effective import CAPACITY_PLACES, effective_capacity_days, quantize
from capacity.errors import ValidationError
from capacity.weeks import business_days, day_name, is_business_day, parse_date
from data.services.base import get_or_raise, transaction
from data.services.capacity_service import CapacityService

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Maintains member x week availability rows and their attendance grids.

    Every weekly row carries a complete business-day attendance grid. Each
    write recomputes the row (days present, calculated percent, weekly
    effective capacity) and then carries the result into the member's
    iteration capacity, all within one transaction.
    """

    def __init__(self, capacity_service: CapacityService | None = None):
        self.capacity = capacity_service or CapacityService()

    def save_attendance(self, team_member_id: int, week_id: int, entries: list):
        """
        Upsert a member's attendance for a week.

        Args:
            entries: Dicts with "date", "status" ("P"/"A") and optional "note".
                Business days not listed keep their stored status, or default
                to Present on a new row.

        Returns:
            The WeeklyAvailability row.
        """
        statuses, notes = self._parse_entries(entries)

        with transaction():
            member, week = self._load_pair(team_member_id, week_id)
            row = self._find_row(member.id, week.id)
            if row is None:
                row = self._new_row(member, week)
            self._apply_grid(row, statuses, notes)
            self._recompute_row(row)
            self.capacity.sync_from_weekly(week.iteration, member)

        logger.info(
            f"Saved attendance for member {team_member_id} week {week_id}: "
            f"{row.days_present}/{row.days_total} days, {row.availability_percent}%"
        )
        return row

    def set_day_status(self, team_member_id: int, week_id: int, day, status=None):
        """Toggle one day's status, or set it when ``status`` is given.

        Only that day's attendance record changes; the week is recomputed.
        """
        day = parse_date(day)

        with transaction():
            member, week = self._load_pair(team_member_id, week_id)
            row = self._get_or_create_row(member, week)

            record = next((a for a in row.attendance if a.date == day), None)
            if record is None:
                raise ValidationError(
                    f"{day.isoformat()} is not a business day of week "
                    f"{week.week_index} ({week.week_start.isoformat()}.."
                    f"{week.week_end.isoformat()})"
                )

            current = AttendanceStatus.parse(record.status)
            new_status = current.toggled() if status is None else AttendanceStatus.parse(status)
            record.status = new_status.value

            self._recompute_row(row)
            self.capacity.sync_from_weekly(week.iteration, member)

        logger.info(
            f"Set {day.isoformat()} to {new_status.value} for member "
            f"{team_member_id} week {week_id}"
        )
        return row

    def set_override(self, team_member_id: int, week_id: int, percent, notes=None):
        """Store a planner override next to the calculated percent."""
        value = validate_percent(percent, "override_percent")

        with transaction():
            member, week = self._load_pair(team_member_id, week_id)
            row = self._get_or_create_row(member, week)
            row.override_percent = value
            if notes is not None:
                row.notes = notes
            self._recompute_row(row)
            self.capacity.sync_from_weekly(week.iteration, member)

        logger.info(
            f"Override {value}% for member {team_member_id} week {week_id} "
            f"(calculated {row.availability_percent}%)"
        )
        return row

    def clear_override(self, team_member_id: int, week_id: int):
        """Drop the override so the calculated percent applies again."""
        with transaction():
            member, week = self._load_pair(team_member_id, week_id)
            row = self._find_row(member.id, week.id)
            if row is None or row.override_percent is None:
                return row
            row.override_percent = None
            self._recompute_row(row)
            self.capacity.sync_from_weekly(week.iteration, member)

        logger.info(f"Cleared override for member {team_member_id} week {week_id}")
        return row

    def save_week_cells(self, iteration_id: int, cells: list) -> list:
        """
        Bulk edit of the planner grid.

        Each cell is a dict with ``iteration_week_id`` and ``team_member_id``
        plus any of ``override_percent`` (``availability_percent`` is accepted
        as an alias; null clears the override) and ``notes``.
        """
        from app.models import Iteration, TeamMember

        rows = []
        with transaction():
            iteration = get_or_raise(Iteration, iteration_id, "Iteration")
            weeks = {week.id: week for week in iteration.weeks}
            touched = {}

            for cell in cells:
                if not isinstance(cell, dict):
                    raise ValidationError("Each cell must be an object")
                week = weeks.get(cell.get("iteration_week_id"))
                if week is None:
                    raise ValidationError(
                        f"Week {cell.get('iteration_week_id')} does not belong to "
                        f"iteration {iteration_id}"
                    )
                member = get_or_raise(TeamMember, cell.get("team_member_id"), "Team member")
                self._check_same_project(member, week)

                row = self._get_or_create_row(member, week)
                key = "override_percent" if "override_percent" in cell else "availability_percent"
                if key in cell:
                    value = cell[key]
                    row.override_percent = (
                        None if value is None else validate_percent(value, key)
                    )
                if "notes" in cell:
                    row.notes = cell["notes"]
                self._recompute_row(row)

                touched[member.id] = member
                rows.append(row)

            for member in touched.values():
                self.capacity.sync_from_weekly(iteration, member)

        logger.info(f"Saved {len(rows)} availability cell(s) for iteration {iteration_id}")
        return rows

    def iteration_grid(self, iteration_id: int) -> dict:
        """Member x week matrix of calculated, override and effective percents."""
        from app.models import Iteration, IterationWeek, WeeklyAvailability

        iteration = get_or_raise(Iteration, iteration_id, "Iteration")
        rows = {
            (row.team_member_id, row.iteration_week_id): row
            for row in WeeklyAvailability.query.join(IterationWeek).filter(
                IterationWeek.iteration_id == iteration.id
            )
        }

        members = {m.id: m for m in iteration.team.members}
        for entry in iteration.capacity_members:
            members.setdefault(entry.team_member_id, entry.team_member)
        for row in rows.values():
            members.setdefault(row.team_member_id, row.team_member)

        grid = []
        for member in sorted(members.values(), key=lambda m: m.display_name):
            cells = []
            for week in iteration.weeks:
                row = rows.get((member.id, week.id))
                if row is None:
                    cells.append(self._default_cell(member, week))
                else:
                    cells.append({**row.to_dict(), "recorded": True})
            grid.append(
                {
                    "team_member_id": member.id,
                    "display_name": member.display_name,
                    "work_mode": member.work_mode,
                    "weeks": cells,
                }
            )

        return {
            "iteration_id": iteration.id,
            "weeks": [week.to_dict() for week in iteration.weeks],
            "members": grid,
        }

    def get_attendance(self, team_member_id: int, week_id: int) -> dict:
        """Attendance grid for one member and week; all-Present when unrecorded."""
        member, week = self._load_pair(team_member_id, week_id)
        row = self._find_row(member.id, week.id)
        if row is None:
            days = [
                {
                    "id": None,
                    "date": day.isoformat(),
                    "day_of_week": day_name(day),
                    "status": AttendanceStatus.PRESENT.value,
                    "note": None,
                }
                for day in business_days(week.week_start, week.week_end)
            ]
            availability = None
        else:
            days = [record.to_dict() for record in row.attendance]
            availability = row.to_dict()

        return {
            "team_member_id": member.id,
            "week": week.to_dict(),
            "availability": availability,
            "days": days,
        }

    def refresh_week(self, week) -> set:
        """Re-derive grids of every row in a week after its dates moved.

        Statuses of days still inside the week are kept; new business days
        are Present. Does not commit.

        Returns:
            Ids of the members whose rows were refreshed.
        """
        member_ids = set()
        for row in week.availability:
            self._apply_grid(row, {}, {})
            self._recompute_row(row)
            member_ids.add(row.team_member_id)
        if member_ids:
            logger.debug(
                f"Refreshed {len(member_ids)} availability row(s) for week {week.id}"
            )
        return member_ids

    def _load_pair(self, team_member_id, week_id):
        from app.models import IterationWeek, TeamMember

        member = get_or_raise(TeamMember, team_member_id, "Team member")
        week = get_or_raise(IterationWeek, week_id, "Iteration week")
        self._check_same_project(member, week)
        return member, week

    def _check_same_project(self, member, week) -> None:
        if member.team.project_id != week.iteration.project_id:
            raise ValidationError(
                f"Team member {member.id} does not belong to project "
                f"{week.iteration.project_id}"
            )

    def _find_row(self, team_member_id: int, week_id: int):
        from app.models import WeeklyAvailability

        return WeeklyAvailability.query.filter_by(
            team_member_id=team_member_id, iteration_week_id=week_id
        ).first()

    def _new_row(self, member, week):
        from app.extensions import db
        from app.models import WeeklyAvailability

        row = WeeklyAvailability(week=week, team_member=member)
        db.session.add(row)
        return row

    def _get_or_create_row(self, member, week):
        row = self._find_row(member.id, week.id)
        if row is None:
            row = self._new_row(member, week)
            self._apply_grid(row, {}, {})
        return row

    def _apply_grid(self, row, statuses: dict, notes: dict) -> None:
        """Bring the row's attendance records in line with its week.

        Stored statuses inside the week are the base, ``statuses`` are laid on
        top and any remaining business day is Present. Records for dates no
        longer in the week are removed.
        """
        from app.models import DailyAttendance

        week = row.week
        existing = {record.date: record for record in row.attendance}
        base = {
            day: record.status
            for day, record in existing.items()
            if week.week_start <= day <= week.week_end and is_business_day(day)
        }
        base.update(statuses)
        grid = attendance_grid(week.week_start, week.week_end, base)

        for day, status in grid.items():
            record = existing.pop(day, None)
            if record is None:
                record = DailyAttendance(date=day, day_of_week=day_name(day))
                row.attendance.append(record)
            record.status = status.value
            if day in notes:
                record.note = notes[day]

        for stale in existing.values():
            row.attendance.remove(stale)

    def _recompute_row(self, row) -> None:
        summary = aggregate_attendance(record.status for record in row.attendance)
        row.days_present = summary.days_present
        row.days_total = summary.days_total
        row.availability_percent = summary.calculated_percent

        iteration = row.week.iteration
        value = effective_capacity_days(
            row.days_total,
            0,
            row.effective_percent,
            self.capacity.work_mode_for(iteration, row.team_member),
            self.capacity.weights_for(iteration.project),
        )
        row.effective_capacity_days = quantize(value, CAPACITY_PLACES)
        logger.debug(
            f"Week {row.iteration_week_id} member {row.team_member_id}: "
            f"{row.days_present}/{row.days_total} present, "
            f"effective {row.effective_percent}%"
        )

    def _parse_entries(self, entries) -> tuple[dict, dict]:
        if not isinstance(entries, list):
            raise ValidationError("entries must be a list")

        statuses = {}
        notes = {}
        for entry in entries:
            if not isinstance(entry, dict):
                raise ValidationError("Each attendance entry must be an object")
            day = parse_date(entry.get("date"))
            if day in statuses:
                raise ValidationError(f"Duplicate attendance entry for {day.isoformat()}")
            statuses[day] = AttendanceStatus.parse(entry.get("status"))
            if "note" in entry:
                notes[day] = entry["note"]
        return statuses, notes

    def _default_cell(self, member, week) -> dict:
        percent = member.default_availability_percent
        return {
            "id": None,
            "iteration_week_id": week.id,
            "team_member_id": member.id,
            "calculated_percent": percent,
            "override_percent": None,
            "availability_percent": percent,
            "is_override": False,
            "days_present": None,
            "days_total": len(business_days(week.week_start, week.week_end)),
            "effective_capacity_days": None,
            "notes": None,
            "recorded": False,
        }
