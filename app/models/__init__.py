"""SQLAlchemy ORM models."""

from app.models.project import Project
from app.models.team import Team, TeamMember
from app.models.iteration import Iteration, IterationWeek
from app.models.availability import WeeklyAvailability, DailyAttendance
from app.models.capacity import CapacityMember
from app.models.util import Util

__all__ = [
    "Project",
    "Team",
    "TeamMember",
    "Iteration",
    "IterationWeek",
    "WeeklyAvailability",
    "DailyAttendance",
    "CapacityMember",
    "Util",
]
