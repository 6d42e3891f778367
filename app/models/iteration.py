"""Iteration and iteration week models."""

from app.extensions import db
from capacity.weeks import WeekRange


class Iteration(db.Model):
    """A dated planning period (iteration, sprint or cycle) for a team."""

    __tablename__ = "iterations"
    __table_args__ = (
        db.CheckConstraint("end_date > start_date", name="ck_iteration_date_range"),
    )

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer, db.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    team_id = db.Column(
        db.Integer, db.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False
    )
    name = db.Column(db.String(255), nullable=False)
    kind = db.Column(db.String(20), nullable=False, default="iteration")
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    weeks_count = db.Column(db.Integer, nullable=False)
    working_days = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime, server_default=db.func.now(), onupdate=db.func.now()
    )

    # Relationships
    project = db.relationship("Project", back_populates="iterations")
    team = db.relationship("Team", back_populates="iterations")
    weeks = db.relationship(
        "IterationWeek",
        back_populates="iteration",
        order_by="IterationWeek.week_index",
        cascade="all, delete-orphan",
    )
    capacity_members = db.relationship(
        "CapacityMember",
        back_populates="iteration",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Iteration {self.name}>"

    def to_dict(self, include_weeks: bool = False) -> dict:
        data = {
            "id": self.id,
            "project_id": self.project_id,
            "team_id": self.team_id,
            "team_name": self.team.name if self.team else None,
            "name": self.name,
            "type": self.kind,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "weeks_count": self.weeks_count,
            "working_days": self.working_days,
        }
        if include_weeks:
            data["weeks"] = [w.to_dict() for w in self.weeks]
        return data


class IterationWeek(db.Model):
    """One weekly bucket of an iteration."""

    __tablename__ = "iteration_weeks"
    __table_args__ = (db.UniqueConstraint("iteration_id", "week_index"),)

    id = db.Column(db.Integer, primary_key=True)
    iteration_id = db.Column(
        db.Integer, db.ForeignKey("iterations.id", ondelete="CASCADE"), nullable=False
    )
    week_index = db.Column(db.Integer, nullable=False)
    week_start = db.Column(db.Date, nullable=False)
    week_end = db.Column(db.Date, nullable=False)
    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime, server_default=db.func.now(), onupdate=db.func.now()
    )

    # Relationships
    iteration = db.relationship("Iteration", back_populates="weeks")
    availability = db.relationship(
        "WeeklyAvailability",
        back_populates="week",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<IterationWeek {self.iteration_id}#{self.week_index}>"

    @property
    def range(self) -> WeekRange:
        return WeekRange(index=self.week_index, start=self.week_start, end=self.week_end)

    def to_dict(self) -> dict:
        return {"id": self.id, "iteration_id": self.iteration_id, **self.range.to_dict()}
