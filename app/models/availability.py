"""Weekly availability and daily attendance models."""

from app.extensions import db
from capacity.availability import Availability, resolve_availability


class WeeklyAvailability(db.Model):
    """Availability of one member for one iteration week.

    ``availability_percent`` is always the value calculated from daily
    attendance; ``override_percent`` is a planner's explicit value stored
    alongside it.
    """

    __tablename__ = "member_weekly_availability"
    __table_args__ = (
        db.UniqueConstraint("iteration_week_id", "team_member_id"),
        db.CheckConstraint(
            "availability_percent >= 0 AND availability_percent <= 100",
            name="ck_weekly_availability_percent",
        ),
        db.CheckConstraint(
            "override_percent IS NULL OR "
            "(override_percent >= 0 AND override_percent <= 100)",
            name="ck_weekly_override_percent",
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    iteration_week_id = db.Column(
        db.Integer,
        db.ForeignKey("iteration_weeks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    team_member_id = db.Column(
        db.Integer,
        db.ForeignKey("team_members.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    availability_percent = db.Column(db.Integer, nullable=False, default=100)
    override_percent = db.Column(db.Integer, nullable=True)
    days_present = db.Column(db.Integer, nullable=False, default=5)
    days_total = db.Column(db.Integer, nullable=False, default=5)
    effective_capacity_days = db.Column(db.Numeric(12, 4), nullable=False, default=0)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime, server_default=db.func.now(), onupdate=db.func.now()
    )

    # Relationships
    week = db.relationship("IterationWeek", back_populates="availability")
    team_member = db.relationship("TeamMember", back_populates="weekly_availability")
    attendance = db.relationship(
        "DailyAttendance",
        back_populates="weekly_availability",
        order_by="DailyAttendance.date",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return (
            f"<WeeklyAvailability week={self.iteration_week_id} "
            f"member={self.team_member_id} {self.effective_percent}%>"
        )

    @property
    def availability(self) -> Availability:
        return resolve_availability(self.availability_percent, self.override_percent)

    @property
    def effective_percent(self) -> int:
        return self.availability.value

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "iteration_week_id": self.iteration_week_id,
            "team_member_id": self.team_member_id,
            "calculated_percent": self.availability_percent,
            "override_percent": self.override_percent,
            "availability_percent": self.effective_percent,
            "is_override": self.availability.is_override,
            "days_present": self.days_present,
            "days_total": self.days_total,
            "effective_capacity_days": float(self.effective_capacity_days or 0),
            "notes": self.notes,
        }


class DailyAttendance(db.Model):
    """Present/absent status of a member on one business day of a week."""

    __tablename__ = "daily_attendance"
    __table_args__ = (
        db.UniqueConstraint("weekly_availability_id", "date"),
        db.CheckConstraint("status IN ('P', 'A')", name="ck_daily_attendance_status"),
    )

    id = db.Column(db.Integer, primary_key=True)
    weekly_availability_id = db.Column(
        db.Integer,
        db.ForeignKey("member_weekly_availability.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date = db.Column(db.Date, nullable=False)
    day_of_week = db.Column(db.String(10), nullable=False)
    status = db.Column(db.String(1), nullable=False, default="P")
    note = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime, server_default=db.func.now(), onupdate=db.func.now()
    )

    # Relationships
    weekly_availability = db.relationship(
        "WeeklyAvailability", back_populates="attendance"
    )

    def __repr__(self) -> str:
        return f"<DailyAttendance {self.date} {self.status}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "day_of_week": self.day_of_week,
            "status": self.status,
            "note": self.note,
        }
