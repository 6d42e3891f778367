"""Iteration-scoped member capacity snapshot."""

from app.extensions import db


class CapacityMember(db.Model):
    """A member's capacity inputs for one iteration.

    ``effective_capacity_days`` is derived from the other columns and is
    recomputed by CapacityService on every write.
    """

    __tablename__ = "team_capacity_members"
    __table_args__ = (
        db.UniqueConstraint("iteration_id", "team_member_id"),
        db.CheckConstraint(
            "availability_percent >= 0 AND availability_percent <= 100",
            name="ck_capacity_member_availability",
        ),
        db.CheckConstraint("leaves >= 0", name="ck_capacity_member_leaves"),
    )

    id = db.Column(db.Integer, primary_key=True)
    iteration_id = db.Column(
        db.Integer,
        db.ForeignKey("iterations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    team_member_id = db.Column(
        db.Integer,
        db.ForeignKey("team_members.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    leaves = db.Column(db.Numeric(6, 2), nullable=False, default=0)
    availability_percent = db.Column(db.Numeric(5, 2), nullable=False, default=100)
    work_mode = db.Column(db.String(50), nullable=False, default="office")
    effective_capacity_days = db.Column(db.Numeric(12, 4), nullable=False)
    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime, server_default=db.func.now(), onupdate=db.func.now()
    )

    # Relationships
    iteration = db.relationship("Iteration", back_populates="capacity_members")
    team_member = db.relationship("TeamMember", back_populates="capacity_entries")

    def __repr__(self) -> str:
        return (
            f"<CapacityMember iteration={self.iteration_id} "
            f"member={self.team_member_id} {self.effective_capacity_days}>"
        )

    def to_dict(self) -> dict:
        member = self.team_member
        return {
            "id": self.id,
            "iteration_id": self.iteration_id,
            "team_member_id": self.team_member_id,
            "member_name": member.display_name if member else None,
            "role": member.role if member else None,
            "team_id": member.team_id if member else None,
            "leaves": float(self.leaves),
            "availability_percent": float(self.availability_percent),
            "work_mode": self.work_mode,
            "effective_capacity_days": float(self.effective_capacity_days),
        }
