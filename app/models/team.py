"""Team and team member models."""

from app.extensions import db


class Team(db.Model):
    """Team entity - belongs to a project, owns members and iterations."""

    __tablename__ = "teams"
    __table_args__ = (db.UniqueConstraint("project_id", "name"),)

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer, db.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    name = db.Column(db.String(255), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime, server_default=db.func.now(), onupdate=db.func.now()
    )

    # Relationships
    project = db.relationship("Project", back_populates="teams")
    members = db.relationship(
        "TeamMember",
        back_populates="team",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )
    iterations = db.relationship(
        "Iteration",
        back_populates="team",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Team {self.name}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "name": self.name,
            "description": self.description,
            "member_count": self.members.count(),
        }


class TeamMember(db.Model):
    """A person on a team. Referenced, not owned, by capacity rows."""

    __tablename__ = "team_members"
    __table_args__ = (
        db.CheckConstraint(
            "default_availability_percent >= 0 AND default_availability_percent <= 100",
            name="ck_team_member_default_availability",
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    team_id = db.Column(
        db.Integer, db.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False
    )
    display_name = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(100), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    work_mode = db.Column(db.String(50), nullable=False, default="office")
    default_availability_percent = db.Column(db.Integer, nullable=False, default=100)
    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime, server_default=db.func.now(), onupdate=db.func.now()
    )

    # Relationships
    team = db.relationship("Team", back_populates="members")
    capacity_entries = db.relationship(
        "CapacityMember", back_populates="team_member", cascade="all, delete-orphan"
    )
    weekly_availability = db.relationship(
        "WeeklyAvailability",
        back_populates="team_member",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<TeamMember {self.display_name}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "team_id": self.team_id,
            "display_name": self.display_name,
            "role": self.role,
            "email": self.email,
            "work_mode": self.work_mode,
            "default_availability_percent": self.default_availability_percent,
        }
