"""Project model."""

from app.extensions import db
from capacity.effective import CAPACITY_PLACES, ModeWeights, quantize
from capacity.errors import ValidationError

WEIGHTED_MODES = ("office", "wfh", "hybrid")


class Project(db.Model):
    """Project entity - owns teams and iterations, carries capacity weights."""

    __tablename__ = "projects"

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(50), unique=True, nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)

    # Work-mode weights; NULL falls back to the configured defaults
    office_weight = db.Column(db.Numeric(6, 4), nullable=True)
    wfh_weight = db.Column(db.Numeric(6, 4), nullable=True)
    hybrid_weight = db.Column(db.Numeric(6, 4), nullable=True)

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime, server_default=db.func.now(), onupdate=db.func.now()
    )

    # Relationships
    teams = db.relationship(
        "Team", back_populates="project", lazy="dynamic", cascade="all, delete-orphan"
    )
    iterations = db.relationship(
        "Iteration",
        back_populates="project",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Project {self.key}>"

    @property
    def weight_overrides(self) -> dict:
        """Configured weights keyed by work mode (None where unset)."""
        return {
            "office": self.office_weight,
            "wfh": self.wfh_weight,
            "hybrid": self.hybrid_weight,
        }

    def set_weights(self, weights: dict) -> None:
        """Set per-mode weights from a mapping; a null value clears the weight."""
        if not isinstance(weights, dict):
            raise ValidationError(f"Weights for project {self.key} must be an object")
        ModeWeights.from_mapping(weights)
        for mode in WEIGHTED_MODES:
            if mode in weights:
                value = weights[mode]
                setattr(
                    self,
                    f"{mode}_weight",
                    quantize(value, CAPACITY_PLACES) if value is not None else None,
                )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "key": self.key,
            "name": self.name,
            "description": self.description,
            "weights": {
                mode: float(weight) if weight is not None else None
                for mode, weight in self.weight_overrides.items()
            },
            "team_count": self.teams.count(),
        }
