"""Application configuration classes."""

import os
from pathlib import Path


def _optional_float(name: str) -> float | None:
    value = os.environ.get(name)
    return float(value) if value else None


class Config:
    """Base configuration."""

    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-production")

    # Database
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        f"sqlite:///{Path(__file__).parent.parent / 'instance' / 'capacity.db'}",
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Roster seed file (projects, teams, members, weights)
    ROSTER_CONFIG_PATH = os.environ.get(
        "ROSTER_CONFIG_PATH",
        str(Path(__file__).parent.parent / "config" / "teams.json"),
    )

    # Work-mode weights applied when a project does not set its own.
    # Unset values fall back to office=1.0, wfh=0.9, hybrid=0.95.
    CAPACITY_DEFAULT_WEIGHTS = {
        "office": _optional_float("CAPACITY_OFFICE_WEIGHT"),
        "wfh": _optional_float("CAPACITY_WFH_WEIGHT"),
        "hybrid": _optional_float("CAPACITY_HYBRID_WEIGHT"),
    }


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    CAPACITY_DEFAULT_WEIGHTS = {}


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
