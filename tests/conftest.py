"""Pytest fixtures for capacity planner tests."""

from datetime import date
from types import SimpleNamespace

import pytest
from app import create_app
from app.extensions import db as _db


@pytest.fixture(scope="session")
def app():
    """Create application for testing."""
    app = create_app("testing")
    return app


@pytest.fixture(scope="function")
def db(app):
    """Fresh schema for every test."""
    with app.app_context():
        _db.drop_all()
        _db.create_all()
        yield _db
        _db.session.remove()


@pytest.fixture
def client(app, db):
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """Create a test CLI runner."""
    return app.test_cli_runner()


@pytest.fixture
def roster(db):
    """One project with a team of two members and an unrelated project."""
    from app.models import Project, Team, TeamMember

    project = Project(key="PLAT", name="Platform")
    team = Team(project=project, name="Core")
    alice = TeamMember(team=team, display_name="Alice", work_mode="office")
    bob = TeamMember(team=team, display_name="Bob", work_mode="hybrid")

    other_project = Project(key="MOB", name="Mobile")
    other_team = Team(project=other_project, name="Apps")
    carol = TeamMember(team=other_team, display_name="Carol", work_mode="wfh")

    db.session.add_all([project, team, alice, bob, other_project, other_team, carol])
    db.session.commit()

    return SimpleNamespace(
        project=project,
        team=team,
        alice=alice,
        bob=bob,
        other_project=other_project,
        other_team=other_team,
        carol=carol,
    )


@pytest.fixture
def services():
    from data.services import AvailabilityService, CapacityService, IterationService

    capacity = CapacityService()
    availability = AvailabilityService(capacity)
    return SimpleNamespace(
        capacity=capacity,
        availability=availability,
        iterations=IterationService(capacity, availability),
    )


@pytest.fixture
def one_week_iteration(roster, services):
    """Monday 2024-01-01 to Friday 2024-01-05: one week, five working days."""
    return services.iterations.create_iteration(
        roster.project.id,
        roster.team.id,
        "Sprint 1",
        date(2024, 1, 1),
        date(2024, 1, 5),
    )


@pytest.fixture
def two_week_iteration(roster, services):
    """2024-01-01 to 2024-01-14: two full weeks, ten working days."""
    return services.iterations.create_iteration(
        roster.project.id,
        roster.team.id,
        "Sprint 2",
        date(2024, 1, 1),
        date(2024, 1, 14),
    )
