"""API blueprint - REST API for projects, teams, members and metrics."""

import logging

from flask import Blueprint, jsonify, request

from app.blueprints.helpers import json_body, required
from capacity.availability import validate_percent
from data.services import get_or_raise, transaction
from data.services.capacity_service import normalize_work_mode

logger = logging.getLogger(__name__)

bp = Blueprint("api", __name__)


@bp.route("/projects")
def list_projects():
    """List all projects."""
    from app.models import Project

    projects = Project.query.order_by(Project.key).all()
    return jsonify([p.to_dict() for p in projects])


@bp.route("/projects", methods=["POST"])
def create_project():
    """Create a project, optionally with work-mode weights."""
    from app.models import Project

    data = json_body()
    key = required(data, "key")

    with transaction() as session:
        project = Project(
            key=key,
            name=data.get("name") or key,
            description=data.get("description"),
        )
        if data.get("weights") is not None:
            project.set_weights(data["weights"])
        session.add(project)
        session.flush()

    logger.info(f"Created project {project.key}")
    return jsonify(project.to_dict()), 201


@bp.route("/projects/<int:project_id>")
def get_project(project_id: int):
    """Get a project with its teams."""
    from app.models import Project, Team

    project = get_or_raise(Project, project_id, "Project")
    data = project.to_dict()
    data["teams"] = [t.to_dict() for t in project.teams.order_by(Team.name)]
    return jsonify(data)


@bp.route("/projects/<int:project_id>", methods=["PUT"])
def update_project(project_id: int):
    """Update name, description or weights of a project."""
    from app.models import Project

    data = json_body()
    with transaction():
        project = get_or_raise(Project, project_id, "Project")
        if "name" in data:
            project.name = required(data, "name")
        if "description" in data:
            project.description = data["description"]
        if "weights" in data:
            project.set_weights(data["weights"] or {})

    logger.info(f"Updated project {project.key}")
    return jsonify(project.to_dict())


@bp.route("/projects/<int:project_id>/teams")
def list_teams(project_id: int):
    """List the teams of a project."""
    from app.models import Project, Team

    project = get_or_raise(Project, project_id, "Project")
    return jsonify([t.to_dict() for t in project.teams.order_by(Team.name)])


@bp.route("/projects/<int:project_id>/teams", methods=["POST"])
def create_team(project_id: int):
    """Create a team in a project."""
    from app.models import Project, Team

    data = json_body()
    with transaction() as session:
        project = get_or_raise(Project, project_id, "Project")
        team = Team(
            project=project,
            name=required(data, "name"),
            description=data.get("description"),
        )
        session.add(team)
        session.flush()

    logger.info(f"Created team {team.name} in project {project.key}")
    return jsonify(team.to_dict()), 201


@bp.route("/teams/<int:team_id>", methods=["PUT"])
def update_team(team_id: int):
    from app.models import Team

    data = json_body()
    with transaction():
        team = get_or_raise(Team, team_id, "Team")
        if "name" in data:
            team.name = required(data, "name")
        if "description" in data:
            team.description = data["description"]

    return jsonify(team.to_dict())


@bp.route("/teams/<int:team_id>", methods=["DELETE"])
def delete_team(team_id: int):
    """Delete a team with its members and iterations."""
    from app.models import Team

    with transaction() as session:
        team = get_or_raise(Team, team_id, "Team")
        session.delete(team)

    logger.info(f"Deleted team {team_id}")
    return "", 204


@bp.route("/teams/<int:team_id>/members")
def list_members(team_id: int):
    """List the members of a team."""
    from app.models import Team, TeamMember

    team = get_or_raise(Team, team_id, "Team")
    members = team.members.order_by(TeamMember.display_name).all()
    return jsonify([m.to_dict() for m in members])


@bp.route("/teams/<int:team_id>/members", methods=["POST"])
def create_member(team_id: int):
    """Add a member to a team."""
    from app.models import Team, TeamMember

    data = json_body()
    with transaction() as session:
        team = get_or_raise(Team, team_id, "Team")
        member = TeamMember(team=team, display_name=required(data, "display_name"))
        _apply_member_fields(member, data)
        session.add(member)
        session.flush()

    logger.info(f"Added member {member.display_name} to team {team.name}")
    return jsonify(member.to_dict()), 201


@bp.route("/members/<int:member_id>", methods=["PUT"])
def update_member(member_id: int):
    """Update a member's details and defaults.

    Existing iteration capacity entries keep their own work mode and
    availability.
    """
    from app.models import TeamMember

    data = json_body()
    with transaction():
        member = get_or_raise(TeamMember, member_id, "Team member")
        if "display_name" in data:
            member.display_name = required(data, "display_name")
        _apply_member_fields(member, data)

    return jsonify(member.to_dict())


@bp.route("/members/<int:member_id>", methods=["DELETE"])
def delete_member(member_id: int):
    from app.models import TeamMember

    with transaction() as session:
        member = get_or_raise(TeamMember, member_id, "Team member")
        session.delete(member)

    logger.info(f"Deleted member {member_id}")
    return "", 204


@bp.route("/metrics")
def list_metrics():
    """List registered metrics, optionally filtered by ?category=."""
    from analytics.registry import AnalyticsRegistry

    AnalyticsRegistry.discover()
    return jsonify(AnalyticsRegistry.describe(request.args.get("category")))


@bp.route("/metrics/<metric_id>")
def compute_metric(metric_id: str):
    """Compute and return a metric result as JSON."""
    from analytics.registry import AnalyticsRegistry

    AnalyticsRegistry.discover()
    metric_class = AnalyticsRegistry.get(metric_id)

    if not metric_class:
        return jsonify({"error": "Metric not found"}), 404

    metric_instance = metric_class()

    # Get filter values from query params
    filters = {}
    for key, value in request.args.items():
        if value:
            filters[key] = value

    result = metric_instance.compute(**filters)

    return jsonify(
        {
            "metric_id": result.metric_id,
            "title": result.title,
            "computed_at": result.computed_at.isoformat(),
            "summary": result.summary,
            "chart_json": result.chart_json,
            "charts": result.charts,
            "error": result.error,
        }
    )


def _apply_member_fields(member, data: dict) -> None:
    if "role" in data:
        member.role = data["role"]
    if "email" in data:
        member.email = data["email"]
    if "work_mode" in data:
        member.work_mode = normalize_work_mode(data["work_mode"] or "")
    if "default_availability_percent" in data:
        member.default_availability_percent = validate_percent(
            data["default_availability_percent"], "default_availability_percent"
        )
