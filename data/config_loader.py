"""Load projects, teams and members from JSON configuration."""

import json
import logging
from datetime import datetime
from pathlib import Path

from capacity.availability import validate_percent
from capacity.errors import ValidationError
from data.services.base import transaction
from data.services.capacity_service import normalize_work_mode

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "teams.json"


def load_roster_config(config_path: str | Path | None = None) -> dict:
    """Load the roster configuration from a JSON file.

    Args:
        config_path: Path to the JSON config file. Defaults to config/teams.json.

    Returns:
        Dictionary with a 'projects' list. Empty when the file does not exist.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    config_path = Path(config_path)

    if not config_path.exists():
        logger.warning(f"Roster config {config_path} not found, nothing to load")
        return {"projects": []}

    with open(config_path) as f:
        try:
            config = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid roster config {config_path}: {e}") from e

    if not isinstance(config.get("projects", []), list):
        raise ValidationError("Roster config 'projects' must be a list")
    return config


def sync_roster_from_config(config_path: str | Path | None = None) -> dict:
    """Sync projects, teams and members from the config file to the database.

    Projects are matched by key, teams by name within their project and
    members by email (or display name when no email is given) within their
    team. Existing rows are updated; nothing is deleted.

    Args:
        config_path: Path to the JSON config file.

    Returns:
        Statistics about the sync operation.
    """
    from app.models import Project, Team, TeamMember, Util

    config = load_roster_config(config_path)
    stats = {
        "projects_created": 0,
        "projects_updated": 0,
        "teams_created": 0,
        "teams_updated": 0,
        "members_created": 0,
        "members_updated": 0,
    }

    with transaction() as session:
        for project_data in config.get("projects", []):
            key = _required(project_data, "key", "project")
            project = Project.query.filter_by(key=key).first()
            if not project:
                project = Project(key=key)
                session.add(project)
                stats["projects_created"] += 1
            else:
                stats["projects_updated"] += 1
            project.name = project_data.get("name") or key
            project.description = project_data.get("description")
            if project_data.get("weights") is not None:
                project.set_weights(project_data["weights"])
            session.flush()

            for team_data in project_data.get("teams", []):
                name = _required(team_data, "name", f"team in project {key}")
                team = project.teams.filter_by(name=name).first()
                if not team:
                    team = Team(project=project, name=name)
                    session.add(team)
                    stats["teams_created"] += 1
                else:
                    stats["teams_updated"] += 1
                team.description = team_data.get("description")
                session.flush()

                for member_data in team_data.get("members", []):
                    created = _sync_member(session, team, member_data, TeamMember)
                    stats["members_created" if created else "members_updated"] += 1

        Util.set_last_roster_sync(datetime.utcnow())

    logger.info(
        f"Roster sync: {stats['projects_created']} project(s), "
        f"{stats['teams_created']} team(s), {stats['members_created']} member(s) created"
    )
    return stats


def _sync_member(session, team, member_data: dict, member_model) -> bool:
    display_name = _required(member_data, "display_name", f"member of team {team.name}")
    email = member_data.get("email")

    query = team.members
    if email:
        member = query.filter_by(email=email).first()
    else:
        member = query.filter_by(display_name=display_name).first()

    created = member is None
    if created:
        member = member_model(team=team, display_name=display_name)
        session.add(member)

    member.display_name = display_name
    member.role = member_data.get("role")
    member.email = email
    member.work_mode = normalize_work_mode(member_data.get("work_mode") or "office")
    member.default_availability_percent = validate_percent(
        member_data.get("default_availability_percent", 100),
        "default_availability_percent",
    )
    return created


def _required(data: dict, field: str, what: str):
    value = data.get(field) if isinstance(data, dict) else None
    if not value:
        raise ValidationError(f"Missing '{field}' for {what}")
    return value
