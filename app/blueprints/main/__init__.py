"""Main blueprint - overview, roster sync and health check."""

import logging

from flask import Blueprint, current_app, jsonify

logger = logging.getLogger(__name__)

bp = Blueprint("main", __name__)


@bp.route("/")
def index():
    """Overview counts."""
    from app.models import CapacityMember, Iteration, Project, Team, TeamMember, Util

    last_sync = Util.get_last_roster_sync()
    return jsonify(
        {
            "projects": Project.query.count(),
            "teams": Team.query.count(),
            "members": TeamMember.query.count(),
            "iterations": Iteration.query.count(),
            "capacity_entries": CapacityMember.query.count(),
            "last_roster_sync": last_sync.isoformat() if last_sync else None,
        }
    )


@bp.route("/sync", methods=["POST"])
def sync():
    """Sync projects, teams and members from the roster config file."""
    from app.models import Util
    from data.config_loader import sync_roster_from_config

    config_path = current_app.config.get("ROSTER_CONFIG_PATH")
    stats = sync_roster_from_config(config_path)
    logger.info(f"Roster sync from {config_path} complete")

    last_sync = Util.get_last_roster_sync()
    return jsonify(
        {
            "stats": stats,
            "last_roster_sync": last_sync.isoformat() if last_sync else None,
        }
    )


@bp.route("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok"}
