"""Capacity blueprint - iterations, weekly availability and capacity rollups."""

from flask import Blueprint, jsonify, request

from app.blueprints.helpers import json_body, required
from capacity.errors import ValidationError
from capacity.weeks import parse_date
from data.services import AvailabilityService, CapacityService, IterationService

bp = Blueprint("capacity", __name__)


def _services():
    capacity = CapacityService()
    availability = AvailabilityService(capacity)
    return capacity, availability, IterationService(capacity, availability)


# Iterations


@bp.route("/projects/<int:project_id>/iterations")
def list_iterations(project_id: int):
    _, _, iterations = _services()
    return jsonify([i.to_dict() for i in iterations.list_iterations(project_id)])


@bp.route("/projects/<int:project_id>/iterations", methods=["POST"])
def create_iteration(project_id: int):
    """Create an iteration; its weeks are generated from the date range."""
    data = json_body()
    _, _, iterations = _services()
    iteration = iterations.create_iteration(
        project_id=project_id,
        team_id=required(data, "team_id"),
        name=required(data, "name"),
        start_date=required(data, "start_date"),
        end_date=required(data, "end_date"),
        working_days=data.get("working_days"),
        weeks_count=data.get("weeks_count"),
        kind=data.get("type") or data.get("kind") or "iteration",
    )
    return jsonify(iteration.to_dict(include_weeks=True)), 201


@bp.route("/iterations/<int:iteration_id>")
def get_iteration(iteration_id: int):
    _, _, iterations = _services()
    return jsonify(iterations.get_iteration(iteration_id).to_dict(include_weeks=True))


@bp.route("/iterations/<int:iteration_id>", methods=["PUT"])
def update_iteration(iteration_id: int):
    """Update name, type, dates or working days."""
    _, _, iterations = _services()
    iteration = iterations.update_iteration(iteration_id, **json_body())
    return jsonify(iteration.to_dict(include_weeks=True))


@bp.route("/iterations/<int:iteration_id>", methods=["DELETE"])
def delete_iteration(iteration_id: int):
    _, _, iterations = _services()
    iterations.delete_iteration(iteration_id)
    return "", 204


@bp.route("/iterations/<int:iteration_id>/weeks")
def list_weeks(iteration_id: int):
    _, _, iterations = _services()
    iteration = iterations.get_iteration(iteration_id)
    return jsonify([w.to_dict() for w in iteration.weeks])


@bp.route("/weeks/preview", methods=["POST"])
def preview_weeks():
    """Weeks a date range would generate, without saving anything."""
    data = json_body()
    _, _, iterations = _services()
    weeks = iterations.preview_weeks(
        required(data, "start_date"),
        required(data, "end_date"),
        data.get("weeks_count"),
    )
    return jsonify({"weeks_count": len(weeks), "weeks": [w.to_dict() for w in weeks]})


# Member capacity


@bp.route("/iterations/<int:iteration_id>/members")
def list_capacity_members(iteration_id: int):
    capacity, _, _ = _services()
    return jsonify([e.to_dict() for e in capacity.list_members(iteration_id)])


@bp.route("/iterations/<int:iteration_id>/members/<int:member_id>", methods=["PUT"])
def upsert_capacity_member(iteration_id: int, member_id: int):
    """Create or update a member's leaves, availability and work mode."""
    data = json_body()
    capacity, _, _ = _services()
    entry = capacity.upsert_member_capacity(
        iteration_id,
        member_id,
        leaves=data.get("leaves"),
        availability_percent=data.get("availability_percent"),
        work_mode=data.get("work_mode"),
    )
    return jsonify(entry.to_dict())


@bp.route("/iterations/<int:iteration_id>/members/<int:member_id>", methods=["DELETE"])
def remove_capacity_member(iteration_id: int, member_id: int):
    capacity, _, _ = _services()
    capacity.remove_member(iteration_id, member_id)
    return "", 204


# Weekly availability


@bp.route("/iterations/<int:iteration_id>/availability")
def availability_grid(iteration_id: int):
    """Member x week availability grid."""
    _, availability, _ = _services()
    return jsonify(availability.iteration_grid(iteration_id))


@bp.route("/iterations/<int:iteration_id>/availability", methods=["POST"])
def save_availability_cells(iteration_id: int):
    """Bulk edit of grid cells: {"cells": [...]}."""
    cells = json_body().get("cells")
    if not isinstance(cells, list):
        raise ValidationError("cells must be a list")
    _, availability, _ = _services()
    rows = availability.save_week_cells(iteration_id, cells)
    return jsonify([row.to_dict() for row in rows])


@bp.route("/members/<int:member_id>/weeks/<int:week_id>/attendance")
def get_attendance(member_id: int, week_id: int):
    _, availability, _ = _services()
    return jsonify(availability.get_attendance(member_id, week_id))


@bp.route("/members/<int:member_id>/weeks/<int:week_id>/attendance", methods=["POST"])
def save_attendance(member_id: int, week_id: int):
    """Save a week of attendance: {"entries": [{"date", "status", "note"}]}."""
    entries = json_body().get("entries")
    _, availability, _ = _services()
    availability.save_attendance(member_id, week_id, entries)
    return jsonify(availability.get_attendance(member_id, week_id))


@bp.route(
    "/members/<int:member_id>/weeks/<int:week_id>/attendance/<day>",
    methods=["PATCH"],
)
def set_day_status(member_id: int, week_id: int, day: str):
    """Toggle one day, or set it with {"status": "P"|"A"}."""
    data = request.get_json(silent=True) or {}
    _, availability, _ = _services()
    row = availability.set_day_status(
        member_id, week_id, parse_date(day), data.get("status")
    )
    return jsonify(row.to_dict())


@bp.route("/members/<int:member_id>/weeks/<int:week_id>/override", methods=["PUT"])
def set_override(member_id: int, week_id: int):
    """Set a weekly override: {"override_percent": 0..100, "notes": ...}."""
    data = json_body()
    _, availability, _ = _services()
    row = availability.set_override(
        member_id,
        week_id,
        required(data, "override_percent"),
        notes=data.get("notes"),
    )
    return jsonify(row.to_dict())


@bp.route("/members/<int:member_id>/weeks/<int:week_id>/override", methods=["DELETE"])
def clear_override(member_id: int, week_id: int):
    _, availability, _ = _services()
    availability.clear_override(member_id, week_id)
    return "", 204


# Rollups


@bp.route("/iterations/<int:iteration_id>/summary")
def iteration_summary(iteration_id: int):
    capacity, _, _ = _services()
    return jsonify(capacity.iteration_summary(iteration_id).to_dict())


@bp.route("/projects/<int:project_id>/summary")
def project_summary(project_id: int):
    capacity, _, _ = _services()
    return jsonify(capacity.project_summary(project_id))


@bp.route("/stats")
def stats():
    capacity, _, _ = _services()
    return jsonify(capacity.global_stats())
