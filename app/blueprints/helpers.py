"""Request parsing shared by the JSON blueprints."""

from flask import request

from capacity.errors import ValidationError


def json_body() -> dict:
    """The request's JSON object, or ValidationError."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def required(data: dict, field: str):
    value = data.get(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field} is required")
    return value.strip() if isinstance(value, str) else value
