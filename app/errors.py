"""JSON error responses for domain and persistence errors."""

import logging

from flask import Flask, jsonify
from sqlalchemy.exc import IntegrityError

from capacity.errors import CapacityError

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask) -> None:
    """Map domain exceptions to {"error": ...} responses."""

    @app.errorhandler(CapacityError)
    def handle_capacity_error(error: CapacityError):
        if error.status_code >= 500:
            logger.error(f"Capacity error: {error}")
        return jsonify({"error": str(error)}), error.status_code

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error: IntegrityError):
        logger.warning(f"Integrity error: {error.orig}")
        return jsonify({"error": "Conflicts with an existing record"}), 409

    @app.errorhandler(400)
    def handle_bad_request(error):
        return jsonify({"error": "Malformed request"}), 400

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return jsonify({"error": "Method not allowed"}), 405
