"""
Health check blueprint.

Endpoints:
    GET /api/v1/health        — liveness with a summary of loaded data
    GET /api/v1/health/ready  — simple 200 for load balancers
"""

import logging

from flask import Blueprint, current_app, jsonify

from systems_hub.blueprints import get_hub

logger = logging.getLogger(__name__)

health_bp = Blueprint("health_bp", __name__, url_prefix="/api/v1/health")


@health_bp.route("", methods=["GET"])
def live():
    """Liveness check with a summary of the in-memory state."""
    hub = get_hub()
    return jsonify({
        "status": "ok",
        "app": "Systems Hub",
        "testing": current_app.testing,
        "sources": {
            "clients": len(hub.catalog.clients),
            "projects": len(hub.catalog.projects),
        },
        "overrides": len(hub.overrides),
        "roi_records": len(hub.roi),
    }), 200


@health_bp.route("/ready", methods=["GET"])
def ready():
    """Readiness check: always 200 if the app is running."""
    return jsonify({"status": "ok"}), 200
