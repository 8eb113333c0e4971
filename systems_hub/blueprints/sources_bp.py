"""
Source records blueprint.

The clients/projects collaborator pushes its current records here; every
push replaces the previous set wholesale and triggers resynthesis on the
next read. Overrides and ROI records are kept across pushes.

Endpoints:
  GET /api/v1/sources   — current client and project records
  PUT /api/v1/sources   — replace them ({"clients": [...], "projects": [...]})
"""

import logging

from flask import Blueprint, jsonify

from systems_hub.blueprints import get_hub, json_body, register_error_handlers
from systems_hub.services.source_catalog import SourceCatalogError
from systems_hub.utils.errors import E, api_error

logger = logging.getLogger(__name__)

sources_bp = Blueprint("sources_bp", __name__, url_prefix="/api/v1/sources")


@sources_bp.errorhandler(SourceCatalogError)
def _handle_source_error(error: SourceCatalogError):
    return api_error(E.VALIDATION_INVALID, error.message, status=error.status_code)


register_error_handlers(sources_bp, logger)


@sources_bp.route("", methods=["GET"])
def get_sources():
    return jsonify(get_hub().sources()), 200


@sources_bp.route("", methods=["PUT"])
def replace_sources():
    data = json_body()
    if data is None:
        return api_error(E.VALIDATION_REQUIRED, "JSON body with 'clients' and 'projects' is required")
    counts = get_hub().replace_sources(data)
    return jsonify({"status": "ok", **counts}), 200
