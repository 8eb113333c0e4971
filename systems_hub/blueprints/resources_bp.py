"""
Resources blueprint — the composed tool/system catalog.

Endpoints:
  GET    /api/v1/resources              — list (filters: status, kind, q)
  GET    /api/v1/resources/options      — select-list entries for ROI forms
  GET    /api/v1/resources/<key>        — one resource with its ROI summary
  POST   /api/v1/resources              — create a custom tool
  PATCH  /api/v1/resources/<key>        — apply an edit (override patch)
  DELETE /api/v1/resources/<key>        — remove custom / revert edits
"""

import logging

from flask import Blueprint, jsonify, request

from systems_hub.blueprints import get_hub, json_body, register_error_handlers
from systems_hub.models.resource import STATUS_VALUES, ResourceKind
from systems_hub.services.roi_formatting import format_roi_card, summarize_record
from systems_hub.utils.errors import E, api_error

logger = logging.getLogger(__name__)

resources_bp = Blueprint("resources_bp", __name__, url_prefix="/api/v1/resources")

register_error_handlers(resources_bp, logger)

_KINDS = frozenset(k.value for k in ResourceKind)


def _with_roi(resource, *, detailed=False) -> dict:
    hub = get_hub()
    data = resource.to_dict()
    record = hub.roi.get(resource.key)
    data["roi"] = format_roi_card(record)
    if detailed:
        data["roiSummary"] = summarize_record(record)
    return data


@resources_bp.route("", methods=["GET"])
def list_resources():
    status = request.args.get("status") or None
    kind = request.args.get("kind") or None
    q = request.args.get("q") or None
    if status and status not in STATUS_VALUES:
        return api_error(E.VALIDATION_INVALID, f"Unknown status '{status}'")
    if kind and kind not in _KINDS:
        return api_error(E.VALIDATION_INVALID, f"Unknown kind '{kind}'")

    items = get_hub().resources(status=status, kind=kind, q=q)
    return jsonify({"items": [_with_roi(r) for r in items], "total": len(items)}), 200


@resources_bp.route("/options", methods=["GET"])
def resource_options():
    return jsonify({"items": get_hub().options()}), 200


@resources_bp.route("/<key>", methods=["GET"])
def get_resource(key):
    hub = get_hub()
    resource = hub.resource(key)
    hub.roi_record(key)
    return jsonify(_with_roi(resource, detailed=True)), 200


@resources_bp.route("", methods=["POST"])
def create_resource():
    data = json_body()
    if not isinstance(data, dict):
        return api_error(E.VALIDATION_REQUIRED, "JSON body is required")
    resource = get_hub().create_resource(data)
    return jsonify(_with_roi(resource)), 201


@resources_bp.route("/<key>", methods=["PATCH"])
def update_resource(key):
    data = json_body()
    if not isinstance(data, dict) or not data:
        return api_error(E.VALIDATION_REQUIRED, "JSON body with at least one field is required")
    resource = get_hub().update_resource(key, data)
    return jsonify(_with_roi(resource)), 200


@resources_bp.route("/<key>", methods=["DELETE"])
def delete_resource(key):
    return jsonify(get_hub().delete_resource(key)), 200
