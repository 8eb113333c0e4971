"""
ROI metrics blueprint.

Endpoints:
  GET  /api/v1/roi          — every ROI record, keyed by resource key
  GET  /api/v1/roi/<key>    — one record with its formatted summary
  PUT  /api/v1/roi/<key>    — manual update (all five metrics, pre/post)
  POST /api/v1/roi/bulk     — JSON bulk update ({"updates": [{key, metrics}]})
"""

import logging

from flask import Blueprint, jsonify

from systems_hub.blueprints import get_hub, json_body, register_error_handlers
from systems_hub.services.roi_formatting import format_roi_card, summarize_record
from systems_hub.utils.errors import E, api_error

logger = logging.getLogger(__name__)

roi_bp = Blueprint("roi_bp", __name__, url_prefix="/api/v1/roi")

register_error_handlers(roi_bp, logger)


def _record_payload(key, record) -> dict:
    return {
        "key": key,
        "metrics": record.to_dict(),
        "summary": summarize_record(record),
        "card": format_roi_card(record),
    }


@roi_bp.route("", methods=["GET"])
def list_roi():
    snapshot = get_hub().roi_snapshot()
    return jsonify({
        "items": {key: record.to_dict() for key, record in snapshot.items()},
        "total": len(snapshot),
    }), 200


@roi_bp.route("/<key>", methods=["GET"])
def get_roi(key):
    record = get_hub().roi_record(key)
    return jsonify(_record_payload(key, record)), 200


@roi_bp.route("/<key>", methods=["PUT"])
def manual_update(key):
    data = json_body()
    if not isinstance(data, dict):
        return api_error(E.VALIDATION_REQUIRED, "JSON body with ROI metrics is required")
    metrics = data.get("metrics", data)
    record = get_hub().manual_roi_update(key, metrics)
    return jsonify(_record_payload(key, record)), 200


@roi_bp.route("/bulk", methods=["POST"])
def bulk_update():
    data = json_body()
    updates = data.get("updates") if isinstance(data, dict) else data
    if not isinstance(updates, list):
        return api_error(E.VALIDATION_REQUIRED, "'updates' list is required")
    count = get_hub().bulk_roi_update(updates)
    noun = "resource" if count == 1 else "resources"
    return jsonify({
        "status": "ok",
        "updated": count,
        "message": f"Updated ROI metrics for {count} {noun}.",
    }), 200
