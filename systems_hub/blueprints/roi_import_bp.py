"""
ROI Import Blueprint

CSV-based bulk ROI import endpoints.

Endpoints:
  GET  /api/v1/roi/import/template   — Download CSV template
  POST /api/v1/roi/import/validate   — Validate CSV without importing
  POST /api/v1/roi/import            — Upload & import CSV

The CSV may arrive as a multipart upload (field "file"), as JSON
{"csv_content": "..."} or as the raw request body.
"""

import logging

from flask import Blueprint, Response, jsonify, request

from systems_hub.blueprints import get_hub, json_body, register_error_handlers
from systems_hub.utils.errors import E, api_error

logger = logging.getLogger(__name__)

roi_import_bp = Blueprint("roi_import_bp", __name__, url_prefix="/api/v1/roi/import")

register_error_handlers(roi_import_bp, logger)


# ═══════════════════════════════════════════════════════════════
# Template Download
# ═══════════════════════════════════════════════════════════════
@roi_import_bp.route("/template", methods=["GET"])
def download_template():
    """Download a CSV template prefilled with current ROI records."""
    csv_content = get_hub().roi_template()
    return Response(
        csv_content,
        mimetype="text/csv",
        headers={"Content-Disposition": "attachment; filename=roi_import_template.csv"},
    )


# ═══════════════════════════════════════════════════════════════
# Validate (dry run)
# ═══════════════════════════════════════════════════════════════
@roi_import_bp.route("/validate", methods=["POST"])
def validate_csv():
    """Validate a CSV file without importing — dry run."""
    file_content = _extract_file_content()
    if file_content is None:
        return api_error(E.VALIDATION_REQUIRED, "CSV file is required (file upload or raw body)")

    result = get_hub().validate_roi_import(file_content)
    body = result.to_dict()
    body["rows"] = [
        {"line": row.line_number, "resourceKey": row.resource_key}
        for row in result.rows
    ]
    return jsonify(body), 200 if result.ok else 400


# ═══════════════════════════════════════════════════════════════
# Import
# ═══════════════════════════════════════════════════════════════
@roi_import_bp.route("", methods=["POST"])
def import_csv():
    """Upload and import a CSV file of ROI metrics."""
    file_content = _extract_file_content()
    if file_content is None:
        return api_error(E.VALIDATION_REQUIRED, "CSV file is required (file upload or raw body)")

    result = get_hub().import_roi(file_content)
    if not result.ok:
        return api_error(E.IMPORT_REJECTED, result.message, details=result.to_dict())
    return jsonify(result.to_dict()), 200


# ═══════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════
def _extract_file_content() -> str | bytes | None:
    """Extract CSV file content from multipart upload, JSON or raw body."""
    # Multipart file upload
    if request.files:
        file = request.files.get("file")
        if file:
            return file.read()

    # JSON body with csv_content field
    data = json_body()
    if isinstance(data, dict) and "csv_content" in data:
        return data["csv_content"] or ""

    # Raw body
    if request.data:
        return request.data

    return None
