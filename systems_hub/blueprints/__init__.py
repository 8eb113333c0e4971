"""
Systems Hub
Blueprint registry and shared blueprint helpers.
"""

import logging

from flask import current_app, request
from werkzeug.exceptions import HTTPException

from systems_hub.core.exceptions import ConflictError, NotFoundError, ValidationError
from systems_hub.utils.errors import E, api_error

HUB_EXTENSION = "solutions_hub"


def get_hub():
    """The SolutionsHub owned by the current app."""
    return current_app.extensions[HUB_EXTENSION]


def json_body() -> dict | list | None:
    """Parsed JSON body, or None when the body is missing or not JSON."""
    return request.get_json(silent=True)


def register_error_handlers(bp, logger: logging.Logger):
    """Map the hub exception hierarchy to standard JSON error responses."""

    @bp.errorhandler(NotFoundError)
    def _handle_not_found(error: NotFoundError):
        return api_error(E.NOT_FOUND, str(error))

    @bp.errorhandler(ValidationError)
    def _handle_validation(error: ValidationError):
        return api_error(E.VALIDATION_CONSTRAINT, str(error), details=error.details)

    @bp.errorhandler(ConflictError)
    def _handle_conflict(error: ConflictError):
        return api_error(E.CONFLICT_DUPLICATE, str(error))

    @bp.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        if isinstance(error, HTTPException):
            return error
        logger.exception("Unexpected error in %s endpoint=%s", bp.name, request.endpoint)
        return api_error(E.INTERNAL, "Internal server error")
