"""
Hub-wide exception hierarchy.

Services raise these types for programmatic misuse; blueprints register
handlers against them once and get consistent HTTP status codes everywhere.
Failures a user can trigger through a form or an import (bad CSV headers,
empty files) are reported as result objects instead and never raise.

Usage:
    from systems_hub.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="Resource", resource_id="tool-42")
    raise ValidationError("Unknown resource 'tool-x'", details={"resourceKey": "tool-x"})
"""


class NotFoundError(Exception):
    """Raised when a resource key names nothing in the composed catalog.

    Maps to HTTP 404.

    Args:
        resource: Human-readable entity name (e.g. "Resource", "ROI record").
        resource_id: The key that was looked up.
    """

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        msg = f"{resource}"
        if resource_id is not None:
            msg += f" id={resource_id}"
        msg += " not found"
        super().__init__(msg)


class ValidationError(Exception):
    """Raised when well-formed input violates a rule of the hub.

    Examples: a manual ROI update for a key that resolves to no resource, a
    category outside the closed vocabulary, a non-numeric stat.

    Maps to HTTP 422.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown for structured API responses.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class ConflictError(Exception):
    """Raised when a user-created resource would reuse an existing key.

    Maps to HTTP 409.
    """

    def __init__(self, resource: str, field: str, value: str | None = None) -> None:
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(f"{resource} with {field}={value!r} already exists")
