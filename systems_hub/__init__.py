"""
Systems Hub
Flask Application Factory.

Usage:
    from systems_hub import create_app
    app = create_app()           # defaults to "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

import click
from flask import Flask, abort, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from systems_hub.blueprints import HUB_EXTENSION
from systems_hub.config import config
from systems_hub.middleware.diagnostics import run_startup_diagnostics
from systems_hub.middleware.logging_config import configure_logging
from systems_hub.middleware.rate_limiter import init_rate_limits
from systems_hub.middleware.timing import init_request_timing
from systems_hub.services.hub import SolutionsHub
from systems_hub.services.resource_synthesizer import SynthesisContext
from systems_hub.services.source_catalog import SourceCatalogError
from systems_hub.utils.errors import E, api_error

logger = logging.getLogger(__name__)

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],                     # per-blueprint limits only
)

# Endpoints that accept CSV bodies as well as JSON
_NON_JSON_PATHS = ("/api/v1/roi/import",)


def _build_hub(app: Flask) -> SolutionsHub:
    context = SynthesisContext(
        account_type=app.config.get("HUB_ACCOUNT_TYPE", "agency"),
        account_name=app.config.get("HUB_ACCOUNT_NAME", ""),
        include_featured=bool(app.config.get("HUB_FEATURED_TOOLS", True)),
    )
    hub = SolutionsHub(context)

    source_file = app.config.get("HUB_SOURCE_FILE")
    if source_file:
        try:
            counts = hub.load_sources(source_file)
            app.logger.info("Loaded source records from %s: %s", source_file, counts)
        except SourceCatalogError as exc:
            app.logger.warning("Could not load source records: %s", exc.message)
    return hub


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     One of: "development", "testing", "production".
                     Defaults to APP_ENV env var, or "development" if unset.

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config[config_name]())

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()])
    else:
        CORS(app)

    # ── Composition root ─────────────────────────────────────────────────
    app.extensions[HUB_EXTENSION] = _build_hub(app)

    # ── Request timing middleware ────────────────────────────────────────
    init_request_timing(app)

    # ── Request guards (input length + Content-Type) ─────────────────────
    @app.before_request
    def _guard_request():
        max_len = app.config.get("MAX_CONTENT_LENGTH")
        if max_len and request.content_length and request.content_length > max_len:
            abort(413, description="Request body too large")
        if request.method in ("POST", "PUT", "PATCH") and request.path.startswith("/api/"):
            if request.path.startswith(_NON_JSON_PATHS):
                return None
            ct = request.content_type or ""
            if request.data and "json" not in ct:
                abort(415, description="Content-Type must be application/json")
        return None

    # ── Blueprints ───────────────────────────────────────────────────────
    from systems_hub.blueprints.health_bp import health_bp
    from systems_hub.blueprints.resources_bp import resources_bp
    from systems_hub.blueprints.roi_bp import roi_bp
    from systems_hub.blueprints.roi_import_bp import roi_import_bp
    from systems_hub.blueprints.sources_bp import sources_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(sources_bp)
    app.register_blueprint(resources_bp)
    app.register_blueprint(roi_import_bp)
    app.register_blueprint(roi_bp)

    # ── CLI commands ─────────────────────────────────────────────────────
    @app.cli.command("import-roi")
    @click.argument("path", type=click.Path(exists=True, dir_okay=False))
    def import_roi_cmd(path):
        """Import ROI metrics from a CSV file into the hub."""
        with open(path, "rb") as fh:
            result = app.extensions[HUB_EXTENSION].import_roi(fh.read())
        click.echo(result.message)
        if not result.ok:
            raise SystemExit(1)

    # ── Error handlers ───────────────────────────────────────────────────
    @app.errorhandler(404)
    def not_found(e):
        return api_error(E.NOT_FOUND, "Not found", details={"path": request.path})

    @app.errorhandler(405)
    def method_not_allowed(e):
        return {"error": "Method not allowed"}, 405

    @app.errorhandler(413)
    def payload_too_large(e):
        return api_error(E.PAYLOAD_TOO_LARGE, "Request body too large")

    @app.errorhandler(415)
    def unsupported_media_type(e):
        return {"error": e.description or "Unsupported media type"}, 415

    @app.errorhandler(429)
    def rate_limited(e):
        return api_error(E.RATE_LIMITED, "Too many requests", details={"retry_after": e.description})

    @app.errorhandler(500)
    def server_error(e):
        logger.error("500 error: %s", e, exc_info=True)
        return api_error(E.INTERNAL, "Internal server error")

    # ── Startup diagnostics ──────────────────────────────────────────────
    run_startup_diagnostics(app)

    # ── Rate limiting (after blueprints registered) ──────────────────────
    init_rate_limits(app, limiter)

    return app
