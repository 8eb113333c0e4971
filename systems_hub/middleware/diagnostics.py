"""
Startup diagnostics — runs once when the Flask app starts.

Logs a summary banner of the hub's configuration and loaded source data.
"""

import logging
import sys

from flask import Flask

logger = logging.getLogger(__name__)


def run_startup_diagnostics(app: Flask):
    """Run diagnostic checks during app startup."""
    if app.config.get("TESTING"):
        return  # skip during tests for speed

    issues: list[str] = []
    hub = app.extensions.get("solutions_hub")

    py = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
    account = f"{hub.context.account_type}" if hub else "n/a"
    if hub and hub.context.account_name:
        account += f" ({hub.context.account_name})"
    featured = "on" if hub and hub.context.include_featured else "off"

    source_file = app.config.get("HUB_SOURCE_FILE") or "none"
    clients = len(hub.catalog.clients) if hub else 0
    projects = len(hub.catalog.projects) if hub else 0
    if app.config.get("HUB_SOURCE_FILE") and not (clients or projects):
        issues.append("Source file configured but no clients or projects were loaded")

    storage = app.config.get("RATELIMIT_STORAGE_URI", "memory://")

    banner = f"""
╔══════════════════════════════════════════════════════════════╗
║  Systems Hub — Startup Diagnostics                           ║
╠══════════════════════════════════════════════════════════════╣
║  Python      : {py:<46s}║
║  Debug       : {str(app.debug):<46s}║
║  Account     : {account[:46]:<46s}║
║  Featured    : {featured:<46s}║
║  Source file : {str(source_file)[-46:]:<46s}║
║  Sources     : {f'{clients} clients / {projects} projects':<46s}║
║  Rate store  : {storage[:46]:<46s}║
╚══════════════════════════════════════════════════════════════╝"""
    logger.info(banner)

    if issues:
        logger.warning("Startup issues detected:")
        for issue in issues:
            logger.warning("  ⚠ %s", issue)
    else:
        logger.info("✅ All startup checks passed")
