"""
Structured logging for the Systems Hub.

One stderr handler on the root logger, with the line format chosen per
environment:
  - production          → one JSON object per line
  - development/testing → short coloured line with request context

LOG_LEVEL sets the level; LOG_FORMAT ("json" / "readable") overrides the
format choice, e.g. to get JSON lines out of a local container.

Request-scoped context (request id, method, path, resource key, import
counts) travels in ``extra=`` and is picked up by both formatters.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

# ``extra=`` keys copied onto log lines
CONTEXT_FIELDS = (
    "request_id",
    "method",
    "path",
    "status",
    "duration_ms",
    "remote_addr",
    "resource_key",
    "imported",
    "skipped",
)

# Third-party loggers that are too chatty below WARNING
QUIET_LOGGERS = ("werkzeug", "flask_limiter", "flask_cors")


def _context(record: logging.LogRecord) -> dict:
    return {
        name: getattr(record, name)
        for name in CONTEXT_FIELDS
        if getattr(record, name, None) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON document per record, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "where": f"{record.module}:{record.lineno}",
        }
        entry.update(_context(record))
        if record.exc_info and record.exc_info[0] is not None:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class ReadableFormatter(logging.Formatter):
    """``HH:MM:SS LEVEL logger: message [rid key 12ms]`` with ANSI level colours."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        level = f"{record.levelname:<8}"
        if self.use_color:
            level = f"{self.LEVEL_COLORS.get(record.levelno, '')}{level}{self.RESET}"

        context = _context(record)
        tags = [context[name] for name in ("request_id", "resource_key") if name in context]
        if "duration_ms" in context:
            tags.append(f"{context['duration_ms']:.0f}ms")
        suffix = f" [{' '.join(str(t) for t in tags)}]" if tags else ""

        line = f"{ts} {level} {record.name}: {record.getMessage()}{suffix}"
        if record.exc_info and record.exc_info[0] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _select_formatter(is_prod: bool) -> logging.Formatter:
    choice = os.getenv("LOG_FORMAT", "").strip().lower()
    if choice == "json" or (is_prod and choice != "readable"):
        return JSONFormatter()
    return ReadableFormatter(use_color=sys.stderr.isatty())


def configure_logging(app):
    """Install the hub's root handler. Safe to call once per create_app()."""
    is_testing = app.config.get("TESTING", False)
    is_prod = not app.config.get("DEBUG", False) and not is_testing

    level_name = os.getenv("LOG_LEVEL", "INFO" if is_prod else "DEBUG").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    formatter = _select_formatter(is_prod)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    # Replace rather than append, so repeated app creation in tests
    # leaves exactly one handler.
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    app.logger.setLevel(level)

    if not is_testing:
        app.logger.info("Logging ready: level=%s format=%s",
                        level_name, type(formatter).__name__)
