"""
Structured logging configuration.

Every record logged while a request is active is stamped with the request id
and the request's view state (``page_type`` / ``active_tab``) by
``RequestContextFilter``, so handlers and blueprints get it without passing
``extra=``.

- Development / testing: one colored line per record
- Production: one JSON object per record
- Log level: LOG_LEVEL env variable
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

from flask import g, has_request_context, request

# Fields copied into JSON output when set on the record
REQUEST_FIELDS = (
    "request_id",
    "method",
    "path",
    "status",
    "duration_ms",
    "remote_addr",
    "page_type",
    "active_tab",
)

_LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
_RESET = "\033[0m"


class RequestContextFilter(logging.Filter):
    """Stamp request id, path and view state onto records logged inside a request.

    Values passed explicitly through ``extra=`` are left alone. Outside a
    request the record is passed through untouched.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not has_request_context():
            return True
        stamps = {
            "request_id": g.get("request_id"),
            "method": request.method,
            "path": request.path,
        }
        view_state = g.get("view_state")
        if view_state is not None and view_state.is_function_detail:
            stamps["page_type"] = view_state.page_type.value
            stamps["active_tab"] = view_state.active_tab.value
        for key, val in stamps.items():
            if val is not None and getattr(record, key, None) is None:
                setattr(record, key, val)
        return True


def request_fields(record: logging.LogRecord) -> dict:
    """The REQUEST_FIELDS present on a record, in declaration order."""
    fields = {}
    for key in REQUEST_FIELDS:
        val = getattr(record, key, None)
        if val is not None:
            fields[key] = val
    return fields


class JSONFormatter(logging.Formatter):
    """JSON log formatter for production / log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        entry.update(request_fields(record))
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


class ReadableFormatter(logging.Formatter):
    """Single-line colored formatter for development.

    ``12:00:01 INFO     venue_desk.x: message [34ms] (req 1a2b3c) <function-detail/notes>``
    """

    def format(self, record: logging.LogRecord) -> str:
        color = _LEVEL_COLORS.get(record.levelname, "")
        parts = [
            f"{color}{datetime.now():%H:%M:%S} {record.levelname:<8}{_RESET} "
            f"{record.name}: {record.getMessage()}"
        ]
        duration = getattr(record, "duration_ms", None)
        if duration is not None:
            parts.append(f"[{duration:.0f}ms]")
        request_id = getattr(record, "request_id", None)
        if request_id:
            parts.append(f"(req {request_id})")
        active_tab = getattr(record, "active_tab", None)
        if active_tab:
            parts.append(f"<{getattr(record, 'page_type', '')}/{active_tab}>")
        line = " ".join(parts)
        if record.exc_info and record.exc_info[0] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(app):
    """
    Install a single stderr handler on the root logger for the Flask app.

    LOG_LEVEL overrides the default (DEBUG in dev/testing, INFO in prod).
    Production gets JSONFormatter, everything else ReadableFormatter; both
    run behind RequestContextFilter.
    """
    is_testing = app.config.get("TESTING", False)
    is_prod = not app.config.get("DEBUG", False) and not is_testing

    level_name = os.getenv("LOG_LEVEL", "INFO" if is_prod else "DEBUG").upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if is_prod else ReadableFormatter())
    handler.setLevel(level)
    handler.addFilter(RequestContextFilter())

    # Replace, don't append: create_app() runs once per test
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for noisy in ("urllib3", "werkzeug"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    app.logger.setLevel(level)

    if not is_testing:
        app.logger.info("Logging configured: level=%s format=%s",
                        level_name, "JSON" if is_prod else "readable")
