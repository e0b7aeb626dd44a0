"""
Structured logging configuration.

- Development / testing: readable, coloured single-line records
- Production: one JSON object per record (log aggregator compatible)
- Level: LOG_LEVEL env variable, else the app config value

Every record emitted while a request is active is stamped with the request
method, path, the authenticated actor and the project id from the URL, so
permission denials and activity-write failures can be traced to a caller.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

from flask import g, has_request_context, request

# Request attributes attached to each record by RequestContextFilter.
_CONTEXT_FIELDS = ("method", "path", "actor_id", "project_id")


class RequestContextFilter(logging.Filter):
    """Attach request / actor / project context to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not has_request_context():
            for key in _CONTEXT_FIELDS:
                if not hasattr(record, key):
                    setattr(record, key, None)
            return True
        record.method = request.method
        record.path = request.path
        record.actor_id = getattr(g, "actor_id", None)
        record.project_id = (request.view_args or {}).get("pid")
        return True


class JSONFormatter(logging.Formatter):
    """JSON log formatter for production."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class ReadableFormatter(logging.Formatter):
    """Coloured one-line formatter for development."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        ts = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"{color}{ts} {record.levelname:<8}{self.RESET} {record.name}: {record.getMessage()}"
        actor_id = getattr(record, "actor_id", None)
        project_id = getattr(record, "project_id", None)
        if actor_id is not None or project_id is not None:
            line += f" [actor={actor_id} project={project_id}]"
        if record.exc_info and record.exc_info[0] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(app):
    """
    Install a single root handler for the app.

    Development / testing → ReadableFormatter on stderr
    Production            → JSONFormatter on stderr
    """
    testing = app.config.get("TESTING", False)
    production = not app.config.get("DEBUG", False) and not testing

    level_name = (os.getenv("LOG_LEVEL") or app.config.get("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if production else ReadableFormatter())
    handler.addFilter(RequestContextFilter())
    handler.setLevel(level)

    # Replace rather than append so repeated create_app() calls don't duplicate output.
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    app.logger.setLevel(level)

    if not testing:
        app.logger.info("Logging configured: level=%s format=%s",
                        level_name, "json" if production else "readable")
