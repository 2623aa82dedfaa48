"""
Logging setup for the RepoRadar API.

ENVIRONMENT=production writes one JSON object per line so a log collector can
index the scan context fields; anything else gets a readable single-line format
with the same context appended in brackets.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

# Scan context passed through `extra=` by the pipeline and the GitHub client
CONTEXT_FIELDS = ("repo", "branch", "path", "status_code", "duration_ms")

NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "google_genai")


def scan_context(record: logging.LogRecord) -> dict:
    """Context fields actually set on `record`, in CONTEXT_FIELDS order."""
    context = {}
    for name in CONTEXT_FIELDS:
        value = getattr(record, name, None)
        if value is not None:
            context[name] = value
    return context


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "severity": record.levelname,
            "logger": record.name,
            "module": record.module,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }
        entry.update(scan_context(record))
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable lines, e.g. `12:00:01 [INFO] scoring.pipeline: Scanned x/y [repo=x/y]`."""

    def __init__(self):
        super().__init__("%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = scan_context(record)
        if not context:
            return line
        # Keep tracebacks last
        head, sep, tail = line.partition("\n")
        suffix = " ".join(f"{k}={v}" for k, v in context.items())
        return f"{head} [{suffix}]{sep}{tail}"


def setup_logging(environment: str | None = None, level: str | None = None) -> None:
    """Install a single stdout handler on the root logger. Safe to call repeatedly."""
    environment = (environment or os.getenv("ENVIRONMENT", "development")).lower()
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if environment == "production" else ConsoleFormatter())
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
