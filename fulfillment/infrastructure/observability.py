"""Structured Logging — one JSON line per record, tagged with the emitting service.

Invariants:
    - Every line carries timestamp, level, logger, service and message
    - Known extras (order_id, item_id, status, error_code, ...) surfaced when set
    - setup_logging is idempotent: re-running a lifespan never duplicates output

Design Decisions:
    - Stdlib logging + JSONFormatter: three services share one format with no
      extra dependency
    - Service name stamped by the formatter, not by call sites: a record's own
      `service` extra (e.g. the downstream that failed) takes precedence
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "order_id", "item_id", "status", "error_code",
    "path", "attempt", "duration_ms",
)

# Library loggers that would otherwise repeat what the services already log.
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


class JSONFormatter(logging.Formatter):
    """Render a LogRecord as a single JSON object."""

    def __init__(self, service_name: str | None = None):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(
                record.created, timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        service = record.__dict__.get("service") or self.service_name
        if service:
            log["service"] = service
        log.update({
            key: record.__dict__[key]
            for key in EXTRA_FIELDS
            if record.__dict__.get(key) is not None
        })
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class _ServiceHandler(logging.StreamHandler):
    """Marker type so setup_logging can find and replace its own handler."""


def setup_logging(
    level: str = "INFO", fmt: str = "json", service_name: str | None = None,
) -> None:
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _ServiceHandler)]:
        root.removeHandler(existing)

    handler = _ServiceHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter(service_name))
    else:
        prefix = f"[{service_name}] " if service_name else ""
        handler.setFormatter(logging.Formatter(
            f"%(asctime)s %(levelname)s {prefix}%(name)s: %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
