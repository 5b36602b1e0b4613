"""Structured Logging: JSON lines for production, plain text for local runs.

Invariants:
    - Every record has timestamp, level, logger and message
    - Request context passed via `extra=` (user_id, resource ids, error_code,
      path, token counts, rate-limit key) is copied into the JSON object
    - setup_logging is idempotent: a second call replaces its own handler

Design Decisions:
    - httpx/httpcore log each Clerk and Anthropic request at INFO; capped at WARNING
"""

import json
import logging
from datetime import datetime, timezone

CONTEXT_FIELDS = (
    "user_id", "resource_type", "resource_id", "error_code", "path",
    "attempt", "input_tokens", "output_tokens", "batch_size", "rate_limit_key",
)
_NOISY_LOGGERS = ("httpx", "httpcore")
_HANDLER_NAME = "bookcircle"


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, getattr(record, key)) for key in CONTEXT_FIELDS
            if getattr(record, key, None) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        JSONFormatter() if fmt == "json"
        else logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"),
    )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
