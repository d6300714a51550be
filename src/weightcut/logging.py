"""Structured logging for the weightcut CLI and harness.

Engine modules only create module loggers; the CLI calls ``setup_logging``
once with the format from WEIGHTCUT_LOG_FORMAT: "json" (default) or "text".
Both formats carry the ``weightcut_*`` extras (pairing rule, protocol,
days until weigh-in, harness failures).
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import IO, Any

EXTRA_PREFIX = "weightcut_"
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def record_extras(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value for key, value in record.__dict__.items() if key.startswith(EXTRA_PREFIX)
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
        }
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = "".join(traceback.format_exception(*record.exc_info))
        entry.update(record_extras(record))
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Plaintext lines with extras appended as key=value pairs."""

    def __init__(self) -> None:
        super().__init__(TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = record_extras(record)
        if not extras:
            return line
        pairs = " ".join(f"{key[len(EXTRA_PREFIX):]}={value}" for key, value in extras.items())
        return f"{line} [{pairs}]"


def setup_logging(
    log_format: str, level: int = logging.INFO, stream: IO[str] | None = None
) -> logging.Handler:
    """Replace the root handlers with a single stderr (or ``stream``) handler."""
    root = logging.getLogger()
    root.setLevel(level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if log_format == "json" else TextFormatter())
    root.addHandler(handler)
    return handler
