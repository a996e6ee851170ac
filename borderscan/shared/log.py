"""
Logging setup for BorderScan.

Text output for terminals, one JSON object per record otherwise.
"""

import json
import logging
import sys
from typing import Optional

EXTRA_KEYS = ("threshold", "contours", "rows", "path")

_handler: Optional[logging.Handler] = None


class JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record):
        entry = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_KEYS:
            if hasattr(record, key):
                entry[key] = getattr(record, key)
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_mode(mode: str, stream=None) -> str:
    """Resolve the 'auto' log mode to 'text' or 'json'."""
    if mode != "auto":
        return mode
    stream = stream or sys.stderr
    isatty = getattr(stream, "isatty", None)
    return "text" if isatty is not None and isatty() else "json"


def configure_logging(mode: str = "auto", level: str = "INFO", stream=None) -> logging.Handler:
    """
    Install the BorderScan handler on the root logger.

    Calling this again replaces the previously installed handler.

    Args:
        mode: auto, json or text
        level: Root log level name
        stream: Output stream (default stderr)

    Returns:
        The installed handler
    """
    global _handler

    if mode not in ("auto", "json", "text"):
        raise ValueError(f"Unknown log mode: {mode!r}")

    stream = stream or sys.stderr
    handler = logging.StreamHandler(stream)
    if resolve_mode(mode, stream) == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
    root.addHandler(handler)
    root.setLevel(level.upper())
    _handler = handler
    return handler
