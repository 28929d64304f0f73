"""Logging configuration.

Diagnostics go through the standard logging module to stderr, either as
plain text lines or as JSON entries with contextual fields (account_index,
proxy_used, mission_id, error_reason, status_code, code).

SECURITY: bearer tokens and proxy passwords are redacted from every entry.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone

# Patterns that should be redacted from log output
_SENSITIVE_PATTERNS = re.compile(
    r"(token|authorization|password|secret)"
    r"[\s]*[=:]\s*(bearer\s+)?\S+",
    re.IGNORECASE,
)
_BEARER_PATTERN = re.compile(r"bearer\s+\S+", re.IGNORECASE)
_PROXY_AUTH_PATTERN = re.compile(r"(?P<scheme>[a-z0-9]+://)[^/@\s:]+:[^/@\s]+@", re.IGNORECASE)

_CONTEXT_FIELDS = (
    "account_index",
    "proxy_used",
    "mission_id",
    "status_code",
    "code",
)


def sanitize(text: str) -> str:
    """Remove sensitive values from log text."""
    text = _SENSITIVE_PATTERNS.sub("[REDACTED]", text)
    text = _BEARER_PATTERN.sub("Bearer [REDACTED]", text)
    return _PROXY_AUTH_PATTERN.sub(r"\g<scheme>***:***@", text)


def mask_proxy(proxy: str | None) -> str | None:
    """Hide the credentials part of a proxy URI."""
    if proxy is None:
        return None
    return _PROXY_AUTH_PATTERN.sub(r"\g<scheme>***:***@", proxy)


class JsonFormatter(logging.Formatter):
    """Formats log records as JSON with structured fields.

    Each entry contains at minimum: timestamp, level, logger, message.
    Additional fields can be attached via the ``extra`` dict on log calls.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": sanitize(record.getMessage()),
        }

        for name in _CONTEXT_FIELDS:
            if hasattr(record, name):
                entry[name] = getattr(record, name)
        if isinstance(entry.get("proxy_used"), str):
            entry["proxy_used"] = mask_proxy(entry["proxy_used"])
        if hasattr(record, "error_reason"):
            entry["error_reason"] = sanitize(str(getattr(record, "error_reason")))

        # Exception info
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = sanitize(self.formatException(record.exc_info))

        return json.dumps(entry, default=str)


class RedactingFormatter(logging.Formatter):
    """Plain text formatter that applies the same redaction as JsonFormatter."""

    def format(self, record: logging.LogRecord) -> str:
        return sanitize(super().format(record))


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """Configure the root logger.

    Parameters
    ----------
    level:
        Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    json_output:
        Emit one JSON object per line instead of plain text.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicates
    root.handlers.clear()

    handler = logging.StreamHandler()
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            RedactingFormatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
    root.addHandler(handler)

    # httpx logs every request URL at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
