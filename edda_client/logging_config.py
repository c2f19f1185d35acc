"""Structured logging configuration (JSON or text format).

Edda endpoints are often reached with basic-auth credentials embedded in the
URL, so every handler installed here scrubs ``user:password@`` from URLs in
messages, arguments and the ``url`` extra field before formatting.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone

from .config import LoggingConfig

_EXTRA_FIELDS = ("url", "load_balancer", "status_code", "elapsed_seconds", "record_count", "filtered")
_USERINFO = re.compile(r"(?P<scheme>[a-zA-Z][a-zA-Z0-9+.-]*://)[^/@\s]+@")


def redact_url(text: str) -> str:
    """Replace URL userinfo with ``***``."""
    return _USERINFO.sub(r"\g<scheme>***@", text)


class CredentialRedactingFilter(logging.Filter):
    """Strips URL credentials from a record in place; never drops records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = redact_url(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(self._scrub(a) for a in record.args)
        url = getattr(record, "url", None)
        if isinstance(url, str):
            record.url = redact_url(url)
        return True

    @staticmethod
    def _scrub(arg: object) -> object:
        if isinstance(arg, (str, Exception)):
            text = str(arg)
            redacted = redact_url(text)
            if redacted != text:
                return redacted
        return arg


class JSONFormatter(logging.Formatter):
    """Emits log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                payload[key] = val

        if record.exc_info and record.exc_info[1]:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable format; request context is appended as ``key=value`` pairs."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = [
            f"{key}={getattr(record, key)}"
            for key in _EXTRA_FIELDS
            if key != "url" and getattr(record, key, None) is not None
        ]
        if not context:
            return line
        # Keep any traceback below the context suffix.
        head, sep, tail = line.partition("\n")
        return f"{head} ({' '.join(context)}){sep}{tail}"


def configure_logging(config: LoggingConfig, level: str | None = None) -> None:
    """Set up the root logger; ``level`` overrides the configured level (e.g. from --verbose)."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or config.level).upper(), logging.INFO))

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(CredentialRedactingFilter())
    if config.format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter())

    root.addHandler(handler)

    # Suppress noisy loggers
    for noisy in ("urllib3", "botocore", "boto3", "s3transfer"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
