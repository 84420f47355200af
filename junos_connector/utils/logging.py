"""structlog configuration and helpers."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

REDACTED = "[REDACTED]"

_SECRET_KEYS = frozenset(
    {"password", "bastion_password", "passphrase", "proxy_command"},
)


def redact_secrets(
    _logger: Any, _method: str, event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Mask credentials in a log event, including nested option dicts."""
    return redact_mapping(event_dict)


def redact_mapping(data: dict[str, Any]) -> dict[str, Any]:
    """Copy of *data* with credentials masked."""
    cleaned: dict[str, Any] = {}
    for key, value in data.items():
        if key in _SECRET_KEYS and value:
            cleaned[key] = REDACTED
        elif key in ("key_files", "key_filename") and value:
            paths = [value] if isinstance(value, str) else list(value)
            cleaned[key] = [os.path.basename(p) for p in paths]
        elif isinstance(value, dict):
            cleaned[key] = redact_mapping(value)
        else:
            cleaned[key] = value
    return cleaned


def setup_logging(level: str = "INFO", json: bool = False) -> None:
    """Configure stdlib logging and structlog for the process."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_secrets,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    return structlog.get_logger(name)
