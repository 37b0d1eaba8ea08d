"""
Structured JSON logging for the SafeCircle backend.

Every line carries timestamp, level, event_type and logger name. Request
scoped context (the scenario being assessed) is bound with bind_scenario().
Provider keys must go through redact_secret() before they reach a log call;
nothing here inspects event values for secrets.

Uses only Python stdlib logging and structlog; no backend_safecircle imports to avoid circular imports.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

# Default log level from env
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)

# JSON output for production (LOG_FORMAT=json); human-readable for local
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

REDACTED = "[REDACTED]"


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Ensure timestamp is always present (ISO 8601)."""
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Rename structlog 'event' to event_type for consistency; keep message if present."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


def configure_structlog() -> None:
    """Configure structlog once at import: JSON, timestamp, level, event_type."""
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _normalize_event,
    ]
    if LOG_FORMAT == "json":
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        )
    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


# One-time configuration on first import
if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

    Log with event_type (first arg) and optional context:
        logger = get_logger(__name__)
        logger.info("risk_assessed", scenario_id="s2", risk_level="HIGH", model="fallback")
    Output (JSON): {"event_type": "risk_assessed", "scenario_id": "s2", ..., "timestamp": "...", "level": "info", "logger": "module.name"}
    """
    return structlog.get_logger(name).bind(logger=name)


def redact_secret(text: Any, secret: str | None) -> str:
    """
    Return str(text) with every occurrence of secret replaced by [REDACTED].

    Provider SDKs sometimes echo request URLs or headers in error messages;
    pass those through here before logging. Empty secrets leave text unchanged.
    """
    if text is None:
        return ""
    try:
        s = str(text)
    except Exception:
        return REDACTED
    if not secret:
        return s
    return s.replace(secret, REDACTED)


def bind_scenario(scenario_id: Any, name: str = "backend_safecircle") -> structlog.BoundLogger:
    """Return a logger with scenario_id bound to all subsequent log calls."""
    return get_logger(name).bind(scenario_id=scenario_id)
