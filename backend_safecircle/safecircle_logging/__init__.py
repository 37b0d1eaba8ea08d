"""
Structured logging for Backend SafeCircle.

JSON logs with timestamp, level, event_type and per-call context.
Use get_logger() in all modules for aggregation-friendly output.
"""

from backend_safecircle.safecircle_logging.logger import bind_scenario, get_logger, redact_secret

__all__ = ["bind_scenario", "get_logger", "redact_secret"]
