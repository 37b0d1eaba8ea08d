"""
Configuration management for the Backend SafeCircle service.

Loads settings from environment variables and the optional project .env
file. Exposes a single source of truth for all service configuration.
"""

from backend_safecircle.config.env import is_placeholder_key  # noqa: F401
from backend_safecircle.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings", "is_placeholder_key"]
