"""
Environment variable loading and credential checks for SafeCircle.

- Loads .env from project root when available.
- GEMINI_API_KEY: risk-assessment provider key (placeholder → local fallback)
- ELEVENLABS_API_KEY / ELEVENLABS_VOICE_ID: speech provider credentials
- ALLOWED_ORIGIN: single CORS origin for the mobile/web client
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is backend_safecircle/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

# Substrings that mark a value copied verbatim from an .env template
PLACEHOLDER_MARKERS = ("your", "placeholder", "change", "replace", "xxxx", "example")


def load_safecircle_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides real env."""
    load_dotenv(_ENV_PATH, override=False)


def is_placeholder_key(value: str | None) -> bool:
    """
    Return True if value is missing or looks like an unfilled template.

    Empty / whitespace-only values and anything containing one of
    PLACEHOLDER_MARKERS (case-insensitive) count as placeholders,
    e.g. "your-api-key-here", "CHANGE_ME", "sk-xxxx".
    """
    if value is None:
        return True
    s = str(value).strip().lower()
    if not s:
        return True
    return any(marker in s for marker in PLACEHOLDER_MARKERS)


def env_str(name: str, default: str | None = None) -> str | None:
    """Return stripped env var, or default when unset or blank."""
    raw = (os.getenv(name) or "").strip()
    return raw if raw else default


def env_float(name: str, default: float) -> float:
    """Return env var as float; fall back to default when unset or unparseable."""
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def env_int(name: str, default: int) -> int:
    """Return env var as int; fall back to default when unset or unparseable."""
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default
