"""
Application settings and environment configuration.

Responsibilities:
- Load configuration from environment variables and the project .env file.
- Provide defaults for optional settings (model ids, timeouts, rate limits).
- Expose a typed, immutable Settings object for the API server, the risk
  assessor, the speech proxy and the entrypoint.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from backend_safecircle.config.env import env_float, env_int, env_str, load_safecircle_env

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
DEFAULT_ELEVENLABS_MODEL_ID = "eleven_monolingual_v1"
DEFAULT_MEMORY_PATH = "memory.json"
DEFAULT_RATE_LIMIT_WINDOW_SEC = 60.0
DEFAULT_RATE_LIMIT_MAX = 30


@dataclass(frozen=True)
class Settings:
    """Typed service configuration. Secrets may be None (or placeholders); callers decide how to degrade."""

    allowed_origin: str | None = None
    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_timeout_sec: float = 15.0
    elevenlabs_api_key: str | None = None
    elevenlabs_voice_id: str | None = None
    elevenlabs_model_id: str = DEFAULT_ELEVENLABS_MODEL_ID
    elevenlabs_timeout_sec: float = 20.0
    memory_path: Path = Path(DEFAULT_MEMORY_PATH)
    rate_limit_window_sec: float = DEFAULT_RATE_LIMIT_WINDOW_SEC
    rate_limit_max: int = DEFAULT_RATE_LIMIT_MAX
    api_host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"


def get_settings() -> Settings:
    """
    Return the current application settings.

    Reads the environment on every call (after loading .env) so tests can
    monkeypatch variables; the API server calls it once when the app is built.
    """
    load_safecircle_env()
    return Settings(
        allowed_origin=env_str("ALLOWED_ORIGIN"),
        gemini_api_key=env_str("GEMINI_API_KEY"),
        gemini_model=env_str("GEMINI_MODEL", DEFAULT_GEMINI_MODEL) or DEFAULT_GEMINI_MODEL,
        gemini_timeout_sec=env_float("GEMINI_TIMEOUT_SEC", 15.0),
        elevenlabs_api_key=env_str("ELEVENLABS_API_KEY"),
        elevenlabs_voice_id=env_str("ELEVENLABS_VOICE_ID"),
        elevenlabs_model_id=env_str("ELEVENLABS_MODEL_ID", DEFAULT_ELEVENLABS_MODEL_ID) or DEFAULT_ELEVENLABS_MODEL_ID,
        elevenlabs_timeout_sec=env_float("ELEVENLABS_TIMEOUT_SEC", 20.0),
        memory_path=Path(env_str("SAFECIRCLE_MEMORY_PATH", DEFAULT_MEMORY_PATH) or DEFAULT_MEMORY_PATH),
        rate_limit_window_sec=env_float("RATE_LIMIT_WINDOW_SEC", DEFAULT_RATE_LIMIT_WINDOW_SEC),
        rate_limit_max=env_int("RATE_LIMIT_MAX", DEFAULT_RATE_LIMIT_MAX),
        api_host=env_str("API_HOST", "0.0.0.0") or "0.0.0.0",
        port=env_int("PORT", 8080),
        log_level=(env_str("LOG_LEVEL", "INFO") or "INFO").upper(),
    )
