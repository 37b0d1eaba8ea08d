"""
Tests for environment configuration and placeholder credential detection.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from backend_safecircle.config import get_settings, is_placeholder_key


@pytest.mark.parametrize(
    "value",
    [None, "", "   ", "your-api-key-here", "YOUR_GEMINI_KEY", "PlaceHolder", "CHANGE_ME",
     "replace-with-real-key", "sk-XXXX-1234", "example-key"],
)
def test_placeholder_values(value):
    assert is_placeholder_key(value) is True


@pytest.mark.parametrize("value", ["AIzaSyA1b2C3d4", "sk_live_0f9e8d7c6b5a", "21m00Tcm4TlvDq8ikWAM"])
def test_real_looking_values(value):
    assert is_placeholder_key(value) is False


def test_get_settings_reads_env(monkeypatch, tmp_path):
    monkeypatch.setenv("GEMINI_API_KEY", "  AIzaSyA1b2C3d4  ")
    monkeypatch.setenv("PORT", "9090")
    monkeypatch.setenv("RATE_LIMIT_MAX", "5")
    monkeypatch.setenv("RATE_LIMIT_WINDOW_SEC", "not-a-number")
    monkeypatch.setenv("SAFECIRCLE_MEMORY_PATH", str(tmp_path / "m.json"))
    monkeypatch.setenv("ALLOWED_ORIGIN", "https://app.safecircle.test")
    s = get_settings()
    assert s.gemini_api_key == "AIzaSyA1b2C3d4"
    assert s.port == 9090
    assert s.rate_limit_max == 5
    assert s.rate_limit_window_sec == 60.0
    assert s.memory_path == Path(tmp_path / "m.json")
    assert s.allowed_origin == "https://app.safecircle.test"


def test_get_settings_defaults(monkeypatch):
    for name in ("GEMINI_MODEL", "ELEVENLABS_MODEL_ID", "PORT", "SAFECIRCLE_MEMORY_PATH"):
        monkeypatch.delenv(name, raising=False)
    s = get_settings()
    assert s.gemini_model == "gemini-1.5-flash"
    assert s.elevenlabs_model_id == "eleven_monolingual_v1"
    assert s.port == 8080
    assert s.memory_path == Path("memory.json")
