"""
Pytest fixtures for SafeCircle tests. Each test gets an isolated app with a
temporary memory file, a fake risk provider and a mock ElevenLabs transport.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace

import httpx
import pytest

from backend_safecircle.config.settings import Settings

REAL_GEMINI_KEY = "AIzaSy-test-key-1234567890"
REAL_ELEVENLABS_KEY = "sk_live_0f9e8d7c6b5a"
REAL_VOICE_ID = "21m00Tcm4TlvDq8ikWAM"


class FakeProvider:
    """Stands in for GeminiProvider: returns canned text or raises."""

    name = "gemini"

    def __init__(self, text: str | None = None, exc: Exception | None = None, delay: float = 0.0):
        self.text = text
        self.exc = exc
        self.delay = delay
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        return self.text or ""


class FakeClock:
    """Manually advanced monotonic clock for rate-limit tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def memory_path(tmp_path):
    return tmp_path / "memory.json"


@pytest.fixture
def settings(memory_path):
    """Settings with placeholder Gemini key (fallback path) and real-looking ElevenLabs creds."""
    return Settings(
        gemini_api_key="your-gemini-api-key-here",
        elevenlabs_api_key=REAL_ELEVENLABS_KEY,
        elevenlabs_voice_id=REAL_VOICE_ID,
        memory_path=memory_path,
    )


@pytest.fixture
def gemini_key():
    return REAL_GEMINI_KEY


@pytest.fixture
def elevenlabs_key():
    return REAL_ELEVENLABS_KEY


@pytest.fixture
def make_provider():
    return FakeProvider


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tts_requests():
    """Requests seen by the mock ElevenLabs transport."""
    return []


@pytest.fixture
def tts_handler(tts_requests):
    """Default ElevenLabs behaviour: 200 with fake MP3 bytes. Tests swap handler.state["response"]."""
    state = {"response": lambda request: httpx.Response(200, content=b"ID3fake-mp3", headers={"content-type": "audio/mpeg"})}

    def handler(request: httpx.Request) -> httpx.Response:
        tts_requests.append(request)
        return state["response"](request)

    handler.state = state
    return handler


@pytest.fixture
def make_app(settings, clock, tts_handler):
    """Factory: build an app, optionally overriding settings fields or the risk provider."""
    from backend_safecircle.api_server.server import create_app

    def _make(provider=None, **overrides):
        s = replace(settings, **overrides)
        return create_app(
            s,
            provider=provider,
            tts_transport=httpx.MockTransport(tts_handler),
            clock=clock,
        )

    return _make


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    """FastAPI TestClient over the fallback-path app."""
    from fastapi.testclient import TestClient

    return TestClient(app)
