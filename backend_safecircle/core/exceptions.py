"""
Application-level exceptions.

Every error the HTTP layer can surface carries a stable machine-readable
code and an HTTP status; the API server renders them as {"error": code}.
Provider errors are raised internally and recovered by the caller
(risk assessor → local heuristic, speech proxy → browser fallback).
"""

from __future__ import annotations


class SafeCircleError(Exception):
    """Base error with a stable error code and HTTP status."""

    code = "server_error"
    status_code = 500

    def __init__(self, code: str | None = None, status_code: int | None = None, message: str | None = None):
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message or self.code)


class MissingFieldError(SafeCircleError):
    """A required request field is absent."""

    status_code = 400

    def __init__(self, field: str):
        self.field = field
        super().__init__(code=f"missing_{field}")


class InvalidJSONError(SafeCircleError):
    """Request body is not a JSON object."""

    code = "invalid_json"
    status_code = 400


class TextTooLongError(SafeCircleError):
    code = "text_too_long"
    status_code = 400


class RateLimitedError(SafeCircleError):
    code = "rate_limited"
    status_code = 429


class ProviderNotConfiguredError(SafeCircleError):
    """Provider credentials are missing or still placeholders."""

    status_code = 500


class ProviderError(SafeCircleError):
    """Risk provider call failed or returned unusable output. Never reaches the client."""

    code = "provider_error"
    status_code = 502


class SpeechProviderError(SafeCircleError):
    """ElevenLabs call failed. Never reaches the client; mapped to browser_tts fallback."""

    code = "elevenlabs_unavailable"
    status_code = 502
