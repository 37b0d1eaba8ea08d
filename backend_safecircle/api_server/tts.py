"""
FastAPI router for GET/POST /api/tts: ElevenLabs text-to-speech proxy.

POST returns audio/mpeg bytes on success. Any provider failure (non-2xx,
network error, plan/payment limits) becomes a 200 JSON fallback telling the
client to use on-device speech; provider bodies and keys are never echoed.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import quote

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from backend_safecircle.api_server.middleware import enforce_rate_limit
from backend_safecircle.api_server.routes import read_json_body
from backend_safecircle.config.env import is_placeholder_key
from backend_safecircle.core.exceptions import (
    MissingFieldError,
    ProviderNotConfiguredError,
    SpeechProviderError,
    TextTooLongError,
)
from backend_safecircle.safecircle_logging import get_logger, redact_secret

logger = get_logger(__name__)

router = APIRouter(prefix="/tts", tags=["tts"])

ELEVENLABS_BASE_URL = "https://api.elevenlabs.io/v1/text-to-speech"
MAX_TEXT_LENGTH = 400
VOICE_SETTINGS = {"stability": 0.5, "similarity_boost": 0.75}
FALLBACK_PROVIDER = "browser_tts"
FALLBACK_REASON = "elevenlabs_unavailable"
# ElevenLabs error markers for exhausted/free plans
PAYMENT_MARKERS = ("payment_required", "paid_plan_required")


class ElevenLabsClient:
    """Minimal async ElevenLabs TTS client. transport is injectable for tests (httpx.MockTransport)."""

    def __init__(
        self,
        api_key: str | None,
        voice_id: str | None,
        model_id: str = "eleven_monolingual_v1",
        timeout_sec: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.voice_id = voice_id
        self.model_id = model_id
        self.timeout_sec = timeout_sec
        self._transport = transport

    @property
    def configured(self) -> bool:
        return not (is_placeholder_key(self.api_key) or is_placeholder_key(self.voice_id))

    async def synthesize(self, text: str) -> bytes:
        """Return MP3 bytes for text. Raises SpeechProviderError on any failure."""
        url = f"{ELEVENLABS_BASE_URL}/{quote(self.voice_id or '', safe='')}"
        headers = {
            "xi-api-key": self.api_key or "",
            "Content-Type": "application/json",
            "Accept": "audio/mpeg",
        }
        body = {"text": text, "model_id": self.model_id, "voice_settings": VOICE_SETTINGS}
        try:
            async with httpx.AsyncClient(timeout=self.timeout_sec, transport=self._transport) as client:
                resp = await client.post(url, headers=headers, json=body)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise SpeechProviderError(message=redact_secret(e, self.api_key)) from e

        if not resp.is_success:
            logger.warning(
                "tts_provider_rejected",
                status_code=resp.status_code,
                payment_required=_is_payment_error(resp),
            )
            raise SpeechProviderError(message=f"status {resp.status_code}")
        return resp.content


def _is_payment_error(resp: httpx.Response) -> bool:
    try:
        parsed = json.loads(resp.text)
    except (json.JSONDecodeError, ValueError):
        return False
    if not isinstance(parsed, dict):
        return False
    detail = parsed.get("detail") if isinstance(parsed.get("detail"), dict) else parsed
    return detail.get("type") in PAYMENT_MARKERS or detail.get("code") in PAYMENT_MARKERS or detail.get("status") in PAYMENT_MARKERS


def fallback_payload(text: str) -> dict[str, Any]:
    return {
        "ok": False,
        "fallback": True,
        "provider": FALLBACK_PROVIDER,
        "text": text,
        "reason": FALLBACK_REASON,
    }


def get_tts_client(request: Request) -> ElevenLabsClient:
    return request.app.state.tts_client


@router.get("")
def tts_info() -> dict[str, Any]:
    return {
        "ok": True,
        "note": "Use POST /api/tts with body { text } to generate audio or fallback JSON.",
        "exampleCurl": 'curl -X POST http://localhost:8080/api/tts -H "Content-Type: application/json" -d \'{"text":"hello"}\'',
    }


@router.post("", dependencies=[Depends(enforce_rate_limit)])
async def synthesize_speech(request: Request, tts: ElevenLabsClient = Depends(get_tts_client)) -> Response:
    """
    Generate speech for { text } (max 400 chars).

    400 missing_text / text_too_long; 500 elevenlabs_not_configured when the
    key or voice id is a placeholder; otherwise 200 audio or fallback JSON.
    """
    payload = await read_json_body(request)
    text = payload.get("text") if isinstance(payload, dict) else None
    if not isinstance(text, str):
        raise MissingFieldError("text")
    if len(text) > MAX_TEXT_LENGTH:
        raise TextTooLongError()
    if not tts.configured:
        raise ProviderNotConfiguredError(code="elevenlabs_not_configured")

    try:
        audio = await tts.synthesize(text)
    except SpeechProviderError as e:
        logger.warning("tts_fallback", error=redact_secret(e, tts.api_key), text_len=len(text))
        return JSONResponse(status_code=200, content=fallback_payload(text))
    return Response(content=audio, media_type="audio/mpeg")
