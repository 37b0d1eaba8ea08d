"""
Gemini risk provider: async wrapper over the google-genai SDK.

The SDK call is blocking, so it runs in a worker thread; the assessor bounds
it with a timeout. Returns the raw response text and leaves parsing to
response_parser.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

from google import genai
from google.genai import types

from backend_safecircle.core.exceptions import ProviderError

PROVIDER_NAME = "gemini"

PROMPT_TEMPLATE = """Given the scenario input: {scenario_json}

Return STRICT JSON ONLY (no markdown, no backticks) with keys:
- riskScore (number 0-100)
- riskLevel ("LOW"|"MEDIUM"|"HIGH")
- reasoning (1-2 short sentences)
- guardianMessage (supportive)
- saferAction (one actionable)

Respond with only the JSON object."""


def build_risk_prompt(scenario: dict[str, Any]) -> str:
    return PROMPT_TEMPLATE.format(scenario_json=json.dumps(scenario))


class GeminiProvider:
    """Generates risk JSON text with a Gemini model."""

    name = PROVIDER_NAME

    def __init__(self, api_key: str, model: str):
        self.model = model
        self._client = genai.Client(api_key=api_key)

    async def generate(self, prompt: str) -> str:
        response = await asyncio.to_thread(
            self._client.models.generate_content,
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                temperature=0,
                response_mime_type="application/json",
            ),
        )
        text = (response.text or "").strip()
        if not text:
            raise ProviderError(message="empty response from Gemini")
        return text
