"""
Tests for the provider-selecting RiskAssessor (ai_engine.assessor).

Gemini is replaced by FakeProvider from conftest; coroutines are driven with
asyncio.run so no async test plugin is needed.
"""

from __future__ import annotations

import asyncio
import json
from unittest.mock import MagicMock

from structlog.testing import capture_logs

from backend_safecircle.ai_engine.assessor import RiskAssessor
from backend_safecircle.analysis_engine.models import ScenarioInput
from backend_safecircle.behavioral_memory.store import MemoryStore

HIGH_SCENARIO = ScenarioInput(
    scenarioId="s-high",
    timeOfDay="night",
    userAlone=True,
    neighborhoodType="industrial",
    routeLighting="poor",
)
LOW_SCENARIO = ScenarioInput(
    scenarioId="s1",
    timeOfDay="day",
    userAlone=False,
    neighborhoodType="downtown",
    routeLighting="good",
)

PROVIDER_JSON = json.dumps(
    {
        "riskScore": 35,
        "riskLevel": "LOW",
        "reasoning": "Daylight and company.",
        "guardianMessage": "Enjoy your walk.",
        "saferAction": "Keep your phone charged.",
    }
)


def _store(memory_path):
    store = MemoryStore(memory_path)
    store.load()
    return store


def test_placeholder_key_uses_fallback_without_calling_provider(memory_path, make_provider):
    provider = make_provider(text=PROVIDER_JSON)
    for key in (None, "", "your-api-key-here", "YOUR_KEY", "Placeholder", "change-me", "sk-XXXX"):
        assessor = RiskAssessor(key, _store(memory_path), provider=provider)
        result = asyncio.run(assessor.assess(HIGH_SCENARIO))
        assert result.model == "fallback"
        assert result.riskScore == 90
    assert provider.prompts == []


def test_provider_result_used_when_key_configured(memory_path, make_provider, gemini_key):
    provider = make_provider(text=PROVIDER_JSON)
    assessor = RiskAssessor(gemini_key, _store(memory_path), provider=provider)
    result = asyncio.run(assessor.assess(HIGH_SCENARIO))
    assert result.model == "gemini"
    assert result.riskScore == 35
    assert result.riskLevel == "LOW"
    assert result.saferAction == "Keep your phone charged."
    # prompt embeds the scenario and asks for strict JSON
    assert '"scenarioId": "s-high"' in provider.prompts[0]
    assert "STRICT JSON" in provider.prompts[0]


def test_provider_score_clamped(memory_path, make_provider, gemini_key):
    provider = make_provider(text='{"riskScore": 250, "riskLevel": "HIGH", "reasoning": "x", "guardianMessage": "y", "saferAction": "z"}')
    assessor = RiskAssessor(gemini_key, _store(memory_path), provider=provider)
    result = asyncio.run(assessor.assess(LOW_SCENARIO))
    assert result.riskScore == 100
    assert result.riskLevel == "HIGH"


def test_verbose_provider_output_parsed(memory_path, make_provider, gemini_key):
    provider = make_provider(text=f"Here is the assessment:\n{PROVIDER_JSON}\nThanks!")
    assessor = RiskAssessor(gemini_key, _store(memory_path), provider=provider)
    assert asyncio.run(assessor.assess(HIGH_SCENARIO)).model == "gemini"


def test_unparseable_output_falls_back(memory_path, make_provider, gemini_key):
    for text in ("I cannot help with that.", '{"riskScore": "unknown"}', '{"riskScore": NaN}', ""):
        assessor = RiskAssessor(gemini_key, _store(memory_path), provider=make_provider(text=text))
        result = asyncio.run(assessor.assess(HIGH_SCENARIO))
        assert result.model == "fallback"
        assert result.riskScore == 90


def test_provider_error_falls_back_and_logs_redacted_key(memory_path, make_provider, gemini_key):
    provider = make_provider(exc=RuntimeError(f"403 for key {gemini_key}"))
    assessor = RiskAssessor(gemini_key, _store(memory_path), provider=provider)
    with capture_logs() as logs:
        result = asyncio.run(assessor.assess(HIGH_SCENARIO))
    assert result.model == "fallback"
    assert result.riskLevel == "HIGH"

    assert all(gemini_key not in str(entry) for entry in logs)
    errors = [e for e in logs if e["event"] == "risk_provider_error"]
    assert len(errors) == 1
    assert errors[0]["error"] == "403 for key [REDACTED]"
    assert errors[0]["scenario_id"] == "s-high"


def test_provider_timeout_falls_back(memory_path, make_provider, gemini_key):
    provider = make_provider(text=PROVIDER_JSON, delay=1.0)
    assessor = RiskAssessor(gemini_key, _store(memory_path), provider=provider, timeout_sec=0.05)
    result = asyncio.run(assessor.assess(HIGH_SCENARIO))
    assert result.model == "fallback"


def test_low_result_updates_memory(memory_path):
    store = _store(memory_path)
    assessor = RiskAssessor(None, store)
    result = asyncio.run(assessor.assess(LOW_SCENARIO))
    assert result.riskLevel == "LOW"
    record = store.current()
    assert record.hasMemory is True
    assert record.lastLowScenarioId == "s1"
    assert record.lastSaferAction == result.saferAction
    assert json.loads(memory_path.read_text(encoding="utf-8"))["lastLowScenarioId"] == "s1"


def test_high_result_leaves_memory_untouched(memory_path):
    store = _store(memory_path)
    assessor = RiskAssessor(None, store)
    asyncio.run(assessor.assess(LOW_SCENARIO))
    asyncio.run(assessor.assess(HIGH_SCENARIO))
    record = store.current()
    assert record.lastLowScenarioId == "s1"


def test_provider_low_result_updates_memory_with_provider_action(memory_path, make_provider, gemini_key):
    store = _store(memory_path)
    assessor = RiskAssessor(gemini_key, store, provider=make_provider(text=PROVIDER_JSON))
    asyncio.run(assessor.assess(HIGH_SCENARIO))
    record = store.current()
    assert record.lastLowScenarioId == "s-high"
    assert record.lastSaferAction == "Keep your phone charged."


def test_memory_failure_does_not_break_response():
    store = MagicMock()
    store.remember_low.side_effect = OSError("disk full")
    assessor = RiskAssessor(None, store)
    result = asyncio.run(assessor.assess(LOW_SCENARIO))
    assert result.riskLevel == "LOW"
    store.remember_low.assert_called_once()


def test_provider_configured_flag(memory_path, gemini_key):
    assert RiskAssessor(gemini_key, _store(memory_path)).provider_configured is True
    assert RiskAssessor("REPLACE_ME", _store(memory_path)).provider_configured is False


def test_gemini_provider_calls_sdk_and_rejects_empty_text():
    """GeminiProvider passes model/prompt to google-genai and raises ProviderError on empty output."""
    from types import SimpleNamespace
    from unittest.mock import patch

    import pytest

    from backend_safecircle.ai_engine.gemini_provider import GeminiProvider
    from backend_safecircle.core.exceptions import ProviderError

    with patch("backend_safecircle.ai_engine.gemini_provider.genai.Client") as client_cls:
        sdk = client_cls.return_value
        sdk.models.generate_content.return_value = SimpleNamespace(text='  {"riskScore": 5}  ')
        provider = GeminiProvider("AIzaSy-test", "gemini-1.5-flash")
        assert asyncio.run(provider.generate("prompt")) == '{"riskScore": 5}'
        client_cls.assert_called_once_with(api_key="AIzaSy-test")
        kwargs = sdk.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-1.5-flash"
        assert kwargs["contents"] == "prompt"

        sdk.models.generate_content.return_value = SimpleNamespace(text=None)
        with pytest.raises(ProviderError):
            asyncio.run(provider.generate("prompt"))
