"""
Provider-selecting risk assessor.

Decision sequence per request:
1. Placeholder / missing GEMINI_API_KEY → local fallback heuristic.
2. Call Gemini (bounded by timeout). Any error or timeout → fallback.
3. Parse the response (strict JSON, then brace slice). Unparseable output or
   non-finite riskScore → fallback.
4. Clamp riskScore, keep the provider's riskLevel and text, tag model="gemini".

After either path a LOW result is written to the memory store. Provider
failures never reach the caller; only the `model` field reveals the path.
"""

from __future__ import annotations

import asyncio
from typing import Any

from backend_safecircle.ai_engine.gemini_provider import PROVIDER_NAME, GeminiProvider, build_risk_prompt
from backend_safecircle.ai_engine.response_parser import normalize_provider_result, parse_provider_json
from backend_safecircle.analysis_engine.fallback import fallback_risk
from backend_safecircle.analysis_engine.models import RISK_LOW, RiskResult, ScenarioInput
from backend_safecircle.behavioral_memory.store import MemoryStore
from backend_safecircle.config.env import is_placeholder_key
from backend_safecircle.safecircle_logging import bind_scenario, redact_secret

DEFAULT_PROVIDER_TIMEOUT_SEC = 15.0


class RiskAssessor:
    """
    Assess scenarios with Gemini when configured, else with the local heuristic.

    provider: object with `name` and `async generate(prompt) -> str`. When
    omitted and the key is real, a GeminiProvider is built on first use.
    """

    def __init__(
        self,
        api_key: str | None,
        memory_store: MemoryStore,
        *,
        provider: Any = None,
        model: str = "gemini-1.5-flash",
        timeout_sec: float = DEFAULT_PROVIDER_TIMEOUT_SEC,
    ):
        self._api_key = api_key
        self.memory_store = memory_store
        self._provider = provider
        self.model = model
        self.timeout_sec = timeout_sec

    @property
    def provider_configured(self) -> bool:
        return not is_placeholder_key(self._api_key)

    def _get_provider(self) -> Any:
        if self._provider is None:
            self._provider = GeminiProvider(self._api_key or "", self.model)
        return self._provider

    async def assess(self, scenario: ScenarioInput) -> RiskResult:
        """Return a RiskResult for scenario. Never raises for provider problems."""
        log = bind_scenario(scenario.scenarioId, __name__)
        result = await self._compute(scenario, log)
        self._remember(scenario, result, log)
        log.info(
            "risk_assessed",
            risk_score=result.riskScore,
            risk_level=result.riskLevel,
            model=result.model,
        )
        return result

    async def _compute(self, scenario: ScenarioInput, log: Any) -> RiskResult:
        if not self.provider_configured:
            log.debug("risk_assess_fallback", reason="provider_not_configured")
            return fallback_risk(scenario)

        try:
            provider = self._get_provider()
            prompt = build_risk_prompt(scenario.model_dump())
            text = await asyncio.wait_for(provider.generate(prompt), timeout=self.timeout_sec)
        except asyncio.TimeoutError:
            log.warning("risk_provider_timeout", timeout_sec=self.timeout_sec)
            return fallback_risk(scenario)
        except Exception as e:
            log.warning(
                "risk_provider_error",
                error_type=type(e).__name__,
                error=redact_secret(e, self._api_key),
            )
            return fallback_risk(scenario)

        parsed = parse_provider_json(text)
        result = normalize_provider_result(parsed, getattr(provider, "name", PROVIDER_NAME)) if parsed else None
        if result is None:
            log.warning("risk_provider_unparseable", response_len=len(text or ""))
            return fallback_risk(scenario)
        return result

    def _remember(self, scenario: ScenarioInput, result: RiskResult, log: Any) -> None:
        """Persist LOW outcomes; failures are logged, never raised."""
        if result.riskLevel != RISK_LOW:
            return
        try:
            self.memory_store.remember_low(scenario.scenarioId, result.saferAction)
        except Exception as e:
            log.error("memory_update_failed", error=str(e))

