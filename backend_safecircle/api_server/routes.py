"""
API route definitions: scenario catalog, risk assessment, memory echo, docs.

Handlers are thin: validate the body, delegate to the RiskAssessor /
MemoryStore held on app.state, and return JSON. Errors are raised as
SafeCircleError subclasses and rendered by the server's exception handlers.
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Depends, Request

from backend_safecircle.ai_engine.assessor import RiskAssessor
from backend_safecircle.analysis_engine.models import validate_scenario_payload
from backend_safecircle.analysis_engine.scenarios import list_scenarios
from backend_safecircle.api_server.middleware import enforce_rate_limit
from backend_safecircle.behavioral_memory.store import MemoryStore
from backend_safecircle.core.exceptions import InvalidJSONError

router = APIRouter(tags=["risk"])

SAMPLE_SCENARIO = {
    "scenarioId": "s1",
    "timeOfDay": "day",
    "userAlone": False,
    "neighborhoodType": "residential",
    "routeLighting": "good",
}

ENDPOINT_CATALOG: list[dict[str, Any]] = [
    {
        "method": "GET",
        "path": "/health",
        "description": "Liveness check",
        "responseExample": {"ok": True, "ts": 1670000000000},
    },
    {
        "method": "GET",
        "path": "/api/scenarios",
        "description": "List preset scenarios",
        "responseExample": [{"scenarioId": "s1", "displayName": "Morning commute"}],
    },
    {
        "method": "POST",
        "path": "/api/risk-assess",
        "description": "Assess risk for a scenario (uses Gemini or fallback)",
        "requestExample": SAMPLE_SCENARIO,
        "responseExample": {
            "riskScore": 12,
            "riskLevel": "LOW",
            "reasoning": "...",
            "guardianMessage": "...",
            "saferAction": "...",
            "model": "fallback",
        },
    },
    {
        "method": "GET",
        "path": "/api/memory-echo",
        "description": "Return last saved low-risk memory (if any)",
        "responseExample": {"hasMemory": False, "lastLowScenarioId": None, "lastSaferAction": None},
    },
    {
        "method": "GET",
        "path": "/api/tts",
        "description": "TTS usage info (call POST /api/tts to generate audio)",
        "responseExample": {"ok": True, "note": "Use POST /api/tts with body { text }..."},
    },
    {
        "method": "POST",
        "path": "/api/tts",
        "description": "Generate speech audio or return safe fallback JSON",
        "requestExample": {"text": "Hello"},
        "responseExample": 'audio/mpeg bytes OR { ok:false, fallback:true, provider:"browser_tts", text: "...", reason: "elevenlabs_unavailable" }',
    },
]


async def read_json_body(request: Request) -> Any:
    """Decoded JSON body; {} when the body is empty, None when it is not valid JSON."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def get_assessor(request: Request) -> RiskAssessor:
    return request.app.state.assessor


def get_memory_store(request: Request) -> MemoryStore:
    return request.app.state.memory_store


@router.get("/scenarios")
def scenarios() -> list[dict[str, Any]]:
    return list_scenarios()


@router.get("/memory-echo")
def memory_echo(store: MemoryStore = Depends(get_memory_store)) -> dict[str, Any]:
    """Last saved low-risk memory (hasMemory false until the first LOW result)."""
    return store.current().to_dict()


@router.get("/docs")
def docs() -> dict[str, Any]:
    """Static machine-readable endpoint catalog."""
    return {"endpoints": ENDPOINT_CATALOG}


@router.post("/risk-assess", dependencies=[Depends(enforce_rate_limit)])
async def risk_assess(request: Request, assessor: RiskAssessor = Depends(get_assessor)) -> dict[str, Any]:
    """
    Assess a scenario. 400 missing_<field> for absent fields, invalid_json for an undecodable body;
    otherwise always 200 with a RiskResult (model tells which path served it).
    """
    payload = await read_json_body(request)
    if payload is None:
        raise InvalidJSONError()
    scenario = validate_scenario_payload(payload)
    result = await assessor.assess(scenario)
    return result.model_dump()
