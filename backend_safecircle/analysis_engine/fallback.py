"""
Fallback risk heuristic: deterministic weighted sum over scenario attributes.

This is the system of record whenever Gemini is not configured or fails.
Pure and total: missing or unexpected values simply contribute zero.

Weights: night +25, alone +25, industrial +20 (downtown +10),
poor lighting +20 (mixed +10). Level: >=70 HIGH, 40-69 MEDIUM, else LOW.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from backend_safecircle.analysis_engine.models import (
    MODEL_FALLBACK,
    RISK_HIGH,
    RISK_LOW,
    RISK_MEDIUM,
    RiskResult,
    ScenarioInput,
)

SCORE_MIN = 0
SCORE_MAX = 100
HIGH_THRESHOLD = 70
MEDIUM_THRESHOLD = 40

WEIGHT_NIGHT = 25
WEIGHT_ALONE = 25
WEIGHT_INDUSTRIAL = 20
WEIGHT_DOWNTOWN = 10
WEIGHT_POOR_LIGHTING = 20
WEIGHT_MIXED_LIGHTING = 10

GUARDIAN_MESSAGES = {
    RISK_HIGH: "High risk detected. Stay alert and consider contacting someone you trust.",
    RISK_MEDIUM: "Moderate risk detected. Stay aware of your surroundings.",
    RISK_LOW: "Low risk detected. Exercise normal caution.",
}

SAFER_ACTIONS = {
    RISK_HIGH: "Avoid the route if possible, choose a well-lit path, or ask someone to accompany you.",
    RISK_MEDIUM: "Prefer well-lit routes and stay in populated areas.",
    RISK_LOW: "Proceed but remain aware of surroundings.",
}


def clamp_score(value: float, lo: int = SCORE_MIN, hi: int = SCORE_MAX) -> float:
    return lo if value < lo else hi if value > hi else value


def risk_level_for_score(score: float) -> str:
    """Map a 0–100 score to LOW / MEDIUM / HIGH."""
    if score >= HIGH_THRESHOLD:
        return RISK_HIGH
    if score >= MEDIUM_THRESHOLD:
        return RISK_MEDIUM
    return RISK_LOW


def _echo(value: Any) -> str:
    # strings verbatim; bools/None/numbers as JSON literals (true, false, null)
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return str(value)


def fallback_risk(scenario: Mapping[str, Any] | ScenarioInput) -> RiskResult:
    """
    Compute a risk result locally from the four scenario attributes.

    Accepts a validated ScenarioInput or a raw mapping; absent keys count as
    falsy. Same input always yields the same output.
    """
    data: Mapping[str, Any] = scenario.model_dump() if isinstance(scenario, ScenarioInput) else (scenario or {})
    time_of_day = data.get("timeOfDay")
    user_alone = data.get("userAlone")
    neighborhood = data.get("neighborhoodType")
    lighting = data.get("routeLighting")

    score = 0
    if time_of_day == "night":
        score += WEIGHT_NIGHT
    if user_alone is True:
        score += WEIGHT_ALONE
    if neighborhood == "industrial":
        score += WEIGHT_INDUSTRIAL
    elif neighborhood == "downtown":
        score += WEIGHT_DOWNTOWN
    if lighting == "poor":
        score += WEIGHT_POOR_LIGHTING
    elif lighting == "mixed":
        score += WEIGHT_MIXED_LIGHTING

    score = int(clamp_score(score))
    level = risk_level_for_score(score)

    reasoning = (
        "Score computed from inputs: "
        f"timeOfDay={_echo(time_of_day)}, userAlone={_echo(user_alone)}, "
        f"neighborhoodType={_echo(neighborhood)}, routeLighting={_echo(lighting)}"
    )
    return RiskResult(
        riskScore=score,
        riskLevel=level,
        reasoning=reasoning,
        guardianMessage=GUARDIAN_MESSAGES[level],
        saferAction=SAFER_ACTIONS[level],
        model=MODEL_FALLBACK,
    )
