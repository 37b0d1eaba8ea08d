"""
Data models for scenario risk assessment.

ScenarioInput is what the client submits; RiskResult is what every
assessment path (Gemini or local fallback) returns. Field names are the
camelCase wire names the mobile client already speaks.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from backend_safecircle.core.exceptions import InvalidJSONError, MissingFieldError

RISK_LOW = "LOW"
RISK_MEDIUM = "MEDIUM"
RISK_HIGH = "HIGH"
RISK_LEVELS = (RISK_LOW, RISK_MEDIUM, RISK_HIGH)

MODEL_FALLBACK = "fallback"

# Checked in this order; the first missing one names the 400 error code
REQUIRED_SCENARIO_FIELDS = (
    "scenarioId",
    "timeOfDay",
    "userAlone",
    "neighborhoodType",
    "routeLighting",
)


class ScenarioInput(BaseModel):
    """
    POST /api/risk-assess body. Extra keys are ignored.

    Values are taken as sent (null and odd types included); the fallback
    heuristic treats anything unrecognized as contributing zero.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    scenarioId: Any = Field(..., description="Client scenario identifier (preset id or custom)")
    timeOfDay: Any = Field(..., description="day | night")
    userAlone: Any = Field(..., description="True if the user is walking alone")
    neighborhoodType: Any = Field(..., description="downtown | residential | industrial | free-form")
    routeLighting: Any = Field(..., description="good | mixed | poor")


class RiskResult(BaseModel):
    """Risk assessment returned to the client; model names the path that produced it."""

    riskScore: int = Field(..., ge=0, le=100, description="Risk score (0–100)")
    riskLevel: Literal["LOW", "MEDIUM", "HIGH"]
    reasoning: str = ""
    guardianMessage: str = ""
    saferAction: str = ""
    model: str = MODEL_FALLBACK


def validate_scenario_payload(payload: Any) -> ScenarioInput:
    """
    Validate a decoded JSON body into a ScenarioInput.

    Raises InvalidJSONError if payload is not an object and MissingFieldError
    for the first absent required field. Only presence is checked; missing
    fields are never defaulted.
    """
    if not isinstance(payload, dict):
        raise InvalidJSONError()
    for field in REQUIRED_SCENARIO_FIELDS:
        if field not in payload:
            raise MissingFieldError(field)
    return ScenarioInput.model_validate(payload)
