"""Preset scenarios served by GET /api/scenarios. Static; not user-mutable."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any

SCENARIOS: tuple[MappingProxyType, ...] = tuple(
    MappingProxyType(s)
    for s in (
        {
            "scenarioId": "s1",
            "displayName": "Morning commute",
            "timeOfDay": "day",
            "userAlone": False,
            "neighborhoodType": "downtown",
            "routeLighting": "good",
        },
        {
            "scenarioId": "s2",
            "displayName": "Late night walk",
            "timeOfDay": "night",
            "userAlone": True,
            "neighborhoodType": "residential",
            "routeLighting": "poor",
        },
        {
            "scenarioId": "s3",
            "displayName": "Evening shift exit",
            "timeOfDay": "night",
            "userAlone": False,
            "neighborhoodType": "industrial",
            "routeLighting": "mixed",
        },
        {
            "scenarioId": "s4",
            "displayName": "Afternoon stroll",
            "timeOfDay": "day",
            "userAlone": True,
            "neighborhoodType": "residential",
            "routeLighting": "good",
        },
        {
            "scenarioId": "s5",
            "displayName": "Late evening errand",
            "timeOfDay": "night",
            "userAlone": True,
            "neighborhoodType": "downtown",
            "routeLighting": "mixed",
        },
    )
)


def list_scenarios() -> list[dict[str, Any]]:
    """Return fresh dict copies so callers cannot mutate the catalog."""
    return [dict(s) for s in SCENARIOS]
