"""
Data model for the last-low-risk memory.

Holds only a scenario identifier and the generic safer-action text; no
location, no user identity.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class MemoryRecord:
    """
    Last LOW-risk outcome, persisted as JSON.

    hasMemory is False until the first LOW result is recorded.
    """

    hasMemory: bool = False
    lastLowScenarioId: str | None = None
    lastSaferAction: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "hasMemory": self.hasMemory,
            "lastLowScenarioId": self.lastLowScenarioId,
            "lastSaferAction": self.lastSaferAction,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MemoryRecord:
        """Coerce a decoded JSON object; falsy ids/text become None."""
        scenario_id = data.get("lastLowScenarioId")
        safer_action = data.get("lastSaferAction")
        return cls(
            hasMemory=bool(data.get("hasMemory")),
            lastLowScenarioId=str(scenario_id) if scenario_id else None,
            lastSaferAction=str(safer_action) if safer_action else None,
        )
