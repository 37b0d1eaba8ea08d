"""
Analysis engine: local risk scoring and scenario data.

Holds the request/response models, the deterministic fallback heuristic
and the static scenario catalog. No network access; everything here is pure.
"""

from backend_safecircle.analysis_engine.fallback import fallback_risk, risk_level_for_score
from backend_safecircle.analysis_engine.models import RiskResult, ScenarioInput, validate_scenario_payload
from backend_safecircle.analysis_engine.scenarios import list_scenarios

__all__ = [
    "RiskResult",
    "ScenarioInput",
    "fallback_risk",
    "list_scenarios",
    "risk_level_for_score",
    "validate_scenario_payload",
]
