"""
Lenient parsing of free-form model output into a RiskResult.

Two stages: strict JSON first, then the substring from the first '{' to the
last '}' (models like to wrap JSON in prose or code fences). Anything that
still fails, or carries a non-finite riskScore, yields None so the caller can
fall back to the local heuristic.
"""

from __future__ import annotations

import json
import math
from typing import Any

from backend_safecircle.analysis_engine.fallback import clamp_score, risk_level_for_score
from backend_safecircle.analysis_engine.models import RISK_LEVELS, RiskResult

TEXT_FIELDS = ("reasoning", "guardianMessage", "saferAction")


def parse_provider_json(text: str | None) -> dict[str, Any] | None:
    """Return the first JSON object found in text, or None."""
    if not text:
        return None
    text = text.strip()
    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        parsed = None
        first = text.find("{")
        last = text.rfind("}")
        if first != -1 and last > first:
            try:
                parsed = json.loads(text[first : last + 1])
            except (json.JSONDecodeError, ValueError):
                parsed = None
    return parsed if isinstance(parsed, dict) else None


def coerce_score(value: Any) -> float | None:
    """Return value as a finite float, or None. Numeric strings accepted; booleans are not."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        score = float(value)
    elif isinstance(value, str):
        try:
            score = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return score if math.isfinite(score) else None


def normalize_provider_result(parsed: dict[str, Any], model_name: str) -> RiskResult | None:
    """
    Shape a parsed provider object into a RiskResult tagged with model_name.

    riskScore is clamped to [0, 100] and rounded. The provider's own riskLevel
    is kept when it is LOW/MEDIUM/HIGH (any case); otherwise it is derived from
    the clamped score. Text fields are stringified, missing ones become "".
    """
    score = coerce_score(parsed.get("riskScore"))
    if score is None:
        return None
    score_int = int(round(clamp_score(score)))

    level = parsed.get("riskLevel")
    level = level.strip().upper() if isinstance(level, str) else None
    if level not in RISK_LEVELS:
        level = risk_level_for_score(score_int)

    texts = {}
    for field in TEXT_FIELDS:
        value = parsed.get(field)
        texts[field] = "" if value is None else str(value)

    return RiskResult(
        riskScore=score_int,
        riskLevel=level,
        model=model_name,
        **texts,
    )
