"""
AI engine: provider-backed risk assessment with local fallback.

RiskAssessor picks Gemini or the fallback heuristic per request;
response_parser turns model text into a validated RiskResult.
"""

from backend_safecircle.ai_engine.assessor import RiskAssessor

__all__ = ["RiskAssessor"]
