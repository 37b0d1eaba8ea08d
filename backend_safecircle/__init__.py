"""
Backend SafeCircle: risk-assessment and speech backend for a personal-safety companion app.

Scores walk/commute scenarios with Gemini when configured, falls back to a
deterministic local heuristic otherwise, remembers the last low-risk outcome,
and proxies text-to-speech to ElevenLabs with a browser fallback signal.
"""

__version__ = "0.1.0"
