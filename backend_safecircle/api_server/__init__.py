"""
API server package: HTTP/REST interface.

Exposes scenario presets, risk assessment, the low-risk memory echo and the
speech proxy. Handles rate limiting and error shaping, and delegates to the
AI engine, analysis engine and memory store for data.
"""
