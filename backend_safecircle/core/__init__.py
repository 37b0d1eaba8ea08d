"""
Core utilities: shared exceptions and cross-cutting concerns.

Provides the error taxonomy used by the risk assessor, speech proxy and
API server.
"""
