"""
FastAPI server: SafeCircle HTTP API.

create_app() builds the application with explicitly owned state on app.state:
the RateGovernor, the MemoryStore (loaded once here), the RiskAssessor and
the ElevenLabs client. Tests build isolated apps with injected collaborators;
production uses the module-level app in api_server.app.
"""

from __future__ import annotations

import threading
import time
from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend_safecircle import __version__
from backend_safecircle.ai_engine.assessor import RiskAssessor
from backend_safecircle.api_server.middleware import RateGovernor, run_reaper_loop
from backend_safecircle.api_server.routes import router as risk_router
from backend_safecircle.api_server.tts import ElevenLabsClient
from backend_safecircle.api_server.tts import router as tts_router
from backend_safecircle.behavioral_memory.store import MemoryStore
from backend_safecircle.config.settings import Settings, get_settings
from backend_safecircle.core.exceptions import SafeCircleError
from backend_safecircle.safecircle_logging import get_logger

logger = get_logger(__name__)

SERVICE_NAME = "SafeCircle Backend"
REAPER_SHUTDOWN_JOIN_SEC = 5.0


# -----------------------------------------------------------------------------
# Lifespan: start background rate-table reaper (never blocks API)
# -----------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the rate-limit reaper in a daemon thread; signal stop on shutdown."""
    governor: RateGovernor = app.state.rate_governor
    stop_event = threading.Event()
    thread = threading.Thread(
        target=run_reaper_loop,
        args=(governor, stop_event, governor.window_sec),
        name="rate-reaper",
        daemon=True,
    )
    thread.start()

    yield

    stop_event.set()
    thread.join(timeout=REAPER_SHUTDOWN_JOIN_SEC)
    if thread.is_alive():
        logger.warning("rate_reaper_shutdown_timeout", timeout_sec=REAPER_SHUTDOWN_JOIN_SEC)


# -----------------------------------------------------------------------------
# Exception handlers
# -----------------------------------------------------------------------------


def safecircle_error_handler(request: Request, exc: SafeCircleError) -> JSONResponse:
    """Stable {"error": code} body for every domain error."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.code})


def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Any:
    """Unmatched routes and wrong methods: plain-text 404. Anything else keeps its status."""
    if exc.status_code in (404, 405):
        return PlainTextResponse("Not Found", status_code=404)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log server-side, return a generic 500 with no internal detail."""
    logger.exception("unhandled_error", path=request.url.path, error_type=type(exc).__name__)
    return JSONResponse(status_code=500, content={"error": "server_error"})


# -----------------------------------------------------------------------------
# App factory
# -----------------------------------------------------------------------------


def create_app(
    settings: Settings | None = None,
    *,
    provider: Any = None,
    tts_transport: httpx.AsyncBaseTransport | None = None,
    clock: Any = None,
) -> FastAPI:
    """
    Build the FastAPI app.

    provider: optional risk provider override (tests); default is Gemini built lazily.
    tts_transport: optional httpx transport for the ElevenLabs client (tests).
    clock: optional monotonic clock for the rate governor (tests).
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Backend SafeCircle API",
        description="Scenario risk assessment (Gemini or local fallback) and speech proxy.",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
    )

    governor_kwargs: dict[str, Any] = {
        "window_sec": settings.rate_limit_window_sec,
        "max_requests": settings.rate_limit_max,
    }
    if clock is not None:
        governor_kwargs["clock"] = clock
    app.state.rate_governor = RateGovernor(**governor_kwargs)

    memory_store = MemoryStore(settings.memory_path)
    memory_store.load()
    app.state.memory_store = memory_store

    app.state.assessor = RiskAssessor(
        settings.gemini_api_key,
        memory_store,
        provider=provider,
        model=settings.gemini_model,
        timeout_sec=settings.gemini_timeout_sec,
    )
    app.state.tts_client = ElevenLabsClient(
        settings.elevenlabs_api_key,
        settings.elevenlabs_voice_id,
        model_id=settings.elevenlabs_model_id,
        timeout_sec=settings.elevenlabs_timeout_sec,
        transport=tts_transport,
    )
    app.state.settings = settings

    if settings.allowed_origin:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[settings.allowed_origin],
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    app.add_exception_handler(SafeCircleError, safecircle_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/")
    def index() -> dict[str, Any]:
        return {
            "ok": True,
            "name": SERVICE_NAME,
            "message": "Backend is running. Visit /health or /api/docs",
            "links": {
                "health": "/health",
                "docs": "/api/docs",
                "scenarios": "/api/scenarios",
                "risk": "/api/risk-assess",
                "memory": "/api/memory-echo",
                "ttsInfo": "/api/tts",
            },
        }

    @app.get("/health")
    def health() -> dict[str, Any]:
        """Liveness probe: API is up."""
        return {"ok": True, "ts": int(time.time() * 1000)}

    app.include_router(risk_router, prefix="/api")
    app.include_router(tts_router, prefix="/api")

    logger.info(
        "api_app_created",
        gemini_configured=app.state.assessor.provider_configured,
        tts_configured=app.state.tts_client.configured,
        memory_path=str(settings.memory_path),
        rate_limit_max=settings.rate_limit_max,
        rate_limit_window_sec=settings.rate_limit_window_sec,
    )
    return app
