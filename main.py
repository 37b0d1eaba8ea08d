"""
Main entrypoint: FastAPI server for SafeCircle.

Reads settings from env / .env (PORT, API_HOST, GEMINI_API_KEY,
ELEVENLABS_API_KEY, ELEVENLABS_VOICE_ID, ALLOWED_ORIGIN, SAFECIRCLE_MEMORY_PATH,
LOG_LEVEL, ...), builds the app and serves it with uvicorn.

Equivalent: uvicorn backend_safecircle.api_server.app:app --host 0.0.0.0 --port 8080
"""

# Configure structured JSON logging before other imports that may log
from backend_safecircle.safecircle_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Build the app from environment settings and run uvicorn in the main thread."""
    from backend_safecircle.api_server.server import create_app
    from backend_safecircle.config.settings import get_settings
    import uvicorn

    settings = get_settings()
    app = create_app(settings)

    logger.info("main_server_starting", host=settings.api_host, port=settings.port)
    uvicorn.run(app, host=settings.api_host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
