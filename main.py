"""
Main entrypoint: FastAPI risk-scoring server.

Loads settings (API_HOST, API_PORT, LOG_LEVEL, RISKGUARD_RULES_PATH) and
builds the engine once before serving, so a broken rules override fails at
startup instead of on the first request.

API-only alternative: uvicorn backend_riskguard.api_server.app:app --host 0.0.0.0 --port 8000
"""

import sys

# Configure structured JSON logging before other imports that may log
from backend_riskguard.riskguard_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Validate the rules configuration, then run the FastAPI server in the main thread."""
    from backend_riskguard.analysis_engine import get_default_engine
    from backend_riskguard.config import get_settings
    from backend_riskguard.core.exceptions import ConfigurationError

    settings = get_settings()
    try:
        get_default_engine()
    except ConfigurationError as e:
        logger.error("main_config_error", message=e.message, rules_path=str(settings.rules_path))
        sys.exit(1)

    logger.info(
        "main_rules_loaded",
        source=str(settings.rules_path) if settings.rules_path else "embedded defaults",
    )

    from backend_riskguard.api_server.app import app
    import uvicorn

    logger.info("main_server_starting", host=settings.api_host, port=settings.api_port)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
