"""
Main entrypoint: FastAPI server for transaction intake and fraud flagging.

Env: API_HOST, API_PORT, LOG_LEVEL, LOG_FORMAT, CORS_ORIGINS, SMTP_HOST, SMTP_PORT,
ALERT_EMAIL_FROM, ALERT_EMAIL_PASSWORD, ALERT_EMAIL_TO (see backend_fraudwatch.config).
Missing alert sender/recipient only disables email alerts; the server still starts.

Equivalent: uvicorn backend_fraudwatch.api_server.app:app --host 0.0.0.0 --port 8000
"""

from backend_fraudwatch.fraudwatch_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Build the app from env settings and serve it."""
    import uvicorn

    from backend_fraudwatch.api_server.server import create_app
    from backend_fraudwatch.config import get_settings

    settings = get_settings()
    app = create_app(settings)

    logger.info("main_server_starting", host=settings.api_host, port=settings.api_port)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
