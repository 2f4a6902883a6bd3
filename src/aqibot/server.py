"""
Run the slash-command server with uvicorn.

Usage:
    SLACK_SIGNATURE_SECRET=... AIRVISUAL_API_KEY=... aqibot-server

Environment variables: see aqibot.config.Settings.from_env.
"""

import logging
import sys

import uvicorn

from .app import create_app
from .config import Settings
from .exceptions import ConfigError
from .logging_setup import configure_logging

logger = logging.getLogger(__name__)


def main() -> int:
    try:
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        settings.validate_server()
        app = create_app(settings)
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    logger.info(
        "Starting AQI Bot on %s:%d (deferred responses: %s)",
        settings.host,
        settings.port,
        settings.deferred_responses,
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
