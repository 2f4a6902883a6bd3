"""
Post the current San Francisco AQI to the configured Slack channel.

Meant to be run on a schedule (cron, Kubernetes CronJob).

Usage:
    AIRVISUAL_API_KEY=... SLACK_WEBHOOK=... aqibot-post
"""

from __future__ import annotations

import logging
import sys

from .airvisual import AirVisualClient
from .config import Settings
from .exceptions import AQIBotError
from .logging_setup import configure_logging
from .messages import aqi_message
from .models import LocationQuery, NamedCity
from .slack import SlackNotifier

logger = logging.getLogger(__name__)


def post_reading(
    settings: Settings,
    query: LocationQuery = NamedCity.SF.query,
    airvisual: AirVisualClient | None = None,
    notifier: SlackNotifier | None = None,
) -> int:
    """
    Fetch one reading and post it to the settings' webhook and channel.

    Returns:
        The AQI that was posted

    Raises:
        FetchFailed: If AirVisual did not return a reading
        NotifyFailed: If Slack rejected the message
    """
    if airvisual is None:
        airvisual = AirVisualClient(settings.airvisual_api_key, timeout_s=settings.http_timeout_s)
    if notifier is None:
        notifier = SlackNotifier(timeout_s=settings.http_timeout_s)

    aqi = airvisual.fetch_reading_sync(query)
    logger.info("AQI: `%d`", aqi)

    logger.info("Notifying slack channel `%s`", settings.slack_channel)
    notifier.notify_sync(settings.slack_webhook, aqi_message(aqi, query.city, channel=settings.slack_channel))
    return aqi


def main() -> int:
    try:
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        settings.validate_job()
        post_reading(settings)
    except AQIBotError as e:
        logger.error("AQI job failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
