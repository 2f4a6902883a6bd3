"""
Exceptions raised by aqibot.
"""


class AQIBotError(Exception):
    """Base class for aqibot errors."""


class FetchFailed(AQIBotError):
    """The air-quality provider did not return a usable reading."""


class NotifyFailed(AQIBotError):
    """A message could not be delivered to Slack."""


class ConfigError(AQIBotError):
    """Required configuration is missing or invalid."""
