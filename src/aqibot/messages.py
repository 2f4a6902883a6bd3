"""
Slack message formatting for AQI readings.
"""

from .models import OutboundMessage

USERNAME = "AQI Bot"

RESPONSE_TYPE_IN_CHANNEL = "in_channel"
RESPONSE_TYPE_EPHEMERAL = "ephemeral"

HEALTHY_EMOJI = ":slightly_smiling_face:"
UNHEALTHY_EMOJI = ":mask:"
TOXIC_EMOJI = ":skull_and_crossbones:"
BOT_EMOJI = ":cloud:"

# Cigarettes smoked per day per point of US AQI
CIGARETTES_PER_AQI = 0.04631

ERROR_TEXT = "Oops! Something's not quite right"
MALFORMED_TEXT = (
    "Sorry, I couldn't understand that. "
    'Try `city "San Francisco" California USA`, or one of sf, nyc, seattle, la.'
)
BLOCKED_TEXT = "no"


def emoji_for_aqi(aqi: int) -> str:
    if aqi <= 50:
        return HEALTHY_EMOJI
    if aqi <= 200:
        return UNHEALTHY_EMOJI
    return TOXIC_EMOJI


def num_cigarettes(aqi: int) -> float:
    return aqi * CIGARETTES_PER_AQI


def aqi_message(aqi: int, city: str, channel: str | None = None) -> OutboundMessage:
    """Message reporting the current AQI for a city."""
    emoji = emoji_for_aqi(aqi)
    return OutboundMessage(
        response_type=RESPONSE_TYPE_IN_CHANNEL,
        text=f"{city} current AQI: `{aqi}` {emoji}",
        username=USERNAME,
        icon_emoji=emoji,
        channel=channel,
    )


def cigarettes_message(aqi: int, city: str) -> OutboundMessage:
    """Message reporting the AQI as a cigarettes-per-day equivalent."""
    return OutboundMessage(
        response_type=RESPONSE_TYPE_IN_CHANNEL,
        text=f"{city} number of cigarettes: `{num_cigarettes(aqi):.2f}`",
        username=USERNAME,
        icon_emoji=emoji_for_aqi(aqi),
    )


def blocked_message() -> OutboundMessage:
    return OutboundMessage(
        response_type=RESPONSE_TYPE_IN_CHANNEL,
        text=BLOCKED_TEXT,
        username=USERNAME,
        icon_emoji=BOT_EMOJI,
    )


def malformed_message() -> OutboundMessage:
    return OutboundMessage(
        response_type=RESPONSE_TYPE_EPHEMERAL,
        text=MALFORMED_TEXT,
        username=USERNAME,
        icon_emoji=BOT_EMOJI,
    )


def error_message() -> OutboundMessage:
    return OutboundMessage(
        response_type=RESPONSE_TYPE_EPHEMERAL,
        text=ERROR_TEXT,
        username=USERNAME,
        icon_emoji=BOT_EMOJI,
    )
