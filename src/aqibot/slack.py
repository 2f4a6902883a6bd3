"""
Slack wire formats: slash-command payloads and outgoing message delivery.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import parse_qs

import httpx

from .exceptions import NotifyFailed
from .models import OutboundMessage

# Form fields of a slash-command payload
PARAM_TEXT = "text"
PARAM_USER_ID = "user_id"
PARAM_RESPONSE_URL = "response_url"


@dataclass(frozen=True)
class SlashCommand:
    """
    The form fields of a slash-command request that aqibot uses.

    Attributes:
        text: Text typed after the command
        user_id: Slack id of the invoking user
        response_url: Callback URL for deferred replies, if provided
        user_name: Slack username of the invoking user
        channel_id: Channel the command was typed in
        command: The command itself, e.g. "/aqi"
    """
    text: str
    user_id: str
    response_url: str | None = None
    user_name: str | None = None
    channel_id: str | None = None
    command: str | None = None

    @classmethod
    def from_form(cls, body: bytes) -> SlashCommand:
        """Parse an application/x-www-form-urlencoded slash-command body."""
        params = parse_qs(body.decode("utf-8", errors="replace"), keep_blank_values=True)

        def first(key: str) -> str | None:
            values = params.get(key)
            return values[0] if values else None

        return cls(
            text=first(PARAM_TEXT) or "",
            user_id=first(PARAM_USER_ID) or "",
            response_url=first(PARAM_RESPONSE_URL) or None,
            user_name=first("user_name"),
            channel_id=first("channel_id"),
            command=first("command"),
        )


def _check_response(response: httpx.Response) -> None:
    # Slack answers webhooks and response_urls with a bare 200 "ok"
    if response.status_code > 200:
        raise NotifyFailed(f"Slack responded {response.status_code}: {response.text}")


class SlackNotifier:
    """
    Posts messages to Slack incoming webhooks and response_urls.

    Args:
        timeout_s: Request timeout in seconds. Default: 5.0
    """

    def __init__(self, timeout_s: float = 5.0):
        self.timeout_s = timeout_s

    async def notify(self, destination: str, message: OutboundMessage) -> None:
        """
        Deliver a message asynchronously.

        Raises:
            NotifyFailed: On network errors or a non-200 response
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s) as client:
                response = await client.post(destination, json=message.to_dict())
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NotifyFailed(f"Slack request failed: {e}") from e
        _check_response(response)

    def notify_sync(self, destination: str, message: OutboundMessage) -> None:
        """
        Deliver a message synchronously.

        Raises:
            NotifyFailed: On network errors or a non-200 response
        """
        try:
            with httpx.Client(timeout=self.timeout_s) as client:
                response = client.post(destination, json=message.to_dict())
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NotifyFailed(f"Slack request failed: {e}") from e
        _check_response(response)
