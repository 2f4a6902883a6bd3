"""
Turns a ResolvedCommand into the reply Slack sees.

In Immediate mode the reading is fetched inline and returned as the HTTP
response. In Deferred mode Slack gets a bare acknowledgment and the message is
posted to the request's response_url from a detached asyncio task.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Coroutine

from .exceptions import FetchFailed, NotifyFailed
from .messages import (
    aqi_message,
    blocked_message,
    cigarettes_message,
    error_message,
    malformed_message,
    RESPONSE_TYPE_IN_CHANNEL,
)
from .models import (
    BlockedUser,
    CigaretteEquivalent,
    Deferred,
    Immediate,
    LocationQuery,
    Malformed,
    OutboundMessage,
    ResolvedCommand,
    ResponseMode,
    SlashResponse,
    location_for,
)

logger = logging.getLogger(__name__)

FetchReading = Callable[[LocationQuery], Awaitable[int]]
Notify = Callable[[str, OutboundMessage], Awaitable[None]]

ACKNOWLEDGMENT = {"response_type": RESPONSE_TYPE_IN_CHANNEL}


def select_mode(deferred_enabled: bool, response_url: str | None) -> ResponseMode:
    """
    Pick the response mode for a request.

    Deferred delivery needs somewhere to deliver to, so a request without a
    response_url is answered immediately even when deferral is configured.
    """
    if deferred_enabled and response_url:
        return Deferred(response_url)
    if deferred_enabled:
        logger.warning("Deferred responses enabled but request has no response_url")
    return Immediate()


def format_reading(command: ResolvedCommand, aqi: int, city: str) -> OutboundMessage:
    if isinstance(command, CigaretteEquivalent):
        return cigarettes_message(aqi, city)
    return aqi_message(aqi, city)


class ResponseController:
    """
    Issues or defers the reply to a slash command.

    Args:
        fetch_reading: Coroutine returning the AQI for a location, raising FetchFailed
        notify: Coroutine posting a message to a URL, raising NotifyFailed

    Example:
        >>> controller = ResponseController(airvisual.fetch_reading, notifier.notify)
        >>> response = await controller.respond(NamedLocation(NamedCity.SF), Immediate())
        >>> response.status_code
        200
    """

    def __init__(self, fetch_reading: FetchReading, notify: Notify):
        self.fetch_reading = fetch_reading
        self.notify = notify
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Number of deferred deliveries still running."""
        return len(self._tasks)

    async def respond(self, command: ResolvedCommand, mode: ResponseMode) -> SlashResponse:
        """
        Produce the HTTP-visible result for a command.

        Args:
            command: Resolved command
            mode: Immediate or Deferred(callback_url)

        Returns:
            SlashResponse with status code and JSON body
        """
        if isinstance(command, BlockedUser):
            return SlashResponse(200, blocked_message().to_dict())
        if isinstance(command, Malformed):
            return SlashResponse(200, malformed_message().to_dict())

        if isinstance(mode, Deferred):
            self._spawn(self._deliver(command, mode.callback_url))
            return SlashResponse(200, dict(ACKNOWLEDGMENT))

        try:
            message = await self._build_message(command)
        except FetchFailed as e:
            logger.error("Fetching reading failed: %s", e)
            return SlashResponse(500, error_message().to_dict())
        return SlashResponse(200, message.to_dict())

    async def drain(self) -> None:
        """Wait for every deferred delivery to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _build_message(self, command: ResolvedCommand) -> OutboundMessage:
        query = location_for(command)
        if query is None:
            raise FetchFailed(f"No location to fetch for {command!r}")
        aqi = await self.fetch_reading(query)
        logger.info("AQI for %s: %d", query.city, aqi)
        return format_reading(command, aqi, query.city)

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Deferred delivery crashed", exc_info=task.exception())

    async def _deliver(self, command: ResolvedCommand, callback_url: str) -> None:
        try:
            message = await self._build_message(command)
            await self.notify(callback_url, message)
            return
        except (FetchFailed, NotifyFailed) as e:
            logger.error("Deferred delivery failed: %s", e)

        try:
            await self.notify(callback_url, error_message())
        except NotifyFailed as e:
            logger.error("Delivering failure message failed: %s", e)
