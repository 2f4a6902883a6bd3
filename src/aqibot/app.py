"""
FastAPI application serving the /aqi slash command.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from .airvisual import AirVisualClient
from .config import Settings, load_blocked_users
from .controller import ResponseController, select_mode
from .middleware.asgi import SlackSignatureMiddleware
from .resolver import resolve
from .slack import SlackNotifier, SlashCommand

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings,
    blocked_users: frozenset[str] | None = None,
    controller: ResponseController | None = None,
) -> FastAPI:
    """
    Build the slash-command app.

    Args:
        settings: Service configuration
        blocked_users: Users who must say "please". Loaded from
            settings.blocked_users_file when not given.
        controller: Response controller. Built from AirVisual and Slack
            clients when not given.
    """
    if blocked_users is None:
        blocked_users = load_blocked_users(settings.blocked_users_file)
    if controller is None:
        airvisual = AirVisualClient(settings.airvisual_api_key, timeout_s=settings.http_timeout_s)
        notifier = SlackNotifier(timeout_s=settings.http_timeout_s)
        controller = ResponseController(airvisual.fetch_reading, notifier.notify)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        if controller.pending:
            logger.info("Waiting for %d deferred deliveries", controller.pending)
        await controller.drain()

    app = FastAPI(
        title="AQI Bot",
        description="Slack slash command reporting air quality",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.blocked_users = blocked_users
    app.state.controller = controller

    app.add_middleware(
        SlackSignatureMiddleware,
        signing_secret=settings.signing_secret,
        max_age_s=settings.signature_max_age_s,
    )

    @app.post("/")
    async def slash_command(request: Request):
        """Handle a slash command invocation."""
        body = await request.body()
        payload = SlashCommand.from_form(body)

        command = resolve(payload.text, payload.user_id, request.app.state.blocked_users)
        mode = select_mode(settings.deferred_responses, payload.response_url)
        logger.info(
            "Slash command %s resolved to %s",
            payload.command or "",
            type(command).__name__,
            extra={"user_id": payload.user_id, "mode": type(mode).__name__},
        )

        result = await request.app.state.controller.respond(command, mode)
        return JSONResponse(status_code=result.status_code, content=result.body)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok"}

    return app
