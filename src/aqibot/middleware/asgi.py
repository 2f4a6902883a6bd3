"""
ASGI middleware for Slack request signature verification (FastAPI/Starlette).
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Iterable, MutableMapping

from starlette.requests import Request
from starlette.responses import JSONResponse

from ..models import AuthenticationResult, RejectReason
from ..signature import SIGNATURE_HEADER, TIMESTAMP_HEADER, verify_signature

logger = logging.getLogger(__name__)

Scope = MutableMapping[str, Any]
Message = MutableMapping[str, Any]
Receive = Callable[[], Awaitable[Message]]
Send = Callable[[Message], Awaitable[None]]


def _replay_body(body: bytes, receive: Receive) -> Receive:
    """Hand the already-read body to the downstream app, then defer to receive."""
    sent = False

    async def replay() -> Message:
        nonlocal sent
        if not sent:
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay


class SlackSignatureMiddleware:
    """
    ASGI middleware that rejects requests not signed by Slack.

    The raw body is read once, verified, and replayed unchanged to the wrapped
    app, so handlers can still call `await request.body()`.

    Attaches the AuthenticationResult to `request.state.slack_auth`.

    Args:
        app: ASGI application
        signing_secret: Slack signing secret
        max_age_s: Optional replay window in seconds. None (default) accepts any timestamp.
        exempt_paths: Paths served without a signature, e.g. health checks

    Example (FastAPI):
        >>> app = FastAPI()
        >>> app.add_middleware(SlackSignatureMiddleware, signing_secret="...")
    """

    def __init__(
        self,
        app: Callable[[Scope, Receive, Send], Awaitable[None]],
        signing_secret: str | bytes,
        max_age_s: int | None = None,
        exempt_paths: Iterable[str] = ("/health",),
    ):
        self.app = app
        if isinstance(signing_secret, str):
            signing_secret = signing_secret.encode("utf-8")
        self.signing_secret = signing_secret
        self.max_age_s = max_age_s
        self.exempt_paths = frozenset(exempt_paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["path"] in self.exempt_paths:
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        timestamp = request.headers.get(TIMESTAMP_HEADER)
        signature = request.headers.get(SIGNATURE_HEADER)

        body = b""
        if timestamp is None or signature is None:
            result = AuthenticationResult.rejected(RejectReason.MISSING_HEADERS)
        else:
            body = await request.body()
            result = verify_signature(
                self.signing_secret,
                timestamp,
                body,
                signature,
                max_age_s=self.max_age_s,
            )

        scope.setdefault("state", {})["slack_auth"] = result

        if not result.verified:
            logger.warning(
                "Rejected unsigned request to %s",
                scope["path"],
                extra={"reason": result.reason.value if result.reason else None},
            )
            response = JSONResponse(status_code=401, content={"error": "Unauthorized"})
            await response(scope, receive, send)
            return

        await self.app(scope, _replay_body(body, receive), send)
