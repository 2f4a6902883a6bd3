"""Tests for the Slack signature ASGI middleware."""

import pytest
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from aqibot.middleware import SlackSignatureMiddleware
from aqibot.signature import sign_request

SECRET = "test-signing-secret"
TIMESTAMP = "1700000000"
BODY = b"command=%2Faqi&text=sf&user_id=U1"


# Test ASGI app
async def echo_endpoint(request):
    auth = getattr(request.state, "slack_auth", None)
    body = await request.body()
    return JSONResponse({
        "verified": auth.verified if auth else None,
        "body": body.decode(),
    })


async def health_endpoint(request):
    return JSONResponse({"status": "ok"})


def create_app(max_age_s=None):
    """Create test ASGI app with middleware."""
    app = Starlette(routes=[
        Route("/", echo_endpoint, methods=["POST"]),
        Route("/health", health_endpoint),
    ])
    app.add_middleware(SlackSignatureMiddleware, signing_secret=SECRET, max_age_s=max_age_s)
    return app


def signed_headers(body=BODY, timestamp=TIMESTAMP, secret=SECRET):
    return {
        "Content-Type": "application/x-www-form-urlencoded",
        "X-Slack-Request-Timestamp": timestamp,
        "X-Slack-Signature": sign_request(secret.encode(), timestamp, body),
    }


@pytest.fixture
def client():
    return TestClient(create_app())


class TestSlackSignatureMiddleware:
    """Tests for SlackSignatureMiddleware."""

    def test_valid_signature_passes(self, client):
        """Signed request reaches the app with the body intact."""
        response = client.post("/", content=BODY, headers=signed_headers())

        assert response.status_code == 200
        data = response.json()
        assert data["verified"] is True
        assert data["body"] == BODY.decode()

    def test_missing_headers(self, client):
        """Unsigned request returns 401."""
        response = client.post("/", content=BODY)

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_missing_timestamp(self, client):
        """Signature without a timestamp returns 401."""
        headers = signed_headers()
        del headers["X-Slack-Request-Timestamp"]

        response = client.post("/", content=BODY, headers=headers)

        assert response.status_code == 401

    def test_tampered_body(self, client):
        """Body changed after signing returns 401."""
        response = client.post("/", content=BODY + b"&x=1", headers=signed_headers())

        assert response.status_code == 401

    def test_wrong_secret(self, client):
        """Request signed with another secret returns 401."""
        response = client.post("/", content=BODY, headers=signed_headers(secret="nope"))

        assert response.status_code == 401

    def test_expected_signature_not_leaked(self, client):
        """The 401 body does not reveal the expected digest."""
        expected = sign_request(SECRET.encode(), TIMESTAMP, BODY)
        headers = signed_headers()
        headers["X-Slack-Signature"] = "v0=" + "00" * 32

        response = client.post("/", content=BODY, headers=headers)

        assert response.status_code == 401
        assert expected.split("=")[1] not in response.text
        assert SECRET not in response.text

    def test_malformed_signature(self, client):
        """Signature header without a version returns 401."""
        headers = signed_headers()
        headers["X-Slack-Signature"] = "deadbeef"

        response = client.post("/", content=BODY, headers=headers)

        assert response.status_code == 401

    def test_health_exempt(self, client):
        """Health checks do not need a signature."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_stale_timestamp_with_window(self):
        """With a replay window, old signed requests are rejected."""
        client = TestClient(create_app(max_age_s=300))

        response = client.post("/", content=BODY, headers=signed_headers())

        assert response.status_code == 401

    def test_fresh_timestamp_with_window(self):
        """With a replay window, current requests pass."""
        import time

        timestamp = str(int(time.time()))
        client = TestClient(create_app(max_age_s=300))

        response = client.post("/", content=BODY, headers=signed_headers(timestamp=timestamp))

        assert response.status_code == 200
