"""
Slack request signing: HMAC-SHA256 over "version:timestamp:body".
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import time

from .models import AuthenticationResult, RejectReason, SignedRequest


# Header names Slack uses for signed requests
TIMESTAMP_HEADER = "X-Slack-Request-Timestamp"
SIGNATURE_HEADER = "X-Slack-Signature"

# Only signing version Slack currently issues
DEFAULT_VERSION = "v0"


def _signing_base(version: str, timestamp: str, body: bytes) -> bytes:
    return version.encode("utf-8") + b":" + timestamp.encode("utf-8") + b":" + body


def sign_request(
    secret: bytes,
    timestamp: str,
    body: bytes,
    version: str = DEFAULT_VERSION,
) -> str:
    """
    Compute the X-Slack-Signature header value for a request.

    Args:
        secret: Slack signing secret
        timestamp: X-Slack-Request-Timestamp value
        body: Raw request body
        version: Signing version prefix

    Returns:
        Header value of the form "<version>=<hex-digest>"

    Examples:
        >>> sign_request(b"secret", "1531420618", b"text=sf")
        'v0=...'
    """
    digest = hmac.new(secret, _signing_base(version, timestamp, body), hashlib.sha256)
    return f"{version}={digest.hexdigest()}"


def verify_signature(
    secret: bytes,
    timestamp: str,
    body: bytes,
    signature_header: str,
    *,
    max_age_s: int | None = None,
    now: float | None = None,
) -> AuthenticationResult:
    """
    Verify that a request body was signed with the shared secret.

    Rules:
    1. signature_header must split on "=" into exactly (version, hex digest)
    2. The signing base is version + ":" + timestamp + ":" + body, over the exact body bytes
    3. The provided digest is compared in constant time
    4. If max_age_s is set, timestamps further than max_age_s seconds from now are rejected

    Args:
        secret: Slack signing secret
        timestamp: X-Slack-Request-Timestamp value, as received
        body: Raw request body, as received
        signature_header: X-Slack-Signature value
        max_age_s: Optional replay window in seconds. None disables the check.
        now: Current unix time, for tests. Defaults to time.time().

    Returns:
        AuthenticationResult, verified or rejected with a reason
    """
    parts = signature_header.split("=")
    if len(parts) != 2:
        return AuthenticationResult.rejected(RejectReason.INVALID_DIGEST_FORMAT)
    version, provided_hex = parts

    try:
        provided = binascii.unhexlify(provided_hex)
    except (binascii.Error, ValueError):
        return AuthenticationResult.rejected(RejectReason.INVALID_DIGEST_FORMAT)

    if max_age_s is not None:
        current = time.time() if now is None else now
        try:
            age = abs(current - int(timestamp))
        except ValueError:
            return AuthenticationResult.rejected(RejectReason.STALE_TIMESTAMP)
        if age > max_age_s:
            return AuthenticationResult.rejected(RejectReason.STALE_TIMESTAMP)

    expected = hmac.new(secret, _signing_base(version, timestamp, body), hashlib.sha256).digest()
    if not hmac.compare_digest(expected, provided):
        return AuthenticationResult.rejected(RejectReason.SIGNATURE_MISMATCH)

    return AuthenticationResult.ok()


def verify_request(
    secret: bytes,
    request: SignedRequest,
    *,
    max_age_s: int | None = None,
    now: float | None = None,
) -> AuthenticationResult:
    """Verify a SignedRequest. See verify_signature."""
    return verify_signature(
        secret,
        request.timestamp,
        request.raw_body,
        request.signature_header,
        max_age_s=max_age_s,
        now=now,
    )
