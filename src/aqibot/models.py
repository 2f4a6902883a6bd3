"""
Data models for the slash-command gateway.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, asdict
from typing import Any, Union


@dataclass(frozen=True)
class SignedRequest:
    """
    An inbound request as Slack signed it.

    Attributes:
        timestamp: X-Slack-Request-Timestamp value, exactly as received
        raw_body: Request body bytes, exactly as received
        signature_header: X-Slack-Signature value ("v0=<hex-digest>")
    """
    timestamp: str
    raw_body: bytes
    signature_header: str


class RejectReason(str, enum.Enum):
    """Why a request failed authentication."""

    INVALID_DIGEST_FORMAT = "invalid_digest_format"
    SIGNATURE_MISMATCH = "signature_mismatch"
    MISSING_HEADERS = "missing_headers"
    STALE_TIMESTAMP = "stale_timestamp"


@dataclass(frozen=True)
class AuthenticationResult:
    """
    Result of verifying a signed request.

    Attributes:
        verified: Whether the signature was valid
        reason: Why verification failed, None when verified
    """
    verified: bool
    reason: RejectReason | None = None

    @classmethod
    def ok(cls) -> AuthenticationResult:
        return cls(verified=True)

    @classmethod
    def rejected(cls, reason: RejectReason) -> AuthenticationResult:
        return cls(verified=False, reason=reason)


@dataclass(frozen=True)
class LocationQuery:
    """
    A city/state/country triple understood by the AirVisual API.

    Attributes:
        city: City name, e.g. "San Francisco"
        state: State or region name, e.g. "California"
        country: Country name, e.g. "USA"
    """
    city: str
    state: str
    country: str


class NamedCity(str, enum.Enum):
    """Cities reachable through a short alias."""

    SF = "sf"
    NYC = "nyc"
    SEATTLE = "seattle"
    LA = "la"

    @property
    def query(self) -> LocationQuery:
        return NAMED_CITY_QUERIES[self]


NAMED_CITY_QUERIES: dict[NamedCity, LocationQuery] = {
    NamedCity.SF: LocationQuery("San Francisco", "California", "USA"),
    NamedCity.NYC: LocationQuery("New York", "New York", "USA"),
    NamedCity.SEATTLE: LocationQuery("Seattle", "Washington", "USA"),
    NamedCity.LA: LocationQuery("Los Angeles", "California", "USA"),
}


@dataclass(frozen=True)
class LocationLookup:
    """Look up an explicitly spelled-out location."""
    query: LocationQuery


@dataclass(frozen=True)
class NamedLocation:
    """Look up one of the aliased cities."""
    city: NamedCity


@dataclass(frozen=True)
class CigaretteEquivalent:
    """Report the inner command's reading as cigarettes smoked per day."""
    inner: ResolvedCommand


@dataclass(frozen=True)
class BlockedUser:
    """The sender is blocked and did not ask nicely."""


@dataclass(frozen=True)
class Malformed:
    """The command text could not be understood."""


ResolvedCommand = Union[
    LocationLookup,
    NamedLocation,
    CigaretteEquivalent,
    BlockedUser,
    Malformed,
]


def location_for(command: ResolvedCommand) -> LocationQuery | None:
    """
    Return the location a command needs fetched, if any.

    CigaretteEquivalent is unwrapped; BlockedUser and Malformed have no location.
    """
    if isinstance(command, CigaretteEquivalent):
        return location_for(command.inner)
    if isinstance(command, LocationLookup):
        return command.query
    if isinstance(command, NamedLocation):
        return command.city.query
    return None


@dataclass
class OutboundMessage:
    """
    A chat message sent back to Slack.

    Attributes:
        response_type: "in_channel" or "ephemeral"
        text: Message body (Slack mrkdwn)
        username: Display name for the bot
        icon_emoji: Emoji shown as the bot avatar
        channel: Target channel, only for incoming-webhook posts
    """
    response_type: str
    text: str
    username: str | None = None
    icon_emoji: str | None = None
    channel: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the Slack JSON shape, omitting unset fields."""
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class Immediate:
    """Answer in the body of the original HTTP response."""


@dataclass(frozen=True)
class Deferred:
    """Acknowledge now, deliver the real answer to callback_url later."""
    callback_url: str


ResponseMode = Union[Immediate, Deferred]


@dataclass
class SlashResponse:
    """
    HTTP-visible result of handling a slash command.

    Attributes:
        status_code: HTTP status for the original request
        body: JSON body for the original request
    """
    status_code: int
    body: dict[str, Any] = field(default_factory=dict)
