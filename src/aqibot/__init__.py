"""
aqibot: Slack slash command reporting air quality.

Verifies Slack-signed requests, resolves command text into a location,
and replies with the current AQI from AirVisual.
"""

__version__ = "0.1.0"

from .models import (
    AuthenticationResult,
    BlockedUser,
    CigaretteEquivalent,
    Deferred,
    Immediate,
    LocationLookup,
    LocationQuery,
    Malformed,
    NamedCity,
    NamedLocation,
    OutboundMessage,
    RejectReason,
    SignedRequest,
)
from .signature import sign_request, verify_request, verify_signature
from .tokenizer import tokenize
from .resolver import resolve
from .controller import ResponseController, select_mode

__all__ = [
    "AuthenticationResult",
    "BlockedUser",
    "CigaretteEquivalent",
    "Deferred",
    "Immediate",
    "LocationLookup",
    "LocationQuery",
    "Malformed",
    "NamedCity",
    "NamedLocation",
    "OutboundMessage",
    "RejectReason",
    "SignedRequest",
    "ResponseController",
    "resolve",
    "select_mode",
    "sign_request",
    "tokenize",
    "verify_request",
    "verify_signature",
]
