"""
Resolve slash-command text into a ResolvedCommand.

Rules are evaluated in a fixed order and the first match wins:

1. Blocked users are refused unless the text contains "please"
2. "city <city> <state> <country>" looks up an explicit location
3. Aliases (sf, nyc, seattle, la) are matched by substring, in table order
4. Anything else defaults to San Francisco

Independently, "cigarettes" anywhere in the text wraps the result in
CigaretteEquivalent.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, NamedTuple

from .models import (
    BlockedUser,
    CigaretteEquivalent,
    LocationLookup,
    LocationQuery,
    Malformed,
    NamedCity,
    NamedLocation,
    ResolvedCommand,
)
from .tokenizer import tokenize

logger = logging.getLogger(__name__)

CITY_PREFIX = re.compile(r"^city\s+", re.IGNORECASE)

POLITE_WORD = "please"
CIGARETTES_WORD = "cigarettes"


class DispatchRule(NamedTuple):
    """A predicate over normalized text and the resolver to run when it matches."""
    predicate: Callable[[str], bool]
    resolve: Callable[[str, str], ResolvedCommand]


def _matches_la(normalized: str) -> bool:
    return " la " in normalized or normalized == "la" or "los angeles" in normalized


# Order matters: "sf" is checked before "nyc", and so on.
ALIAS_TABLE: tuple[tuple[Callable[[str], bool], NamedCity], ...] = (
    (lambda t: "sf" in t or "san francisco" in t, NamedCity.SF),
    (lambda t: "nyc" in t or "new york" in t, NamedCity.NYC),
    (lambda t: "seattle" in t, NamedCity.SEATTLE),
    (_matches_la, NamedCity.LA),
)

DEFAULT_CITY = NamedCity.SF


def title_case(word: str) -> str:
    """
    Upper-case the first letter of each space-separated word.

    The rest of each word is left alone, so "USA" stays "USA".

    >>> title_case("los angeles")
    'Los Angeles'
    """
    return " ".join(part[:1].upper() + part[1:] for part in word.split(" "))


def resolve_city(original: str) -> ResolvedCommand:
    """
    Resolve "city <city> <state> <country>" into a LocationLookup.

    Args:
        original: Trimmed command text, original case, starting with "city"

    Returns:
        LocationLookup, or Malformed if fewer than three tokens follow the prefix
    """
    remainder = CITY_PREFIX.sub("", original, count=1)
    parts = tokenize(remainder)
    logger.debug("Parsed city input: %s", parts)
    if len(parts) < 3:
        return Malformed()
    return LocationLookup(
        LocationQuery(
            city=title_case(parts[0]),
            state=title_case(parts[1]),
            country=title_case(parts[2]),
        )
    )


def resolve_alias(normalized: str) -> ResolvedCommand:
    """Match the alias table in order, falling back to the default city."""
    for predicate, city in ALIAS_TABLE:
        if predicate(normalized):
            return NamedLocation(city)
    return NamedLocation(DEFAULT_CITY)


DISPATCH_POLICY: tuple[DispatchRule, ...] = (
    DispatchRule(
        predicate=lambda normalized: CITY_PREFIX.match(normalized) is not None,
        resolve=lambda normalized, original: resolve_city(original),
    ),
    DispatchRule(
        predicate=lambda normalized: True,
        resolve=lambda normalized, original: resolve_alias(normalized),
    ),
)


def is_blocked(user_id: str, text: str, blocked_users: frozenset[str]) -> bool:
    """Blocked users get through only if they ask nicely."""
    return user_id in blocked_users and POLITE_WORD not in text.lower()


def resolve(
    text: str,
    user_id: str,
    blocked_users: frozenset[str] = frozenset(),
    policy: tuple[DispatchRule, ...] = DISPATCH_POLICY,
) -> ResolvedCommand:
    """
    Resolve raw slash-command text.

    Args:
        text: The "text" field of the slash command
        user_id: The "user_id" field of the slash command
        blocked_users: User ids that must say "please"
        policy: Ordered dispatch rules; first match wins

    Returns:
        Exactly one ResolvedCommand variant

    Examples:
        >>> resolve("sf", "U1")
        NamedLocation(city=<NamedCity.SF: 'sf'>)
        >>> resolve("city foo bar", "U1")
        Malformed()
    """
    if is_blocked(user_id, text, blocked_users):
        return BlockedUser()

    original = text.strip()
    normalized = original.lower()

    command: ResolvedCommand = Malformed()
    for rule in policy:
        if rule.predicate(normalized):
            command = rule.resolve(normalized, original)
            break

    if CIGARETTES_WORD in normalized and not isinstance(command, Malformed):
        return CigaretteEquivalent(command)
    return command
