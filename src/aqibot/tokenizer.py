"""
Whitespace tokenizer that keeps quoted spans together.
"""

# Straight quote plus the directional quotes Slack clients substitute for it
QUOTE_CHARS = frozenset({'"', "“", "”"})

_IDLE = 0
_IN_TOKEN = 1
_QUOTED = 2


def tokenize(text: str) -> list[str]:
    """
    Split text on spaces, treating quoted spans as part of a single token.

    Any of the quote characters opens or closes a span. Inside a span, runs of
    spaces collapse to one and leading spaces are dropped. A quote does not end
    the current token, so 'foo"bar baz"' is one token. An unterminated quote
    keeps whatever was collected.

    Args:
        text: Free-text command input

    Returns:
        List of tokens in input order

    Examples:
        >>> tokenize('city "San Francisco" California USA')
        ['city', 'San Francisco', 'California', 'USA']
        >>> tokenize("a  b")
        ['a', 'b']
    """
    tokens: list[str] = []
    current: list[str] = []
    state = _IDLE

    for char in text:
        if state == _IDLE:
            if char == " ":
                continue
            if char in QUOTE_CHARS:
                state = _QUOTED
                continue
            current.append(char)
            state = _IN_TOKEN

        elif state == _IN_TOKEN:
            if char == " ":
                tokens.append("".join(current))
                current = []
                state = _IDLE
            elif char in QUOTE_CHARS:
                state = _QUOTED
            else:
                current.append(char)

        else:
            if char == " ":
                if not current or current[-1] == " ":
                    continue
                current.append(char)
            elif char in QUOTE_CHARS:
                state = _IN_TOKEN
            else:
                current.append(char)

    if current:
        tokens.append("".join(current))

    return tokens
