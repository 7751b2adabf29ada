"""Text canonicalisation for case- and punctuation-insensitive comparison."""

from __future__ import annotations

import re

# Bracket, separator and quote characters that are replaced by a space
_PUNCTUATION = re.compile(r"[(),\[\]{}:;'\"]")
_WHITESPACE = re.compile(r"\s+")


def normalize(text: str) -> str:
    """Return the canonical form of *text*.

    Steps (order matters: punctuation becomes whitespace first, so it is
    collapsed together with the surrounding spaces)
    -----
    1. Lower-case.
    2. Replace each of ``( ) , [ ] { } : ; ' "`` with a space.
    3. Collapse whitespace runs into a single space.
    4. Trim.
    """
    text = text.lower()
    text = _PUNCTUATION.sub(" ", text)
    text = _WHITESPACE.sub(" ", text)
    return text.strip()
