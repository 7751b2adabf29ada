"""Blacklist-term containment check.

A term is present when its normalised form is a substring of the normalised
ingredient text. Matching is deliberately not word-boundary aware, so
``"Milk"`` matches ``"Skimmed Milk Powder"`` and also ``"Buttermilk"``.

An empty term normalises to ``""`` and therefore matches any text. Blank
names are rejected when they are added to the blacklist, not here.
"""

from __future__ import annotations

from isitsafe.engine.normalizer import normalize


def contains_term(normalized_term: str, normalized_text: str) -> bool:
    """Containment test on inputs that are already normalised."""
    return normalized_term in normalized_text


def matches(term: str, ingredients_text: str) -> bool:
    """Return ``True`` if *term* appears in *ingredients_text*."""
    return contains_term(normalize(term), normalize(ingredients_text))
