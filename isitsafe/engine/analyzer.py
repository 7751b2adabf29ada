"""Safety analysis of a product against the user's blacklist.

Both entry points are pure: no I/O, no logging and no shared state, so they
can be called concurrently from independent request handlers.
"""

from __future__ import annotations

from collections.abc import Sequence

from isitsafe.engine.extraction import extract_ingredients
from isitsafe.engine.matcher import contains_term
from isitsafe.engine.normalizer import normalize
from isitsafe.models import AnalysisResult, BlacklistItem, ProductRecord

NO_INGREDIENTS_PLACEHOLDER = "No ingredients listed"
UNKNOWN_PRODUCT_PLACEHOLDER = "Unknown Product"


def find_matches(ingredients_text: str, blacklist: Sequence[BlacklistItem]) -> list[str]:
    """Return the names of blacklist items found in *ingredients_text*.

    Names come back in blacklist order. Duplicate names are kept.
    """
    normalized_text = normalize(ingredients_text)
    return [
        item.name
        for item in blacklist
        if contains_term(normalize(item.name), normalized_text)
    ]


def analyze(product: ProductRecord, blacklist: Sequence[BlacklistItem]) -> AnalysisResult:
    """Check *product* against *blacklist* and build the verdict."""
    ingredients_text = extract_ingredients(product)
    matched = find_matches(ingredients_text, blacklist)

    return AnalysisResult(
        matched_ingredients=tuple(matched),
        full_ingredients_list=ingredients_text or NO_INGREDIENTS_PLACEHOLDER,
        product_name=product.product_name or UNKNOWN_PRODUCT_PLACEHOLDER,
        barcode=product.code or "",
    )


def is_safe_quick(ingredients_text: str, blacklist: Sequence[BlacklistItem]) -> bool:
    """Return ``False`` on the first blacklist match, ``True`` otherwise."""
    normalized_text = normalize(ingredients_text)
    for item in blacklist:
        if contains_term(normalize(item.name), normalized_text):
            return False
    return True
