"""Ingredient-text selection from an Open Food Facts product."""

from __future__ import annotations

from isitsafe.models import ProductRecord


def extract_ingredients(product: ProductRecord) -> str:
    """Return the product's ingredient text, or ``""`` when it has none.

    ``ingredients_text`` wins when non-empty, then ``ingredients_text_en``.
    The chosen value is trimmed afterwards, so a whitespace-only primary
    field still shadows the English one.
    """
    return (product.ingredients_text or product.ingredients_text_en or "").strip()
