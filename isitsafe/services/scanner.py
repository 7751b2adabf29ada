"""Scan orchestration – lookup → blacklist load → analysis → verdict log.

The engine only runs once a product has been found; lookup errors propagate
to the caller unchanged so they can be shown as distinct messages.
"""

from __future__ import annotations

import logging
from typing import Protocol

from isitsafe.engine.analyzer import analyze
from isitsafe.logger import log_result
from isitsafe.models import AnalysisResult, ProductRecord
from isitsafe.services.blacklist_store import BlacklistStore

_log = logging.getLogger("isitsafe.scanner")


class ProductLookup(Protocol):
    def fetch_product(self, barcode: str) -> ProductRecord: ...


def scan_barcode(
    barcode: str,
    lookup: ProductLookup,
    store: BlacklistStore,
) -> AnalysisResult:
    """Fetch the product behind *barcode* and check it against the stored blacklist."""
    product = lookup.fetch_product(barcode)
    if not product.code:
        product = product.model_copy(update={"code": barcode.strip()})

    blacklist = store.load()
    result = analyze(product, blacklist)

    _log.info(
        "Scanned %s: %s (%d/%d blacklist terms matched)",
        result.barcode,
        "safe" if result.is_safe else "unsafe",
        len(result.matched_ingredients),
        len(blacklist),
    )
    log_result(
        barcode=result.barcode,
        product_name=result.product_name,
        matched_ingredients=result.matched_ingredients,
        is_safe=result.is_safe,
        blacklist_size=len(blacklist),
    )
    return result
