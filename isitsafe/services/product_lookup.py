"""Open Food Facts product lookup.

Fetches ``{base_url}/{barcode}.json`` and returns the product payload.
Every failure is reported as a :class:`ProductLookupError` whose ``kind``
tells the caller which user-facing message to show.
"""

from __future__ import annotations

import enum
import logging

import httpx
from pydantic import ValidationError

from isitsafe.config import settings
from isitsafe.models import ProductLookupResponse, ProductRecord

_log = logging.getLogger("isitsafe.lookup")


class LookupErrorKind(str, enum.Enum):
    TIMEOUT = "timeout"
    NOT_FOUND = "not_found"
    API_ERROR = "api_error"


class ProductLookupError(Exception):
    """Raised when a barcode cannot be resolved to a product."""

    def __init__(self, kind: LookupErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


def _not_found(barcode: str) -> ProductLookupError:
    return ProductLookupError(
        LookupErrorKind.NOT_FOUND,
        f'The barcode "{barcode}" was not found in the Open Food Facts database. '
        "This product may not have been added yet.",
    )


class OpenFoodFactsClient:
    """Thin synchronous client around the Open Food Facts product endpoint.

    Pass an existing ``httpx.Client`` to share a connection pool or to
    inject a mock transport; otherwise one is created and owned here.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = (base_url or settings.off_base_url).rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=timeout if timeout is not None else settings.off_timeout_seconds,
            headers={"User-Agent": user_agent or settings.off_user_agent},
            follow_redirects=True,
        )

    def __enter__(self) -> OpenFoodFactsClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def fetch_product(self, barcode: str) -> ProductRecord:
        """Return the product registered under *barcode*.

        Raises
        ------
        ProductLookupError
            ``NOT_FOUND`` for unknown barcodes, ``TIMEOUT`` when the request
            times out, ``API_ERROR`` for any other HTTP or decoding failure.
        """
        barcode = barcode.strip()
        if not barcode:
            raise _not_found(barcode)

        url = f"{self.base_url}/{barcode}.json"
        try:
            resp = self._client.get(url, follow_redirects=True)
            if resp.status_code == 404:
                raise _not_found(barcode)
            resp.raise_for_status()
            envelope = ProductLookupResponse.model_validate(resp.json())
        except httpx.TimeoutException as exc:
            _log.warning("Lookup for %s timed out: %s", barcode, exc)
            raise ProductLookupError(
                LookupErrorKind.TIMEOUT,
                "Request timed out. Please check your connection.",
            ) from exc
        except httpx.HTTPError as exc:
            _log.warning("Lookup for %s failed: %s", barcode, exc)
            raise ProductLookupError(
                LookupErrorKind.API_ERROR, f"API Error: {exc}"
            ) from exc
        except (ValueError, ValidationError) as exc:
            _log.warning("Lookup for %s returned an unreadable body: %s", barcode, exc)
            raise ProductLookupError(
                LookupErrorKind.API_ERROR, "API Error: unexpected response from Open Food Facts"
            ) from exc

        if envelope.status == 0 or envelope.product is None:
            _log.info("Product %s not found in Open Food Facts", barcode)
            raise _not_found(barcode)

        return envelope.product
