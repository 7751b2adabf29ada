"""Pydantic v2 models for products, blacklist items and analysis verdicts."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field, computed_field, field_validator


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ── Blacklist ───────────────────────────────────────────────────────────────

class BlacklistItem(BaseModel):
    """One ingredient name the user wants to avoid."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str = Field(..., min_length=1, description="Display name, as entered")
    created_at: datetime = Field(default_factory=_utc_now)


# ── Open Food Facts payloads ────────────────────────────────────────────────

class ProductRecord(BaseModel):
    """The subset of an Open Food Facts product the checker reads.

    Unknown keys in the upstream payload are ignored.
    """

    product_name: str | None = None
    ingredients_text: str | None = None
    ingredients_text_en: str | None = None
    brands: str | None = None
    image_url: str | None = None
    code: str | None = None

    model_config = {"extra": "ignore"}


class ProductLookupResponse(BaseModel):
    """Envelope returned by ``GET /api/v0/product/{barcode}.json``."""

    status: int = 0
    status_verbose: str | None = None
    product: ProductRecord | None = None
    code: str | None = None

    model_config = {"extra": "ignore"}


# ── Analysis ────────────────────────────────────────────────────────────────

class AnalysisResult(BaseModel):
    """Safety verdict for one product against one blacklist.

    ``is_safe`` is derived from ``matched_ingredients`` and cannot be set.
    """

    matched_ingredients: tuple[str, ...] = ()
    full_ingredients_list: str
    product_name: str
    barcode: str = ""

    model_config = {"frozen": True}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_safe(self) -> bool:
        return len(self.matched_ingredients) == 0


# ── Request Models ──────────────────────────────────────────────────────────

def _reject_blank_names(blacklist: list[BlacklistItem] | None) -> list[BlacklistItem] | None:
    # A blank term would match every product
    if blacklist is not None and any(not item.name.strip() for item in blacklist):
        raise ValueError("blacklist names must not be blank")
    return blacklist


class AddBlacklistItemRequest(BaseModel):
    name: str


class AnalyzeRequest(BaseModel):
    """Analyse an already-fetched product.

    ``blacklist`` is optional. When omitted the stored blacklist is used.
    """

    product: ProductRecord
    blacklist: list[BlacklistItem] | None = None

    @field_validator("blacklist")
    @classmethod
    def no_blank_names(cls, v: list[BlacklistItem] | None) -> list[BlacklistItem] | None:
        return _reject_blank_names(v)


class QuickCheckRequest(BaseModel):
    ingredients_text: str
    blacklist: list[BlacklistItem] | None = None

    @field_validator("blacklist")
    @classmethod
    def no_blank_names(cls, v: list[BlacklistItem] | None) -> list[BlacklistItem] | None:
        return _reject_blank_names(v)


# ── Response Models ─────────────────────────────────────────────────────────

class BlacklistResponse(BaseModel):
    items: list[BlacklistItem]
    total: int


class QuickCheckResponse(BaseModel):
    is_safe: bool


class ErrorResponse(BaseModel):
    """Body returned for lookup and blacklist failures."""

    kind: str
    detail: str


# ── Health ──────────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    """Response from /health endpoint."""

    status: str
    blacklist_size: int
    uptime_seconds: float
