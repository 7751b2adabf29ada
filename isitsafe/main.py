"""FastAPI application – ingredient safety checker.

Endpoints
---------
GET    /health             – service status
GET    /blacklist          – list blacklisted ingredients
POST   /blacklist          – add an ingredient to the blacklist
DELETE /blacklist/{id}     – remove one ingredient
DELETE /blacklist          – clear the blacklist
GET    /scan/{barcode}     – look up a product and check it
POST   /analyze            – check an already-fetched product
POST   /check              – quick yes/no check of raw ingredient text
"""

from __future__ import annotations

import logging
import threading
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse

from isitsafe.config import settings
from isitsafe.engine.analyzer import analyze as analyze_product
from isitsafe.engine.analyzer import is_safe_quick
from isitsafe.logger import configure_logging
from isitsafe.models import (
    AddBlacklistItemRequest,
    AnalysisResult,
    AnalyzeRequest,
    BlacklistResponse,
    ErrorResponse,
    HealthResponse,
    QuickCheckRequest,
    QuickCheckResponse,
)
from isitsafe.services.blacklist_store import (
    BlacklistError,
    BlacklistStore,
    DuplicateBlacklistItemError,
    InvalidBlacklistNameError,
    JsonFileBlacklistStore,
)
from isitsafe.services.product_lookup import (
    LookupErrorKind,
    OpenFoodFactsClient,
    ProductLookupError,
)
from isitsafe.services.scanner import scan_barcode

configure_logging()
_log = logging.getLogger("isitsafe.main")

_start_time: float = 0.0
_store: BlacklistStore | None = None
_lookup: OpenFoodFactsClient | None = None
_deps_lock = threading.Lock()


# ── Dependencies ────────────────────────────────────────────────────────────

def get_store() -> BlacklistStore:
    global _store
    with _deps_lock:
        if _store is None:
            _store = JsonFileBlacklistStore(settings.blacklist_path, settings.blacklist_storage_key)
    return _store


def get_lookup() -> OpenFoodFactsClient:
    global _lookup
    with _deps_lock:
        if _lookup is None:
            _lookup = OpenFoodFactsClient()
    return _lookup


# ── Lifespan ────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    global _start_time, _lookup
    _start_time = time.time()
    _log.info("Ingredient checker started (blacklist at %s)", settings.blacklist_path)

    yield

    with _deps_lock:
        if _lookup is not None:
            _lookup.close()
            _lookup = None
    _log.info("Ingredient checker stopped")


# ── Application ─────────────────────────────────────────────────────────────

app = FastAPI(
    title="Is It Safe? Ingredient Checker",
    version="1.0.0",
    lifespan=lifespan,
)

_LOOKUP_STATUS = {
    LookupErrorKind.NOT_FOUND: 404,
    LookupErrorKind.TIMEOUT: 504,
    LookupErrorKind.API_ERROR: 502,
}


@app.exception_handler(ProductLookupError)
async def _lookup_error_handler(request: Request, exc: ProductLookupError) -> JSONResponse:
    body = ErrorResponse(kind=exc.kind.value, detail=exc.message)
    return JSONResponse(status_code=_LOOKUP_STATUS[exc.kind], content=body.model_dump())


@app.exception_handler(BlacklistError)
async def _blacklist_error_handler(request: Request, exc: BlacklistError) -> JSONResponse:
    if isinstance(exc, InvalidBlacklistNameError):
        status_code, kind = 400, "invalid_name"
    elif isinstance(exc, DuplicateBlacklistItemError):
        status_code, kind = 409, "duplicate"
    else:
        status_code, kind = 500, "persistence"
    body = ErrorResponse(kind=kind, detail=str(exc))
    return JSONResponse(status_code=status_code, content=body.model_dump())


# ── Blacklist ───────────────────────────────────────────────────────────────

def _blacklist_response(items: list) -> BlacklistResponse:
    return BlacklistResponse(items=items, total=len(items))


@app.get("/blacklist", response_model=BlacklistResponse)
def list_blacklist(store: BlacklistStore = Depends(get_store)) -> BlacklistResponse:
    return _blacklist_response(store.load())


@app.post("/blacklist", response_model=BlacklistResponse, status_code=201)
def add_blacklist_item(
    request: AddBlacklistItemRequest,
    store: BlacklistStore = Depends(get_store),
) -> BlacklistResponse:
    """Add one ingredient; blank or duplicate names are rejected."""
    return _blacklist_response(store.add(request.name))


@app.delete("/blacklist/{item_id}", response_model=BlacklistResponse)
def remove_blacklist_item(
    item_id: str,
    store: BlacklistStore = Depends(get_store),
) -> BlacklistResponse:
    return _blacklist_response(store.remove(item_id))


@app.delete("/blacklist", status_code=204)
def clear_blacklist(store: BlacklistStore = Depends(get_store)) -> Response:
    store.clear()
    return Response(status_code=204)


# ── Analysis ────────────────────────────────────────────────────────────────

@app.get("/scan/{barcode}", response_model=AnalysisResult)
def scan(
    barcode: str,
    store: BlacklistStore = Depends(get_store),
    lookup: OpenFoodFactsClient = Depends(get_lookup),
) -> AnalysisResult:
    """Look up *barcode* on Open Food Facts and check it against the blacklist."""
    return scan_barcode(barcode, lookup, store)


@app.post("/analyze", response_model=AnalysisResult)
def analyze(
    request: AnalyzeRequest,
    store: BlacklistStore = Depends(get_store),
) -> AnalysisResult:
    """Check a product the caller already has against a blacklist."""
    blacklist = request.blacklist if request.blacklist is not None else store.load()
    return analyze_product(request.product, blacklist)


@app.post("/check", response_model=QuickCheckResponse)
def quick_check(
    request: QuickCheckRequest,
    store: BlacklistStore = Depends(get_store),
) -> QuickCheckResponse:
    blacklist = request.blacklist if request.blacklist is not None else store.load()
    return QuickCheckResponse(is_safe=is_safe_quick(request.ingredients_text, blacklist))


# ── Health ──────────────────────────────────────────────────────────────────

@app.get("/health", response_model=HealthResponse)
def health(store: BlacklistStore = Depends(get_store)) -> HealthResponse:
    """Return service status and blacklist size."""
    return HealthResponse(
        status="ok",
        blacklist_size=len(store.load()),
        uptime_seconds=round(time.time() - _start_time, 2),
    )
