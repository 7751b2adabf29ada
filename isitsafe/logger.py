"""Structured JSON logger for scan verdicts.

Writes one JSON object per line to the verdict log file.
Ingredient text is *never* logged, only the matched blacklist terms.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from isitsafe.config import settings

_VERDICT_LOGGER = "isitsafe.verdicts"

_logger: logging.Logger | None = None


def configure_verdict_log(log_path: str | Path | None = None) -> logging.Logger:
    """Point the verdict log at *log_path* (default: ``settings.log_path``).

    Any file handler from an earlier call is closed and replaced.
    """
    global _logger
    path = Path(log_path if log_path is not None else settings.log_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(_VERDICT_LOGGER)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    _close_handlers(logger)

    handler = logging.FileHandler(str(path), encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)

    _logger = logger
    return logger


def reset_verdict_log() -> None:
    """Close the verdict log; the next entry reopens it from settings."""
    global _logger
    _close_handlers(logging.getLogger(_VERDICT_LOGGER))
    _logger = None


def _close_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def _get_logger() -> logging.Logger:
    """Return the verdict logger, opening the configured file on first use."""
    if _logger is None:
        return configure_verdict_log()
    return _logger


def configure_logging(level: str | None = None) -> None:
    """Set up operational (non-verdict) logging for an entry point."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )


def log_result(
    barcode: str,
    product_name: str,
    matched_ingredients: list[str] | tuple[str, ...],
    is_safe: bool,
    blacklist_size: int,
) -> None:
    """Append a structured JSON entry for one analysed product."""
    entry: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "barcode": barcode,
        "product_name": product_name,
        "matched_ingredients": list(matched_ingredients),
        "is_safe": is_safe,
        "blacklist_size": blacklist_size,
    }
    _get_logger().info(json.dumps(entry, ensure_ascii=False))
