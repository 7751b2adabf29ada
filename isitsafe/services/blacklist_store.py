"""Blacklist persistence.

The analysis engine never touches storage: callers load the blacklist
through a :class:`BlacklistStore` and pass the resulting list in.

Two stores are provided:

* :class:`InMemoryBlacklistStore` – process-local, used by tests and
  one-off checks.
* :class:`JsonFileBlacklistStore` – a JSON document on disk that holds the
  whole blacklist as one value under a fixed key.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from isitsafe.models import BlacklistItem

_log = logging.getLogger("isitsafe.blacklist")

_ITEMS = TypeAdapter(list[BlacklistItem])


# ── Errors ──────────────────────────────────────────────────────────────────

class BlacklistError(Exception):
    """Base class for blacklist failures shown to the user."""


class InvalidBlacklistNameError(BlacklistError):
    pass


class DuplicateBlacklistItemError(BlacklistError):
    pass


class BlacklistPersistenceError(BlacklistError):
    pass


# ── Port ────────────────────────────────────────────────────────────────────

class BlacklistStore(Protocol):
    def load(self) -> list[BlacklistItem]: ...

    def add(self, name: str) -> list[BlacklistItem]: ...

    def remove(self, item_id: str) -> list[BlacklistItem]: ...

    def clear(self) -> None: ...


# ── Shared behaviour ────────────────────────────────────────────────────────

class _BaseBlacklistStore(ABC):
    """Validation and read-modify-write logic on top of ``_read``/``_write``."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    @abstractmethod
    def _read(self) -> list[BlacklistItem]: ...

    @abstractmethod
    def _write(self, items: list[BlacklistItem]) -> None: ...

    @abstractmethod
    def _delete(self) -> None: ...

    def load(self) -> list[BlacklistItem]:
        """Return the stored blacklist, or ``[]`` if it cannot be read."""
        with self._lock:
            return self._safe_read()

    def _safe_read(self) -> list[BlacklistItem]:
        try:
            return self._read()
        except (OSError, ValueError, ValidationError) as exc:
            _log.error("Error loading blacklist: %s", exc)
            return []

    def add(self, name: str) -> list[BlacklistItem]:
        """Append *name* and return the updated blacklist.

        The name is trimmed. Blank names and names already present
        (case-insensitively) are rejected.
        """
        trimmed = name.strip()
        if not trimmed:
            raise InvalidBlacklistNameError("Please enter an ingredient name")

        with self._lock:
            current = self._safe_read()
            if any(item.name.lower() == trimmed.lower() for item in current):
                raise DuplicateBlacklistItemError("This item is already in your blacklist")

            updated = [*current, BlacklistItem(name=trimmed)]
            self._save(updated)

        _log.info("Added '%s' to blacklist (%d items)", trimmed, len(updated))
        return updated

    def remove(self, item_id: str) -> list[BlacklistItem]:
        """Drop the item with *item_id*; unknown ids leave the list as is."""
        with self._lock:
            current = self._safe_read()
            updated = [item for item in current if item.id != item_id]
            self._save(updated)
        return updated

    def clear(self) -> None:
        with self._lock:
            try:
                self._delete()
            except OSError as exc:
                _log.error("Error clearing blacklist: %s", exc)
                raise BlacklistPersistenceError("Failed to clear blacklist") from exc
        _log.info("Blacklist cleared")

    def _save(self, items: list[BlacklistItem]) -> None:
        try:
            self._write(items)
        except (OSError, TypeError, ValueError) as exc:
            _log.error("Error saving blacklist: %s", exc)
            raise BlacklistPersistenceError("Failed to save blacklist") from exc


# ── Implementations ─────────────────────────────────────────────────────────

class InMemoryBlacklistStore(_BaseBlacklistStore):
    def __init__(self, items: list[BlacklistItem] | None = None) -> None:
        super().__init__()
        self._items: list[BlacklistItem] = list(items or [])

    def _read(self) -> list[BlacklistItem]:
        return list(self._items)

    def _write(self, items: list[BlacklistItem]) -> None:
        self._items = list(items)

    def _delete(self) -> None:
        self._items = []


class JsonFileBlacklistStore(_BaseBlacklistStore):
    """Keeps the blacklist under *key* in a JSON object stored at *path*.

    Other keys in the document are preserved on write.
    """

    def __init__(self, path: str | Path, key: str = "@is_it_safe_blacklist") -> None:
        super().__init__()
        self.path = Path(path)
        self.key = key

    def _read_document(self) -> dict:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            document = json.load(f)
        if not isinstance(document, dict):
            raise ValueError(f"{self.path} does not contain a JSON object")
        return document

    def _write_document(self, document: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=self.path.name, suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def _read(self) -> list[BlacklistItem]:
        raw = self._read_document().get(self.key)
        if raw is None:
            return []
        return _ITEMS.validate_python(raw)

    def _write(self, items: list[BlacklistItem]) -> None:
        try:
            document = self._read_document()
        except ValueError:
            # Unreadable document: the blacklist value replaces it
            document = {}
        document[self.key] = _ITEMS.dump_python(items, mode="json")
        self._write_document(document)

    def _delete(self) -> None:
        try:
            document = self._read_document()
        except ValueError:
            document = {}
        if self.key not in document:
            return
        del document[self.key]
        self._write_document(document)
