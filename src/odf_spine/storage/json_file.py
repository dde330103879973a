"""
JSON document frame store.

Persists everything in a single ``data.json`` document::

    {
      "odf":        {"North||A": {...entry...}, ...},
      "subregions": {"North": ["A", "B"], ...}
    }

Every call outside a transaction is a whole-file read-modify-write. Inside
``transaction()`` the document is read once and written once on commit, so a
roster reconciliation lands as a single file replacement.

Writes go to ``data.json.tmp`` and are moved into place with ``os.replace``
so readers never see a half-written file. ``atomic=False`` writes the file in
place, as the oldest local deployments did.

Calls within one process are serialized by the store lock. Separate
processes writing the same file are not coordinated: the last write wins.

Tags:
    storage, json, atomic-write, seed-file, odf-spine
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from odf_spine.core.errors import StorageError
from odf_spine.core.logging import get_logger
from odf_spine.frames.models import storage_key
from odf_spine.storage.base import FrameStore

logger = get_logger(__name__)


def empty_document() -> dict[str, Any]:
    return {"odf": {}, "subregions": {}}


def coerce_document(parsed: Any) -> dict[str, Any]:
    """Document with ``odf`` and ``subregions`` guaranteed to be objects."""
    if not isinstance(parsed, dict):
        return empty_document()
    document = dict(parsed)
    if not isinstance(document.get("odf"), dict):
        document["odf"] = {}
    if not isinstance(document.get("subregions"), dict):
        document["subregions"] = {}
    return document


class JsonFileFrameStore(FrameStore):
    """Frame store backed by one JSON file."""

    backend = "json"

    def __init__(
        self,
        path: str | Path,
        *,
        seed_file: str | Path | None = None,
        atomic: bool = True,
        indent: int = 2,
    ) -> None:
        super().__init__()
        self.path = Path(path)
        self.seed_file = Path(seed_file) if seed_file else None
        self.atomic = atomic
        self.indent = indent
        self._pending: dict[str, Any] | None = None

    # -- File handling -----------------------------------------------------

    def _storage_error(self, message: str, exc: Exception) -> StorageError:
        logger.error("store_io_failed", backend=self.backend, path=str(self.path), error=str(exc))
        return StorageError(message, cause=exc).with_context(backend=self.backend, path=str(self.path))

    def _load_seed(self) -> dict[str, Any]:
        seed = self.seed_file
        if seed is None or not seed.exists():
            return empty_document()
        if seed.resolve() == self.path.resolve():
            return empty_document()
        try:
            parsed = json.loads(seed.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("seed_file_unreadable", path=str(seed), error=str(exc))
            return empty_document()
        document = coerce_document(parsed)
        return {"odf": document["odf"], "subregions": document["subregions"]}

    def ensure_file(self) -> None:
        """Create the data directory and file, seeding it when configured."""
        with self._lock:
            if self.path.exists():
                return
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                initial = self._load_seed()
                self._write(initial)
            except OSError as exc:
                raise self._storage_error("Failed to create data file", exc) from exc
        logger.info("data_file_created", path=str(self.path), entries=len(initial["odf"]))

    def read_document(self) -> dict[str, Any]:
        """Current document; unparseable content reads as empty."""
        if self._pending is not None:
            return self._pending
        self.ensure_file()
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise self._storage_error("Failed to read data file", exc) from exc
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.warning("data_file_invalid_json", path=str(self.path))
            return empty_document()
        return coerce_document(parsed)

    def _write(self, document: dict[str, Any]) -> None:
        text = json.dumps(document, indent=self.indent, ensure_ascii=False)
        if not self.atomic:
            self.path.write_text(text, encoding="utf-8")
            return
        tmp = self.path.with_name(f"{self.path.name}.tmp")
        tmp.write_text(text, encoding="utf-8")
        os.replace(tmp, self.path)

    def write_document(self, document: dict[str, Any]) -> None:
        if self._pending is not None:
            self._pending = document
            return
        try:
            self._write(document)
        except OSError as exc:
            raise self._storage_error("Failed to write data file", exc) from exc

    # -- Contract ----------------------------------------------------------

    def get(self, region: str, sub: str) -> dict[str, Any] | None:
        with self._lock:
            entry = self.read_document()["odf"].get(storage_key(region, sub))
        return entry if isinstance(entry, dict) else None

    def put(self, region: str, sub: str, entry: dict[str, Any]) -> None:
        with self._lock:
            document = self.read_document()
            document["odf"][storage_key(region, sub)] = entry
            self.write_document(document)

    def delete(self, region: str, sub: str) -> bool:
        key = storage_key(region, sub)
        with self._lock:
            document = self.read_document()
            if key not in document["odf"]:
                return False
            del document["odf"][key]
            self.write_document(document)
            return True

    def iter_entries(self) -> Iterator[tuple[str, dict[str, Any]]]:
        with self._lock:
            items = list(self.read_document()["odf"].items())
        yield from items

    def list_subregions(self, region: str) -> list[str]:
        with self._lock:
            items = self.read_document()["subregions"].get(region)
        return [str(item) for item in items] if isinstance(items, list) else []

    def replace_subregions(self, region: str, items: list[str]) -> None:
        with self._lock:
            document = self.read_document()
            document["subregions"][region] = list(items)
            self.write_document(document)

    # -- Transactions ------------------------------------------------------

    def _begin(self) -> None:
        self._pending = self.read_document()

    def _commit(self) -> None:
        document, self._pending = self._pending, None
        if document is not None:
            self.write_document(document)

    def _rollback(self) -> None:
        self._pending = None

    def __repr__(self) -> str:
        return f"JsonFileFrameStore(path={str(self.path)!r}, atomic={self.atomic})"


__all__ = ["JsonFileFrameStore", "coerce_document", "empty_document"]
