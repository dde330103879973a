"""In-memory frame store for tests and ephemeral runs."""

from __future__ import annotations

import copy
from collections.abc import Iterator
from typing import Any

from odf_spine.frames.models import storage_key
from odf_spine.storage.base import FrameStore


class MemoryFrameStore(FrameStore):
    """Dict-backed store. Rollback restores a snapshot taken at ``_begin``.

    Entries are deep-copied on the way in and out, so callers never share
    state with the store.
    """

    backend = "memory"

    def __init__(
        self,
        odf: dict[str, dict[str, Any]] | None = None,
        subregions: dict[str, list[str]] | None = None,
    ) -> None:
        super().__init__()
        self._odf: dict[str, dict[str, Any]] = copy.deepcopy(odf or {})
        self._subregions: dict[str, list[str]] = copy.deepcopy(subregions or {})
        self._snapshot: tuple[dict[str, Any], dict[str, list[str]]] | None = None

    def get(self, region: str, sub: str) -> dict[str, Any] | None:
        with self._lock:
            entry = self._odf.get(storage_key(region, sub))
            return copy.deepcopy(entry) if entry is not None else None

    def put(self, region: str, sub: str, entry: dict[str, Any]) -> None:
        with self._lock:
            self._odf[storage_key(region, sub)] = copy.deepcopy(entry)

    def delete(self, region: str, sub: str) -> bool:
        with self._lock:
            return self._odf.pop(storage_key(region, sub), None) is not None

    def iter_entries(self) -> Iterator[tuple[str, dict[str, Any]]]:
        with self._lock:
            items = copy.deepcopy(list(self._odf.items()))
        yield from items

    def list_subregions(self, region: str) -> list[str]:
        with self._lock:
            return list(self._subregions.get(region, []))

    def replace_subregions(self, region: str, items: list[str]) -> None:
        with self._lock:
            self._subregions[region] = list(items)

    def _begin(self) -> None:
        self._snapshot = (copy.deepcopy(self._odf), copy.deepcopy(self._subregions))

    def _commit(self) -> None:
        self._snapshot = None

    def _rollback(self) -> None:
        if self._snapshot is not None:
            self._odf, self._subregions = self._snapshot
        self._snapshot = None


__all__ = ["MemoryFrameStore"]
