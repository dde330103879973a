"""
Storage collaborator contract for frame entries and subregion rosters.

The frames engine never touches persisted state directly; it goes through a
:class:`FrameStore`. Every backend keeps the same two collections:

- frame entries keyed by ``(region, sub)`` (full replace on ``put``)
- the subregion roster, ``region → [sub, ...]`` in display order

Architecture:
    ::

        FrameStore (ABC)
        ├── MemoryFrameStore    dict-backed, snapshot rollback
        ├── JsonFileFrameStore  data.json document, atomic write
        └── SqliteFrameStore    odf_entries / odf_ports / odf_subregions

        API: get(region, sub)               → raw entry | None
             put(region, sub, entry)
             delete(region, sub)            → bool
             list_subregions(region)        → [sub, ...]
             replace_subregions(region, items)
             iter_entries()                 → (storage_key, entry) pairs
             transaction()                  → context manager

Transactions:
    ``with store.transaction() as tx:`` groups calls into one unit. Nested
    blocks join the outermost unit. Backends implement ``_begin``,
    ``_commit`` and ``_rollback``; the base class keeps the depth count, so
    only the outermost block commits, and an exception anywhere inside rolls
    the whole unit back before propagating.

Threads:
    One store serves every API request, and sync routes run in a thread
    pool. Each store owns a reentrant ``_lock``; a transaction holds it from
    begin to commit or rollback, and every public backend method takes it,
    so a unit is invisible to other threads until it commits and a call from
    another thread never joins it.

Guardrails:
    ❌ DON'T: Mutate a returned entry and expect it to be persisted
    ✅ DO: ``put`` the full canonical entry

    ❌ DON'T: Catch storage failures inside a transaction and carry on
    ✅ DO: Let them propagate so the unit rolls back

Tags:
    storage, repository, transaction, frame-entry, odf-spine
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from odf_spine.core.logging import get_logger

logger = get_logger(__name__)


class FrameStore(ABC):
    """Base class for frame entry storage backends."""

    backend: str = "abstract"

    def __init__(self) -> None:
        self._depth = 0
        # Held by every public backend method and for a whole transaction
        self._lock = threading.RLock()

    # -- Entries -----------------------------------------------------------

    @abstractmethod
    def get(self, region: str, sub: str) -> dict[str, Any] | None:
        """Stored entry for ``(region, sub)``, or ``None``."""

    @abstractmethod
    def put(self, region: str, sub: str, entry: dict[str, Any]) -> None:
        """Store ``entry``, replacing anything at ``(region, sub)``."""

    @abstractmethod
    def delete(self, region: str, sub: str) -> bool:
        """Remove the entry and its ports; ``True`` if it existed."""

    @abstractmethod
    def iter_entries(self) -> Iterator[tuple[str, dict[str, Any]]]:
        """``(storage_key, entry)`` pairs in store order."""

    # -- Roster ------------------------------------------------------------

    @abstractmethod
    def list_subregions(self, region: str) -> list[str]:
        """Roster for ``region`` in stored order (empty when unknown)."""

    @abstractmethod
    def replace_subregions(self, region: str, items: list[str]) -> None:
        """Replace the roster for ``region``."""

    # -- Transactions ------------------------------------------------------

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    @contextmanager
    def transaction(self) -> Iterator[FrameStore]:
        """Group calls into one all-or-nothing unit (nested blocks join).

        The store lock is held for the whole unit, so other threads neither
        join it nor see its uncommitted state.
        """
        with self._lock:
            outermost = self._depth == 0
            if outermost:
                self._begin()
            self._depth += 1
            try:
                yield self
            except BaseException:
                self._depth -= 1
                if outermost:
                    self._rollback()
                    logger.warning("store_transaction_rolled_back", backend=self.backend)
                raise
            else:
                self._depth -= 1
                if outermost:
                    self._commit()

    def _begin(self) -> None:
        """Start a unit of work."""

    def _commit(self) -> None:
        """Make the unit's changes visible."""

    def _rollback(self) -> None:
        """Discard the unit's changes."""

    def close(self) -> None:
        """Release backend resources."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(backend={self.backend!r})"


__all__ = ["FrameStore"]
