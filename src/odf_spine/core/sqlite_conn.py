"""SQLite driver for the relational frame store.

Every connection is opened with foreign keys enforced, since deleting a
frame entry relies on ``ON DELETE CASCADE`` to drop its port rows. File
databases also get a busy timeout so a second process (the CLI next to a
running server) waits for a lock instead of failing at once.

Rows come back as :class:`sqlite3.Row`, which the repository turns into
plain dicts.
"""

from __future__ import annotations

import sqlite3
from typing import Any

MEMORY_PATH = ":memory:"


class SqliteConnection:
    """:class:`~odf_spine.core.protocols.Connection` over ``sqlite3``."""

    def __init__(self, path: str = MEMORY_PATH, *, timeout: float = 5.0) -> None:
        self.path = path
        # API handlers run in a thread pool; SqliteFrameStore serializes them
        self._conn = sqlite3.connect(path, timeout=timeout, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._closed = False

    @property
    def persistent(self) -> bool:
        return self.path != MEMORY_PATH

    @property
    def closed(self) -> bool:
        return self._closed

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        return self._conn.execute(sql, params)

    def executemany(self, sql: str, params: list[tuple]) -> sqlite3.Cursor:
        return self._conn.executemany(sql, params)

    def executescript(self, script: str) -> None:
        self._conn.executescript(script)

    def commit(self) -> None:
        self._conn.commit()

    def rollback(self) -> None:
        self._conn.rollback()

    def close(self) -> None:
        if not self._closed:
            self._conn.close()
            self._closed = True

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"SqliteConnection(path={self.path!r}, {state})"


__all__ = ["MEMORY_PATH", "SqliteConnection"]
