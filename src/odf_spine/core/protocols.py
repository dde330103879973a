"""
Database connection contract for the relational frame store.

:class:`~odf_spine.core.repository.BaseRepository` and
:class:`~odf_spine.storage.sql.SqliteFrameStore` only ever talk to this
protocol, so a test double or another DB-API driver can stand in for
:class:`~odf_spine.core.sqlite_conn.SqliteConnection`.

    Connection
    ├── execute(sql, params)       → cursor (iterate / fetchall / rowcount)
    ├── executemany(sql, rows)     → cursor
    ├── executescript(script)      schema DDL, several statements
    ├── commit() / rollback()      end the implicit transaction
    └── close()

Guardrails:
    ❌ DON'T: Commit from inside a repository method
    ✅ DO: Leave transaction boundaries to ``FrameStore.transaction()``

Tags:
    protocol, connection, database, odf-spine
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Connection(Protocol):
    """Synchronous connection used by the frame repository."""

    def execute(self, sql: str, params: tuple = ()) -> Any: ...

    def executemany(self, sql: str, params: list[tuple]) -> Any: ...

    def executescript(self, script: str) -> None:
        """Run a multi-statement script such as the table DDL."""
        ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def close(self) -> None: ...


__all__ = ["Connection"]
