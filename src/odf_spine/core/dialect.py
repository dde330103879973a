"""SQL fragments for the frame tables.

The frame repository builds its statements from a :class:`Dialect` so
placeholder style and upsert syntax live in one place. SQLite is the only
implementation; it needs 3.24+ for ``ON CONFLICT ... DO UPDATE``.

Examples:
    >>> d = SQLiteDialect()
    >>> d.placeholders(2)
    '?, ?'
    >>> d.where_equals(["region", "sub"])
    'region = ? AND sub = ?'
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Dialect(Protocol):
    name: str

    def placeholders(self, count: int) -> str: ...

    def where_equals(self, columns: list[str]) -> str: ...

    def upsert(self, table: str, columns: list[str], key_columns: list[str]) -> str: ...


class SQLiteDialect:
    """``?`` placeholders, ``excluded.`` upserts."""

    name = "sqlite"

    def placeholders(self, count: int) -> str:
        return ", ".join(["?"] * count)

    def where_equals(self, columns: list[str]) -> str:
        return " AND ".join(f"{column} = ?" for column in columns)

    def upsert(self, table: str, columns: list[str], key_columns: list[str]) -> str:
        """Insert, or update the non-key columns of the row already holding the key.

        Updating in place keeps the row id, so entries keep their original
        position in ``ORDER BY id`` listings.
        """
        insert = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({self.placeholders(len(columns))})"
        conflict = f"ON CONFLICT ({', '.join(key_columns)})"
        assignments = [f"{column} = excluded.{column}" for column in columns if column not in key_columns]
        if not assignments:
            return f"{insert} {conflict} DO NOTHING"
        return f"{insert} {conflict} DO UPDATE SET {', '.join(assignments)}"


__all__ = ["Dialect", "SQLiteDialect"]
