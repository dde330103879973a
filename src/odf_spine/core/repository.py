"""Dict-in, dict-out SQL helpers shared by repositories.

:class:`BaseRepository` pairs a :class:`~odf_spine.core.protocols.Connection`
with a :class:`~odf_spine.core.dialect.Dialect`. Subclasses describe rows as
``{column: value}`` dicts and get them back the same way; none of the
helpers commits.

    BaseRepository
    ├── query(sql, params)               → [dict]
    ├── query_one(sql, params)           → dict | None
    ├── insert_many(table, rows)         → count
    ├── upsert(table, row, key_columns)
    └── delete_where(table, **criteria)  → rows removed

Tags:
    repository, database, sqlite, odf-spine
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from odf_spine.core.dialect import Dialect, SQLiteDialect
from odf_spine.core.protocols import Connection


def row_to_dict(row: Any, description: Any = None) -> dict[str, Any]:
    """Plain dict for a ``sqlite3.Row``, a mapping, or a tuple plus cursor description."""
    if isinstance(row, Mapping):
        return dict(row)
    if hasattr(row, "keys"):
        return {key: row[key] for key in row.keys()}
    columns = [column[0] for column in description or ()]
    return dict(zip(columns, row))


class BaseRepository:
    """Base class for repositories over one connection."""

    def __init__(self, conn: Connection, dialect: Dialect | None = None) -> None:
        self.conn = conn
        self.dialect: Dialect = dialect or SQLiteDialect()

    def ph(self, count: int) -> str:
        return self.dialect.placeholders(count)

    def execute(self, sql: str, params: tuple = ()) -> Any:
        return self.conn.execute(sql, params)

    def query(self, sql: str, params: tuple = ()) -> list[dict[str, Any]]:
        cursor = self.conn.execute(sql, params)
        description = getattr(cursor, "description", None)
        return [row_to_dict(row, description) for row in cursor.fetchall()]

    def query_one(self, sql: str, params: tuple = ()) -> dict[str, Any] | None:
        rows = self.query(sql, params)
        return rows[0] if rows else None

    def insert_many(self, table: str, rows: list[dict[str, Any]]) -> int:
        """Batch insert; every row must have the first row's columns."""
        if not rows:
            return 0
        columns = list(rows[0])
        sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({self.ph(len(columns))})"
        self.conn.executemany(sql, [tuple(row[column] for column in columns) for row in rows])
        return len(rows)

    def upsert(self, table: str, row: dict[str, Any], key_columns: list[str]) -> None:
        sql = self.dialect.upsert(table, list(row), key_columns)
        self.conn.execute(sql, tuple(row.values()))

    def delete_where(self, table: str, **criteria: Any) -> int:
        """Delete rows matching every ``column=value`` pair; returns the count."""
        if not criteria:
            raise ValueError("delete_where needs at least one criterion")
        columns = list(criteria)
        cursor = self.conn.execute(
            f"DELETE FROM {table} WHERE {self.dialect.where_equals(columns)}",
            tuple(criteria.values()),
        )
        return max(getattr(cursor, "rowcount", 0), 0)


__all__ = ["BaseRepository", "row_to_dict"]
