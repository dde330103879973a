"""
Relational frame store on SQLite.

Frame entries are split across three tables so ports can be queried and
replaced as rows::

    odf_subregions (region, sub, position)             roster, display order
    odf_entries    (id, storage_key, region, sub,      one row per frame
                    display_count, extra_field_defs,
                    last_save, extra)
    odf_ports      (entry_key → odf_entries,           one row per port
                    position, port_id, label, status,
                    ...text fields..., custom_fields,
                    extra)                             ON DELETE CASCADE

``extra`` columns hold, as JSON, any keys the canonical model does not name,
so a round trip through the table layout returns the entry it was given.

Every mutating call is one transaction: ``put`` upserts the entry row and
replaces all of its ports (delete, then batch insert); ``replace_subregions``
swaps the roster the same way. Inside ``store.transaction()`` these join the
outer unit and commit together. ``sqlite3`` failures roll the unit back and
surface as :class:`~odf_spine.core.errors.DatabaseError`.

Examples:
    >>> store = SqliteFrameStore.in_memory()
    >>> store.replace_subregions("North", ["A", "B"])
    >>> store.list_subregions("North")
    ['A', 'B']

Tags:
    storage, sqlite, repository, transaction, cascade-delete, odf-spine
"""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from odf_spine.core.connection import create_connection
from odf_spine.core.dialect import Dialect
from odf_spine.core.errors import DatabaseError
from odf_spine.core.logging import get_logger
from odf_spine.core.repository import BaseRepository
from odf_spine.core.sqlite_conn import SqliteConnection
from odf_spine.frames.models import ENTRY_FIELDS, PORT_FIELDS, storage_key
from odf_spine.storage.base import FrameStore

logger = get_logger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS odf_subregions (
    region      TEXT NOT NULL,
    sub         TEXT NOT NULL,
    position    INTEGER NOT NULL,
    PRIMARY KEY (region, sub)
);

CREATE TABLE IF NOT EXISTS odf_entries (
    id               INTEGER PRIMARY KEY AUTOINCREMENT,
    storage_key      TEXT NOT NULL UNIQUE,
    region           TEXT NOT NULL,
    sub              TEXT NOT NULL,
    display_count    INTEGER NOT NULL DEFAULT 0,
    extra_field_defs TEXT NOT NULL DEFAULT '[]',
    last_save        TEXT,
    extra            TEXT NOT NULL DEFAULT '{}'
);

CREATE TABLE IF NOT EXISTS odf_ports (
    entry_key           TEXT NOT NULL REFERENCES odf_entries (storage_key) ON DELETE CASCADE,
    position            INTEGER NOT NULL,
    port_id             INTEGER,
    label               TEXT,
    status              TEXT,
    fiber_type          TEXT,
    connector_type      TEXT,
    destination         TEXT,
    otdr_distance       TEXT,
    otdr_distance_value TEXT,
    last_maintained     TEXT,
    branching_joint     TEXT,
    cx_location         TEXT,
    notes               TEXT,
    custom_fields       TEXT NOT NULL DEFAULT '{}',
    extra               TEXT NOT NULL DEFAULT '{}',
    PRIMARY KEY (entry_key, position)
);
"""

# Wire name → column name for the port table
PORT_COLUMNS: dict[str, str] = {
    "id": "port_id",
    "label": "label",
    "status": "status",
    "fiberType": "fiber_type",
    "connectorType": "connector_type",
    "destination": "destination",
    "otdrDistance": "otdr_distance",
    "otdrDistanceValue": "otdr_distance_value",
    "lastMaintained": "last_maintained",
    "branchingJoint": "branching_joint",
    "cxLocation": "cx_location",
    "notes": "notes",
}


def _dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def _loads(text: str | None, default: Any) -> Any:
    if not text:
        return default
    try:
        return json.loads(text)
    except ValueError:
        return default


def port_to_row(key: str, position: int, port: dict[str, Any]) -> dict[str, Any]:
    row: dict[str, Any] = {"entry_key": key, "position": position}
    for wire, column in PORT_COLUMNS.items():
        row[column] = port.get(wire)
    row["custom_fields"] = _dumps(port.get("customFields", {}))
    row["extra"] = _dumps({k: v for k, v in port.items() if k not in PORT_FIELDS})
    return row


def row_to_port(row: dict[str, Any]) -> dict[str, Any]:
    port: dict[str, Any] = {wire: row[column] for wire, column in PORT_COLUMNS.items()}
    port["customFields"] = _loads(row["custom_fields"], {})
    port.update(_loads(row["extra"], {}))
    return port


class FrameRepository(BaseRepository):
    """SQL for the three frame tables. Does not commit."""

    def ensure_schema(self) -> None:
        self.conn.executescript(SCHEMA)

    # -- entries -----------------------------------------------------------

    def fetch_entry(self, key: str) -> dict[str, Any] | None:
        return self.query_one(
            f"SELECT * FROM odf_entries WHERE storage_key = {self.ph(1)}",
            (key,),
        )

    def fetch_ports(self, key: str) -> list[dict[str, Any]]:
        return self.query(
            f"SELECT * FROM odf_ports WHERE entry_key = {self.ph(1)} ORDER BY position",
            (key,),
        )

    def entry_rows(self) -> list[dict[str, Any]]:
        return self.query("SELECT * FROM odf_entries ORDER BY id")

    def upsert_entry(self, key: str, region: str, sub: str, entry: dict[str, Any]) -> None:
        self.upsert(
            "odf_entries",
            {
                "storage_key": key,
                "region": region,
                "sub": sub,
                "display_count": entry.get("displayCount", 0),
                "extra_field_defs": _dumps(entry.get("extraFieldDefs", [])),
                "last_save": entry.get("lastSave"),
                "extra": _dumps({k: v for k, v in entry.items() if k not in ENTRY_FIELDS}),
            },
            key_columns=["storage_key"],
        )

    def replace_ports(self, key: str, ports: list[dict[str, Any]]) -> int:
        self.delete_where("odf_ports", entry_key=key)
        rows = [port_to_row(key, i, port) for i, port in enumerate(ports) if isinstance(port, dict)]
        return self.insert_many("odf_ports", rows)

    def delete_entry(self, key: str) -> bool:
        return self.delete_where("odf_entries", storage_key=key) > 0

    # -- roster ------------------------------------------------------------

    def subregions(self, region: str) -> list[str]:
        rows = self.query(
            f"SELECT sub FROM odf_subregions WHERE region = {self.ph(1)} ORDER BY position",
            (region,),
        )
        return [row["sub"] for row in rows]

    def replace_subregions(self, region: str, items: list[str]) -> int:
        self.delete_where("odf_subregions", region=region)
        rows = [{"region": region, "sub": sub, "position": i} for i, sub in enumerate(items)]
        return self.insert_many("odf_subregions", rows)


def entry_from_rows(row: dict[str, Any], port_rows: list[dict[str, Any]]) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "region": row["region"],
        "sub": row["sub"],
        "ports": [row_to_port(port_row) for port_row in port_rows],
        "displayCount": row["display_count"],
        "extraFieldDefs": _loads(row["extra_field_defs"], []),
        "lastSave": row["last_save"],
    }
    entry.update(_loads(row["extra"], {}))
    return entry


class SqliteFrameStore(FrameStore):
    """Frame store on the connection / dialect / repository layer."""

    backend = "sqlite"

    def __init__(self, conn: SqliteConnection, *, dialect: Dialect | None = None) -> None:
        super().__init__()
        self.conn = conn
        self.repo = FrameRepository(conn, dialect)
        with self._db_errors("ensure_schema"):
            self.repo.ensure_schema()

    @classmethod
    def from_url(cls, url: str | None, *, data_dir: Any = None) -> SqliteFrameStore:
        conn, info = create_connection(url, data_dir=data_dir)
        logger.info("sqlite_store_opened", persistent=info.persistent, path=info.resolved_path)
        return cls(conn)

    @classmethod
    def in_memory(cls) -> SqliteFrameStore:
        return cls.from_url(None)

    @contextmanager
    def _db_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except sqlite3.Error as exc:
            logger.error("store_query_failed", backend=self.backend, operation=operation, error=str(exc))
            raise DatabaseError(f"SQLite {operation} failed: {exc}", cause=exc).with_context(
                backend=self.backend,
                operation=operation,
            ) from exc

    # -- Contract ----------------------------------------------------------

    def get(self, region: str, sub: str) -> dict[str, Any] | None:
        key = storage_key(region, sub)
        with self._lock, self._db_errors("get"):
            row = self.repo.fetch_entry(key)
            if row is None:
                return None
            return entry_from_rows(row, self.repo.fetch_ports(key))

    def put(self, region: str, sub: str, entry: dict[str, Any]) -> None:
        key = storage_key(region, sub)
        ports = entry.get("ports")
        with self.transaction(), self._db_errors("put"):
            self.repo.upsert_entry(key, region, sub, entry)
            count = self.repo.replace_ports(key, list(ports) if isinstance(ports, list) else [])
        logger.debug("entry_written", storage_key=key, ports=count)

    def delete(self, region: str, sub: str) -> bool:
        with self.transaction(), self._db_errors("delete"):
            return self.repo.delete_entry(storage_key(region, sub))

    def iter_entries(self) -> Iterator[tuple[str, dict[str, Any]]]:
        with self._lock, self._db_errors("iter_entries"):
            entries = [
                (row["storage_key"], entry_from_rows(row, self.repo.fetch_ports(row["storage_key"])))
                for row in self.repo.entry_rows()
            ]
        yield from entries

    def list_subregions(self, region: str) -> list[str]:
        with self._lock, self._db_errors("list_subregions"):
            return self.repo.subregions(region)

    def replace_subregions(self, region: str, items: list[str]) -> None:
        with self.transaction(), self._db_errors("replace_subregions"):
            self.repo.replace_subregions(region, list(items))

    # -- Transactions ------------------------------------------------------

    def _commit(self) -> None:
        with self._db_errors("commit"):
            self.conn.commit()

    def _rollback(self) -> None:
        with self._db_errors("rollback"):
            self.conn.rollback()

    def close(self) -> None:
        with self._lock:
            self.conn.close()


__all__ = ["SCHEMA", "FrameRepository", "SqliteFrameStore"]
