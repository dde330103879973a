"""Open the SQLite database named by ``database_url``.

Accepted forms::

    None, "", "memory", ":memory:", "sqlite://", "sqlite:///:memory:"   in-memory
    "sqlite:///odf.db", "sqlite://odf.db"                               file
    "odf.db", "/srv/odf/odf.db"                                         file

Relative file paths are placed under the data directory. Any other
``scheme://`` URL is a :class:`~odf_spine.core.errors.ConfigError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from odf_spine.core.errors import ConfigError
from odf_spine.core.logging import get_logger
from odf_spine.core.sqlite_conn import MEMORY_PATH, SqliteConnection

logger = get_logger(__name__)

_MEMORY_ALIASES = frozenset({"", "memory", MEMORY_PATH})
_SQLITE_PREFIXES = ("sqlite:///", "sqlite://")


@dataclass(frozen=True)
class ConnectionInfo:
    backend: str
    persistent: bool
    url: str
    resolved_path: str | None = None


def sqlite_target(db: str | None) -> str | None:
    """File path named by ``db``, or None for an in-memory database."""
    if db is None or db in _MEMORY_ALIASES:
        return None
    for prefix in _SQLITE_PREFIXES:
        if db.startswith(prefix):
            rest = db.removeprefix(prefix)
            return None if rest in _MEMORY_ALIASES else rest
    if "://" in db:
        raise ConfigError("database_url", db, f"Unsupported database URL: {db!r} (only SQLite is supported)")
    return db


def create_connection(
    db: str | None = None,
    *,
    data_dir: str | Path | None = None,
) -> tuple[SqliteConnection, ConnectionInfo]:
    target = sqlite_target(db)
    if target is None:
        conn = SqliteConnection(MEMORY_PATH)
        info = ConnectionInfo("sqlite", persistent=False, url=db or MEMORY_PATH)
    else:
        path = Path(target)
        if data_dir is not None and not path.is_absolute():
            path = Path(data_dir) / path
        path.parent.mkdir(parents=True, exist_ok=True)
        resolved = str(path.resolve())
        conn = SqliteConnection(resolved)
        info = ConnectionInfo("sqlite", persistent=True, url=db, resolved_path=resolved)

    logger.debug("connection_opened", persistent=info.persistent, path=info.resolved_path)
    return conn, info


__all__ = ["ConnectionInfo", "create_connection", "sqlite_target"]
