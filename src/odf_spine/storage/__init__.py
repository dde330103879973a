"""
Storage collaborators for frame entries.

``create_store(settings)`` picks the backend named by ``settings.backend``::

    memory  → MemoryFrameStore
    json    → JsonFileFrameStore(settings.data_path)
    sqlite  → SqliteFrameStore(settings.database_url)
"""

from __future__ import annotations

from odf_spine.core.errors import ConfigError
from odf_spine.core.logging import get_logger
from odf_spine.core.settings import OdfSettings
from odf_spine.storage.base import FrameStore
from odf_spine.storage.json_file import JsonFileFrameStore
from odf_spine.storage.memory import MemoryFrameStore
from odf_spine.storage.sql import SqliteFrameStore

logger = get_logger(__name__)


def create_store(settings: OdfSettings) -> FrameStore:
    """Build the configured frame store."""
    if settings.backend == "memory":
        store: FrameStore = MemoryFrameStore()
    elif settings.backend == "json":
        store = JsonFileFrameStore(
            settings.data_path,
            seed_file=settings.seed_file,
            atomic=settings.atomic_writes,
        )
    elif settings.backend == "sqlite":
        store = SqliteFrameStore.from_url(settings.database_url, data_dir=settings.data_dir)
    else:
        raise ConfigError("backend", settings.backend)

    logger.info("store_created", backend=store.backend)
    return store


__all__ = [
    "FrameStore",
    "MemoryFrameStore",
    "JsonFileFrameStore",
    "SqliteFrameStore",
    "create_store",
]
