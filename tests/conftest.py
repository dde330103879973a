"""
Shared pytest fixtures for odf-spine tests.

This module provides:
- Environment isolation (no stray ``ODF_*`` variables or ``.env`` files)
- Store fixtures for every backend, plus a parametrized ``any_store``
- Sample frame entries in current and legacy encodings

Usage:
    def test_something(memory_store, legacy_entry):
        ...
"""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from datetime import date
from pathlib import Path
from typing import Any

import pytest

# Ensure odf_spine is importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from odf_spine.core.settings import OdfSettings, get_settings
from odf_spine.ops.context import OperationContext
from odf_spine.storage import JsonFileFrameStore, MemoryFrameStore, SqliteFrameStore
from odf_spine.storage.base import FrameStore

FIXED_TODAY = date(2026, 1, 15)


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark tests that touch files or databases as integration, the rest as unit."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Environment isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Run every test in an empty directory with no odf-related variables."""
    for name in list(os.environ):
        if name.startswith("ODF_") or name in ("PORT", "DATA_DIR", "RENDER_DISK_MOUNT_PATH"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Stores
# =============================================================================


@pytest.fixture
def memory_store() -> MemoryFrameStore:
    return MemoryFrameStore()


@pytest.fixture
def json_store(tmp_path: Path) -> JsonFileFrameStore:
    return JsonFileFrameStore(tmp_path / "data" / "data.json")


@pytest.fixture
def sqlite_store() -> Iterator[SqliteFrameStore]:
    store = SqliteFrameStore.in_memory()
    yield store
    store.close()


@pytest.fixture(params=["memory", "json", "sqlite"])
def any_store(request: pytest.FixtureRequest, tmp_path: Path) -> Iterator[FrameStore]:
    """Each backend in turn; tests using it must hold for all of them."""
    if request.param == "memory":
        store: FrameStore = MemoryFrameStore()
    elif request.param == "json":
        store = JsonFileFrameStore(tmp_path / "any" / "data.json")
    else:
        store = SqliteFrameStore.in_memory()
    yield store
    store.close()


@pytest.fixture
def settings(tmp_path: Path) -> OdfSettings:
    return OdfSettings(backend="memory", data_dir=tmp_path)


@pytest.fixture
def op_ctx(memory_store: MemoryFrameStore, settings: OdfSettings) -> OperationContext:
    return OperationContext(store=memory_store, settings=settings, caller="test")


# =============================================================================
# Sample entries
# =============================================================================


def make_port(number: int, **fields: Any) -> dict[str, Any]:
    port: dict[str, Any] = {
        "id": number,
        "label": f"PORT-{number:03d}",
        "status": "ACTIVE",
        "fiberType": "Single-mode OS2",
        "connectorType": "LC/UPC",
        "destination": "",
        "otdrDistance": "",
        "otdrDistanceValue": "",
        "lastMaintained": "2025-06-01",
        "branchingJoint": "",
        "cxLocation": "",
        "notes": "",
        "customFields": {},
    }
    port.update(fields)
    return port


def make_entry(region: str = "North", sub: str = "A", ports: list[dict[str, Any]] | None = None, **fields: Any) -> dict[str, Any]:
    port_list = ports if ports is not None else [make_port(n) for n in range(1, 4)]
    entry: dict[str, Any] = {
        "region": region,
        "sub": sub,
        "ports": port_list,
        "displayCount": len(port_list),
        "extraFieldDefs": [],
        "lastSave": "2026-01-01T00:00:00.000Z",
    }
    entry.update(fields)
    return entry


@pytest.fixture
def canonical_entry() -> dict[str, Any]:
    return make_entry(
        ports=[
            make_port(1, destination="Core switch 1", customFields={"Owner": "NOC"}),
            make_port(2, status="FAULTY", notes="Dirty connector", customFields={"Owner": ""}),
            make_port(3, status="INACTIVE", customFields={"Owner": "Field team"}),
        ],
        extraFieldDefs=["Owner"],
    )


@pytest.fixture
def legacy_entry() -> dict[str, Any]:
    """An entry as older clients stored it: flat and record-list custom fields."""
    return {
        "region": "North",
        "sub": "B",
        "displayCount": "2",
        "extraFieldDefs": ["Distance", "Owner"],
        "ports": [
            {"status": "active", "extraFieldValues": ["10km", "NOC"], "notes": None},
            {"status": "broken", "extraFields": [{"value": "3km"}, {"value": 42}], "lastMaintained": "2024-03-05T10:00:00Z"},
        ],
    }


@pytest.fixture
def port_factory():
    return make_port


@pytest.fixture
def entry_factory():
    return make_entry
