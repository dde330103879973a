"""
Tests for the bulk normalization sweep.
"""

from __future__ import annotations

from odf_spine.ops.context import OperationContext
from odf_spine.ops.maintenance import normalize_all
from odf_spine.ops.result import OperationResult
from odf_spine.storage import MemoryFrameStore


def _seeded_store(canonical_entry, legacy_entry) -> MemoryFrameStore:
    return MemoryFrameStore(
        odf={
            "North||A": canonical_entry,
            "North||B": legacy_entry,
            "North||C": {"region": "North", "sub": "C"},
        }
    )


class TestNormalizeAll:
    def test_repairs_changed_entries(self, canonical_entry, legacy_entry, settings):
        store = _seeded_store(canonical_entry, legacy_entry)

        result = normalize_all(OperationContext(store=store, settings=settings))

        assert isinstance(result, OperationResult)
        assert result.data == {"scanned": 3, "updated": 1, "invalid": 1, "dry_run": False}
        repaired = store.get("North", "B")
        assert repaired["displayCount"] == 2
        assert repaired["ports"][0]["label"] == "PORT-001"
        assert store.get("North", "C") == {"region": "North", "sub": "C"}

    def test_dry_run_writes_nothing(self, canonical_entry, legacy_entry, settings):
        store = _seeded_store(canonical_entry, legacy_entry)

        result = normalize_all(OperationContext(store=store, settings=settings), dry_run=True)

        assert result.data["updated"] == 1
        assert result.data["dry_run"] is True
        assert store.get("North", "B") == legacy_entry

    def test_second_pass_is_clean(self, canonical_entry, legacy_entry, settings):
        ctx = OperationContext(store=_seeded_store(canonical_entry, legacy_entry), settings=settings)
        normalize_all(ctx)
        assert normalize_all(ctx).data["updated"] == 0

    def test_empty_store(self, op_ctx):
        assert normalize_all(op_ctx).data == {"scanned": 0, "updated": 0, "invalid": 0, "dry_run": False}

    def test_result_serialises(self, op_ctx):
        payload = normalize_all(op_ctx).to_dict()
        assert payload["success"] is True
        assert payload["data"]["scanned"] == 0
