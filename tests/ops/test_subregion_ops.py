"""
Tests for subregion roster operations.
"""

from __future__ import annotations

import pytest

from odf_spine.core.settings import OdfSettings
from odf_spine.ops.context import OperationContext
from odf_spine.ops.subregions import list_subregions, update_subregions


class TestListSubregions:
    def test_unknown_region_is_empty(self, op_ctx):
        assert list_subregions(op_ctx, "North").data == {"items": []}

    def test_missing_region(self, op_ctx):
        result = list_subregions(op_ctx, "")
        assert result.error.code == "VALIDATION_FAILED"
        assert result.error.message == "Missing region"


class TestUpdateSubregions:
    def test_replace_roster(self, op_ctx, entry_factory):
        op_ctx.store.replace_subregions("North", ["A", "B"])
        op_ctx.store.put("North", "A", entry_factory("North", "A"))
        op_ctx.store.put("North", "B", entry_factory("North", "B"))

        result = update_subregions(op_ctx, "North", ["B", " C ", "C", ""])

        assert result.data == {
            "ok": True,
            "region": "North",
            "items": ["B", "C"],
            "added": ["C"],
            "removed": ["A"],
            "created": 1,
        }
        assert list_subregions(op_ctx, "North").data == {"items": ["B", "C"]}
        assert op_ctx.store.get("North", "A") is None
        assert op_ctx.store.get("North", "C")["displayCount"] == 96

    def test_default_port_count_from_settings(self, memory_store, tmp_path):
        ctx = OperationContext(
            store=memory_store,
            settings=OdfSettings(backend="memory", data_dir=tmp_path, default_port_count=24),
        )
        update_subregions(ctx, "North", ["A"])
        assert len(memory_store.get("North", "A")["ports"]) == 24

    @pytest.mark.parametrize("items", [None, "A,B", {"A": 1}, 3])
    def test_invalid_items(self, op_ctx, items):
        result = update_subregions(op_ctx, "North", items)
        assert result.error.code == "VALIDATION_FAILED"
        assert result.error.message == "Invalid payload"

    def test_missing_region(self, op_ctx):
        assert update_subregions(op_ctx, None, ["A"]).error.code == "VALIDATION_FAILED"

    def test_empty_roster_removes_everything(self, op_ctx, entry_factory):
        op_ctx.store.replace_subregions("North", ["A"])
        op_ctx.store.put("North", "A", entry_factory())

        result = update_subregions(op_ctx, "North", [])

        assert result.data["removed"] == ["A"]
        assert op_ctx.store.get("North", "A") is None
