"""
Tests for subregion roster reconciliation.
"""

from __future__ import annotations

from datetime import date

import pytest

from odf_spine.core.errors import StorageError, ValidationError
from odf_spine.frames.roster import RosterReconciler, normalize_roster, plan_roster
from odf_spine.storage import MemoryFrameStore

TODAY = date(2026, 1, 15)


class TestNormalizeRoster:
    def test_trims_dedupes_and_drops_blanks(self):
        assert normalize_roster([" A", "B ", "", None, "A", "  "]) == ["A", "B"]

    def test_set_is_sorted(self):
        assert normalize_roster({"b", " a"}) == ["a", "b"]

    def test_non_list_is_invalid(self):
        assert normalize_roster("A,B") is None
        assert normalize_roster(None) is None
        assert normalize_roster({"A": 1}) is None

    def test_scalars_are_stringified(self):
        assert normalize_roster([1, 2]) == ["1", "2"]


class TestPlanRoster:
    def test_diff(self):
        plan = plan_roster(["B", "C"], ["A", "B"])
        assert plan.added == ["C"]
        assert plan.removed == ["A"]
        assert not set(plan.added) & set(plan.removed)

    def test_orders(self):
        plan = plan_roster(["Z", "Y", "X"], ["C", "X", "B"])
        assert plan.added == ["Z", "Y"]
        assert plan.removed == ["C", "B"]


class TestRosterReconciler:
    def test_add_and_remove(self, any_store, entry_factory):
        any_store.replace_subregions("North", ["A", "B"])
        any_store.put("North", "A", entry_factory("North", "A"))
        any_store.put("North", "B", entry_factory("North", "B"))

        result = RosterReconciler(any_store).reconcile("North", ["B", "C"], today=TODAY)

        assert result.added == ["C"]
        assert result.removed == ["A"]
        assert result.created_count == 1
        assert any_store.get("North", "A") is None
        assert any_store.list_subregions("North") == ["B", "C"]

        created = any_store.get("North", "C")
        assert created["displayCount"] == 96
        assert len(created["ports"]) == 96
        assert {p["status"] for p in created["ports"]} == {"INACTIVE"}
        assert created["ports"][0]["lastMaintained"] == "2026-01-15"
        assert created["extraFieldDefs"] == []
        assert created["ports"][95]["label"] == "PORT-096"

    def test_existing_entry_is_not_clobbered(self, any_store, entry_factory):
        kept = entry_factory("North", "C")
        any_store.put("North", "C", kept)

        result = RosterReconciler(any_store).reconcile("North", ["C"])

        assert result.added == ["C"]
        assert result.created_count == 0
        assert any_store.get("North", "C")["displayCount"] == 3

    def test_reapplying_is_a_no_op(self, any_store):
        reconciler = RosterReconciler(any_store, port_count=4)
        reconciler.reconcile("North", ["A"])
        again = reconciler.reconcile("North", ["A"])
        assert again.added == [] and again.removed == [] and again.created_count == 0

    def test_other_regions_untouched(self, any_store, entry_factory):
        any_store.replace_subregions("South", ["A"])
        any_store.put("South", "A", entry_factory("South", "A"))

        RosterReconciler(any_store).reconcile("North", [])

        assert any_store.list_subregions("South") == ["A"]
        assert any_store.get("South", "A") is not None

    def test_port_count_setting(self, memory_store):
        RosterReconciler(memory_store, port_count=12).reconcile("North", ["A"])
        assert memory_store.get("North", "A")["displayCount"] == 12

    def test_result_dict(self, memory_store):
        result = RosterReconciler(memory_store, port_count=1).reconcile("North", ["A"])
        assert result.to_dict() == {"region": "North", "items": ["A"], "added": ["A"], "removed": [], "created": 1}

    def test_uncleaned_roster_is_normalized(self, any_store):
        result = RosterReconciler(any_store, port_count=2).reconcile("North", [" C ", "", "C", None])

        assert result.items == ["C"]
        assert result.added == ["C"]
        assert result.created_count == 1
        assert any_store.list_subregions("North") == ["C"]
        assert any_store.get("North", " C ") is None
        assert any_store.get("North", "") is None

    def test_set_roster_is_sorted(self, memory_store):
        result = RosterReconciler(memory_store, port_count=1).reconcile("North", {"B", "A", " "})
        assert result.items == ["A", "B"]

    @pytest.mark.parametrize("desired", [None, "A,B", {"A": 1}])
    def test_malformed_roster_raises_before_touching_store(self, memory_store, desired):
        memory_store.replace_subregions("North", ["A"])

        with pytest.raises(ValidationError):
            RosterReconciler(memory_store).reconcile("North", desired)

        assert memory_store.list_subregions("North") == ["A"]

    def test_default_entry_is_canonical(self, memory_store):
        entry = RosterReconciler(memory_store, port_count=3).build_default("North", "A", TODAY)
        assert [port["id"] for port in entry["ports"]] == [1, 2, 3]
        assert entry["displayCount"] == 3


class _FailingPutStore(MemoryFrameStore):
    def put(self, region, sub, entry):
        raise StorageError("disk full")


class TestRosterAtomicity:
    def test_failure_rolls_everything_back(self, entry_factory):
        store = _FailingPutStore(
            odf={"North||A": entry_factory("North", "A")},
            subregions={"North": ["A"]},
        )

        with pytest.raises(StorageError):
            RosterReconciler(store).reconcile("North", ["B"])

        assert store.list_subregions("North") == ["A"]
        assert store.get("North", "A") is not None
