"""
Contract tests run against every storage backend.
"""

from __future__ import annotations

import threading

import pytest

from odf_spine.core.errors import ConfigError
from odf_spine.core.settings import OdfSettings
from odf_spine.storage import JsonFileFrameStore, MemoryFrameStore, SqliteFrameStore, create_store


class TestEntryContract:
    def test_missing_entry(self, any_store):
        assert any_store.get("North", "A") is None

    def test_put_then_get(self, any_store, canonical_entry):
        any_store.put("North", "A", canonical_entry)
        assert any_store.get("North", "A") == canonical_entry

    def test_put_replaces(self, any_store, entry_factory, port_factory):
        any_store.put("North", "A", entry_factory())
        smaller = entry_factory(ports=[port_factory(1, notes="only")])
        any_store.put("North", "A", smaller)

        stored = any_store.get("North", "A")
        assert stored["displayCount"] == 1
        assert [p["notes"] for p in stored["ports"]] == ["only"]

    def test_unknown_keys_survive(self, any_store, entry_factory, port_factory):
        entry = entry_factory(ports=[port_factory(1, zone="Z1")], building="HQ")
        any_store.put("North", "A", entry)
        stored = any_store.get("North", "A")
        assert stored["building"] == "HQ"
        assert stored["ports"][0]["zone"] == "Z1"

    def test_delete(self, any_store, entry_factory):
        any_store.put("North", "A", entry_factory())
        assert any_store.delete("North", "A") is True
        assert any_store.get("North", "A") is None
        assert any_store.delete("North", "A") is False

    def test_iter_entries_in_insertion_order(self, any_store, entry_factory):
        for sub in ("B", "A", "C"):
            any_store.put("North", sub, entry_factory("North", sub))
        assert [key for key, _ in any_store.iter_entries()] == ["North||B", "North||A", "North||C"]

    def test_iter_entries_empty(self, any_store):
        assert list(any_store.iter_entries()) == []


class TestRosterContract:
    def test_unknown_region(self, any_store):
        assert any_store.list_subregions("Nowhere") == []

    def test_replace_keeps_order(self, any_store):
        any_store.replace_subregions("North", ["C", "A", "B"])
        assert any_store.list_subregions("North") == ["C", "A", "B"]
        any_store.replace_subregions("North", ["A"])
        assert any_store.list_subregions("North") == ["A"]

    def test_regions_independent(self, any_store):
        any_store.replace_subregions("North", ["A"])
        any_store.replace_subregions("South", ["Z"])
        any_store.replace_subregions("North", [])
        assert any_store.list_subregions("North") == []
        assert any_store.list_subregions("South") == ["Z"]


class TestTransactionContract:
    def test_commit(self, any_store, entry_factory):
        with any_store.transaction() as tx:
            tx.replace_subregions("North", ["A"])
            tx.put("North", "A", entry_factory())
            assert tx.in_transaction
        assert not any_store.in_transaction
        assert any_store.list_subregions("North") == ["A"]
        assert any_store.get("North", "A") is not None

    def test_reads_see_own_writes(self, any_store, entry_factory):
        with any_store.transaction() as tx:
            tx.put("North", "A", entry_factory())
            assert tx.get("North", "A") is not None

    def test_rollback(self, any_store, entry_factory):
        any_store.replace_subregions("North", ["A"])
        any_store.put("North", "A", entry_factory())

        with pytest.raises(RuntimeError):
            with any_store.transaction() as tx:
                tx.replace_subregions("North", ["B"])
                tx.delete("North", "A")
                tx.put("North", "B", entry_factory("North", "B"))
                raise RuntimeError("boom")

        assert any_store.list_subregions("North") == ["A"]
        assert any_store.get("North", "A") is not None
        assert any_store.get("North", "B") is None
        assert not any_store.in_transaction

    def test_nested_blocks_join_outer_unit(self, any_store, entry_factory):
        with pytest.raises(RuntimeError):
            with any_store.transaction():
                with any_store.transaction() as inner:
                    inner.put("North", "A", entry_factory())
                assert any_store.get("North", "A") is not None
                raise RuntimeError("boom")

        assert any_store.get("North", "A") is None

    def test_other_thread_waits_for_unit_and_survives_its_rollback(self, any_store, entry_factory):
        any_store.replace_subregions("North", ["A"])
        unit_open = threading.Event()
        seen: dict[str, list[str]] = {}

        def save_elsewhere():
            unit_open.wait(timeout=5)
            any_store.put("South", "B", entry_factory("South", "B"))
            seen["roster"] = any_store.list_subregions("North")

        worker = threading.Thread(target=save_elsewhere)
        worker.start()
        with pytest.raises(RuntimeError):
            with any_store.transaction() as tx:
                tx.replace_subregions("North", ["X"])
                unit_open.set()
                worker.join(timeout=0.2)
                assert worker.is_alive()
                raise RuntimeError("boom")
        worker.join(timeout=5)

        assert not worker.is_alive()
        assert seen["roster"] == ["A"]
        assert any_store.get("South", "B") is not None
        assert any_store.list_subregions("North") == ["A"]


class TestCreateStore:
    def test_memory(self, tmp_path):
        assert isinstance(create_store(OdfSettings(backend="memory", data_dir=tmp_path)), MemoryFrameStore)

    def test_json(self, tmp_path):
        store = create_store(OdfSettings(backend="json", data_dir=tmp_path, atomic_writes=False))
        assert isinstance(store, JsonFileFrameStore)
        assert store.path == tmp_path / "data.json"
        assert store.atomic is False

    def test_sqlite(self, tmp_path):
        store = create_store(OdfSettings(backend="sqlite", data_dir=tmp_path, database_url="sqlite:///odf.db"))
        try:
            assert isinstance(store, SqliteFrameStore)
            store.replace_subregions("North", ["A"])
        finally:
            store.close()
        assert (tmp_path / "odf.db").exists()

    def test_unsupported_database_url(self, tmp_path):
        with pytest.raises(ConfigError):
            create_store(OdfSettings(backend="sqlite", data_dir=tmp_path, database_url="postgresql://db/odf"))
