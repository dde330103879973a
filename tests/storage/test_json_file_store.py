"""
Tests for the JSON document store: seeding, bad files, atomic writes.
"""

from __future__ import annotations

import json

import pytest

from odf_spine.core.errors import StorageError
from odf_spine.storage.json_file import JsonFileFrameStore, coerce_document, empty_document

pytestmark = pytest.mark.integration


class TestDocumentHelpers:
    def test_coerce_non_object(self):
        assert coerce_document([1, 2]) == empty_document()

    def test_coerce_repairs_collections(self):
        assert coerce_document({"odf": [], "subregions": "x", "meta": 1}) == {"odf": {}, "subregions": {}, "meta": 1}


class TestFileCreation:
    def test_creates_directory_and_empty_document(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "data.json"
        store = JsonFileFrameStore(path)

        assert store.list_subregions("North") == []
        assert json.loads(path.read_text(encoding="utf-8")) == {"odf": {}, "subregions": {}}

    def test_seed_file_copied(self, tmp_path, entry_factory):
        seed = tmp_path / "seed.json"
        seed.write_text(json.dumps({"odf": {"North||A": entry_factory()}, "subregions": {"North": ["A"]}}))
        store = JsonFileFrameStore(tmp_path / "data" / "data.json", seed_file=seed)

        assert store.list_subregions("North") == ["A"]
        assert store.get("North", "A")["displayCount"] == 3

    def test_invalid_seed_gives_empty_document(self, tmp_path):
        seed = tmp_path / "seed.json"
        seed.write_text("{not json")
        store = JsonFileFrameStore(tmp_path / "data.json", seed_file=seed)
        assert list(store.iter_entries()) == []

    def test_seed_equal_to_data_path_is_ignored(self, tmp_path):
        path = tmp_path / "data.json"
        store = JsonFileFrameStore(path, seed_file=path)
        store.ensure_file()
        assert json.loads(path.read_text(encoding="utf-8")) == empty_document()

    def test_existing_file_not_reseeded(self, tmp_path, entry_factory):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({"odf": {}, "subregions": {"South": ["Z"]}}))
        seed = tmp_path / "seed.json"
        seed.write_text(json.dumps({"odf": {}, "subregions": {"North": ["A"]}}))

        store = JsonFileFrameStore(path, seed_file=seed)
        assert store.list_subregions("North") == []
        assert store.list_subregions("South") == ["Z"]


class TestReadingBadFiles:
    def test_invalid_json_reads_as_empty(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("garbage")
        store = JsonFileFrameStore(path)
        assert store.get("North", "A") is None
        assert list(store.iter_entries()) == []

    def test_non_list_roster_reads_as_empty(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({"odf": {}, "subregions": {"North": "A,B"}}))
        assert JsonFileFrameStore(path).list_subregions("North") == []

    def test_top_level_keys_preserved_on_write(self, tmp_path, entry_factory):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({"odf": {}, "subregions": {}, "schemaNote": "v1"}))
        JsonFileFrameStore(path).put("North", "A", entry_factory())
        assert json.loads(path.read_text(encoding="utf-8"))["schemaNote"] == "v1"


class TestWrites:
    def test_atomic_write_leaves_no_temp_file(self, json_store, entry_factory):
        json_store.put("North", "A", entry_factory())
        assert json_store.path.exists()
        assert not json_store.path.with_name("data.json.tmp").exists()

    def test_non_atomic_write(self, tmp_path, entry_factory):
        store = JsonFileFrameStore(tmp_path / "data.json", atomic=False)
        store.put("North", "A", entry_factory())
        assert "North||A" in json.loads(store.path.read_text(encoding="utf-8"))["odf"]

    def test_unicode_written_verbatim(self, json_store, entry_factory):
        json_store.put("Nörd", "Ä", entry_factory("Nörd", "Ä"))
        assert "Nörd||Ä" in json_store.path.read_text(encoding="utf-8")

    def test_transaction_writes_once(self, json_store, entry_factory, monkeypatch):
        json_store.ensure_file()
        writes = []
        original = json_store._write
        monkeypatch.setattr(json_store, "_write", lambda doc: (writes.append(doc), original(doc)))

        with json_store.transaction() as tx:
            tx.replace_subregions("North", ["A", "B"])
            tx.put("North", "A", entry_factory("North", "A"))
            tx.put("North", "B", entry_factory("North", "B"))

        assert len(writes) == 1
        assert json_store.list_subregions("North") == ["A", "B"]

    def test_rolled_back_transaction_writes_nothing(self, json_store, entry_factory):
        json_store.ensure_file()
        before = json_store.path.read_text(encoding="utf-8")

        with pytest.raises(ValueError):
            with json_store.transaction() as tx:
                tx.put("North", "A", entry_factory())
                raise ValueError("boom")

        assert json_store.path.read_text(encoding="utf-8") == before

    def test_unwritable_location_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        store = JsonFileFrameStore(blocker / "data.json")

        with pytest.raises(StorageError) as exc_info:
            store.list_subregions("North")
        assert exc_info.value.context.backend == "json"
        assert exc_info.value.context.path == str(blocker / "data.json")
