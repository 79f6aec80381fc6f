"""
Tests for teamate.data.vector_store: in-memory store, JSON loading and factory.

ChromaDB itself is not exercised; the in-memory store implements the same
interface.
"""

import json

import pytest

from teamate.data.vector_store import (
    ChromaVectorStore,
    InMemoryVectorStore,
    VectorRecord,
    get_vector_store,
    load_records_from_json,
)


def _record(record_id: str) -> VectorRecord:
    return VectorRecord(id=record_id, embedding=[1.0, 2.0], metadata={"name": record_id})


# ── InMemoryVectorStore ──────────────────────────────────────────────────────


class TestInMemoryVectorStore:
    def test_upsert_and_count(self):
        store = InMemoryVectorStore()
        store.upsert([_record("a"), _record("b")])
        assert store.count() == 2

    def test_upsert_replaces(self):
        store = InMemoryVectorStore([_record("a")])
        store.upsert([VectorRecord(id="a", embedding=[3.0, 4.0])])
        assert store.count() == 1
        assert store.get(["a"])[0].embedding == [3.0, 4.0]

    def test_get_skips_unknown(self):
        store = InMemoryVectorStore([_record("a")])
        assert [r.id for r in store.get(["a", "zzz"])] == ["a"]

    def test_iteration_keeps_insertion_order(self):
        store = InMemoryVectorStore([_record("c"), _record("a"), _record("b")])
        assert [r.id for r in store.iter_records(batch_size=2)] == ["c", "a", "b"]

    def test_delete(self):
        store = InMemoryVectorStore([_record("a"), _record("b")])
        store.delete(["a", "missing"])
        assert [r.id for r in store.iter_records()] == ["b"]

    def test_clear(self):
        store = InMemoryVectorStore([_record("a")])
        store.clear()
        assert store.count() == 0

    def test_context_manager(self):
        with InMemoryVectorStore([_record("a")]) as store:
            assert store.count() == 1


# ── load_records_from_json ───────────────────────────────────────────────────


class TestLoadRecordsFromJson:
    def test_list_payload(self, tmp_path):
        path = tmp_path / "participants.json"
        path.write_text(json.dumps([
            {"id": "s1", "embedding": [0.1, 0.2], "name": "Ana", "type": "student", "q1": 4},
            {"id": 7, "values": [0.3, 0.4], "metadata": {"name": "Ben", "type": "senior"}},
        ]))
        records = load_records_from_json(path)

        assert [r.id for r in records] == ["s1", "7"]
        assert records[0].embedding == [0.1, 0.2]
        assert records[0].metadata == {"name": "Ana", "type": "student", "q1": 4}
        assert records[1].embedding == [0.3, 0.4]
        assert records[1].metadata == {"name": "Ben", "type": "senior"}

    def test_wrapped_payload(self, tmp_path):
        path = tmp_path / "participants.json"
        path.write_text(json.dumps({"participants": [{"id": "s1", "embedding": [1.0]}]}))
        assert [r.id for r in load_records_from_json(path)] == ["s1"]

    def test_document_kept_out_of_metadata(self, tmp_path):
        path = tmp_path / "participants.json"
        path.write_text(json.dumps([{"id": "s1", "embedding": [1.0], "document": "I like chess"}]))
        record = load_records_from_json(path)[0]
        assert record.document == "I like chess"
        assert record.metadata == {}

    def test_bad_shape(self, tmp_path):
        path = tmp_path / "participants.json"
        path.write_text(json.dumps({"people": []}))
        with pytest.raises(ValueError):
            load_records_from_json(path)

    def test_missing_id(self, tmp_path):
        path = tmp_path / "participants.json"
        path.write_text(json.dumps([{"embedding": [1.0]}]))
        with pytest.raises(ValueError, match="no 'id'"):
            load_records_from_json(path)


# ── get_vector_store ─────────────────────────────────────────────────────────


class TestGetVectorStore:
    def test_memory(self):
        assert isinstance(get_vector_store("memory"), InMemoryVectorStore)

    def test_chromadb_is_lazy(self, tmp_path):
        store = get_vector_store("chromadb", persist_directory=tmp_path, collection_name="test")
        assert isinstance(store, ChromaVectorStore)
        assert store.collection_name == "test"
        assert not store._initialized

    def test_unknown(self):
        with pytest.raises(ValueError):
            get_vector_store("pinecone")
