"""Tests for the shared VectorStore behaviour."""

import logging
from unittest.mock import MagicMock

import pytest

from qbank.errors import DimensionMismatchError, StoreError
from qbank.models import GradeLevel, MetadataFilter, QueryMatch, VectorRecord

from fakes import FakeVectorStore


def _records(n: int, dim: int = 4) -> list[VectorRecord]:
    return [VectorRecord(id=f"q{i}", embedding=[0.1] * dim) for i in range(n)]


class TestUpsertBatch:
    def test_batches(self):
        store = FakeVectorStore(upsert_batch_size=2)
        store._upsert = MagicMock()

        result = store.upsert_batch(_records(5), "ns")

        assert result.succeeded == 5
        assert result.failed == 0
        assert store._upsert.call_count == 3

    def test_failed_batch_does_not_stop_the_rest(self, caplog):
        store = FakeVectorStore(upsert_batch_size=2)
        store._upsert = MagicMock(side_effect=[None, RuntimeError("boom"), None])

        with caplog.at_level(logging.ERROR, logger="qbank"):
            result = store.upsert_batch(_records(5), "ns")

        assert result.succeeded == 3
        assert result.failed == 2
        assert result.errors == ["Batch 2: boom"]
        assert store._upsert.call_count == 3
        assert "boom" in caplog.text

    def test_dimension_mismatch_writes_nothing(self):
        store = FakeVectorStore(dimension=4)
        records = _records(2) + [VectorRecord(id="bad", embedding=[0.1, 0.2])]

        with pytest.raises(DimensionMismatchError) as exc_info:
            store.upsert_batch(records, "ns")

        assert exc_info.value.record_id == "bad"
        assert exc_info.value.expected == 4
        assert exc_info.value.actual == 2
        assert store.data == {}

    def test_no_dimension_check_when_unset(self):
        store = FakeVectorStore(dimension=None)
        result = store.upsert_batch([VectorRecord(id="a", embedding=[1.0])], "ns")
        assert result.succeeded == 1

    def test_empty(self):
        assert FakeVectorStore().upsert_batch([], "ns").total == 0

    def test_upsert_overwrites(self):
        store = FakeVectorStore()
        store.upsert_batch([VectorRecord(id="a", embedding=[0.1] * 4, metadata={"v": 1})], "ns")
        store.upsert_batch([VectorRecord(id="a", embedding=[0.2] * 4, metadata={"v": 2})], "ns")
        assert store.fetch_one("a", "ns").metadata == {"v": 2}


class TestQuery:
    def test_truncates_to_top_k(self):
        store = FakeVectorStore()
        store.matches = [QueryMatch(id=f"q{i}", score=0.9 - i * 0.1) for i in range(5)]

        matches = store.query([0.1] * 4, top_k=2, namespace="ns")

        assert [m.id for m in matches] == ["q0", "q1"]

    def test_zero_top_k_makes_no_call(self):
        store = FakeVectorStore()
        assert store.query([0.1] * 4, top_k=0, namespace="ns") == []
        assert store.query_calls == []

    def test_empty_filter_is_dropped(self):
        store = FakeVectorStore()
        store.query([0.1] * 4, top_k=3, namespace="ns", filter=MetadataFilter())
        assert store.query_calls == [(3, "ns", None)]

    def test_filter_is_passed(self):
        store = FakeVectorStore()
        f = MetadataFilter(grade_level=GradeLevel.P2)
        store.query([0.1] * 4, top_k=3, namespace="ns", filter=f)
        assert store.query_calls[0][2] == f

    def test_dimension_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            FakeVectorStore(dimension=4).query([0.1], top_k=3, namespace="ns")

    def test_backend_error_is_wrapped(self):
        store = FakeVectorStore()
        store.fail_on.add("query")
        with pytest.raises(StoreError, match="query failed"):
            store.query([0.1] * 4, top_k=3, namespace="ns")


class TestFetchAndDelete:
    def test_fetch_missing_ids_are_absent(self):
        store = FakeVectorStore()
        store.upsert_batch(_records(2), "ns")
        fetched = store.fetch(["q0", "missing"], "ns")
        assert set(fetched) == {"q0"}
        assert store.fetch_one("missing", "ns") is None

    def test_fetch_error_is_wrapped(self):
        store = FakeVectorStore()
        store.fail_on.add("fetch")
        with pytest.raises(StoreError):
            store.fetch(["q0"], "ns")

    def test_delete_many(self):
        store = FakeVectorStore()
        store.upsert_batch(_records(3), "ns")
        assert store.delete_many(["q0", "q1"], "ns") is True
        assert store.list_all_ids("ns") == ["q2"]

    def test_delete_one(self):
        store = FakeVectorStore()
        store.upsert_batch(_records(1), "ns")
        assert store.delete_one("q0", "ns") is True
        assert store.list_all_ids("ns") == []

    def test_delete_failure_returns_false(self, caplog):
        store = FakeVectorStore()
        store.fail_on.add("delete")
        with caplog.at_level(logging.ERROR, logger="qbank"):
            assert store.delete_many(["q0"], "ns") is False
            assert store.delete_all("ns") is False
        assert "Failed to clear namespace" in caplog.text

    def test_delete_all(self):
        store = FakeVectorStore()
        store.upsert_batch(_records(3), "ns")
        store.upsert_batch(_records(1), "other")
        assert store.delete_all("ns") is True
        assert store.list_all_ids("ns") == []
        assert store.list_all_ids("other") == ["q0"]


class TestListAllIds:
    def test_follows_pages(self):
        store = FakeVectorStore(list_page_size=2)
        store.upsert_batch(_records(5), "ns")
        assert store.list_all_ids("ns") == ["q0", "q1", "q2", "q3", "q4"]

    def test_page_limit(self):
        store = FakeVectorStore(list_page_size=2, max_list_pages=2)
        store.upsert_batch(_records(5), "ns")
        with pytest.raises(StoreError, match="exceeded 2 pages"):
            store.list_all_ids("ns")

    def test_failure_raises(self):
        store = FakeVectorStore()
        store.fail_on.add("list")
        with pytest.raises(StoreError):
            store.list_all_ids("ns")

    def test_empty_namespace(self):
        assert FakeVectorStore().list_all_ids("ns") == []


class TestDescribeStats:
    def test_counts(self):
        store = FakeVectorStore()
        store.upsert_batch(_records(3), "ns")
        stats = store.describe_stats()
        assert stats.total_records == 3
        assert stats.namespaces == {"ns": 3}

    def test_failure_returns_none(self, caplog):
        store = FakeVectorStore()
        store.fail_on.add("stats")
        with caplog.at_level(logging.WARNING, logger="qbank"):
            assert store.describe_stats() is None
        assert "Could not read index stats" in caplog.text
