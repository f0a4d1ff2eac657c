"""Tests for PineconeVectorStore with a mocked index."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from qbank.errors import StoreError
from qbank.models import Difficulty, GradeLevel, MetadataFilter, VectorRecord
from qbank.stores import PineconeVectorStore, build_pinecone_filter


@pytest.fixture
def index():
    return MagicMock()


@pytest.fixture
def store(index):
    return PineconeVectorStore(index=index, dimension=3)


class TestBuildPineconeFilter:
    def test_single_condition(self):
        f = MetadataFilter(grade_level=GradeLevel.P2)
        assert build_pinecone_filter(f) == {"gradeLevel": {"$eq": "P2"}}

    def test_multiple_conditions(self):
        f = MetadataFilter(grade_level=GradeLevel.P2, topic="Fractions", difficulty=Difficulty.EASY)
        assert build_pinecone_filter(f) == {
            "gradeLevel": {"$eq": "P2"},
            "topic": {"$eq": "Fractions"},
            "difficulty": {"$eq": "Easy"},
        }

    def test_empty(self):
        assert build_pinecone_filter(None) is None
        assert build_pinecone_filter(MetadataFilter()) is None


class TestPineconeVectorStore:
    def test_missing_api_key(self):
        store = PineconeVectorStore(api_key=None)
        with pytest.raises(StoreError, match="PINECONE_API_KEY"):
            store.query([0.1] * 1536, top_k=3, namespace="ns")

    @patch("qbank.stores.pinecone.Pinecone")
    def test_index_is_created_once(self, mock_pinecone):
        store = PineconeVectorStore(api_key="pk", index_name="bank")
        assert store.index is store.index
        mock_pinecone.assert_called_once_with(api_key="pk")
        mock_pinecone.return_value.Index.assert_called_once_with("bank")

    @patch("qbank.stores.pinecone.Pinecone")
    def test_index_host(self, mock_pinecone):
        store = PineconeVectorStore(api_key="pk", index_name="bank", index_host="https://h")
        _ = store.index
        mock_pinecone.return_value.Index.assert_called_once_with(name="bank", host="https://h")

    def test_upsert(self, store, index):
        store.upsert_batch(
            [VectorRecord(id="a", embedding=[0.1, 0.2, 0.3], metadata={"topic": "Time"})],
            "math-questions",
        )
        index.upsert.assert_called_once_with(
            vectors=[{"id": "a", "values": [0.1, 0.2, 0.3], "metadata": {"topic": "Time"}}],
            namespace="math-questions",
        )

    def test_query_with_filter(self, store, index):
        index.query.return_value = {
            "matches": [{"id": "P2-HP-001", "score": 0.92, "metadata": {"questionText": "2+2=?"}}]
        }

        matches = store.query(
            [0.1, 0.2, 0.3],
            top_k=5,
            namespace="math-questions",
            filter=MetadataFilter(grade_level=GradeLevel.P2),
        )

        kwargs = index.query.call_args.kwargs
        assert kwargs["filter"] == {"gradeLevel": {"$eq": "P2"}}
        assert kwargs["top_k"] == 5
        assert kwargs["namespace"] == "math-questions"
        assert kwargs["include_metadata"] is True
        assert matches[0].id == "P2-HP-001"
        assert matches[0].score == 0.92
        assert matches[0].metadata == {"questionText": "2+2=?"}

    def test_query_without_filter(self, store, index):
        index.query.return_value = SimpleNamespace(
            matches=[SimpleNamespace(id="a", score=0.5, metadata=None)]
        )

        matches = store.query([0.1, 0.2, 0.3], top_k=5, namespace="ns")

        assert "filter" not in index.query.call_args.kwargs
        assert matches[0].metadata == {}

    def test_query_error_is_wrapped(self, store, index):
        index.query.side_effect = RuntimeError("503")
        with pytest.raises(StoreError, match="503"):
            store.query([0.1, 0.2, 0.3], top_k=5, namespace="ns")

    def test_fetch(self, store, index):
        index.fetch.return_value = SimpleNamespace(
            vectors={"a": SimpleNamespace(values=[1.0, 2.0, 3.0], metadata={"topic": "Time"})}
        )
        record = store.fetch_one("a", "ns")
        assert record.embedding == [1.0, 2.0, 3.0]
        assert record.metadata == {"topic": "Time"}

    def test_delete(self, store, index):
        assert store.delete_many(["a", "b"], "ns")
        index.delete.assert_called_once_with(ids=["a", "b"], namespace="ns")

    def test_delete_all(self, store, index):
        assert store.delete_all("ns")
        index.delete.assert_called_once_with(delete_all=True, namespace="ns")

    def test_delete_failure(self, store, index):
        index.delete.side_effect = RuntimeError("404")
        assert store.delete_all("ns") is False

    def test_list_all_ids_follows_tokens(self, index):
        store = PineconeVectorStore(index=index, list_page_size=2)
        index.list_paginated.side_effect = [
            {"vectors": [{"id": "a"}, {"id": "b"}], "pagination": {"next": "t1"}},
            {"vectors": [{"id": "c"}], "pagination": None},
        ]

        assert store.list_all_ids("ns") == ["a", "b", "c"]

        first, second = index.list_paginated.call_args_list
        assert first.kwargs == {"namespace": "ns", "limit": 2}
        assert second.kwargs == {"namespace": "ns", "limit": 2, "pagination_token": "t1"}

    def test_describe_stats(self, store, index):
        index.describe_index_stats.return_value = {
            "total_vector_count": 10,
            "dimension": 1536,
            "namespaces": {
                "math-questions": {"vector_count": 7},
                "other": SimpleNamespace(vector_count=3),
            },
        }
        stats = store.describe_stats()
        assert stats.total_records == 10
        assert stats.dimension == 1536
        assert stats.namespaces == {"math-questions": 7, "other": 3}
