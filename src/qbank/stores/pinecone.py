# src/qbank/stores/pinecone.py
"""Pinecone vector store implementation."""

from typing import Any

from pinecone import Pinecone

from qbank.errors import StoreError
from qbank.log import get_logger
from qbank.models import IndexStats, MetadataFilter, QueryMatch, VectorRecord
from qbank.stores.base import VectorStore

logger = get_logger(__name__)

DEFAULT_INDEX_NAME = "ai-math-tutor-v2"


def _field(obj: Any, name: str, default: Any = None) -> Any:
    """Read a field from a Pinecone response (dict or model object)."""
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def build_pinecone_filter(filter: MetadataFilter | None) -> dict[str, Any] | None:
    """Render a MetadataFilter as a Pinecone filter, e.g. {"gradeLevel": {"$eq": "P2"}}."""
    if filter is None:
        return None
    conditions = filter.conditions()
    if not conditions:
        return None
    return {key: {"$eq": value} for key, value in conditions.items()}


class PineconeVectorStore(VectorStore):
    """Pinecone-backed vector store.

    The index handle is created on first use and reused for the life of the
    store.

    Example:
        store = PineconeVectorStore(api_key="...", index_name="ai-math-tutor-v2")
        matches = store.query(vector, top_k=5, namespace="math-questions")
    """

    def __init__(
        self,
        api_key: str | None = None,
        index_name: str = DEFAULT_INDEX_NAME,
        index_host: str | None = None,
        dimension: int | None = 1536,
        index: Any = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the Pinecone store.

        Args:
            api_key: Pinecone API key.
            index_name: Name of an existing index.
            index_host: Index host URL; skips the host lookup when given.
            dimension: Vector length of the index.
            index: Pre-built index handle (used instead of connecting).
            **kwargs: Batch and paging settings passed to VectorStore.
        """
        super().__init__(dimension=dimension, **kwargs)
        self._api_key = api_key
        self.index_name = index_name
        self.index_host = index_host
        self._index = index

    @property
    def index(self) -> Any:
        """The Pinecone index handle, created on first access.

        Raises:
            StoreError: If no API key was configured.
        """
        if self._index is None:
            if not self._api_key:
                raise StoreError("PINECONE_API_KEY is not set")
            client = Pinecone(api_key=self._api_key)
            if self.index_host:
                self._index = client.Index(name=self.index_name, host=self.index_host)
            else:
                self._index = client.Index(self.index_name)
            logger.debug("Connected to Pinecone index '%s'", self.index_name)
        return self._index

    def _upsert(self, records: list[VectorRecord], namespace: str) -> None:
        vectors = [
            {"id": r.id, "values": r.embedding, "metadata": dict(r.metadata)} for r in records
        ]
        self.index.upsert(vectors=vectors, namespace=namespace)

    def _query(
        self,
        embedding: list[float],
        top_k: int,
        namespace: str,
        filter: MetadataFilter | None,
    ) -> list[QueryMatch]:
        kwargs: dict[str, Any] = {
            "vector": embedding,
            "top_k": top_k,
            "include_metadata": True,
            "namespace": namespace,
        }
        pinecone_filter = build_pinecone_filter(filter)
        if pinecone_filter:
            kwargs["filter"] = pinecone_filter

        res = self.index.query(**kwargs)
        matches = _field(res, "matches") or []
        return [
            QueryMatch(
                id=str(_field(m, "id")),
                score=float(_field(m, "score") or 0.0),
                metadata=dict(_field(m, "metadata") or {}),
            )
            for m in matches
        ]

    def _fetch(self, ids: list[str], namespace: str) -> dict[str, VectorRecord]:
        res = self.index.fetch(ids=ids, namespace=namespace)
        vectors = _field(res, "vectors") or {}
        out: dict[str, VectorRecord] = {}
        for vid, vec in vectors.items():
            out[vid] = VectorRecord(
                id=vid,
                embedding=list(_field(vec, "values") or []),
                metadata=dict(_field(vec, "metadata") or {}),
            )
        return out

    def _delete_ids(self, ids: list[str], namespace: str) -> None:
        self.index.delete(ids=ids, namespace=namespace)

    def _delete_all(self, namespace: str) -> None:
        self.index.delete(delete_all=True, namespace=namespace)

    def _list_page(
        self, namespace: str, limit: int, token: str | None
    ) -> tuple[list[str], str | None]:
        kwargs: dict[str, Any] = {"namespace": namespace, "limit": limit}
        if token:
            kwargs["pagination_token"] = token
        res = self.index.list_paginated(**kwargs)
        ids = [str(_field(v, "id")) for v in (_field(res, "vectors") or [])]
        next_token = _field(_field(res, "pagination"), "next")
        return ids, next_token or None

    def _describe_stats(self) -> IndexStats:
        res = self.index.describe_index_stats()
        namespaces = {
            name: int(_field(summary, "vector_count") or 0)
            for name, summary in (_field(res, "namespaces") or {}).items()
        }
        return IndexStats(
            total_records=int(_field(res, "total_vector_count") or 0),
            namespaces=namespaces,
            dimension=_field(res, "dimension"),
        )
