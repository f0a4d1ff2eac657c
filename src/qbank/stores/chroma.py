# src/qbank/stores/chroma.py
"""ChromaDB vector store implementation."""

from pathlib import Path
from typing import Any

import chromadb

from qbank.log import get_logger
from qbank.models import IndexStats, MetadataFilter, QueryMatch, VectorRecord
from qbank.stores.base import VectorStore

logger = get_logger(__name__)


def build_chroma_where(filter: MetadataFilter | None) -> dict[str, Any] | None:
    """Render a MetadataFilter as a Chroma ``where`` clause.

    Chroma only accepts one field per clause, so several constraints are
    combined with ``$and``.
    """
    if filter is None:
        return None
    clauses = [{key: {"$eq": value}} for key, value in filter.conditions().items()]
    if not clauses:
        return None
    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


class ChromaVectorStore(VectorStore):
    """ChromaDB-backed vector store for local use.

    Each namespace maps to its own collection (cosine space).
    """

    def __init__(
        self,
        persist_dir: str,
        dimension: int | None = 1536,
        collection_prefix: str = "qbank",
        **kwargs: Any,
    ) -> None:
        """Initialize the ChromaDB store."""
        super().__init__(dimension=dimension, **kwargs)
        Path(persist_dir).mkdir(parents=True, exist_ok=True)
        self.persist_dir = persist_dir
        self.collection_prefix = collection_prefix
        self._client = chromadb.PersistentClient(path=persist_dir)
        self._collections: dict[str, Any] = {}

    def close(self) -> None:
        """Close the store and release resources.

        ChromaDB doesn't have an official close method, so we call the internal
        _system.stop() to release file handles.

        See: https://github.com/chroma-core/chroma/issues/5868
        """
        self._collections = {}
        try:
            if self._client is not None and hasattr(self._client, "_system"):
                self._client._system.stop()
        except Exception as e:
            logger.debug("Chroma shutdown: %s", e)
        self._client = None  # type: ignore[assignment]

    def collection_name(self, namespace: str) -> str:
        return f"{self.collection_prefix}_{namespace}"

    def _collection(self, namespace: str) -> Any:
        if namespace not in self._collections:
            self._collections[namespace] = self._client.get_or_create_collection(
                name=self.collection_name(namespace),
                metadata={"hnsw:space": "cosine"},
            )
        return self._collections[namespace]

    def _upsert(self, records: list[VectorRecord], namespace: str) -> None:
        self._collection(namespace).upsert(
            ids=[r.id for r in records],
            embeddings=[r.embedding for r in records],  # type: ignore[arg-type]
            metadatas=[dict(r.metadata) or None for r in records],  # type: ignore[misc]
        )

    def _query(
        self,
        embedding: list[float],
        top_k: int,
        namespace: str,
        filter: MetadataFilter | None,
    ) -> list[QueryMatch]:
        collection = self._collection(namespace)
        count = collection.count()
        if count == 0:
            return []

        results = collection.query(
            query_embeddings=[embedding],  # type: ignore[arg-type]
            n_results=min(top_k, count),
            where=build_chroma_where(filter),  # type: ignore[arg-type]
            include=["metadatas", "distances"],
        )

        ids = results["ids"][0]
        metadatas = results["metadatas"][0]  # type: ignore[index]
        distances = results["distances"][0]  # type: ignore[index]

        matches = []
        for qid, meta, dist in zip(ids, metadatas, distances, strict=True):
            # Cosine distance is in [0, 2]; similarity = 1 - distance, clamped
            score = min(1.0, max(0.0, 1.0 - float(dist)))
            matches.append(QueryMatch(id=qid, score=score, metadata=dict(meta or {})))
        return matches

    def _fetch(self, ids: list[str], namespace: str) -> dict[str, VectorRecord]:
        results = self._collection(namespace).get(ids=ids, include=["embeddings", "metadatas"])
        embeddings = results["embeddings"]
        if embeddings is None:
            embeddings = [[] for _ in results["ids"]]
        metadatas = results["metadatas"] or [None] * len(results["ids"])

        return {
            rid: VectorRecord(
                id=rid,
                embedding=[float(x) for x in emb],
                metadata=dict(meta or {}),
            )
            for rid, emb, meta in zip(results["ids"], embeddings, metadatas, strict=True)
        }

    def _delete_ids(self, ids: list[str], namespace: str) -> None:
        self._collection(namespace).delete(ids=ids)

    def _delete_all(self, namespace: str) -> None:
        collection = self._collection(namespace)
        existing = collection.get(include=[])["ids"]
        if existing:
            collection.delete(ids=existing)

    def _list_page(
        self, namespace: str, limit: int, token: str | None
    ) -> tuple[list[str], str | None]:
        offset = int(token) if token else 0
        ids = self._collection(namespace).get(include=[], limit=limit, offset=offset)["ids"]
        next_token = str(offset + len(ids)) if len(ids) == limit else None
        return list(ids), next_token

    def _describe_stats(self) -> IndexStats:
        prefix = f"{self.collection_prefix}_"
        namespaces: dict[str, int] = {}
        for entry in self._client.list_collections():
            # Newer chromadb returns names, older returns Collection objects
            name = entry if isinstance(entry, str) else entry.name
            if not name.startswith(prefix):
                continue
            namespace = name[len(prefix) :]
            namespaces[namespace] = self._collection(namespace).count()
        return IndexStats(
            total_records=sum(namespaces.values()),
            namespaces=namespaces,
            dimension=self.dimension,
        )
