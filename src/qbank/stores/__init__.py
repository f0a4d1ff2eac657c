# src/qbank/stores/__init__.py
"""Vector storage for qbank."""

from qbank.stores.base import (
    DEFAULT_LIST_PAGE_SIZE,
    DEFAULT_MAX_LIST_PAGES,
    DEFAULT_UPSERT_BATCH_SIZE,
    VectorStore,
)
from qbank.stores.chroma import ChromaVectorStore, build_chroma_where
from qbank.stores.pinecone import PineconeVectorStore, build_pinecone_filter

__all__ = [
    "VectorStore",
    "PineconeVectorStore",
    "ChromaVectorStore",
    "build_pinecone_filter",
    "build_chroma_where",
    "DEFAULT_UPSERT_BATCH_SIZE",
    "DEFAULT_LIST_PAGE_SIZE",
    "DEFAULT_MAX_LIST_PAGES",
]
