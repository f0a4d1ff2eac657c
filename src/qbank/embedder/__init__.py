# src/qbank/embedder/__init__.py
"""Embedding functionality for qbank."""

from qbank.embedder.base import Embedder, searchable_text
from qbank.embedder.client import DEFAULT_BATCH_SIZE, ClientEmbedder

__all__ = ["Embedder", "ClientEmbedder", "DEFAULT_BATCH_SIZE", "searchable_text"]
