# src/qbank/providers/litellm/__init__.py
"""LiteLLM provider clients for qbank.

Usage:
    from qbank.providers.litellm import LiteLLMEmbeddingClient, EmbeddingModels
    from qbank.embedder import ClientEmbedder

    client = LiteLLMEmbeddingClient(model=EmbeddingModels.TEXT_3_SMALL)
    embedder = ClientEmbedder(embedding_client=client)
"""

from qbank.providers.litellm.client import LiteLLMEmbeddingClient
from qbank.providers.litellm.models import DEFAULT_DIMENSIONS, EmbeddingModels

__all__ = [
    "EmbeddingModels",
    "DEFAULT_DIMENSIONS",
    "LiteLLMEmbeddingClient",
]
