# src/qbank/providers/__init__.py
"""Embedding providers for qbank.

- EmbeddingClient: Abstract base class for embedding providers
- LiteLLMEmbeddingClient: Embeddings through LiteLLM (OpenAI, Gemini, Bedrock, ...)

Usage:
    from qbank.providers import EmbeddingClient
    from qbank.providers.litellm import LiteLLMEmbeddingClient, EmbeddingModels
"""

from qbank.providers.base import EmbeddingClient
from qbank.providers.litellm import EmbeddingModels, LiteLLMEmbeddingClient

__all__ = [
    "EmbeddingClient",
    "EmbeddingModels",
    "LiteLLMEmbeddingClient",
]
