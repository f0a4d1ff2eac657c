# src/qbank/providers/base.py
"""Abstract base class for embedding providers."""

from abc import ABC, abstractmethod


class EmbeddingClient(ABC):
    """Abstract base class for embedding providers.

    Implementations generate fixed-length vectors for text. Every vector a
    client returns has the same length.

    Example:
        class MyEmbeddingClient(EmbeddingClient):
            def embed(self, texts):
                return my_api.embed_batch(texts)
    """

    @abstractmethod
    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for multiple texts.

        Args:
            texts: List of texts to embed.

        Returns:
            List of embedding vectors, one per input text.
            Order is preserved (result[i] corresponds to texts[i]).

        Raises:
            EmbeddingError: If the provider call fails.
        """
        ...

    async def aembed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for multiple texts (async).

        Default implementation calls sync embed(). Override in subclasses
        for true async behavior.
        """
        return self.embed(texts)
