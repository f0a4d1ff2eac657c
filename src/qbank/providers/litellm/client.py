# src/qbank/providers/litellm/client.py
"""LiteLLM embedding client."""

from typing import Any

import litellm

from qbank.errors import EmbeddingError
from qbank.providers.base import EmbeddingClient
from qbank.providers.litellm.models import EmbeddingModels


class LiteLLMEmbeddingClient(EmbeddingClient):
    """LiteLLM-based embedding client.

    Supports any embedding model available through LiteLLM. Every returned
    vector is checked against ``dimensions`` so a misconfigured model never
    reaches the vector store.

    Example:
        from qbank.providers.litellm import LiteLLMEmbeddingClient, EmbeddingModels

        client = LiteLLMEmbeddingClient(model=EmbeddingModels.TEXT_3_SMALL, dimensions=1536)
        embeddings = client.embed(["P1 Addition Basic What is 2 + 3?"])

        # With retry for rate-limited APIs
        client = LiteLLMEmbeddingClient(num_retries=5)
    """

    def __init__(
        self,
        model: str = EmbeddingModels.TEXT_3_SMALL,
        dimensions: int | None = 1536,
        api_key: str | None = None,
        num_retries: int = 3,
        timeout: float | None = None,
    ) -> None:
        """Initialize the LiteLLM embedding client.

        Args:
            model: LiteLLM embedding model identifier.
            dimensions: Expected vector length, also sent to the provider.
                        None accepts whatever length the model returns.
            api_key: Provider API key. If None, LiteLLM reads the provider's
                     environment variable (e.g. OPENAI_API_KEY).
            num_retries: Number of retries on rate limit errors. LiteLLM handles
                        exponential backoff automatically. Default: 3.
            timeout: Per-request timeout in seconds.
        """
        self.model = model
        self.dimensions = dimensions
        self.api_key = api_key
        self.num_retries = num_retries
        self.timeout = timeout

    def _request_kwargs(self, texts: list[str]) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "input": texts,
            "num_retries": self.num_retries,
        }
        if self.dimensions is not None:
            kwargs["dimensions"] = self.dimensions
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        return kwargs

    def _unpack(self, response: Any, expected: int) -> list[list[float]]:
        # Sort by index to maintain order
        sorted_data = sorted(response.data, key=lambda x: x["index"])
        vectors = [list(item["embedding"]) for item in sorted_data]

        if len(vectors) != expected:
            raise EmbeddingError(
                f"{self.model} returned {len(vectors)} embeddings for {expected} inputs"
            )
        if self.dimensions is not None:
            for vector in vectors:
                if len(vector) != self.dimensions:
                    raise EmbeddingError(
                        f"{self.model} returned a {len(vector)}-dimensional vector, "
                        f"expected {self.dimensions}"
                    )
        return vectors

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings using LiteLLM."""
        if not texts:
            return []

        try:
            response = litellm.embedding(**self._request_kwargs(texts))
        except Exception as e:
            raise EmbeddingError(f"Embedding request to {self.model} failed: {e}") from e
        return self._unpack(response, len(texts))

    async def aembed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings using LiteLLM (async)."""
        if not texts:
            return []

        try:
            response = await litellm.aembedding(**self._request_kwargs(texts))
        except Exception as e:
            raise EmbeddingError(f"Embedding request to {self.model} failed: {e}") from e
        return self._unpack(response, len(texts))
