# src/qbank/embedder/client.py
"""Client-based embedder implementation."""

from qbank.embedder.base import Embedder
from qbank.errors import EmbeddingError
from qbank.log import get_logger
from qbank.providers.base import EmbeddingClient

logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 100


class ClientEmbedder(Embedder):
    """Embedder that uses an EmbeddingClient for generating embeddings.

    Example:
        from qbank.providers.litellm import LiteLLMEmbeddingClient
        from qbank.embedder import ClientEmbedder

        client = LiteLLMEmbeddingClient(model="openai/text-embedding-3-small")
        embedder = ClientEmbedder(embedding_client=client)
    """

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        """Initialize the embedder.

        Args:
            embedding_client: Any EmbeddingClient implementation
            batch_size: Maximum number of texts sent in one provider call
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self._client = embedding_client
        self.batch_size = batch_size

    def embed(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text."""
        result = self._client.embed([text])
        if len(result) != 1:
            raise EmbeddingError(f"Expected 1 embedding, got {len(result)}")
        return result[0]

    async def aembed(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text (async)."""
        result = await self._client.aembed([text])
        if len(result) != 1:
            raise EmbeddingError(f"Expected 1 embedding, got {len(result)}")
        return result[0]

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors in chunks of ``batch_size``.

        Chunks are sent one after another. The first failing chunk aborts
        the whole call; partial results are discarded.

        Raises:
            EmbeddingError: If any chunk fails or returns the wrong count.
        """
        if not texts:
            return []

        total_batches = (len(texts) + self.batch_size - 1) // self.batch_size
        embeddings: list[list[float]] = []
        for start in range(0, len(texts), self.batch_size):
            chunk = texts[start : start + self.batch_size]
            batch_num = start // self.batch_size + 1
            try:
                vectors = self._client.embed(chunk)
            except EmbeddingError as e:
                raise EmbeddingError(f"Batch {batch_num}/{total_batches}: {e}") from e
            if len(vectors) != len(chunk):
                raise EmbeddingError(
                    f"Batch {batch_num}/{total_batches}: expected {len(chunk)} "
                    f"embeddings, got {len(vectors)}"
                )
            embeddings.extend(vectors)
            logger.info("Embedded batch %d/%d (%d texts)", batch_num, total_batches, len(chunk))

        return embeddings
