# src/qbank/qbank.py
"""Central configuration class for qbank."""

from __future__ import annotations

from typing import TYPE_CHECKING

from qbank.embedder import ClientEmbedder, Embedder
from qbank.ingestor import Ingestor
from qbank.intent import DEFAULT_KEYWORDS, IntentKeywords
from qbank.providers.litellm import LiteLLMEmbeddingClient
from qbank.retriever import Retriever
from qbank.settings import Settings

if TYPE_CHECKING:
    from qbank.stores import VectorStore


class QBank:
    """Owns the embedder and vector store for the life of the process.

    Build one QBank at startup and create Retrievers/Ingestors from it; they
    share its clients.

    Example:
        from qbank import QBank, PineconeVectorStore

        bank = QBank.with_litellm(
            store=PineconeVectorStore(api_key="...", index_name="ai-math-tutor-v2"),
        )
        context = await bank.retriever().get_retrieval_context(
            "Give me a P1 addition question"
        )
    """

    def __init__(
        self,
        *,
        embedder: Embedder,
        store: VectorStore,
        settings: Settings | None = None,
        enabled: bool = True,
        keywords: IntentKeywords = DEFAULT_KEYWORDS,
    ) -> None:
        """Create a QBank instance.

        Args:
            embedder: Embedder used for queries and ingestion
            store: Vector store holding the question bank
            settings: Behavioral settings (namespace, top_k, timeouts, ...)
            enabled: False when credentials are missing; retrievers then
                     return empty contexts without any network call
            keywords: Keyword tables for intent detection
        """
        self._settings = settings if settings is not None else Settings()
        self.embedder = embedder
        self.store = store
        self.enabled = enabled
        self.keywords = keywords

    @classmethod
    def with_litellm(
        cls,
        *,
        store: VectorStore,
        settings: Settings | None = None,
        api_key: str | None = None,
        enabled: bool = True,
    ) -> QBank:
        """Create a QBank that embeds through LiteLLM.

        Args:
            store: Vector store holding the question bank
            settings: Behavioral settings; embedding model, dimensions,
                      retries and batch size are read from here
            api_key: Embedding provider key (None = provider's env var)
            enabled: See __init__
        """
        settings = settings if settings is not None else Settings()
        client = LiteLLMEmbeddingClient(
            model=settings.embedding_model,
            dimensions=settings.embedding_dimensions,
            api_key=api_key,
            num_retries=settings.num_retries,
            timeout=settings.request_timeout,
        )
        embedder = ClientEmbedder(
            embedding_client=client,
            batch_size=settings.embedding_batch_size,
        )
        return cls(embedder=embedder, store=store, settings=settings, enabled=enabled)

    @property
    def settings(self) -> Settings:
        return self._settings

    def retriever(
        self,
        namespace: str | None = None,
        top_k: int | None = None,
    ) -> Retriever:
        """Create a Retriever bound to this bank's clients.

        Args:
            namespace: Override the configured namespace
            top_k: Override the configured number of results
        """
        return Retriever(
            embedder=self.embedder,
            store=self.store,
            namespace=namespace or self._settings.namespace,
            top_k=top_k if top_k is not None else self._settings.top_k,
            timeout=self._settings.request_timeout,
            enabled=self.enabled,
            keywords=self.keywords,
        )

    def ingestor(
        self,
        namespace: str | None = None,
        settle_seconds: float = 0.0,
    ) -> Ingestor:
        """Create an Ingestor bound to this bank's clients.

        Args:
            namespace: Override the configured namespace
            settle_seconds: Pause after clearing a namespace before uploading
        """
        return Ingestor(
            embedder=self.embedder,
            store=self.store,
            namespace=namespace or self._settings.namespace,
            settle_seconds=settle_seconds,
        )

    def close(self) -> None:
        """Release store resources (local stores hold file handles)."""
        close = getattr(self.store, "close", None)
        if callable(close):
            close()
