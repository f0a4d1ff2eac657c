# src/qbank/settings.py
"""Behavioral settings for qbank.

Settings are passed programmatically; the library itself does not read
environment variables. ``qbank.config`` builds a Settings object from YAML
and QBANK_* variables for the CLI and for applications that want env-based
configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Behavioral settings for qbank.

    Example:
        settings = Settings(top_k=3, request_timeout=5.0)
    """

    # Retrieval
    namespace: str = "math-questions"
    top_k: int = Field(default=5, ge=1)
    request_timeout: float | None = 10.0

    # Embeddings
    embedding_model: str = "openai/text-embedding-3-small"
    embedding_dimensions: int = Field(default=1536, ge=1)
    embedding_batch_size: int = Field(default=100, ge=1)

    # Vector store
    upsert_batch_size: int = Field(default=100, ge=1)
    list_page_size: int = Field(default=99, ge=1)
    max_list_pages: int = Field(default=1000, ge=1)

    # Retry configuration (LiteLLM handles exponential backoff for RateLimitError)
    num_retries: int = Field(default=3, ge=0)
