# src/qbank/providers/litellm/models.py
"""Curated embedding model constants for the LiteLLM provider.

Any valid LiteLLM model string works; these exist for IDE autocomplete.

Example:
    from qbank.providers.litellm import EmbeddingModels, LiteLLMEmbeddingClient

    client = LiteLLMEmbeddingClient(model=EmbeddingModels.TEXT_3_SMALL)
"""


class EmbeddingModels:
    """Embedding models for LiteLLMEmbeddingClient / ClientEmbedder."""

    # OpenAI (both accept a reduced ``dimensions``)
    TEXT_3_SMALL = "openai/text-embedding-3-small"
    TEXT_3_LARGE = "openai/text-embedding-3-large"

    # Google Gemini
    GEMINI_004 = "gemini/text-embedding-004"

    # AWS Bedrock
    BEDROCK_TITAN_V2 = "bedrock/amazon.titan-embed-text-v2:0"


# Native vector length of each curated model
DEFAULT_DIMENSIONS = {
    EmbeddingModels.TEXT_3_SMALL: 1536,
    EmbeddingModels.TEXT_3_LARGE: 3072,
    EmbeddingModels.GEMINI_004: 768,
    EmbeddingModels.BEDROCK_TITAN_V2: 1024,
}
