"""qbank - question-bank retrieval for grounded question generation.

Parses a bank of curated math questions, indexes them in a vector store, and
retrieves the most relevant ones as style references for a tutoring prompt.

Quick Start (LiteLLM + Pinecone):
    from qbank import QBank, PineconeVectorStore

    bank = QBank.with_litellm(
        store=PineconeVectorStore(api_key="...", index_name="ai-math-tutor-v2"),
    )

    # Ingest question-bank files
    report = bank.ingestor().ingest("./question_bank")

    # Retrieve examples for a request
    context = bank.retriever().retrieve("Give me a P2 fractions question")
    print(context.formatted_text)

Local (Chroma):
    from qbank import QBank, ChromaVectorStore

    bank = QBank.with_litellm(store=ChromaVectorStore("./qbank_data/chroma"))

From configuration (qbank.yaml + environment):
    from qbank import get_qbank

    bank = get_qbank()
"""

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("qbank-rag")
except PackageNotFoundError:
    # Development / source-tree fallback (e.g. running tests without installing the wheel).
    try:
        import tomllib
        from pathlib import Path

        def _read_version_from_pyproject() -> str | None:
            for parent in Path(__file__).resolve().parents:
                pyproject = parent / "pyproject.toml"
                if pyproject.exists():
                    data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
                    version = data.get("project", {}).get("version")
                    return str(version) if version is not None else None
            return None

        __version__ = _read_version_from_pyproject() or "unknown"
    except (OSError, ValueError):
        __version__ = "unknown"

# Configuration
from qbank.config import ConfigError, QBankConfig, get_qbank, get_qbank_config

# Embedding
from qbank.embedder import ClientEmbedder, Embedder

# Errors
from qbank.errors import (
    DimensionMismatchError,
    EmbeddingError,
    ParseSkip,
    QBankError,
    StoreError,
)
from qbank.formatting import format_context

# Pipelines
from qbank.ingestor import Ingestor, verify_questions
from qbank.intent import DEFAULT_KEYWORDS, IntentKeywords, detect_intent

# File loading
from qbank.loaders import MarkdownQuestionLoader, parse_markdown
from qbank.log import configure_logging

# Core models
from qbank.models import (
    Difficulty,
    GradeLevel,
    IngestReport,
    MetadataFilter,
    Question,
    RetrievalContext,
    SearchResult,
    UpsertResult,
    UserIntent,
    VectorRecord,
    VerificationReport,
)
from qbank.providers import EmbeddingClient, EmbeddingModels, LiteLLMEmbeddingClient

# Central configuration
from qbank.qbank import QBank
from qbank.retriever import Retriever
from qbank.settings import Settings

# Stores
from qbank.stores import ChromaVectorStore, PineconeVectorStore, VectorStore

__all__ = [
    "__version__",
    # Central
    "QBank",
    "Settings",
    "QBankConfig",
    "ConfigError",
    "get_qbank",
    "get_qbank_config",
    "configure_logging",
    # Models
    "Difficulty",
    "GradeLevel",
    "Question",
    "VectorRecord",
    "MetadataFilter",
    "UpsertResult",
    "SearchResult",
    "RetrievalContext",
    "UserIntent",
    "VerificationReport",
    "IngestReport",
    # Errors
    "QBankError",
    "ParseSkip",
    "EmbeddingError",
    "StoreError",
    "DimensionMismatchError",
    # Loading
    "MarkdownQuestionLoader",
    "parse_markdown",
    # Intent and formatting
    "IntentKeywords",
    "DEFAULT_KEYWORDS",
    "detect_intent",
    "format_context",
    # Embedding
    "EmbeddingClient",
    "EmbeddingModels",
    "LiteLLMEmbeddingClient",
    "Embedder",
    "ClientEmbedder",
    # Stores
    "VectorStore",
    "PineconeVectorStore",
    "ChromaVectorStore",
    # Pipelines
    "Ingestor",
    "Retriever",
    "verify_questions",
]
