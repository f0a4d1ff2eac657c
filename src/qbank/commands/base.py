# src/qbank/commands/base.py
"""Base types for the commands layer.

This module defines the data structures used by all commands:
- Progress callbacks for long-running operations
- Confirmation callbacks for destructive commands
- Result types for each command
- Loading a QBank from configuration
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from qbank.config import ConfigError, QBankConfig, create_qbank, get_qbank_config
from qbank.models import IngestReport, UserIntent
from qbank.qbank import QBank


class CommandStage(Enum):
    """Stages of command execution for progress reporting."""

    # Ingest stages
    PARSING = "Parsing"
    EMBEDDING = "Embedding"
    INDEXING = "Indexing"

    # General stages
    LOADING = "Loading"
    COMPLETE = "Complete"


@dataclass
class ProgressUpdate:
    """Progress update for long-running operations.

    Attributes:
        stage: Current stage of the operation
        current: Current item number
        total: Total number of items (0 for indeterminate)
        message: Optional status message
    """

    stage: CommandStage
    current: int
    total: int
    message: str | None = None

    @property
    def is_indeterminate(self) -> bool:
        """True if progress is indeterminate (total unknown)."""
        return self.total == 0

    @property
    def percentage(self) -> int:
        """Progress as percentage (0-100). Returns 0 if indeterminate."""
        if self.total == 0:
            return 0
        return int(100 * self.current / self.total)


# Callback type for progress updates
ProgressCallback = Callable[[ProgressUpdate], None]


@dataclass
class ConfirmRequest:
    """Details shown to the user before a destructive operation."""

    message: str
    count: int = 0


# Callback type for confirmation - returns True to proceed
ConfirmCallback = Callable[[ConfirmRequest], bool]


@dataclass
class CommandResult:
    """Base result type for commands."""

    success: bool
    error: str | None = None


@dataclass
class IngestResult(CommandResult):
    """Result of the ingest command.

    Attributes:
        report: Full ingestion report (None if ingestion never started)
    """

    report: IngestReport | None = None


@dataclass
class ExampleInfo:
    """A retrieved example question."""

    id: str
    score: float
    grade_level: str
    topic: str
    difficulty: str
    text: str
    answer: str


@dataclass
class QueryResult(CommandResult):
    """Result of the query command.

    Attributes:
        query: The original request
        intent: Detected intent
        examples: Retrieved examples, best first
        context: Formatted prompt context ("" when nothing was retrieved)
    """

    query: str = ""
    intent: UserIntent | None = None
    examples: list[ExampleInfo] = field(default_factory=list)
    context: str = ""


@dataclass
class IntentResult(CommandResult):
    """Result of the intent command."""

    intent: UserIntent | None = None
    keywords_version: str = ""


@dataclass
class StatusResult(CommandResult):
    """Result of the status command.

    Attributes:
        backend: Vector store backend (pinecone, chroma)
        location: Index name or local directory
        namespace: Configured namespace
        namespace_records: Records in the configured namespace
        total_records: Records across all namespaces
        namespaces: Per-namespace record counts
        dimension: Index dimension, if reported
        embedding_model: Configured embedding model
        embedding_configured: Embedding credential present
        store_configured: Vector store credential present
    """

    backend: str = ""
    location: str = ""
    namespace: str = ""
    namespace_records: int = 0
    total_records: int = 0
    namespaces: dict[str, int] = field(default_factory=dict)
    dimension: int | None = None
    embedding_model: str = ""
    embedding_configured: bool = False
    store_configured: bool = False


@dataclass
class ListResult(CommandResult):
    """Result of the list command."""

    namespace: str = ""
    ids: list[str] = field(default_factory=list)


@dataclass
class DeleteResult(CommandResult):
    """Result of the delete command.

    Attributes:
        namespace: Namespace records were deleted from
        ids: Ids that were deleted (empty when the namespace was cleared)
        deleted_all: True if the whole namespace was cleared
        cancelled: True if the user declined the confirmation
    """

    namespace: str = ""
    ids: list[str] = field(default_factory=list)
    deleted_all: bool = False
    cancelled: bool = False


@dataclass
class LoadedQBank:
    """A QBank together with the configuration it was built from."""

    qbank: QBank
    config: QBankConfig


def load_qbank(
    config_path: str | Path | None = None,
    *,
    need_embedding: bool = True,
    need_store: bool = True,
) -> LoadedQBank | ConfigError:
    """Build a QBank for a command, checking the credentials it needs."""
    config = get_qbank_config(config_path)
    if isinstance(config, ConfigError):
        return config

    if need_store and not config.is_vector_store_configured():
        return ConfigError(
            message=f"Vector store ({config.backend}) is not configured.",
            suggestion="Set PINECONE_API_KEY and PINECONE_INDEX_NAME, or use backend: chroma",
        )
    if need_embedding and not config.is_embedding_configured():
        return ConfigError(
            message=f"No API key found for embedding model {config.settings.embedding_model}.",
            suggestion="Set the provider key (e.g. OPENAI_API_KEY) or QBANK_EMBEDDING_API_KEY",
        )

    try:
        qbank = create_qbank(config)
    except Exception as e:
        return ConfigError(message=f"Failed to create QBank: {e}")
    return LoadedQBank(qbank=qbank, config=config)


def format_config_error(error: ConfigError) -> str:
    if error.suggestion:
        return f"{error.message} {error.suggestion}"
    return error.message
