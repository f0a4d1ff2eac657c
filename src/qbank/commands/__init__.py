# src/qbank/commands/__init__.py
"""UI-agnostic command layer for qbank.

Commands return data structures, allowing the CLI (or any other UI) to
render results appropriately.

Usage:
    from qbank.commands import ingest, query, status

    result = ingest.ingest("./questions", verify_only=True)
    result = query.query("Give me a P1 addition question")
    result = status.status()
"""

from qbank.commands import delete, ingest, intent_cmd, query, status
from qbank.commands import list as list_cmd
from qbank.commands.base import (
    CommandResult,
    CommandStage,
    ConfirmCallback,
    ConfirmRequest,
    DeleteResult,
    ExampleInfo,
    IngestResult,
    IntentResult,
    ListResult,
    ProgressCallback,
    ProgressUpdate,
    QueryResult,
    StatusResult,
)

__all__ = [
    # Base types
    "CommandStage",
    "ProgressUpdate",
    "ProgressCallback",
    "ConfirmRequest",
    "ConfirmCallback",
    "CommandResult",
    # Result types
    "IngestResult",
    "QueryResult",
    "ExampleInfo",
    "IntentResult",
    "StatusResult",
    "ListResult",
    "DeleteResult",
    # Command modules
    "ingest",
    "query",
    "intent_cmd",
    "status",
    "list_cmd",
    "delete",
]
