# src/qbank/commands/ingest.py
"""Ingest command - parse question banks and upload them.

This module provides the ingest logic the CLI uses.
"""

from __future__ import annotations

from pathlib import Path

from qbank.commands.base import (
    CommandStage,
    IngestResult,
    ProgressCallback,
    ProgressUpdate,
    format_config_error,
    load_qbank,
)
from qbank.config import ConfigError
from qbank.errors import QBankError

# Map ingestor event names to CommandStage
STAGE_MAP = {
    "parsing": CommandStage.PARSING,
    "embedding": CommandStage.EMBEDDING,
    "indexing": CommandStage.INDEXING,
}


def ingest(
    path: str | Path,
    config_path: str | Path | None = None,
    namespace: str | None = None,
    delete_first: bool = False,
    verify_only: bool = False,
    file_filter: str | None = None,
    settle_seconds: float = 0.0,
    on_progress: ProgressCallback | None = None,
) -> IngestResult:
    """Parse, verify and upload question-bank files.

    Args:
        path: Question-bank file or directory
        config_path: Override config file path
        namespace: Override the configured namespace
        delete_first: Clear the namespace before uploading
        verify_only: Only parse and verify; upload nothing
        file_filter: Only ingest the file whose name contains this text
        settle_seconds: Pause after clearing the namespace
        on_progress: Callback for progress updates

    Returns:
        IngestResult wrapping the ingestion report
    """
    path = Path(path)
    if not path.exists():
        return IngestResult(success=False, error=f"Path not found: {path}")

    # Verification needs no credentials
    loaded = load_qbank(
        config_path,
        need_embedding=not verify_only,
        need_store=not verify_only,
    )
    if isinstance(loaded, ConfigError):
        return IngestResult(success=False, error=format_config_error(loaded))

    def forward(event: str, current: int, total: int, message: str) -> None:
        if on_progress:
            stage = STAGE_MAP.get(event, CommandStage.LOADING)
            on_progress(ProgressUpdate(stage, current, total, message))

    ingestor = loaded.qbank.ingestor(namespace=namespace, settle_seconds=settle_seconds)
    try:
        report = ingestor.ingest(
            str(path),
            delete_first=delete_first,
            verify_only=verify_only,
            file_filter=file_filter,
            on_progress=forward,
        )
    except (OSError, QBankError) as e:
        return IngestResult(success=False, error=str(e))
    finally:
        loaded.qbank.close()

    if not report.verification.ok:
        error = "Verification failed. Fix the errors above and re-run."
    elif report.upsert is not None and report.upsert.failed:
        error = f"{report.upsert.failed} records failed to upload"
    elif report.failed_files:
        error = f"{len(report.failed_files)} files could not be read"
    else:
        error = None
    return IngestResult(success=error is None, error=error, report=report)
