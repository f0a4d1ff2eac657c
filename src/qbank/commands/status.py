# src/qbank/commands/status.py
"""Status command - show configuration and index statistics."""

from __future__ import annotations

from pathlib import Path

from qbank.commands.base import StatusResult, format_config_error, load_qbank
from qbank.config import ConfigError, get_qbank_config


def status(config_path: str | Path | None = None) -> StatusResult:
    """Report what is configured and how many records the index holds.

    Args:
        config_path: Override config file path

    Returns:
        StatusResult with configuration flags and index statistics
    """
    config = get_qbank_config(config_path)
    if isinstance(config, ConfigError):
        return StatusResult(success=False, error=format_config_error(config))

    result = StatusResult(
        success=True,
        backend=config.backend,
        location=config.chroma_dir if config.backend == "chroma" else config.pinecone_index,
        namespace=config.settings.namespace,
        embedding_model=config.settings.embedding_model,
        embedding_configured=config.is_embedding_configured(),
        store_configured=config.is_vector_store_configured(),
    )
    if not result.store_configured:
        return result

    loaded = load_qbank(config_path, need_embedding=False)
    if isinstance(loaded, ConfigError):
        return StatusResult(success=False, error=format_config_error(loaded))

    try:
        stats = loaded.qbank.store.describe_stats()
    finally:
        loaded.qbank.close()

    if stats is None:
        result.success = False
        result.error = "Could not read index statistics (see log for details)"
        return result

    result.total_records = stats.total_records
    result.namespaces = stats.namespaces
    result.namespace_records = stats.namespaces.get(result.namespace, 0)
    result.dimension = stats.dimension
    return result
