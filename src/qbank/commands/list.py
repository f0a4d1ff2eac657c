# src/qbank/commands/list.py
"""List command - show every record id in a namespace."""

from __future__ import annotations

from pathlib import Path

from qbank.commands.base import ListResult, format_config_error, load_qbank
from qbank.config import ConfigError
from qbank.errors import StoreError


def list_ids(
    config_path: str | Path | None = None,
    namespace: str | None = None,
) -> ListResult:
    """List all record ids in a namespace.

    Args:
        config_path: Override config file path
        namespace: Override the configured namespace

    Returns:
        ListResult with ids in store order
    """
    loaded = load_qbank(config_path, need_embedding=False)
    if isinstance(loaded, ConfigError):
        return ListResult(success=False, error=format_config_error(loaded))

    ns = namespace or loaded.config.settings.namespace
    try:
        ids = loaded.qbank.store.list_all_ids(ns)
    except StoreError as e:
        return ListResult(success=False, namespace=ns, error=str(e))
    finally:
        loaded.qbank.close()

    return ListResult(success=True, namespace=ns, ids=ids)
