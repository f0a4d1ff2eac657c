# src/qbank/commands/delete.py
"""Delete command - remove records from a namespace.

Uses a callback for confirmation so each UI can ask in its own way.
"""

from __future__ import annotations

from pathlib import Path

from qbank.commands.base import (
    ConfirmCallback,
    ConfirmRequest,
    DeleteResult,
    format_config_error,
    load_qbank,
)
from qbank.config import ConfigError


def delete(
    ids: list[str] | None = None,
    delete_all: bool = False,
    config_path: str | Path | None = None,
    namespace: str | None = None,
    on_confirm: ConfirmCallback | None = None,
) -> DeleteResult:
    """Delete records by id, or clear the whole namespace.

    Args:
        ids: Record ids to delete
        delete_all: Clear every record in the namespace (ids are ignored)
        config_path: Override config file path
        namespace: Override the configured namespace
        on_confirm: Called before deleting; return False to cancel. If None,
            deletion proceeds without confirmation.

    Returns:
        DeleteResult describing what was deleted
    """
    ids = ids or []
    if not ids and not delete_all:
        return DeleteResult(success=False, error="Nothing to delete: pass ids or --all")

    loaded = load_qbank(config_path, need_embedding=False)
    if isinstance(loaded, ConfigError):
        return DeleteResult(success=False, error=format_config_error(loaded))

    ns = namespace or loaded.config.settings.namespace
    store = loaded.qbank.store
    try:
        if on_confirm is not None:
            message = (
                f"Delete ALL records in namespace '{ns}'?"
                if delete_all
                else f"Delete {len(ids)} records from namespace '{ns}'?"
            )
            if not on_confirm(ConfirmRequest(message=message, count=len(ids))):
                return DeleteResult(success=True, namespace=ns, cancelled=True)

        ok = store.delete_all(ns) if delete_all else store.delete_many(ids, ns)
    finally:
        loaded.qbank.close()

    if not ok:
        return DeleteResult(
            success=False,
            namespace=ns,
            error="Delete failed (see log for details)",
        )
    return DeleteResult(
        success=True,
        namespace=ns,
        ids=[] if delete_all else ids,
        deleted_all=delete_all,
    )
