"""Shared pytest fixtures."""

import contextlib
import os
import tempfile

import pytest

from fakes import SAMPLE_BANK


@pytest.fixture
def temp_dir():
    """Create a temporary directory for stores."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir

        # Cleanup ChromaDB's shared system cache to release file handles
        # See: https://github.com/chroma-core/chroma/issues/5868
        with contextlib.suppress(ImportError):
            from chromadb.api.shared_system_client import SharedSystemClient

            if hasattr(SharedSystemClient, "_identifier_to_system"):
                identifiers_to_remove = [
                    identifier
                    for identifier in list(SharedSystemClient._identifier_to_system.keys())
                    if tmpdir in str(identifier)
                ]
                for identifier in identifiers_to_remove:
                    system = SharedSystemClient._identifier_to_system.pop(identifier, None)
                    if system is not None:
                        with contextlib.suppress(Exception):
                            system.stop()


@pytest.fixture
def sample_bank():
    return SAMPLE_BANK


@pytest.fixture
def bank_dir(temp_dir, sample_bank):
    """A directory holding one question-bank file."""
    path = os.path.join(temp_dir, "P1_HenryPark_2022.md")
    with open(path, "w", encoding="utf-8") as f:
        f.write(sample_bank)
    return temp_dir
