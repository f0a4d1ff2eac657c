# src/qbank/models/__init__.py
"""Data models for qbank."""

from qbank.models.ingest import IngestReport, VerificationReport
from qbank.models.metadata import question_from_metadata, question_to_metadata
from qbank.models.question import Difficulty, GradeLevel, Question, QuestionFileMetadata
from qbank.models.records import (
    IndexStats,
    MetadataFilter,
    QueryMatch,
    UpsertResult,
    VectorRecord,
)
from qbank.models.results import RetrievalContext, SearchResult, UserIntent

__all__ = [
    "Difficulty",
    "GradeLevel",
    "Question",
    "QuestionFileMetadata",
    "VectorRecord",
    "QueryMatch",
    "MetadataFilter",
    "UpsertResult",
    "IndexStats",
    "SearchResult",
    "RetrievalContext",
    "UserIntent",
    "VerificationReport",
    "IngestReport",
    "question_to_metadata",
    "question_from_metadata",
]
