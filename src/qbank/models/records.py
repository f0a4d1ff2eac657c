# src/qbank/models/records.py
"""Vector store record models."""

from typing import Any

from pydantic import BaseModel, Field

from qbank.models.question import Difficulty, GradeLevel

MetadataValue = str | int | float | bool | list[str]


class VectorRecord(BaseModel):
    """A vector plus its metadata, as written to the store."""

    id: str
    embedding: list[float]
    metadata: dict[str, MetadataValue] = Field(default_factory=dict)


class QueryMatch(BaseModel):
    """A raw similarity match returned by the store."""

    id: str
    score: float = 0.0
    metadata: dict[str, Any] = Field(default_factory=dict)


class MetadataFilter(BaseModel):
    """Equality constraints on question metadata.

    Every field that is set must match; unset fields do not restrict results.
    """

    grade_level: GradeLevel | None = None
    topic: str | None = None
    difficulty: Difficulty | None = None

    def conditions(self) -> dict[str, str]:
        """Return the set constraints keyed by store metadata field."""
        out: dict[str, str] = {}
        if self.grade_level is not None:
            out["gradeLevel"] = self.grade_level.value
        if self.topic:
            out["topic"] = self.topic
        if self.difficulty is not None:
            out["difficulty"] = self.difficulty.value
        return out

    def is_empty(self) -> bool:
        return not self.conditions()


class UpsertResult(BaseModel):
    """Outcome of a batched upsert."""

    succeeded: int = 0
    failed: int = 0
    errors: list[str] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return self.succeeded + self.failed


class IndexStats(BaseModel):
    """Read-only store statistics."""

    total_records: int = 0
    namespaces: dict[str, int] = Field(default_factory=dict)
    dimension: int | None = None
