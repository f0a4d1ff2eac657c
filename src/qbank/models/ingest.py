# src/qbank/models/ingest.py
"""Ingestion report models."""

from pydantic import BaseModel, Field

from qbank.models.records import UpsertResult


class VerificationReport(BaseModel):
    """Checks run on parsed questions before anything is uploaded."""

    total: int = 0
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    by_grade: dict[str, int] = Field(default_factory=dict)
    by_topic: dict[str, int] = Field(default_factory=dict)
    by_difficulty: dict[str, int] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


class IngestReport(BaseModel):
    """Everything an operator needs to know about one ingestion run."""

    namespace: str
    files: list[str] = Field(default_factory=list)
    failed_files: dict[str, str] = Field(default_factory=dict)
    questions: int = 0
    verification: VerificationReport = Field(default_factory=VerificationReport)
    verify_only: bool = False
    deleted: bool | None = None
    records_before: int | None = None
    records_after: int | None = None
    upsert: UpsertResult | None = None

    @property
    def uploaded(self) -> bool:
        return self.upsert is not None

    @property
    def ok(self) -> bool:
        """True if verification passed and nothing failed to load or upload."""
        if not self.verification.ok or self.failed_files:
            return False
        return self.upsert is None or self.upsert.failed == 0
