# src/qbank/ingestor.py
"""Ingestion pipeline for qbank."""

import time
from collections import Counter
from collections.abc import Callable
from pathlib import Path

from qbank.embedder import Embedder
from qbank.errors import QBankError
from qbank.loaders import MarkdownQuestionLoader, duplicate_ids
from qbank.log import get_logger
from qbank.models import (
    IngestReport,
    Question,
    UpsertResult,
    VectorRecord,
    VerificationReport,
    question_to_metadata,
)
from qbank.models.question import UNKNOWN_TOPIC
from qbank.stores import VectorStore

logger = get_logger(__name__)

ProgressCallback = Callable[[str, int, int, str], None]
"""Callback for ingestion progress updates.

Args:
    event: Event type - "parsing", "embedding", or "indexing"
    current: Current progress count (0 to total)
    total: Total items to process
    message: Human-readable status message
"""


def verify_questions(questions: list[Question]) -> VerificationReport:
    """Check parsed questions before upload.

    Missing ids, text or answers are errors. Unknown topics and duplicate ids
    are warnings.
    """
    report = VerificationReport(total=len(questions))
    if not questions:
        report.errors.append("No questions found")
        return report

    for q in questions:
        if not q.id:
            report.errors.append(f"Question missing ID: {q.text[:50]}...")
        if not q.text:
            report.errors.append(f"Question {q.id} missing question text")
        if not q.answer:
            report.errors.append(f"Question {q.id} missing answer")
        if not q.topic or q.topic == UNKNOWN_TOPIC:
            report.warnings.append(f"Question {q.id} missing topic")

    for qid in duplicate_ids(questions):
        report.warnings.append(f"Duplicate question id {qid}; the last one is kept")

    report.by_grade = dict(Counter(q.grade_level.value for q in questions))
    report.by_topic = dict(Counter(q.topic for q in questions))
    report.by_difficulty = dict(Counter(q.difficulty.value for q in questions))
    return report


def keep_last_by_id(questions: list[Question]) -> list[Question]:
    """Drop earlier questions that share an id with a later one."""
    latest = {q.id: q for q in questions}
    return [q for q in questions if latest[q.id] is q]


class Ingestor:
    """Orchestrates the ingestion pipeline.

    Pipeline:
    1. Parse question-bank files (a broken file is reported, not fatal)
    2. Verify the parsed questions
    3. Optionally clear the namespace
    4. Embed searchable text in sequential batches
    5. Upsert vector records in sequential batches
    """

    def __init__(
        self,
        embedder: Embedder,
        store: VectorStore,
        namespace: str,
        loader: MarkdownQuestionLoader | None = None,
        settle_seconds: float = 0.0,
    ) -> None:
        """Initialize the ingestor.

        Args:
            embedder: Component to embed questions
            store: Vector store to write to
            namespace: Namespace the question bank lives in
            loader: Question-bank loader (default: MarkdownQuestionLoader)
            settle_seconds: Pause after clearing the namespace, for stores
                whose deletes are eventually consistent
        """
        self.embedder = embedder
        self.store = store
        self.namespace = namespace
        self.loader = loader or MarkdownQuestionLoader()
        self.settle_seconds = settle_seconds

    def select_files(self, path: str, file_filter: str | None = None) -> list[str]:
        """Question-bank files to ingest from a file or directory path.

        Args:
            path: A single file or a directory of question banks
            file_filter: Keep only the first file whose name contains this text

        Raises:
            FileNotFoundError: If the path does not exist or nothing matches.
        """
        target = Path(path)
        if not target.exists():
            raise FileNotFoundError(f"Path not found: {path}")

        files = [str(target)] if target.is_file() else self.loader.list_files(str(target))
        if file_filter:
            matching = [f for f in files if file_filter in Path(f).name]
            if not matching:
                available = ", ".join(Path(f).name for f in files) or "none"
                raise FileNotFoundError(
                    f'No file matching "{file_filter}" (available: {available})'
                )
            files = matching[:1]
        return files

    def records_for(
        self, questions: list[Question], embeddings: list[list[float]]
    ) -> list[VectorRecord]:
        if len(questions) != len(embeddings):
            raise QBankError(
                f"Embedding count mismatch: {len(questions)} questions, "
                f"{len(embeddings)} embeddings"
            )
        return [
            VectorRecord(id=q.id, embedding=e, metadata=question_to_metadata(q))
            for q, e in zip(questions, embeddings, strict=True)
        ]

    def ingest_questions(
        self,
        questions: list[Question],
        on_progress: ProgressCallback | None = None,
    ) -> UpsertResult:
        """Embed and upsert already-parsed questions.

        Raises:
            EmbeddingError: If any embedding batch fails. Nothing is uploaded.
            DimensionMismatchError: If the embeddings don't fit the store.
        """

        def progress(event: str, current: int, total: int, message: str = "") -> None:
            if on_progress:
                on_progress(event, current, total, message)

        questions = keep_last_by_id(questions)
        if not questions:
            return UpsertResult()

        progress("embedding", 0, 1, f"Embedding {len(questions)} questions...")
        embeddings = self.embedder.embed_questions(questions)
        progress("embedding", 1, 1, "Embedding complete")

        records = self.records_for(questions, embeddings)

        progress("indexing", 0, 1, f"Uploading {len(records)} records...")
        result = self.store.upsert_batch(records, self.namespace)
        progress("indexing", 1, 1, f"Uploaded {result.succeeded}, failed {result.failed}")
        return result

    def _namespace_count(self) -> int | None:
        stats = self.store.describe_stats()
        if stats is None:
            return None
        return stats.namespaces.get(self.namespace, 0)

    def ingest(
        self,
        path: str,
        *,
        delete_first: bool = False,
        verify_only: bool = False,
        file_filter: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> IngestReport:
        """Parse, verify and upload question banks.

        Upload is skipped when verification finds errors or verify_only is set.

        Args:
            path: Question-bank file or directory
            delete_first: Clear the namespace before uploading
            verify_only: Stop after verification
            file_filter: Only ingest the file whose name contains this text
            on_progress: Optional callback(event, current, total, message)
        """

        def progress(event: str, current: int, total: int, message: str = "") -> None:
            if on_progress:
                on_progress(event, current, total, message)

        files = self.select_files(path, file_filter)
        report = IngestReport(namespace=self.namespace, files=files, verify_only=verify_only)

        questions: list[Question] = []
        for i, filepath in enumerate(files):
            progress("parsing", i, len(files), f"Parsing {Path(filepath).name}...")
            try:
                questions.extend(self.loader.load(filepath))
            except (OSError, UnicodeDecodeError, ValueError) as e:
                logger.error("Failed to load %s: %s", filepath, e)
                report.failed_files[filepath] = str(e)
        progress("parsing", len(files), len(files), f"Parsed {len(questions)} questions")

        report.questions = len(questions)
        report.verification = verify_questions(questions)
        if not report.verification.ok:
            logger.error("Verification failed with %d errors", len(report.verification.errors))
            return report
        if verify_only:
            return report

        report.records_before = self._namespace_count()

        if delete_first:
            report.deleted = self.store.delete_all(self.namespace)
            if not report.deleted:
                logger.warning("Failed to delete existing records in '%s'", self.namespace)
            if self.settle_seconds > 0:
                time.sleep(self.settle_seconds)

        report.upsert = self.ingest_questions(questions, on_progress)
        report.records_after = self._namespace_count()
        logger.info(
            "Ingested %d/%d records into '%s'",
            report.upsert.succeeded,
            report.upsert.total,
            self.namespace,
        )
        return report
