# src/qbank/embedder/base.py
"""Embedder abstract base class."""

from abc import ABC, abstractmethod

from qbank.models import Question


def searchable_text(question: Question) -> str:
    """Text that represents a question in the index.

    Grade, topic and subtopic are prepended so that short requests like
    "P2 fractions" land near the right questions.
    """
    return (
        f"{question.grade_level.value} {question.topic} {question.subtopic} {question.text}"
    )


class Embedder(ABC):
    """Abstract base class for embedding generation.

    Subclasses must implement embed, aembed and embed_batch.
    """

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text."""
        ...

    @abstractmethod
    async def aembed(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text (async)."""
        ...

    @abstractmethod
    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for many texts, in input order."""
        ...

    def embed_questions(self, questions: list[Question]) -> list[list[float]]:
        """Embed the searchable text of each question."""
        if not questions:
            return []
        return self.embed_batch([searchable_text(q) for q in questions])
