# src/qbank/loaders/base.py
"""Loader abstract base class."""

from abc import ABC, abstractmethod

from qbank.models import Question


class Loader(ABC):
    """Abstract base class for question-bank loading."""

    @abstractmethod
    def load(self, path: str) -> list[Question]:
        """Load a file and return its questions in document order."""
        ...

    @abstractmethod
    def supports(self, path: str) -> bool:
        """Check if this loader supports the given path."""
        ...
