# src/qbank/errors.py
"""Exception types for qbank."""


class QBankError(Exception):
    """Base class for all qbank errors."""


class ParseSkip(QBankError):
    """A question block could not be turned into a Question.

    Raised by the block parser and caught by the document parser, which logs
    the reason and moves on to the next block.
    """

    def __init__(self, number: int, reason: str) -> None:
        super().__init__(f"Skipping question {number} - {reason}")
        self.number = number
        self.reason = reason


class EmbeddingError(QBankError):
    """The embedding provider failed or is not configured."""


class StoreError(QBankError):
    """A vector store call failed."""


class DimensionMismatchError(StoreError):
    """A vector does not match the dimension configured for the store."""

    def __init__(self, record_id: str, expected: int, actual: int) -> None:
        super().__init__(
            f"Record '{record_id}' has dimension {actual}, expected {expected}"
        )
        self.record_id = record_id
        self.expected = expected
        self.actual = actual
