# src/qbank/models/results.py
"""Query-time result models."""

from pydantic import BaseModel, Field, model_validator

from qbank.models.question import GradeLevel, Question


class UserIntent(BaseModel):
    """What a free-text request is asking for."""

    wants_questions: bool = False
    grade_level: GradeLevel | None = None
    topic: str | None = None
    wants_visual_hints: bool = False
    raw_query: str = ""


class SearchResult(BaseModel):
    """A matched question and its similarity score."""

    id: str
    score: float
    question: Question


class RetrievalContext(BaseModel):
    """Example questions formatted for prompt injection."""

    examples: list[Question] = Field(default_factory=list)
    formatted_text: str = ""
    count: int = 0

    @model_validator(mode="after")
    def _check_count(self) -> "RetrievalContext":
        if self.count != len(self.examples):
            raise ValueError(
                f"count ({self.count}) must equal number of examples ({len(self.examples)})"
            )
        if (self.count == 0) != (self.formatted_text == ""):
            raise ValueError("formatted_text must be empty exactly when there are no examples")
        return self

    @classmethod
    def empty(cls) -> "RetrievalContext":
        return cls()
