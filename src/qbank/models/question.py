# src/qbank/models/question.py
"""Question data models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_TOPIC = "Unknown"


class GradeLevel(str, Enum):
    """Primary school grade levels."""

    P1 = "P1"
    P2 = "P2"
    P3 = "P3"
    P4 = "P4"
    P5 = "P5"
    P6 = "P6"


class Difficulty(str, Enum):
    """Question difficulty."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class Question(BaseModel):
    """A single practice question parsed from a question bank."""

    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    grade_level: GradeLevel
    topic: str
    subtopic: str = "General"
    difficulty: Difficulty = Difficulty.EASY
    answer: str
    working_solution: str | None = None
    visual_hint: str | None = None
    source: str = ""
    skills_tested: list[str] = Field(default_factory=list)
    options: str | None = None  # Multiple choice line, kept verbatim


class QuestionFileMetadata(BaseModel):
    """Metadata derived from a question-bank filename."""

    filename: str
    grade_level: GradeLevel = GradeLevel.P1
    source: str
    year: str | None = None

    @property
    def full_source(self) -> str:
        """Source with the year appended when known (e.g. "Henry Park 2022")."""
        return f"{self.source} {self.year}" if self.year else self.source
