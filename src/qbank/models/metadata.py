# src/qbank/models/metadata.py
"""Mapping between Question and vector store metadata.

Store metadata uses camelCase keys so indexes written by earlier versions of
the question bank stay readable. Decoding never raises: each missing or
malformed field falls back to its default on its own.
"""

from typing import Any

from qbank.models.question import UNKNOWN_TOPIC, Difficulty, GradeLevel, Question
from qbank.models.records import MetadataValue

GRADE_LEVEL = "gradeLevel"
TOPIC = "topic"
SUBTOPIC = "subtopic"
DIFFICULTY = "difficulty"
QUESTION_TEXT = "questionText"
ANSWER = "answer"
WORKING_SOLUTION = "workingSolution"
VISUAL_HINT = "visualHint"
SOURCE = "source"
SKILLS_TESTED = "skillsTested"

FILTERABLE_FIELDS = (GRADE_LEVEL, TOPIC, DIFFICULTY)


def question_to_metadata(question: Question) -> dict[str, MetadataValue]:
    """Build store metadata for a question. Absent optional fields are omitted."""
    metadata: dict[str, MetadataValue] = {
        GRADE_LEVEL: question.grade_level.value,
        TOPIC: question.topic,
        SUBTOPIC: question.subtopic,
        DIFFICULTY: question.difficulty.value,
        QUESTION_TEXT: question.text,
        ANSWER: question.answer,
        SOURCE: question.source,
        SKILLS_TESTED: ",".join(question.skills_tested),
    }
    if question.working_solution:
        metadata[WORKING_SOLUTION] = question.working_solution
    if question.visual_hint:
        metadata[VISUAL_HINT] = question.visual_hint
    return metadata


def _as_str(value: Any, default: str = "") -> str:
    if value is None or isinstance(value, (dict, list)):
        return default
    return str(value)


def _as_optional_str(value: Any) -> str | None:
    text = _as_str(value).strip()
    return text or None


def _as_grade(value: Any) -> GradeLevel:
    try:
        return GradeLevel(_as_str(value).upper())
    except ValueError:
        return GradeLevel.P1


def _as_difficulty(value: Any) -> Difficulty:
    try:
        return Difficulty(_as_str(value).capitalize())
    except ValueError:
        return Difficulty.EASY


def _as_skills(value: Any) -> list[str]:
    if isinstance(value, list):
        return [str(s).strip() for s in value if str(s).strip()]
    return [s.strip() for s in _as_str(value).split(",") if s.strip()]


def question_from_metadata(record_id: str, metadata: dict[str, Any] | None) -> Question:
    """Rebuild a Question from store metadata, defaulting each bad field."""
    md = metadata or {}
    return Question(
        id=record_id,
        text=_as_str(md.get(QUESTION_TEXT)),
        grade_level=_as_grade(md.get(GRADE_LEVEL)),
        topic=_as_str(md.get(TOPIC)) or UNKNOWN_TOPIC,
        subtopic=_as_str(md.get(SUBTOPIC)) or "General",
        difficulty=_as_difficulty(md.get(DIFFICULTY)),
        answer=_as_str(md.get(ANSWER)),
        working_solution=_as_optional_str(md.get(WORKING_SOLUTION)),
        visual_hint=_as_optional_str(md.get(VISUAL_HINT)),
        source=_as_str(md.get(SOURCE)),
        skills_tested=_as_skills(md.get(SKILLS_TESTED)),
    )
