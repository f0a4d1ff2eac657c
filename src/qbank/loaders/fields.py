# src/qbank/loaders/fields.py
"""Pure helpers for reading question-bank markdown.

Each function handles one field or naming rule and can be tested on its own.
"""

import re
from pathlib import Path

from qbank.models import Difficulty, GradeLevel, QuestionFileMetadata

FIELD_NAMES = (
    "Topic",
    "Subtopic",
    "Difficulty",
    "Question",
    "Visual_Hint",
    "Answer",
    "Working",
    "Skills",
    "Options",
)

# Filename format: P{1-6}_{SourceWords}_{Year}.md
GRADE_PREFIX_PATTERN = re.compile(r"^(P[1-6])", re.IGNORECASE)
SOURCE_PATTERN = re.compile(r"^P[1-6]_(.+?)_\d{4}$", re.IGNORECASE)
YEAR_PATTERN = re.compile(r"(\d{4})$")
CAPITAL_LETTER = re.compile(r"([A-Z])")

EMPTY_VISUAL_HINTS = {"none needed", "none", "n/a"}

SOURCE_CODE_LENGTH = 6


def parse_filename_metadata(filename: str) -> QuestionFileMetadata:
    """Derive grade, source and year from a question-bank filename.

    Example:
        P1_HenryPark_2022.md -> grade=P1, source="Henry Park", year="2022"
        P2_ACSJunior_2019.md -> grade=P2, source="A C S Junior", year="2019"
    """
    stem = Path(filename).stem

    grade_match = GRADE_PREFIX_PATTERN.match(stem)
    grade = GradeLevel(grade_match.group(1).upper()) if grade_match else GradeLevel.P1

    source_match = SOURCE_PATTERN.match(stem)
    if source_match:
        words = source_match.group(1).replace("_", " ")
        source = " ".join(CAPITAL_LETTER.sub(r" \1", words).split())
    else:
        source = stem

    year_match = YEAR_PATTERN.search(stem)
    year = year_match.group(1) if year_match else None

    return QuestionFileMetadata(
        filename=Path(filename).name,
        grade_level=grade,
        source=source,
        year=year,
    )


def extract_field(block: str, field_name: str) -> str | None:
    """Return the value of a ``- **Field:** value`` line, or None if absent."""
    pattern = re.compile(
        rf"-\s*\*\*{re.escape(field_name)}:\*\*[ \t]*(.*?)[ \t]*(?:\r?\n|$)",
        re.IGNORECASE,
    )
    match = pattern.search(block)
    if match is None:
        return None
    return match.group(1).strip()


def parse_difficulty(value: str | None) -> Difficulty:
    """Parse a free-text difficulty; unrecognized input is Easy."""
    normalized = (value or "").strip().lower()
    if normalized.startswith("medium"):
        return Difficulty.MEDIUM
    if normalized.startswith("hard"):
        return Difficulty.HARD
    return Difficulty.EASY


def clean_visual_hint(value: str | None) -> str | None:
    """Drop placeholder hints like "None needed"."""
    cleaned = (value or "").strip()
    if not cleaned or cleaned.lower() in EMPTY_VISUAL_HINTS:
        return None
    return cleaned


def parse_skills(value: str | None) -> list[str]:
    if not value:
        return []
    return [s.strip() for s in value.split(",") if s.strip()]


def make_source_code(source: str) -> str:
    """Upper-cased initials of the source words, at most six characters."""
    initials = "".join(word[0] for word in source.split() if word)
    return initials.upper()[:SOURCE_CODE_LENGTH]


def make_question_id(grade: GradeLevel, source: str, number: int) -> str:
    """Build ``{grade}-{sourceCode}-{number:03d}``."""
    return f"{grade.value}-{make_source_code(source)}-{number:03d}"
