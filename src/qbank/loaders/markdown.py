# src/qbank/loaders/markdown.py
"""Markdown question-bank loader.

Question banks are pre-cleaned markdown files named
``P{1-6}_{SourceWords}_{Year}.md``. Each question starts with a
``### Question <n>`` header followed by ``- **Field:** value`` lines.
"""

import re
from collections import Counter
from pathlib import Path

from qbank.errors import ParseSkip
from qbank.loaders.base import Loader
from qbank.loaders.fields import (
    clean_visual_hint,
    extract_field,
    make_question_id,
    parse_difficulty,
    parse_filename_metadata,
    parse_skills,
)
from qbank.log import get_logger
from qbank.models import Question, QuestionFileMetadata
from qbank.models.question import UNKNOWN_TOPIC

logger = get_logger(__name__)

QUESTION_HEADER = re.compile(r"^[ \t]*###[ \t]+Question\b[ \t]*", re.IGNORECASE | re.MULTILINE)
LEADING_NUMBER = re.compile(r"^(\d+)[a-z]?\b", re.IGNORECASE)


def split_blocks(content: str) -> list[tuple[int, str]]:
    """Split a document into ``(sequence_number, block_text)`` pairs.

    Text before the first question header is ignored. The number in the
    header (``### Question 12a`` -> 12) is the sequence number; blocks
    without one use their 1-based position.
    """
    parts = QUESTION_HEADER.split(content)
    blocks = []
    for position, block in enumerate(parts[1:], start=1):
        match = LEADING_NUMBER.match(block)
        number = int(match.group(1)) if match else position
        blocks.append((number, block))
    return blocks


def parse_question_block(
    block: str,
    number: int,
    metadata: QuestionFileMetadata,
) -> Question:
    """Parse one question block.

    Raises:
        ParseSkip: If the block has no question text or no answer.
    """
    text = extract_field(block, "Question") or ""
    answer = extract_field(block, "Answer") or ""
    if not text or not answer:
        raise ParseSkip(number, "missing question or answer")

    return Question(
        id=make_question_id(metadata.grade_level, metadata.source, number),
        text=text,
        grade_level=metadata.grade_level,
        topic=extract_field(block, "Topic") or UNKNOWN_TOPIC,
        subtopic=extract_field(block, "Subtopic") or "General",
        difficulty=parse_difficulty(extract_field(block, "Difficulty")),
        answer=answer,
        working_solution=extract_field(block, "Working") or None,
        visual_hint=clean_visual_hint(extract_field(block, "Visual_Hint")),
        source=metadata.full_source,
        skills_tested=parse_skills(extract_field(block, "Skills")),
        options=extract_field(block, "Options") or None,
    )


def duplicate_ids(questions: list[Question]) -> list[str]:
    """Return ids that appear more than once, in first-seen order."""
    counts = Counter(q.id for q in questions)
    return [qid for qid, n in counts.items() if n > 1]


def parse_markdown(content: str, metadata: QuestionFileMetadata) -> list[Question]:
    """Parse a whole document. Malformed blocks are logged and skipped."""
    questions = []
    for number, block in split_blocks(content):
        try:
            questions.append(parse_question_block(block, number, metadata))
        except ParseSkip as e:
            logger.warning("%s: %s", metadata.filename, e)

    for qid in duplicate_ids(questions):
        logger.warning("%s: duplicate question id %s (last one wins)", metadata.filename, qid)

    return questions


class MarkdownQuestionLoader(Loader):
    """Load question-bank markdown files into Question records."""

    SUPPORTED_EXTENSIONS = {".md", ".markdown"}

    def supports(self, path: str) -> bool:
        """Check if this loader supports the given file."""
        return Path(path).suffix.lower() in self.SUPPORTED_EXTENSIONS

    def load(self, path: str) -> list[Question]:
        """Load a single question-bank file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        content = file_path.read_text(encoding="utf-8")
        metadata = parse_filename_metadata(file_path.name)
        questions = parse_markdown(content, metadata)
        logger.info("Parsed %s: %d questions", file_path.name, len(questions))
        return questions

    def list_files(self, directory: str) -> list[str]:
        """Supported files directly inside ``directory``, sorted by name."""
        return sorted(
            str(p) for p in Path(directory).iterdir() if p.is_file() and self.supports(str(p))
        )

    def load_directory(self, directory: str) -> list[Question]:
        """Load every supported file in a directory.

        A file that cannot be read or parsed is logged and skipped; the
        remaining files are still loaded.
        """
        questions: list[Question] = []
        for filepath in self.list_files(directory):
            try:
                questions.extend(self.load(filepath))
            except (OSError, UnicodeDecodeError, ValueError) as e:
                logger.error("Failed to load %s: %s: %s", filepath, type(e).__name__, e)

        for qid in duplicate_ids(questions):
            logger.warning("Duplicate question id %s across files in %s", qid, directory)

        return questions
