# src/qbank/loaders/__init__.py
"""Question-bank file loading."""

from qbank.loaders.base import Loader
from qbank.loaders.fields import (
    clean_visual_hint,
    extract_field,
    make_question_id,
    make_source_code,
    parse_difficulty,
    parse_filename_metadata,
    parse_skills,
)
from qbank.loaders.markdown import (
    MarkdownQuestionLoader,
    duplicate_ids,
    parse_markdown,
    parse_question_block,
    split_blocks,
)

__all__ = [
    "Loader",
    "MarkdownQuestionLoader",
    "parse_markdown",
    "parse_question_block",
    "split_blocks",
    "duplicate_ids",
    "parse_filename_metadata",
    "extract_field",
    "parse_difficulty",
    "clean_visual_hint",
    "parse_skills",
    "make_source_code",
    "make_question_id",
]
