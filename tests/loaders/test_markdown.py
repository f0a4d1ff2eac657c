"""Tests for the markdown question-bank loader."""

import logging
import os

import pytest

from qbank.errors import ParseSkip
from qbank.loaders import (
    MarkdownQuestionLoader,
    duplicate_ids,
    parse_filename_metadata,
    parse_markdown,
    parse_question_block,
    split_blocks,
)
from qbank.models import Difficulty, GradeLevel


@pytest.fixture
def metadata():
    return parse_filename_metadata("P1_HenryPark_2022.md")


class TestSplitBlocks:
    def test_preamble_is_ignored(self):
        content = "# Title\n\nIntro\n\n### Question 1\n- **Answer:** 1\n"
        blocks = split_blocks(content)
        assert len(blocks) == 1
        assert blocks[0][0] == 1
        assert "Intro" not in blocks[0][1]

    def test_header_number_is_used(self):
        content = "### Question 7\nA\n### Question 12a\nB\n"
        assert [n for n, _ in split_blocks(content)] == [7, 12]

    def test_position_used_without_number(self):
        content = "### Question\nA\n### Question\nB\n"
        assert [n for n, _ in split_blocks(content)] == [1, 2]

    def test_no_headers(self):
        assert split_blocks("just some text") == []


class TestParseQuestionBlock:
    def test_full_block(self, metadata):
        block = (
            "1\n"
            "- **Topic:** Addition\n"
            "- **Subtopic:** Within 10\n"
            "- **Difficulty:** Medium\n"
            "- **Question:** What is 2 + 3?\n"
            "- **Visual_Hint:** 🍎🍎 + 🍎🍎🍎\n"
            "- **Answer:** 5\n"
            "- **Working:** 2 + 3 = 5\n"
            "- **Skills:** addition, counting\n"
            "- **Options:** (1) 4 (2) 5 (3) 6 (4) 7\n"
        )
        q = parse_question_block(block, 1, metadata)
        assert q.id == "P1-HP-001"
        assert q.text == "What is 2 + 3?"
        assert q.grade_level == GradeLevel.P1
        assert q.topic == "Addition"
        assert q.subtopic == "Within 10"
        assert q.difficulty == Difficulty.MEDIUM
        assert q.answer == "5"
        assert q.working_solution == "2 + 3 = 5"
        assert q.visual_hint == "🍎🍎 + 🍎🍎🍎"
        assert q.source == "Henry Park 2022"
        assert q.skills_tested == ["addition", "counting"]
        assert q.options == "(1) 4 (2) 5 (3) 6 (4) 7"

    def test_defaults(self, metadata):
        q = parse_question_block("- **Question:** 1 + 1?\n- **Answer:** 2\n", 4, metadata)
        assert q.topic == "Unknown"
        assert q.subtopic == "General"
        assert q.difficulty == Difficulty.EASY
        assert q.working_solution is None
        assert q.visual_hint is None
        assert q.skills_tested == []

    def test_missing_answer_skips(self, metadata):
        with pytest.raises(ParseSkip) as exc_info:
            parse_question_block("- **Question:** 1 + 1?\n", 3, metadata)
        assert exc_info.value.number == 3
        assert exc_info.value.reason == "missing question or answer"

    def test_missing_question_skips(self, metadata):
        with pytest.raises(ParseSkip):
            parse_question_block("- **Answer:** 2\n", 1, metadata)


class TestParseMarkdown:
    def test_sample_bank(self, sample_bank, metadata):
        questions = parse_markdown(sample_bank, metadata)
        assert [q.id for q in questions] == ["P1-HP-001", "P1-HP-002"]

        second = questions[1]
        assert second.difficulty == Difficulty.MEDIUM
        assert second.subtopic == "General"
        assert second.visual_hint is None

    def test_skipped_block_is_logged(self, sample_bank, metadata, caplog):
        with caplog.at_level(logging.WARNING, logger="qbank"):
            parse_markdown(sample_bank, metadata)
        assert "Skipping question 3" in caplog.text

    def test_duplicate_ids_are_reported(self, metadata, caplog):
        content = (
            "### Question 1\n- **Question:** A?\n- **Answer:** 1\n"
            "### Question 1\n- **Question:** B?\n- **Answer:** 2\n"
        )
        with caplog.at_level(logging.WARNING, logger="qbank"):
            questions = parse_markdown(content, metadata)
        assert len(questions) == 2
        assert duplicate_ids(questions) == ["P1-HP-001"]
        assert "last one wins" in caplog.text

    def test_empty_document(self, metadata):
        assert parse_markdown("", metadata) == []


class TestMarkdownQuestionLoader:
    def test_supports(self):
        loader = MarkdownQuestionLoader()
        assert loader.supports("bank.md")
        assert loader.supports("bank.MARKDOWN")
        assert not loader.supports("bank.txt")

    def test_load(self, bank_dir):
        loader = MarkdownQuestionLoader()
        questions = loader.load(os.path.join(bank_dir, "P1_HenryPark_2022.md"))
        assert len(questions) == 2
        assert questions[0].source == "Henry Park 2022"

    def test_load_missing_file(self):
        with pytest.raises(FileNotFoundError):
            MarkdownQuestionLoader().load("/nonexistent/P1_Nowhere_2020.md")

    def test_list_files_is_sorted_and_filtered(self, bank_dir):
        for name in ("P2_Alpha_2021.md", "notes.txt"):
            with open(os.path.join(bank_dir, name), "w", encoding="utf-8") as f:
                f.write("")
        files = MarkdownQuestionLoader().list_files(bank_dir)
        assert [os.path.basename(f) for f in files] == [
            "P1_HenryPark_2022.md",
            "P2_Alpha_2021.md",
        ]

    def test_load_directory_skips_unreadable_file(self, bank_dir, caplog):
        with open(os.path.join(bank_dir, "P2_Broken_2020.md"), "wb") as f:
            f.write(b"\xff\xfe\xfa not utf-8")

        with caplog.at_level(logging.ERROR, logger="qbank"):
            questions = MarkdownQuestionLoader().load_directory(bank_dir)

        assert len(questions) == 2
        assert "P2_Broken_2020.md" in caplog.text
