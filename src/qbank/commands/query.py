# src/qbank/commands/query.py
"""Query command - retrieve example questions for a request."""

from __future__ import annotations

import asyncio
from pathlib import Path

from qbank.commands.base import ExampleInfo, QueryResult, format_config_error, load_qbank
from qbank.config import ConfigError
from qbank.formatting import format_context
from qbank.intent import detect_intent


def query(
    text: str,
    config_path: str | Path | None = None,
    namespace: str | None = None,
    k: int | None = None,
) -> QueryResult:
    """Run the retrieval pipeline for a request.

    Args:
        text: Free-text request, as a student would type it
        config_path: Override config file path
        namespace: Override the configured namespace
        k: Number of examples to return (None for default)

    Returns:
        QueryResult with the detected intent, examples and formatted context
    """
    loaded = load_qbank(config_path)
    if isinstance(loaded, ConfigError):
        return QueryResult(success=False, query=text, error=format_config_error(loaded))

    retriever = loaded.qbank.retriever(namespace=namespace, top_k=k)
    try:
        results = asyncio.run(retriever.find_examples(text))
    finally:
        loaded.qbank.close()

    examples = [
        ExampleInfo(
            id=r.id,
            score=r.score,
            grade_level=r.question.grade_level.value,
            topic=r.question.topic,
            difficulty=r.question.difficulty.value,
            text=r.question.text,
            answer=r.question.answer,
        )
        for r in results
    ]
    return QueryResult(
        success=True,
        query=text,
        intent=detect_intent(text, retriever.keywords),
        examples=examples,
        context=format_context(results).formatted_text,
    )
