# src/qbank/commands/intent_cmd.py
"""Intent command - show how a request is classified. No I/O."""

from __future__ import annotations

from qbank.commands.base import IntentResult
from qbank.intent import DEFAULT_KEYWORDS, detect_intent


def intent(text: str) -> IntentResult:
    return IntentResult(
        success=True,
        intent=detect_intent(text, DEFAULT_KEYWORDS),
        keywords_version=DEFAULT_KEYWORDS.version,
    )
