# src/qbank/formatting.py
"""Render retrieved questions as a prompt context block."""

from qbank.models import Question, RetrievalContext, SearchResult

CONTEXT_HEADER = """## Relevant Example Questions

Use these MOE-style questions as reference for format, difficulty, and style:"""

STYLE_GUIDANCE = """---
When generating new questions:
- Match the grade level and difficulty of the request
- Use Singapore context (names like Ahmad, Siti, Mei Ling, Ravi; places; SGD currency)
- For simple problems, consider including visual hints with emojis (e.g., 🍎 for apples, 🚗 for cars)
- Follow the MOE format shown in these examples"""


def format_example(question: Question, position: int) -> str:
    """One example block. Optional lines are left out when empty."""
    lines = [
        f"### Example {position}",
        f"**Grade:** {question.grade_level.value} | "
        f"**Topic:** {question.topic} - {question.subtopic} | "
        f"**Difficulty:** {question.difficulty.value}",
        "",
        f"**Question:** {question.text}",
    ]
    if question.visual_hint:
        lines.append(f"**Visual Hint:** {question.visual_hint}")
    lines.append(f"**Answer:** {question.answer}")
    if question.working_solution:
        lines.append(f"**Working:** {question.working_solution}")
    return "\n".join(lines)


def format_context(results: list[SearchResult]) -> RetrievalContext:
    """Build a RetrievalContext from results, keeping their order."""
    if not results:
        return RetrievalContext.empty()

    examples = [r.question for r in results]
    blocks = [format_example(q, i) for i, q in enumerate(examples, start=1)]
    formatted = "\n\n".join([CONTEXT_HEADER, *blocks, STYLE_GUIDANCE]) + "\n"

    return RetrievalContext(examples=examples, formatted_text=formatted, count=len(examples))
