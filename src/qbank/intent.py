# src/qbank/intent.py
"""Keyword-based intent detection for tutoring requests.

``detect_intent`` is a pure function over a request string and an
``IntentKeywords`` table. Tables are plain data so they can be versioned,
swapped in tests, or localized without touching the matching logic.
"""

import re
from dataclasses import dataclass
from functools import lru_cache

from qbank.models import GradeLevel, UserIntent


@dataclass(frozen=True)
class IntentKeywords:
    """Keyword tables used by detect_intent.

    Order matters: the first matching grade synonym wins, and topics are
    tried in declaration order.
    """

    version: str
    grades: tuple[tuple[str, GradeLevel], ...]
    topics: tuple[tuple[str, tuple[str, ...]], ...]
    question_requests: tuple[str, ...]
    visual_hints: tuple[str, ...]

    @property
    def topic_names(self) -> list[str]:
        return [name for name, _ in self.topics]


_NUMBER_WORDS = ("one", "two", "three", "four", "five", "six")


def _grade_synonyms() -> tuple[tuple[str, GradeLevel], ...]:
    synonyms = []
    for n, word in enumerate(_NUMBER_WORDS, start=1):
        grade = GradeLevel(f"P{n}")
        synonyms += [
            (f"p{n}", grade),
            (f"primary {n}", grade),
            (f"primary {word}", grade),
            (f"grade {n}", grade),
            (f"grade {word}", grade),
        ]
    return tuple(synonyms)


DEFAULT_KEYWORDS = IntentKeywords(
    version="2024.1",
    grades=_grade_synonyms(),
    topics=(
        ("Addition", ("add", "addition", "plus", "sum", "total", "altogether", "combine")),
        (
            "Subtraction",
            ("subtract", "subtraction", "minus", "difference", "take away", "left", "remaining"),
        ),
        (
            "Multiplication",
            ("multiply", "multiplication", "times", "multiplied", "groups of", "product"),
        ),
        ("Division", ("divide", "division", "shared", "split", "quotient", "equal groups")),
        ("Fractions", ("fraction", "half", "quarter", "third", "numerator", "denominator")),
        (
            "Money",
            ("money", "dollars", "cents", "coins", "notes", "sgd", "cost", "price", "spend"),
        ),
        ("Time", ("time", "clock", "hour", "minute", "am", "pm", "o'clock", "duration")),
        ("Length", ("length", "long", "short", "cm", "m", "meter", "centimeter", "measure")),
        (
            "Mass",
            ("mass", "weight", "kg", "gram", "kilogram", "heavy", "light", "weigh", "scales"),
        ),
        (
            "Shapes",
            ("shape", "triangle", "square", "circle", "rectangle", "sides", "corners", "vertices"),
        ),
        ("Picture Graphs", ("picture graph", "bar graph", "chart", "graph", "data")),
        ("Word Problems", ("word problem", "story problem")),
        ("Number Bonds", ("number bond", "part whole", "bond")),
        ("Number Patterns", ("pattern", "sequence", "skip count")),
    ),
    question_requests=(
        "give me",
        "i need",
        "can you give",
        "practice",
        "question",
        "problem",
        "example",
        "test me",
        "quiz me",
        "generate",
        "create",
        "more questions",
        "another question",
        "help me practice",
        "some questions",
    ),
    visual_hints=("visual", "picture", "image", "emoji", "drawing", "show me", "illustration"),
)


@lru_cache(maxsize=512)
def _word_pattern(keyword: str) -> re.Pattern[str]:
    # Whole words only, allowing a plural suffix ("fraction" matches "fractions")
    return re.compile(rf"(?<!\w){re.escape(keyword)}(?:s|es)?(?!\w)")


def _contains_word(text: str, keyword: str) -> bool:
    return _word_pattern(keyword.lower()).search(text) is not None


def detect_grade(text: str, keywords: IntentKeywords = DEFAULT_KEYWORDS) -> GradeLevel | None:
    normalized = text.lower()
    for synonym, grade in keywords.grades:
        if _contains_word(normalized, synonym):
            return grade
    return None


def detect_topic(text: str, keywords: IntentKeywords = DEFAULT_KEYWORDS) -> str | None:
    normalized = text.lower()
    for topic, topic_keywords in keywords.topics:
        if any(_contains_word(normalized, kw) for kw in topic_keywords):
            return topic
    return None


def detect_intent(text: str, keywords: IntentKeywords = DEFAULT_KEYWORDS) -> UserIntent:
    """Classify a free-text request.

    Never raises; an empty string yields an intent with nothing detected.

    Example:
        >>> detect_intent("Give me a P2 fractions question").topic
        'Fractions'
    """
    text = text or ""
    normalized = text.lower()
    return UserIntent(
        wants_questions=any(p in normalized for p in keywords.question_requests),
        grade_level=detect_grade(text, keywords),
        topic=detect_topic(text, keywords),
        wants_visual_hints=any(p in normalized for p in keywords.visual_hints),
        raw_query=text,
    )
