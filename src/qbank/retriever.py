# src/qbank/retriever.py
"""Retrieval pipeline for qbank.

Turns a tutoring request into a bounded block of example questions. Every
external call is isolated: a failing or slow embedding provider or vector
store yields an empty context, never an exception.
"""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from qbank.embedder import Embedder
from qbank.formatting import format_context
from qbank.intent import DEFAULT_KEYWORDS, IntentKeywords, detect_intent
from qbank.log import get_logger
from qbank.models import (
    Difficulty,
    MetadataFilter,
    Question,
    QueryMatch,
    RetrievalContext,
    SearchResult,
    UserIntent,
    question_from_metadata,
)
from qbank.stores import VectorStore

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_NAMESPACE = "math-questions"

QUIZ_DIFFICULTY_MAP = {
    "beginner": Difficulty.EASY,
    "easy": Difficulty.EASY,
    "intermediate": Difficulty.MEDIUM,
    "medium": Difficulty.MEDIUM,
    "advanced": Difficulty.HARD,
    "hard": Difficulty.HARD,
}


def build_search_query(intent: UserIntent) -> str:
    """Prefix the request with detected grade and topic.

    Requests with no detected topic are searched as written.
    """
    if not intent.topic:
        return intent.raw_query
    parts = [
        intent.grade_level.value if intent.grade_level else "",
        intent.topic,
        intent.raw_query,
    ]
    return " ".join(p for p in parts if p).strip()


def build_filter(intent: UserIntent) -> MetadataFilter:
    return MetadataFilter(grade_level=intent.grade_level, topic=intent.topic)


def to_search_result(match: QueryMatch) -> SearchResult:
    return SearchResult(
        id=match.id,
        score=min(1.0, max(0.0, match.score)),
        question=question_from_metadata(match.id, match.metadata),
    )


class Retriever:
    """Orchestrates intent detection, search and context formatting."""

    def __init__(
        self,
        embedder: Embedder,
        store: VectorStore,
        namespace: str = DEFAULT_NAMESPACE,
        top_k: int = 5,
        timeout: float | None = None,
        enabled: bool = True,
        keywords: IntentKeywords = DEFAULT_KEYWORDS,
    ) -> None:
        """Initialize the retriever.

        Args:
            embedder: Embedder for query embedding
            store: Vector store holding the indexed questions
            namespace: Store namespace to search
            top_k: Default number of results to return
            timeout: Seconds allowed for each external call (None = no limit)
            enabled: False when embedding or store credentials are missing;
                     every call then returns an empty result without I/O
            keywords: Keyword tables for intent detection
        """
        self.embedder = embedder
        self.store = store
        self.namespace = namespace
        self.top_k = top_k
        self.timeout = timeout
        self.enabled = enabled
        self.keywords = keywords

    async def _bounded(self, awaitable: Awaitable[T]) -> T:
        if self.timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout=self.timeout)

    async def search(
        self,
        query: str,
        filter: MetadataFilter | None = None,
        top_k: int | None = None,
    ) -> list[SearchResult]:
        """Embed a query and search the store.

        Returns an empty list if retrieval is disabled or any call fails.
        """
        if not self.enabled:
            return []
        k = self.top_k if top_k is None else top_k

        # Step 1: Embed query
        try:
            embedding = await self._bounded(self.embedder.aembed(query))
        except TimeoutError:
            logger.warning("Query embedding timed out after %ss", self.timeout)
            return []
        except Exception as e:
            logger.warning("Query embedding failed: %s", e)
            return []

        # Step 2: Query the store off the event loop
        try:
            matches = await self._bounded(
                asyncio.to_thread(self.store.query, embedding, k, self.namespace, filter)
            )
        except TimeoutError:
            logger.warning("Vector store query timed out after %ss", self.timeout)
            return []
        except Exception as e:
            logger.warning("Vector store query failed: %s", e)
            return []

        return [to_search_result(m) for m in matches]

    async def find_examples(self, query: str, top_k: int | None = None) -> list[SearchResult]:
        """Search results for a free-text request, best first.

        Requests that neither ask for questions nor mention a topic are not
        searched.
        """
        intent = detect_intent(query, self.keywords)
        if not self.enabled or (not intent.wants_questions and intent.topic is None):
            return []
        return await self.search(build_search_query(intent), build_filter(intent), top_k)

    async def get_retrieval_context(self, query: str) -> RetrievalContext:
        """Example questions relevant to a request, formatted for a prompt."""
        context = format_context(await self.find_examples(query))
        logger.info("Retrieved %d examples for %r", context.count, query)
        return context

    def retrieve(self, query: str) -> RetrievalContext:
        """Synchronous wrapper around get_retrieval_context."""
        return asyncio.run(self.get_retrieval_context(query))

    async def search_by_filters(
        self,
        filter: MetadataFilter,
        query_text: str | None = None,
        top_k: int | None = None,
    ) -> RetrievalContext:
        """Search with explicit constraints instead of a detected intent."""
        if query_text is None:
            parts = [
                filter.grade_level.value if filter.grade_level else "",
                filter.topic or "",
                "math questions",
            ]
            query_text = " ".join(p for p in parts if p)
        results = await self.search(query_text, filter, top_k)
        return format_context(results)

    async def get_quiz_context(
        self,
        topic: str,
        difficulty: str = "intermediate",
        count: int = 3,
    ) -> list[Question]:
        """Style-reference questions for generating a quiz on a topic.

        Difficulty words (beginner/easy, intermediate/medium, advanced/hard)
        steer the query text; unknown words count as Medium.
        """
        mapped = QUIZ_DIFFICULTY_MAP.get(difficulty.strip().lower(), Difficulty.MEDIUM)
        context = await self.search_by_filters(
            MetadataFilter(topic=topic),
            query_text=f"{mapped.value} {topic} math questions",
            top_k=count,
        )
        return context.examples
