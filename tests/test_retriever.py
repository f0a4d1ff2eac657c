"""Tests for the Retriever pipeline."""

import asyncio
import logging
import os

import pytest

from qbank.ingestor import Ingestor
from qbank.models import GradeLevel, MetadataFilter, QueryMatch, UserIntent
from qbank.retriever import Retriever, build_search_query, to_search_result

from fakes import FakeEmbedder, FakeVectorStore, question_metadata


class SlowEmbedder(FakeEmbedder):
    async def aembed(self, text: str) -> list[float]:
        await asyncio.sleep(1)
        return await super().aembed(text)


@pytest.fixture
def store():
    s = FakeVectorStore()
    s.matches = [QueryMatch(id="P2-HP-001", score=0.92, metadata=question_metadata())]
    return s


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def retriever(embedder, store):
    return Retriever(embedder=embedder, store=store, namespace="math-questions", top_k=5)


class TestHelpers:
    def test_build_search_query_with_topic(self):
        intent = UserIntent(
            grade_level=GradeLevel.P2, topic="Fractions", raw_query="give me fractions"
        )
        assert build_search_query(intent) == "P2 Fractions give me fractions"

    def test_build_search_query_without_grade(self):
        intent = UserIntent(topic="Time", raw_query="clock question")
        assert build_search_query(intent) == "Time clock question"

    def test_build_search_query_without_topic(self):
        intent = UserIntent(grade_level=GradeLevel.P2, raw_query="give me a question")
        assert build_search_query(intent) == "give me a question"

    def test_to_search_result_clamps_score(self):
        assert to_search_result(QueryMatch(id="a", score=1.3)).score == 1.0
        assert to_search_result(QueryMatch(id="a", score=-0.2)).score == 0.0


class TestFindExamples:
    @pytest.mark.asyncio
    async def test_end_to_end(self, retriever, store, embedder):
        results = await retriever.find_examples("Give me a P2 addition question")

        assert len(results) == 1
        assert results[0].id == "P2-HP-001"
        assert results[0].score == pytest.approx(0.92)
        assert results[0].question.text == "2+2=?"
        assert results[0].question.answer == "4"

        assert embedder.texts == ["P2 Addition Give me a P2 addition question"]
        top_k, namespace, filter = store.query_calls[0]
        assert top_k == 5
        assert namespace == "math-questions"
        assert filter.conditions() == {"gradeLevel": "P2", "topic": "Addition"}

    @pytest.mark.asyncio
    async def test_small_talk_makes_no_calls(self, retriever, store, embedder):
        assert await retriever.find_examples("hello there") == []
        assert embedder.calls == 0
        assert store.query_calls == []

    @pytest.mark.asyncio
    async def test_request_without_topic_is_searched(self, retriever, store):
        await retriever.find_examples("give me a P3 question")
        assert store.query_calls[0][2].conditions() == {"gradeLevel": "P3"}

    @pytest.mark.asyncio
    async def test_top_k_override(self, retriever, store):
        await retriever.find_examples("give me a question", top_k=2)
        assert store.query_calls[0][0] == 2

    @pytest.mark.asyncio
    async def test_disabled_makes_no_calls(self, embedder, store):
        retriever = Retriever(embedder=embedder, store=store, enabled=False)
        assert await retriever.find_examples("Give me a P2 addition question") == []
        assert embedder.calls == 0
        assert store.query_calls == []


class TestDegradation:
    @pytest.mark.asyncio
    async def test_embedding_failure(self, store, caplog):
        retriever = Retriever(embedder=FakeEmbedder(fail=True), store=store)
        with caplog.at_level(logging.WARNING, logger="qbank"):
            ctx = await retriever.get_retrieval_context("Give me a P2 addition question")
        assert ctx.count == 0
        assert ctx.formatted_text == ""
        assert "Query embedding failed" in caplog.text
        assert store.query_calls == []

    @pytest.mark.asyncio
    async def test_store_failure(self, embedder, store, caplog):
        store.fail_on.add("query")
        retriever = Retriever(embedder=embedder, store=store)
        with caplog.at_level(logging.WARNING, logger="qbank"):
            assert await retriever.search("fractions") == []
        assert "Vector store query failed" in caplog.text

    @pytest.mark.asyncio
    async def test_embedding_timeout(self, store, caplog):
        retriever = Retriever(embedder=SlowEmbedder(), store=store, timeout=0.01)
        with caplog.at_level(logging.WARNING, logger="qbank"):
            assert await retriever.search("fractions") == []
        assert "timed out" in caplog.text

    @pytest.mark.asyncio
    async def test_dimension_mismatch_degrades(self, store):
        retriever = Retriever(embedder=FakeEmbedder(dimension=3), store=store)
        assert await retriever.search("fractions") == []


class TestRetrievalContext:
    @pytest.mark.asyncio
    async def test_context(self, retriever):
        ctx = await retriever.get_retrieval_context("Give me a P2 addition question")
        assert ctx.count == 1
        assert "**Question:** 2+2=?" in ctx.formatted_text
        assert "**Grade:** P2 | **Topic:** Addition - Within 10" in ctx.formatted_text

    def test_retrieve_sync(self, retriever):
        ctx = retriever.retrieve("Give me a P2 addition question")
        assert ctx.count == 1

    def test_retrieve_sync_small_talk(self, retriever):
        assert retriever.retrieve("thanks!").count == 0

    @pytest.mark.asyncio
    async def test_ingested_record_comes_back(self, temp_dir):
        path = os.path.join(temp_dir, "P1_HenryPark_2022.md")
        with open(path, "w", encoding="utf-8") as f:
            f.write("### Question 1\n- **Topic:** Addition\n- **Question:** 2+2=?\n- **Answer:** 4\n")

        store = FakeVectorStore()
        embedder = FakeEmbedder()
        Ingestor(embedder, store, "math-questions").ingest(path)
        record = store.data["math-questions"]["P1-HP-001"]
        store.matches = [QueryMatch(id=record.id, score=0.92, metadata=record.metadata)]

        retriever = Retriever(embedder=embedder, store=store, namespace="math-questions")
        ctx = await retriever.get_retrieval_context("I need a P1 addition practice question")

        assert ctx.count == 1
        assert ctx.examples[0].answer == "4"
        assert "2+2=?" in ctx.formatted_text
        assert store.query_calls[0][2].conditions() == {"gradeLevel": "P1", "topic": "Addition"}


class TestFilteredSearch:
    @pytest.mark.asyncio
    async def test_search_by_filters_default_text(self, retriever, embedder, store):
        ctx = await retriever.search_by_filters(
            MetadataFilter(grade_level=GradeLevel.P2, topic="Fractions")
        )
        assert ctx.count == 1
        assert embedder.texts == ["P2 Fractions math questions"]
        assert store.query_calls[0][2].topic == "Fractions"

    @pytest.mark.asyncio
    async def test_search_by_filters_custom_text(self, retriever, embedder):
        await retriever.search_by_filters(MetadataFilter(topic="Time"), query_text="clocks")
        assert embedder.texts == ["clocks"]

    @pytest.mark.asyncio
    async def test_quiz_context(self, retriever, embedder, store):
        questions = await retriever.get_quiz_context("Fractions", difficulty="advanced", count=2)

        assert [q.id for q in questions] == ["P2-HP-001"]
        assert embedder.texts == ["Hard Fractions math questions"]
        top_k, _, filter = store.query_calls[0]
        assert top_k == 2
        assert filter.conditions() == {"topic": "Fractions"}

    @pytest.mark.asyncio
    async def test_quiz_context_unknown_difficulty(self, retriever, embedder):
        await retriever.get_quiz_context("Time", difficulty="whatever")
        assert embedder.texts == ["Medium Time math questions"]
