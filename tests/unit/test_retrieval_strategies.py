"""Tests for ranking strategies."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from mnemoflow.services.retrieval.keyword import KeywordRetrievalStrategy
from mnemoflow.services.retrieval.embedding import EmbeddingRetrievalStrategy, HybridRetrievalStrategy
from mnemoflow.services.retrieval.none import NoneRetrievalStrategy
from mnemoflow.services.retrieval.remote_index import RemoteIndexRetrievalStrategy
from mnemoflow.services.storage.in_memory import MemoryStorageBackend


@pytest.fixture
def abc_records(make_record):
    return [
        make_record("JavaScript is great", record_id="A"),
        make_record("Python rocks", record_id="B"),
        make_record("Coffee beats tea", record_id="C"),
    ]


@pytest.fixture
def fixed_embedding_service():
    """Embeds every query to the unit x-axis."""
    service = MagicMock()
    service.embed = AsyncMock(return_value=[1.0, 0.0])
    return service


class TestKeywordStrategy:
    @pytest.mark.asyncio
    async def test_single_match(self, v, abc_records):
        strategy = KeywordRetrievalStrategy(v=v)
        assert [r.id for r in await strategy.retrieve("JavaScript", abc_records)] == ["A"]

    @pytest.mark.asyncio
    async def test_no_match(self, v, abc_records):
        strategy = KeywordRetrievalStrategy(v=v)
        assert await strategy.retrieve("quantum", abc_records) == []

    @pytest.mark.asyncio
    async def test_ranked_by_hits_with_stable_ties(self, v, make_record):
        records = [
            make_record("tea time", record_id="one"),
            make_record("green tea and coffee", record_id="two"),
            make_record("tea again", record_id="three"),
        ]
        strategy = KeywordRetrievalStrategy(v=v)
        result = await strategy.retrieve("coffee tea", records)
        assert [r.id for r in result] == ["two", "one", "three"]

    @pytest.mark.asyncio
    async def test_short_query_tokens_ignored(self, v, abc_records):
        strategy = KeywordRetrievalStrategy(v=v)
        assert await strategy.retrieve("is a", abc_records) == []

    @pytest.mark.asyncio
    async def test_limit(self, v, make_record):
        records = [make_record(f"note number {i}") for i in range(15)]
        strategy = KeywordRetrievalStrategy(v=v)
        assert len(await strategy.retrieve("note", records)) == 10
        assert len(await strategy.retrieve("note", records, limit=3)) == 3

    @pytest.mark.asyncio
    async def test_matches_metadata(self, v, make_record):
        record = make_record("dinner", metadata={"topic": "restaurants"})
        strategy = KeywordRetrievalStrategy(v=v)
        assert await strategy.retrieve("restaurants", [record]) == [record]

    @pytest.mark.asyncio
    async def test_partial_word_matches(self, v, abc_records):
        strategy = KeywordRetrievalStrategy(v=v)
        assert [r.id for r in await strategy.retrieve("script", abc_records)] == ["A"]
        assert [r.id for r in await strategy.retrieve("rock", abc_records)] == ["B"]

    @pytest.mark.asyncio
    async def test_metadata_substring_matches(self, v, make_record):
        record = make_record("dinner", metadata={"topic": "restaurants"})
        strategy = KeywordRetrievalStrategy(v=v)
        assert await strategy.retrieve("restaurant", [record]) == [record]


class TestEmbeddingStrategy:
    @pytest.mark.asyncio
    async def test_excludes_unembedded(self, v, make_record, fixed_embedding_service):
        embedded_a = make_record("a", embedding=[1.0, 0.0])
        embedded_b = make_record("b", embedding=[0.0, 1.0])
        bare = make_record("c")

        strategy = EmbeddingRetrievalStrategy(fixed_embedding_service, v=v)
        result = await strategy.retrieve("anything", [bare, embedded_b, embedded_a])

        assert [r.id for r in result] == [embedded_a.id, embedded_b.id]
        assert bare not in result

    @pytest.mark.asyncio
    async def test_no_embedded_candidates(self, v, make_record, fixed_embedding_service):
        strategy = EmbeddingRetrievalStrategy(fixed_embedding_service, v=v)
        assert await strategy.retrieve("q", [make_record("bare")]) == []
        fixed_embedding_service.embed.assert_not_awaited()


class TestHybridStrategy:
    @pytest.mark.asyncio
    async def test_keyword_hits_boost_score(self, v, make_record, fixed_embedding_service):
        similar = make_record("unrelated words", embedding=[1.0, 0.0])
        keyword = make_record("espresso machine", embedding=[0.6, 0.8])
        bare = make_record("espresso without vector")

        strategy = HybridRetrievalStrategy(fixed_embedding_service, v=v)
        result = await strategy.retrieve("espresso", [similar, keyword, bare])

        # 0.6 + 0.5 beats 1.0 + 0
        assert [r.id for r in result] == [keyword.id, similar.id]


class TestNoneStrategy:
    @pytest.mark.asyncio
    async def test_truncates_without_reordering(self, v, abc_records):
        strategy = NoneRetrievalStrategy(v=v)
        assert [r.id for r in await strategy.retrieve("x", abc_records, limit=2)] == ["A", "B"]


class TestRemoteIndexStrategy:
    @pytest.mark.asyncio
    async def test_ignores_candidates_and_queries_storage(self, v, make_record, fixed_embedding_service):
        storage = MemoryStorageBackend(v=v)
        near = make_record("near", embedding=[1.0, 0.0])
        far = make_record("far", embedding=[0.0, 1.0])
        await storage.save(far)
        await storage.save(near)

        strategy = RemoteIndexRetrievalStrategy(storage, fixed_embedding_service, v=v)
        result = await strategy.retrieve("query", [make_record("not indexed")], limit=1)

        assert [r.id for r in result] == [near.id]

    def test_requires_similarity_capable_storage(self, v, fixed_embedding_service):
        storage = MagicMock()
        storage.supports_similarity_search = False
        with pytest.raises(ValueError):
            RemoteIndexRetrievalStrategy(storage, fixed_embedding_service, v=v)
