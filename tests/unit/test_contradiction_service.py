"""Tests for contradiction detection: similarity gate, verdict parsing, resolution parsing."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from mnemoflow.services.contradiction import (
    DefaultContradictionService, ContradictionResolution, parse_contradiction_verdict, parse_resolution,
)


@pytest.fixture
def axis_embedding_service():
    service = MagicMock()
    service.embed = AsyncMock(return_value=[1.0, 0.0])
    service.embed_batch = AsyncMock(side_effect=lambda texts: [[1.0, 0.0] for _ in texts])
    return service


@pytest.fixture
def detector(v, axis_embedding_service, llm_service, clock):
    return DefaultContradictionService(
        embedding_service=axis_embedding_service,
        llm_service=llm_service,
        similarity_threshold=0.7,
        time_provider=clock,
        v=v,
    )


class TestVerdictParsing:
    @pytest.mark.parametrize("text, expected", [
        ("YES, they conflict", True),
        ("  yes", True),
        ("No.", False),
        ("It depends", False),
        ("", False),
        ("Maybe yes", False),
    ])
    def test_verdict(self, text, expected):
        assert parse_contradiction_verdict(text) is expected

    @pytest.mark.parametrize("text, expected", [
        ("KEEP_NEW", ContradictionResolution.KEEP_NEW),
        ("keep_old - still valid", ContradictionResolution.KEEP_OLD),
        ("MERGE", ContradictionResolution.MERGE),
        ("unclear", ContradictionResolution.MERGE),
    ])
    def test_resolution(self, text, expected):
        assert parse_resolution(text) is expected


class TestDetect:
    @pytest.mark.asyncio
    async def test_gate_limits_judgments(self, detector, llm_service, make_record):
        new = make_record("I am vegetarian", embedding=[1.0, 0.0])
        similar = make_record("I love steak", embedding=[0.9, 0.1])
        unrelated = make_record("The meeting is at 3", embedding=[0.0, 1.0])
        llm_service.generate.return_value = "YES - diet conflict"

        found = await detector.detect(new, [new, similar, unrelated])

        assert [c.existing.id for c in found] == [similar.id]
        assert found[0].new_id == new.id
        assert found[0].similarity > 0.7
        assert llm_service.generate.await_count == 1

    @pytest.mark.asyncio
    async def test_ambiguous_verdict_is_no_contradiction(self, detector, llm_service, make_record):
        new = make_record("a", embedding=[1.0, 0.0])
        llm_service.generate.return_value = "Possibly, hard to say"
        assert await detector.detect(new, [make_record("b", embedding=[1.0, 0.0])]) == []

    @pytest.mark.asyncio
    async def test_missing_embeddings_computed_on_demand(
            self, detector, axis_embedding_service, llm_service, make_record
    ):
        new = make_record("new without vector")
        old = make_record("old without vector")
        llm_service.generate.return_value = "yes"

        found = await detector.detect(new, [old])

        assert [c.existing.id for c in found] == [old.id]
        axis_embedding_service.embed.assert_awaited_once_with("new without vector")
        axis_embedding_service.embed_batch.assert_awaited_once_with(["old without vector"])
        assert old.embedding is None

    @pytest.mark.asyncio
    async def test_embedding_failure_skips_detection(self, detector, axis_embedding_service, llm_service, make_record):
        axis_embedding_service.embed.side_effect = RuntimeError("down")
        assert await detector.detect(make_record("x"), [make_record("y", embedding=[1.0, 0.0])]) == []
        llm_service.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_candidate_embedding_failure_skips_those_candidates(
            self, detector, axis_embedding_service, llm_service, make_record
    ):
        axis_embedding_service.embed_batch.side_effect = RuntimeError("down")
        llm_service.generate.return_value = "yes"
        embedded = make_record("has vector", embedding=[1.0, 0.0])
        bare = make_record("no vector")

        found = await detector.detect(make_record("new", embedding=[1.0, 0.0]), [bare, embedded])

        assert [c.existing.id for c in found] == [embedded.id]
        assert llm_service.generate.await_count == 1

    @pytest.mark.asyncio
    async def test_generation_failure_propagates(self, detector, llm_service, make_record):
        llm_service.generate.side_effect = ConnectionError("provider unreachable")
        with pytest.raises(ConnectionError):
            await detector.detect(make_record("x", embedding=[1.0, 0.0]), [make_record("y", embedding=[1.0, 0.0])])


class TestResolve:
    @pytest.mark.asyncio
    async def test_prompt_carries_both_records(self, detector, llm_service, make_record):
        old = make_record("Lives in Paris")
        new = make_record("Lives in Berlin")
        llm_service.generate.return_value = "KEEP_NEW"

        assert await detector.resolve(new, old) == ContradictionResolution.KEEP_NEW
        prompt = llm_service.generate.await_args.args[0]
        assert "OLD: Lives in Paris" in prompt
        assert "NEW: Lives in Berlin" in prompt
