"""Tests for domain models: validation, metadata accessors, storage copies."""
import pytest
from datetime import datetime, timezone
from pydantic import ValidationError

from mnemoflow.models.memory import (
    MemoryRecord, MemoryKind, RememberInput, SummarizeScope, META_IMPORTANCE, META_CATEGORIES, META_TOPIC,
)
from mnemoflow.models.relation import Relation, RelationKind

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


class TestRememberInput:
    def test_defaults_to_fact(self):
        inp = RememberInput(content="The sky is blue")
        assert inp.kind == MemoryKind.FACT
        assert inp.metadata is None
        assert inp.embedding is None

    @pytest.mark.parametrize("content", ["", "   ", "\n\t"])
    def test_rejects_blank_content(self, content):
        with pytest.raises(ValidationError):
            RememberInput(content=content)

    def test_accepts_kind_by_value(self):
        assert RememberInput(content="Buy milk", kind="todo").kind == MemoryKind.TODO


class TestMemoryRecord:
    def test_accessors_without_metadata(self, make_record):
        record = make_record("plain")
        assert record.importance is None
        assert record.categories == []
        assert record.topic is None

    def test_set_meta_creates_map(self, make_record):
        record = make_record("plain")
        record.set_meta(META_IMPORTANCE, 0.7)
        record.set_meta(META_CATEGORIES, ["personal/food"])
        record.set_meta(META_TOPIC, "food")

        assert record.metadata == {META_IMPORTANCE: 0.7, META_CATEGORIES: ["personal/food"], META_TOPIC: "food"}
        assert record.importance == 0.7
        assert record.categories == ["personal/food"]
        assert record.topic == "food"

    def test_for_storage_clears_relevance_and_copies(self, make_record):
        record = make_record("plain", metadata={"tags": ["a"]})
        record.relevance = 0.42

        stored = record.for_storage()
        assert stored.relevance is None
        assert record.relevance == 0.42

        stored.metadata["tags"].append("b")
        assert record.metadata == {"tags": ["a"]}

    def test_updated_at_is_optional(self):
        record = MemoryRecord(id="mem_1", kind=MemoryKind.EVENT, content="x", created_at=NOW)
        assert record.updated_at is None


class TestSummarizeScope:
    def test_limit_must_be_positive(self):
        with pytest.raises(ValidationError):
            SummarizeScope(limit=0)

    def test_empty_scope(self):
        scope = SummarizeScope()
        assert scope.kind is None and scope.since is None and scope.limit is None


class TestRelation:
    def test_default_kind(self):
        relation = Relation(from_id="a", to_id="b", strength=0.9, created_at=NOW)
        assert relation.kind == RelationKind.RELATES_TO

    @pytest.mark.parametrize("strength", [-0.1, 1.5])
    def test_strength_bounds(self, strength):
        with pytest.raises(ValidationError):
            Relation(from_id="a", to_id="b", strength=strength, created_at=NOW)
