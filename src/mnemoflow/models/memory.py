"""
Memory domain models for mnemoflow.

Defines memory kinds, the stored record, and the inputs accepted by the core service.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

# Well-known metadata keys written by augmentation stages
META_IMPORTANCE = "importance"
META_CATEGORIES = "categories"
META_TOPIC = "topic"
META_LAST_ACCESSED = "last_accessed"
META_CONSOLIDATED_FROM = "consolidated_from"
META_CONSOLIDATED_COUNT = "consolidated_count"
META_CONTRADICTS = "contradicts"
META_RESOLUTION = "resolution"


class MemoryKind(str, Enum):
    """What a memory record describes."""

    FACT = "fact"  # Something true about the world or the user
    PREFERENCE = "preference"  # Likes, dislikes, standing choices
    EVENT = "event"  # Something that happened at a point in time
    SUMMARY = "summary"  # Condensed view of other records
    TODO = "todo"  # Pending action


class MemoryRecord(BaseModel):
    """A stored memory.

    ``relevance`` is a transient, per-query score attached to recall results.
    Storage backends never persist it.
    """

    id: str = Field(..., description="Unique record identifier")
    kind: MemoryKind = Field(..., description="Memory kind")
    content: str = Field(..., description="Memory content")
    embedding: Optional[list[float]] = Field(None, description="Vector embedding of content")
    metadata: Optional[dict[str, Any]] = Field(None, description="Open key-value map, mutated by pipeline stages")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last explicit content update")
    source: Optional[str] = Field(None, description="Free-form origin tag")
    relevance: Optional[float] = Field(None, description="Transient per-query score")

    @property
    def importance(self) -> Optional[float]:
        if not self.metadata:
            return None
        return self.metadata.get(META_IMPORTANCE)

    @property
    def categories(self) -> list[str]:
        if not self.metadata:
            return []
        return list(self.metadata.get(META_CATEGORIES) or [])

    @property
    def topic(self) -> Optional[str]:
        if not self.metadata:
            return None
        return self.metadata.get(META_TOPIC)

    def set_meta(self, key: str, value: Any) -> None:
        """Set a metadata key, creating the map when absent."""
        if self.metadata is None:
            self.metadata = {}
        self.metadata[key] = value

    def for_storage(self) -> "MemoryRecord":
        """Deep copy with transient fields cleared."""
        return self.model_copy(update={"relevance": None}, deep=True)


class RememberInput(BaseModel):
    """Input for storing a new memory."""

    content: str = Field(..., description="Memory content to store")
    kind: MemoryKind = Field(MemoryKind.FACT, description="Memory kind")
    metadata: Optional[dict[str, Any]] = Field(None, description="Initial metadata")
    source: Optional[str] = Field(None, description="Origin tag")
    embedding: Optional[list[float]] = Field(None, description="Precomputed embedding (skips auto-embed)")

    @field_validator("content")
    @classmethod
    def content_not_empty(cls, v: str) -> str:
        """Ensure content is not empty."""
        if not v or not v.strip():
            raise ValueError("Content cannot be empty")
        return v


class SummarizeScope(BaseModel):
    """Restricts which records summarize() considers."""

    kind: Optional[MemoryKind] = Field(None, description="Only records of this kind")
    since: Optional[datetime] = Field(None, description="Only records created at or after this instant")
    limit: Optional[int] = Field(None, ge=1, description="Only the first N matching records")
