"""
Core domain models for mnemoflow.

Exports the Pydantic models for memory records and relations, and the dataclasses used by the generation port.
"""
from .memory import (
    MemoryKind,
    MemoryRecord,
    RememberInput,
    SummarizeScope,
    META_IMPORTANCE,
    META_CATEGORIES,
    META_TOPIC,
    META_LAST_ACCESSED,
    META_CONSOLIDATED_FROM,
    META_CONSOLIDATED_COUNT,
    META_CONTRADICTS,
    META_RESOLUTION,
)
from .relation import Relation, RelationKind
from .llm import LLMMessage, LLMRequest, LLMResponse, LLMRole

__all__ = [
    "MemoryKind",
    "MemoryRecord",
    "RememberInput",
    "SummarizeScope",
    "META_IMPORTANCE",
    "META_CATEGORIES",
    "META_TOPIC",
    "META_LAST_ACCESSED",
    "META_CONSOLIDATED_FROM",
    "META_CONSOLIDATED_COUNT",
    "META_CONTRADICTS",
    "META_RESOLUTION",
    "Relation",
    "RelationKind",
    "LLMMessage",
    "LLMRequest",
    "LLMResponse",
    "LLMRole",
]
