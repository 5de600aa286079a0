"""
Relation models for the memory graph.

Relations are directed edges between record ids; traversal treats them as undirected.
"""
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class RelationKind(str, Enum):
    """Edge kinds in the relation graph."""

    RELATES_TO = "relates_to"
    CAUSES = "causes"
    CONTRADICTS = "contradicts"
    ELABORATES = "elaborates"
    FOLLOWS = "follows"


class Relation(BaseModel):
    """Directed edge between two memory records."""

    from_id: str = Field(..., description="Source record id")
    to_id: str = Field(..., description="Target record id")
    kind: RelationKind = Field(RelationKind.RELATES_TO, description="Edge kind")
    strength: float = Field(..., ge=0.0, le=1.0, description="Edge strength (similarity for auto-created edges)")
    created_at: datetime = Field(..., description="Creation timestamp")
