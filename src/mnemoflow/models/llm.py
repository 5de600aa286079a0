from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class LLMRole(str, Enum):
    """Message role in conversation."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class LLMMessage:
    """Single message in conversation."""
    role: LLMRole
    content: str


@dataclass
class LLMRequest:
    """Request to a generation provider.

    ``max_tokens`` and ``temperature`` fall back to the provider defaults when unset.
    """
    messages: List[LLMMessage]
    model: Optional[str] = None
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    stop: Optional[List[str]] = None


@dataclass
class LLMResponse:
    """Response from a generation provider."""
    content: str
    model: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    finish_reason: str = "stop"  # "stop", "length", "content_filter"
