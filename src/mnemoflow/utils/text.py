"""Text helpers shared by ranking and augmentation stages."""
import json
import re
from typing import Any, Optional

_NON_WORD = re.compile(r"\W+")

# tokens of this length or shorter are ignored
MIN_TOKEN_LENGTH = 2


def tokenize(text: str) -> list[str]:
    """Lowercase word tokens longer than two characters, in order of appearance."""
    return [t for t in _NON_WORD.split(text.lower()) if len(t) > MIN_TOKEN_LENGTH]


def metadata_json(metadata: Optional[dict[str, Any]]) -> str:
    """JSON form of a metadata map; values JSON cannot encode (datetimes, enums) become strings."""
    return json.dumps(metadata or {}, default=str, sort_keys=True)


def searchable_text(content: str, metadata: Optional[dict[str, Any]]) -> str:
    """Content followed by serialized metadata, as matched by keyword ranking."""
    return f"{content} {metadata_json(metadata)}"


def keyword_score(query_tokens: list[str], text: str) -> int:
    """Number of query tokens (with repetition) occurring anywhere in ``text``, case-insensitively.

    Matching is by substring, so ``script`` hits ``JavaScript``.
    """
    haystack = text.lower()
    return sum(1 for token in query_tokens if token in haystack)


def contains_ci(haystack: str, needle: str) -> bool:
    """Case-insensitive substring test."""
    return needle.lower() in haystack.lower()
