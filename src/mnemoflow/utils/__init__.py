"""Shared utilities for mnemoflow services."""

from .id_generation import generate_id, RECORD_ID_PREFIX, CONTRADICTION_ID_PREFIX
from .datetime import utc_now, parse_datetime_utc, age_in_days, TimeProvider, SystemTimeProvider
from .vector_math import cosine_similarity, cosine_similarities
from .text import tokenize, metadata_json, searchable_text, keyword_score, contains_ci
from .llm_json import parse_json_payload, strip_code_fences

__all__ = [
    "generate_id",
    "RECORD_ID_PREFIX",
    "CONTRADICTION_ID_PREFIX",
    "utc_now",
    "parse_datetime_utc",
    "age_in_days",
    "TimeProvider",
    "SystemTimeProvider",
    "cosine_similarity",
    "cosine_similarities",
    "tokenize",
    "metadata_json",
    "searchable_text",
    "keyword_score",
    "contains_ci",
    "parse_json_payload",
    "strip_code_fences",
]
