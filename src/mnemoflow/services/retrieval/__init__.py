"""Retrieval strategy package."""
from .base import RetrievalStrategy, RetrievalStrategyPluginBase, DEFAULT_STRATEGY_LIMIT, EXT_RETRIEVAL_STRATEGY
from .none import NoneRetrievalStrategy
from .keyword import KeywordRetrievalStrategy
from .embedding import EmbeddingRetrievalStrategy, HybridRetrievalStrategy
from .remote_index import RemoteIndexRetrievalStrategy

from scitrera_app_framework import Variables, get_extension


def get_retrieval_strategy(v: Variables = None) -> RetrievalStrategy:
    """Get the configured retrieval strategy."""
    return get_extension(EXT_RETRIEVAL_STRATEGY, v)


__all__ = (
    'RetrievalStrategy',
    'RetrievalStrategyPluginBase',
    'NoneRetrievalStrategy',
    'KeywordRetrievalStrategy',
    'EmbeddingRetrievalStrategy',
    'HybridRetrievalStrategy',
    'RemoteIndexRetrievalStrategy',
    'get_retrieval_strategy',
    'DEFAULT_STRATEGY_LIMIT',
    'EXT_RETRIEVAL_STRATEGY',
)
