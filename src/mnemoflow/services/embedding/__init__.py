from .base import EmbeddingProvider, EXT_EMBEDDING_PROVIDER, EXT_EMBEDDING_SERVICE
from .mock import MockEmbeddingProvider
from .service_default import EmbeddingService, embedding_enabled

from scitrera_app_framework import Variables, get_extension


def get_embedding_provider(v: Variables = None) -> EmbeddingProvider:
    return get_extension(EXT_EMBEDDING_PROVIDER, v)


def get_embedding_service(v: Variables = None) -> EmbeddingService:
    return get_extension(EXT_EMBEDDING_SERVICE, v)


__all__ = (
    'EmbeddingProvider',
    'EmbeddingService',
    'embedding_enabled',
    'MockEmbeddingProvider',
    'get_embedding_provider',
    'get_embedding_service',
    'EXT_EMBEDDING_PROVIDER',
    'EXT_EMBEDDING_SERVICE',
)
