import hashlib
from logging import Logger

from cachetools import LRUCache
from scitrera_app_framework import get_logger, Variables, ext_parse_bool

from ...config import (
    MNEMOFLOW_EMBEDDING_CACHE_SIZE, DEFAULT_MNEMOFLOW_EMBEDDING_CACHE_SIZE,
    MNEMOFLOW_EMBEDDING_ENABLED, DEFAULT_MNEMOFLOW_EMBEDDING_ENABLED,
)
from .base import EmbeddingProvider, EmbeddingServicePluginBase, EXT_EMBEDDING_PROVIDER
from ...utils import cosine_similarity as _cosine_similarity


class EmbeddingService:
    """
    Embedding port used by the memory services.

    Wraps a provider and memoizes results in a bounded LRU keyed by text digest.
    """

    def __init__(
            self,
            v: Variables = None,
            provider: EmbeddingProvider = None,
            cache_size: int = DEFAULT_MNEMOFLOW_EMBEDDING_CACHE_SIZE,
    ):
        self.provider = provider
        self.cache: LRUCache | None = LRUCache(maxsize=cache_size) if cache_size > 0 else None
        self.logger = get_logger(v, name=self.__class__.__name__)

        self.logger.info(
            "Initialized EmbeddingService with provider: %s, dimensions: %s, cache_size: %s",
            provider.__class__.__name__,
            provider.dimensions,
            cache_size,
        )

    @staticmethod
    def _cache_key(text: str) -> str:
        return f"emb:{hashlib.md5(text.encode()).hexdigest()}"

    async def embed(self, text: str) -> list[float]:
        """Generate embedding with caching."""
        if not text or not text.strip():
            raise ValueError("Cannot embed empty text")

        cache_key = self._cache_key(text)
        if self.cache is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                self.logger.debug("Cache hit for embedding: %s", cache_key)
                return list(cached)

        embedding = await self.provider.embed(text)

        if self.cache is not None:
            self.cache[cache_key] = list(embedding)
        return embedding

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for a batch, preserving input order."""
        if not texts:
            return []
        if any(not t or not t.strip() for t in texts):
            raise ValueError("Cannot embed empty text")

        missing = [t for t in texts if self.cache is None or self._cache_key(t) not in self.cache]
        if missing:
            unique = list(dict.fromkeys(missing))
            generated = await self.provider.embed_batch(unique)
            fresh = dict(zip(unique, generated))
        else:
            fresh = {}

        results = []
        for text in texts:
            if text in fresh:
                embedding = fresh[text]
                if self.cache is not None:
                    self.cache[self._cache_key(text)] = list(embedding)
            else:
                embedding = list(self.cache[self._cache_key(text)])
            results.append(embedding)
        return results

    @property
    def dimensions(self) -> int:
        return self.provider.dimensions

    @staticmethod
    def cosine_similarity(a: list[float], b: list[float]) -> float:
        """Calculate cosine similarity between two vectors."""
        return _cosine_similarity(a, b)


class EmbeddingServicePlugin(EmbeddingServicePluginBase):
    """Default plugin for embedding service."""
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> EmbeddingService:
        embedding_provider: EmbeddingProvider = self.get_extension(EXT_EMBEDDING_PROVIDER, v)
        return EmbeddingService(
            v=v,
            provider=embedding_provider,
            cache_size=v.environ(
                MNEMOFLOW_EMBEDDING_CACHE_SIZE, default=DEFAULT_MNEMOFLOW_EMBEDDING_CACHE_SIZE, type_fn=int
            ),
        )


def embedding_enabled(v: Variables) -> bool:
    """Whether the embedding port is switched on for this configuration."""
    return v.environ(MNEMOFLOW_EMBEDDING_ENABLED, default=DEFAULT_MNEMOFLOW_EMBEDDING_ENABLED, type_fn=ext_parse_bool)
