"""Hash-seeded embedding provider for tests and offline use."""
import hashlib
from logging import Logger

import numpy as np
from scitrera_app_framework import Variables

from ...config import EmbeddingProviderType, MNEMOFLOW_EMBEDDING_DIMENSIONS
from .base import EmbeddingProvider, EmbeddingProviderPluginBase

DEFAULT_EMBEDDING_DIMENSIONS = 384


class MockEmbeddingProvider(EmbeddingProvider):
    """
    Maps each text to a fixed pseudo-random unit vector.

    The generator is seeded from the SHA-256 digest of the text, so equal text yields
    equal vectors across processes. Components are drawn from [0, 1), which keeps cosine
    similarity non-negative. There is no semantic signal: unrelated texts with shared
    words are no closer than any other pair.
    """

    def __init__(self, v: Variables = None, dimensions: int = DEFAULT_EMBEDDING_DIMENSIONS):
        super().__init__(v, dimensions)
        self.logger.info("Initialized MockEmbeddingProvider with dimensions=%d", dimensions)

    def _vector(self, text: str) -> list[float]:
        seed = int.from_bytes(hashlib.sha256(text.encode("utf-8")).digest()[:8], byteorder="big")
        vec = np.random.default_rng(seed).random(self._dimensions)
        norm = np.linalg.norm(vec)
        if norm > 0:
            vec = vec / norm
        return vec.tolist()

    async def embed(self, text: str) -> list[float]:
        return self._vector(text)

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [self._vector(text) for text in texts]


class MockEmbeddingProviderPlugin(EmbeddingProviderPluginBase):
    PROVIDER_NAME = EmbeddingProviderType.MOCK

    def initialize(self, v: Variables, logger: Logger) -> MockEmbeddingProvider:
        dimensions = v.environ(MNEMOFLOW_EMBEDDING_DIMENSIONS, default=DEFAULT_EMBEDDING_DIMENSIONS, type_fn=int)
        return MockEmbeddingProvider(v=v, dimensions=dimensions)
