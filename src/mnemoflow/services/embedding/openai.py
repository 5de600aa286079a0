"""Embedding provider for the OpenAI embeddings endpoint and compatible servers."""
from logging import Logger
from typing import Optional

from scitrera_app_framework import Variables

from ...config import EmbeddingProviderType, MNEMOFLOW_EMBEDDING_MODEL, MNEMOFLOW_EMBEDDING_DIMENSIONS
from .base import EmbeddingProvider, EmbeddingProviderPluginBase

MNEMOFLOW_EMBEDDING_OPENAI_API_KEY = 'MNEMOFLOW_EMBEDDING_OPENAI_API_KEY'
MNEMOFLOW_EMBEDDING_OPENAI_BASE_URL = 'MNEMOFLOW_EMBEDDING_OPENAI_BASE_URL'

DEFAULT_EMBEDDING_MODEL = 'text-embedding-3-small'
DEFAULT_EMBEDDING_DIMENSIONS = 1536

# only the text-embedding-3 family accepts a requested output size
_SIZED_MODEL_PREFIX = 'text-embedding-3'


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """
    Embeds record content through ``embeddings.create``.

    Point ``base_url`` at vLLM, Ollama or LocalAI to use a self-hosted model. Batch results
    are reordered by their ``index`` so vectors line up with the input texts.
    """

    def __init__(
            self,
            v: Variables = None,
            api_key: Optional[str] = None,
            model: str = DEFAULT_EMBEDDING_MODEL,
            base_url: Optional[str] = None,
            dimensions: int = DEFAULT_EMBEDDING_DIMENSIONS,
    ):
        super().__init__(v, output_dimensions=dimensions)
        import openai
        self.client = openai.AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.model = model
        self.logger.info("Initialized OpenAIEmbeddingProvider: model=%s, dimensions=%s, base_url=%s",
                         model, dimensions, base_url)

    async def _create(self, payload):
        kwargs = {'input': payload, 'model': self.model}
        if self.model.startswith(_SIZED_MODEL_PREFIX):
            kwargs['dimensions'] = self._dimensions
        response = await self.client.embeddings.create(**kwargs)
        return sorted(response.data, key=lambda item: item.index)

    async def embed(self, text: str) -> list[float]:
        self.logger.debug("Embedding %s chars with %s", len(text), self.model)
        return (await self._create(text))[0].embedding

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        self.logger.debug("Embedding batch of %s texts with %s", len(texts), self.model)
        return [item.embedding for item in await self._create(texts)]


class OpenAIEmbeddingProviderPlugin(EmbeddingProviderPluginBase):
    PROVIDER_NAME = EmbeddingProviderType.OPENAI

    def initialize(self, v: Variables, logger: Logger) -> OpenAIEmbeddingProvider:
        return OpenAIEmbeddingProvider(
            v=v,
            api_key=v.environ(MNEMOFLOW_EMBEDDING_OPENAI_API_KEY, default='x'),
            model=v.environ(MNEMOFLOW_EMBEDDING_MODEL, default=DEFAULT_EMBEDDING_MODEL),
            base_url=v.environ(MNEMOFLOW_EMBEDDING_OPENAI_BASE_URL, default=None),
            dimensions=v.environ(MNEMOFLOW_EMBEDDING_DIMENSIONS, default=DEFAULT_EMBEDDING_DIMENSIONS, type_fn=int),
        )
