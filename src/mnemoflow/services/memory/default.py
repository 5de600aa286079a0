"""
Core memory service: store, recall, summarize, forget.

Owns record creation (id, timestamps, auto-embedding) and recall (decay decoration plus
delegation to a retrieval strategy). Augmentation stages live in the pipeline service,
which wraps this one.
"""
from logging import Logger
from typing import Optional

from scitrera_app_framework import Variables, get_logger, ext_parse_bool

from ...config import (
    MNEMOFLOW_AUTO_EMBED, DEFAULT_MNEMOFLOW_AUTO_EMBED,
    MNEMOFLOW_DEFAULT_RETRIEVAL_LIMIT, DEFAULT_MNEMOFLOW_DEFAULT_RETRIEVAL_LIMIT,
    MNEMOFLOW_ENABLE_DECAY, DEFAULT_MNEMOFLOW_ENABLE_DECAY,
)
from ...models.memory import MemoryRecord, RememberInput, SummarizeScope
from ...utils import generate_id, TimeProvider, SystemTimeProvider
from ..decay import DecayService
from ..embedding import EmbeddingService, embedding_enabled
from ..llm import LLMService, LLMNotConfiguredError, generation_available
from ..retrieval import RetrievalStrategy
from ..storage import StorageBackend
from .._constants import (
    EXT_STORAGE_BACKEND, EXT_EMBEDDING_SERVICE, EXT_LLM_SERVICE, EXT_RETRIEVAL_STRATEGY, EXT_DECAY_SERVICE,
)
from .base import MemoryServicePluginBase, NOTHING_TO_SUMMARIZE


class MemoryService:
    """Canonical create/read/delete/summarize contract over the storage port."""

    def __init__(
            self,
            storage: StorageBackend,
            embedding_service: Optional[EmbeddingService] = None,
            llm_service: Optional[LLMService] = None,
            strategy: Optional[RetrievalStrategy] = None,
            decay_service: Optional[DecayService] = None,
            time_provider: Optional[TimeProvider] = None,
            auto_embed: bool = DEFAULT_MNEMOFLOW_AUTO_EMBED,
            default_limit: int = DEFAULT_MNEMOFLOW_DEFAULT_RETRIEVAL_LIMIT,
            v: Variables = None,
    ):
        self.storage = storage
        self.embedding_service = embedding_service
        self.llm_service = llm_service
        self.strategy = strategy
        self.decay_service = decay_service
        self.time = time_provider or SystemTimeProvider()
        self.auto_embed = auto_embed
        self.default_limit = default_limit
        self.logger = get_logger(v, name=self.__class__.__name__)
        self.logger.info(
            "Initialized MemoryService: strategy=%s, auto_embed=%s, decay=%s, default_limit=%s",
            strategy.__class__.__name__ if strategy else None,
            auto_embed and embedding_service is not None,
            decay_service is not None,
            default_limit,
        )

    async def remember(self, input: RememberInput) -> MemoryRecord:
        """Create and persist a record.

        Embedding failures are logged and the record is stored without an embedding.
        Storage failures propagate.
        """
        now = self.time.now()
        embedding = input.embedding
        if embedding is None and self.auto_embed and self.embedding_service is not None:
            try:
                embedding = await self.embedding_service.embed(input.content)
            except Exception as e:
                self.logger.warning("Embedding failed, storing record without embedding: %s", e)
                embedding = None

        record = MemoryRecord(
            id=generate_id(),
            kind=input.kind,
            content=input.content,
            embedding=embedding,
            metadata=dict(input.metadata) if input.metadata is not None else None,
            created_at=now,
            source=input.source,
        )
        await self.storage.save(record)
        self.logger.info("Stored memory %s (kind=%s, embedded=%s)", record.id, record.kind.value, embedding is not None)
        return record

    async def recall(self, query: str, limit: Optional[int] = None) -> list[MemoryRecord]:
        """Ranked records for a query, at most ``limit`` (configured default when None)."""
        limit = self.default_limit if limit is None else limit
        if limit <= 0:
            return []

        candidates = await self.storage.get_all()
        if not candidates:
            return []

        if self.decay_service is not None:
            candidates = self.decay_service.apply(candidates, self.time.now())

        if self.strategy is not None:
            results = await self.strategy.retrieve(query, candidates, limit)
        else:
            results = candidates

        results = results[:limit]
        self.logger.debug("Recall '%s': %s results from %s candidates", query, len(results), len(candidates))
        return results

    async def summarize(self, scope: Optional[SummarizeScope] = None) -> str:
        """Generated summary of the records in scope.

        Raises:
            LLMNotConfiguredError: no generation port is configured (raised before any I/O)
        """
        if not generation_available(self.llm_service):
            raise LLMNotConfiguredError("summarize() requires a configured generation provider")

        records = await self.storage.get_all()
        if scope is not None:
            if scope.kind is not None:
                records = [r for r in records if r.kind == scope.kind]
            if scope.since is not None:
                records = [r for r in records if r.created_at >= scope.since]
            if scope.limit is not None:
                records = records[:scope.limit]

        if not records:
            return NOTHING_TO_SUMMARIZE

        lines = "\n".join(f"[{r.kind.value}] {r.content}" for r in records)
        prompt = f"Summarize the following memories:\n\n{lines}\n\nProvide a concise summary:"
        self.logger.debug("Summarizing %s records", len(records))
        return await self.llm_service.generate(prompt)

    async def forget(self, record_id: str) -> bool:
        """Delete a record. Returns whether it existed."""
        deleted = await self.storage.delete(record_id)
        if deleted:
            self.logger.info("Deleted memory %s", record_id)
        else:
            self.logger.warning("Memory %s not found for deletion", record_id)
        return deleted

    async def inspect(self, record_id: str) -> Optional[MemoryRecord]:
        return await self.storage.get(record_id)

    async def get_all(self) -> list[MemoryRecord]:
        return await self.storage.get_all()

    async def clear(self) -> None:
        self.logger.warning("Clearing all memories")
        await self.storage.clear()


class DefaultMemoryServicePlugin(MemoryServicePluginBase):
    """Default memory service plugin."""
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> MemoryService:
        enable_decay = v.environ(MNEMOFLOW_ENABLE_DECAY, default=DEFAULT_MNEMOFLOW_ENABLE_DECAY, type_fn=ext_parse_bool)
        return MemoryService(
            storage=self.get_extension(EXT_STORAGE_BACKEND, v),
            embedding_service=self.get_extension(EXT_EMBEDDING_SERVICE, v) if embedding_enabled(v) else None,
            llm_service=self.get_extension(EXT_LLM_SERVICE, v),
            strategy=self.get_extension(EXT_RETRIEVAL_STRATEGY, v),
            decay_service=self.get_extension(EXT_DECAY_SERVICE, v) if enable_decay else None,
            auto_embed=v.environ(MNEMOFLOW_AUTO_EMBED, default=DEFAULT_MNEMOFLOW_AUTO_EMBED, type_fn=ext_parse_bool),
            default_limit=v.environ(
                MNEMOFLOW_DEFAULT_RETRIEVAL_LIMIT, default=DEFAULT_MNEMOFLOW_DEFAULT_RETRIEVAL_LIMIT, type_fn=int
            ),
            v=v,
        )
