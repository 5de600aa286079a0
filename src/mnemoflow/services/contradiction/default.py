"""Default contradiction service: similarity gate, then model judgment."""
from logging import Logger
from typing import Optional

from scitrera_app_framework import Variables, get_logger

from ...models.memory import MemoryRecord
from ...utils import cosine_similarity, TimeProvider, SystemTimeProvider
from .._constants import EXT_EMBEDDING_SERVICE, EXT_LLM_SERVICE
from ..embedding import EmbeddingService
from ..llm import LLMService
from .base import (
    ContradictionService, ContradictionServicePluginBase, ContradictionRecord, ContradictionResolution,
    MNEMOFLOW_CONTRADICTION_SIMILARITY_THRESHOLD, DEFAULT_MNEMOFLOW_CONTRADICTION_SIMILARITY_THRESHOLD,
)


def parse_contradiction_verdict(text: str) -> bool:
    """Only an answer starting with "yes" counts; anything else is no contradiction."""
    return text.strip().lower().startswith("yes")


def parse_resolution(text: str) -> ContradictionResolution:
    upper = text.upper()
    if "KEEP_NEW" in upper:
        return ContradictionResolution.KEEP_NEW
    if "KEEP_OLD" in upper:
        return ContradictionResolution.KEEP_OLD
    return ContradictionResolution.MERGE


class DefaultContradictionService(ContradictionService):
    """
    Embedding-gated, model-judged contradiction detection.

    Records lacking an embedding are embedded on demand for the comparison; those
    embeddings are not persisted.
    """

    JUDGE_PROMPT = """Do these two statements contradict each other?

Statement 1: {new}
Statement 2: {existing}

Answer with YES or NO, then briefly explain."""

    RESOLVE_PROMPT = """Two contradicting memories:

OLD: {old} (from {old_at})
NEW: {new} (from {new_at})

What should we do?
- KEEP_NEW: The new information supersedes the old
- KEEP_OLD: The old information is still correct
- MERGE: Both contain partial truth

Answer with one word: KEEP_NEW, KEEP_OLD, or MERGE"""

    def __init__(
            self,
            embedding_service: EmbeddingService,
            llm_service: LLMService,
            similarity_threshold: float = DEFAULT_MNEMOFLOW_CONTRADICTION_SIMILARITY_THRESHOLD,
            time_provider: Optional[TimeProvider] = None,
            v: Variables = None,
    ):
        self.embedding_service = embedding_service
        self.llm_service = llm_service
        self.similarity_threshold = similarity_threshold
        self.time = time_provider or SystemTimeProvider()
        self.logger = get_logger(v, name=self.__class__.__name__)
        self.logger.info("Initialized DefaultContradictionService with similarity_threshold=%s",
                         similarity_threshold)

    async def detect(self, record: MemoryRecord, existing: list[MemoryRecord]) -> list[ContradictionRecord]:
        embedding = record.embedding
        if not embedding:
            try:
                embedding = await self.embedding_service.embed(record.content)
            except Exception as e:
                self.logger.warning("Cannot embed %s for contradiction check, skipping: %s", record.id, e)
                return []

        candidates = [r for r in existing if r.id != record.id]
        missing = [r for r in candidates if not r.embedding]
        missing_vectors = {}
        if missing:
            try:
                vectors = await self.embedding_service.embed_batch([r.content for r in missing])
            except Exception as e:
                # unembedded candidates stay below the gate
                self.logger.warning("Cannot embed %d candidate(s) for contradiction check, skipping them: %s",
                                    len(missing), e)
            else:
                missing_vectors = {r.id: vec for r, vec in zip(missing, vectors)}

        found = []
        for candidate in candidates:
            vector = candidate.embedding or missing_vectors.get(candidate.id)
            similarity = cosine_similarity(embedding, vector) if vector else 0.0
            if similarity <= self.similarity_threshold:
                continue
            verdict = await self.llm_service.generate(
                self.JUDGE_PROMPT.format(new=record.content, existing=candidate.content)
            )
            if parse_contradiction_verdict(verdict):
                self.logger.info("Contradiction: %s vs %s (similarity=%.3f)", record.id, candidate.id, similarity)
                found.append(ContradictionRecord(
                    new_id=record.id,
                    existing=candidate,
                    similarity=similarity,
                    detected_at=self.time.now(),
                ))
        return found

    async def resolve(self, record: MemoryRecord, existing: MemoryRecord) -> ContradictionResolution:
        response = await self.llm_service.generate(self.RESOLVE_PROMPT.format(
            old=existing.content,
            old_at=existing.created_at.isoformat(),
            new=record.content,
            new_at=record.created_at.isoformat(),
        ))
        resolution = parse_resolution(response)
        self.logger.debug("Resolution for %s vs %s: %s", record.id, existing.id, resolution.value)
        return resolution


class DefaultContradictionServicePlugin(ContradictionServicePluginBase):
    """Default contradiction service plugin."""
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> DefaultContradictionService:
        return DefaultContradictionService(
            embedding_service=self.get_extension(EXT_EMBEDDING_SERVICE, v),
            llm_service=self.get_extension(EXT_LLM_SERVICE, v),
            similarity_threshold=v.environ(
                MNEMOFLOW_CONTRADICTION_SIMILARITY_THRESHOLD,
                default=DEFAULT_MNEMOFLOW_CONTRADICTION_SIMILARITY_THRESHOLD,
                type_fn=float,
            ),
            v=v,
        )
