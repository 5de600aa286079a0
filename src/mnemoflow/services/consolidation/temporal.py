"""Temporal consolidation: summarize once enough records land inside a trailing window."""
from datetime import datetime, timedelta
from logging import Logger
from typing import Awaitable, Callable, Optional

from scitrera_app_framework import Variables, get_logger, ext_parse_bool

from ...models.memory import (
    MemoryRecord, MemoryKind, RememberInput, META_CONSOLIDATED_FROM, META_CONSOLIDATED_COUNT,
)
from .._constants import EXT_MEMORY_SERVICE, EXT_LLM_SERVICE
from ..llm import LLMService
from ..memory import MemoryService
from .base import (
    ConsolidationService, ConsolidationServicePluginBase, ConsolidationSettings,
    consolidated_ids, is_consolidation_summary, CONSOLIDATION_SOURCE,
    MNEMOFLOW_CONSOLIDATION_MIN_MEMORIES, DEFAULT_MNEMOFLOW_CONSOLIDATION_MIN_MEMORIES,
    MNEMOFLOW_CONSOLIDATION_WINDOW_HOURS, DEFAULT_MNEMOFLOW_CONSOLIDATION_WINDOW_HOURS,
    MNEMOFLOW_CONSOLIDATION_RETIRE_SOURCES, DEFAULT_MNEMOFLOW_CONSOLIDATION_RETIRE_SOURCES,
)


class TemporalConsolidationService(ConsolidationService):
    """
    Triggers when the number of eligible records created inside the trailing window
    reaches ``min_memories``, then writes one summary record over every eligible record.

    Summaries list their inputs under ``consolidated_from``; those inputs stop counting
    toward later triggers, so the same records are not summarized twice. Originals are
    kept unless ``retire_sources`` is set.
    """

    PROMPT = """Consolidate these related memories into a single, comprehensive summary:

{memories}

Extract:
1. Key facts and patterns
2. Preferences and tendencies
3. Important relationships
4. Notable events

Format as a concise but complete summary."""

    def __init__(
            self,
            memory_service: MemoryService,
            llm_service: LLMService,
            settings: Optional[ConsolidationSettings] = None,
            v: Variables = None,
    ):
        self.memory_service = memory_service
        self.llm_service = llm_service
        self.settings = settings or ConsolidationSettings()
        self.logger = get_logger(v, name=self.__class__.__name__)
        self.logger.info(
            "Initialized TemporalConsolidationService: min_memories=%s, window=%s, retire_sources=%s",
            self.settings.min_memories, self.settings.time_window, self.settings.retire_sources,
        )

    def eligible(self, records: list[MemoryRecord]) -> list[MemoryRecord]:
        folded = consolidated_ids(records)
        return [r for r in records if r.id not in folded and not is_consolidation_summary(r)]

    def should_consolidate(self, records: list[MemoryRecord], now: datetime) -> bool:
        window_start = now - self.settings.time_window
        recent = [r for r in self.eligible(records) if r.created_at > window_start]
        return len(recent) >= self.settings.min_memories

    async def consolidate(
            self,
            records: list[MemoryRecord],
            forget: Optional[Callable[[str], Awaitable[bool]]] = None,
    ) -> Optional[MemoryRecord]:
        """Summarize the eligible records. With ``retire_sources``, each source id is passed to
        ``forget`` (default: the core memory service) after the summary is stored.
        """
        sources = self.eligible(records)
        if not sources:
            return None

        memories = "\n".join(f"[{r.kind.value}] {r.content}" for r in sources)
        summary = await self.llm_service.generate(self.PROMPT.format(memories=memories))

        record = await self.memory_service.remember(RememberInput(
            content=summary,
            kind=MemoryKind.SUMMARY,
            metadata={
                META_CONSOLIDATED_FROM: [r.id for r in sources],
                META_CONSOLIDATED_COUNT: len(sources),
            },
            source=CONSOLIDATION_SOURCE,
        ))
        self.logger.info("Consolidated %s memories into %s", len(sources), record.id)

        if self.settings.retire_sources:
            forget = forget or self.memory_service.forget
            for source in sources:
                await forget(source.id)
            self.logger.info("Retired %s consolidated sources", len(sources))
        return record


class TemporalConsolidationServicePlugin(ConsolidationServicePluginBase):
    PROVIDER_NAME = 'temporal'

    def initialize(self, v: Variables, logger: Logger) -> TemporalConsolidationService:
        settings = ConsolidationSettings(
            min_memories=v.environ(
                MNEMOFLOW_CONSOLIDATION_MIN_MEMORIES, default=DEFAULT_MNEMOFLOW_CONSOLIDATION_MIN_MEMORIES,
                type_fn=int,
            ),
            time_window=timedelta(hours=v.environ(
                MNEMOFLOW_CONSOLIDATION_WINDOW_HOURS, default=DEFAULT_MNEMOFLOW_CONSOLIDATION_WINDOW_HOURS,
                type_fn=float,
            )),
            retire_sources=v.environ(
                MNEMOFLOW_CONSOLIDATION_RETIRE_SOURCES, default=DEFAULT_MNEMOFLOW_CONSOLIDATION_RETIRE_SOURCES,
                type_fn=ext_parse_bool,
            ),
        )
        return TemporalConsolidationService(
            memory_service=self.get_extension(EXT_MEMORY_SERVICE, v),
            llm_service=self.get_extension(EXT_LLM_SERVICE, v),
            settings=settings,
            v=v,
        )
