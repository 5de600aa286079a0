from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...config import (
    MNEMOFLOW_MEMORY_SERVICE, DEFAULT_MNEMOFLOW_MEMORY_SERVICE,
    MNEMOFLOW_AUTO_EMBED, DEFAULT_MNEMOFLOW_AUTO_EMBED,
    MNEMOFLOW_DEFAULT_RETRIEVAL_LIMIT, DEFAULT_MNEMOFLOW_DEFAULT_RETRIEVAL_LIMIT,
    MNEMOFLOW_ENABLE_DECAY, DEFAULT_MNEMOFLOW_ENABLE_DECAY,
    MNEMOFLOW_DECAY_FACTOR, DEFAULT_MNEMOFLOW_DECAY_FACTOR,
)
from .._constants import (
    EXT_MEMORY_SERVICE,
    EXT_STORAGE_BACKEND,
    EXT_EMBEDDING_SERVICE,
    EXT_LLM_SERVICE,
    EXT_RETRIEVAL_STRATEGY,
    EXT_DECAY_SERVICE,
)

# Returned by summarize() when no records match, without calling the generation port
NOTHING_TO_SUMMARIZE = "No memories to summarize."


# noinspection PyAbstractClass
class MemoryServicePluginBase(Plugin):
    """Base plugin for memory service - extensible for custom implementations."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_MEMORY_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_MEMORY_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MNEMOFLOW_MEMORY_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MNEMOFLOW_MEMORY_SERVICE, DEFAULT_MNEMOFLOW_MEMORY_SERVICE)
        v.set_default_value(MNEMOFLOW_AUTO_EMBED, DEFAULT_MNEMOFLOW_AUTO_EMBED)
        v.set_default_value(MNEMOFLOW_DEFAULT_RETRIEVAL_LIMIT, DEFAULT_MNEMOFLOW_DEFAULT_RETRIEVAL_LIMIT)
        v.set_default_value(MNEMOFLOW_ENABLE_DECAY, DEFAULT_MNEMOFLOW_ENABLE_DECAY)
        v.set_default_value(MNEMOFLOW_DECAY_FACTOR, DEFAULT_MNEMOFLOW_DECAY_FACTOR)

    def get_dependencies(self, v: Variables):
        return (
            EXT_STORAGE_BACKEND,
            EXT_EMBEDDING_SERVICE,
            EXT_LLM_SERVICE,
            EXT_RETRIEVAL_STRATEGY,
            EXT_DECAY_SERVICE,
        )
