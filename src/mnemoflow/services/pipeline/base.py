"""Augmentation pipeline - Base plugin."""
from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...config import (
    MNEMOFLOW_PIPELINE_SERVICE, DEFAULT_MNEMOFLOW_PIPELINE_SERVICE,
    ALL_STAGE_FLAGS, DEFAULT_MNEMOFLOW_STAGE_ENABLED,
)
from .._constants import (
    EXT_PIPELINE_SERVICE,
    EXT_MEMORY_SERVICE,
    EXT_EMBEDDING_SERVICE,
    EXT_LLM_SERVICE,
    EXT_RELATION_GRAPH,
    EXT_WORKING_MEMORY,
    EXT_IMPORTANCE_SCORER,
    EXT_CONTRADICTION_SERVICE,
    EXT_HIERARCHY_SERVICE,
    EXT_VERSIONING_SERVICE,
    EXT_DUAL_MEMORY_SERVICE,
    EXT_CONSOLIDATION_SERVICE,
    EXT_REASONING_SERVICE,
    EXT_ANALYTICS_SERVICE,
)

# Depth used by recall_with_graph when the caller does not pass one
DEFAULT_GRAPH_RECALL_DEPTH = 2
# Seed results taken from ranked recall before graph expansion
GRAPH_RECALL_SEED_LIMIT = 3


# noinspection PyAbstractClass
class PipelineServicePluginBase(Plugin):
    """Base plugin for the augmentation pipeline."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_PIPELINE_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_PIPELINE_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MNEMOFLOW_PIPELINE_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MNEMOFLOW_PIPELINE_SERVICE, DEFAULT_MNEMOFLOW_PIPELINE_SERVICE)
        for flag in ALL_STAGE_FLAGS:
            v.set_default_value(flag, DEFAULT_MNEMOFLOW_STAGE_ENABLED)

    def get_dependencies(self, v: Variables):
        return (
            EXT_MEMORY_SERVICE,
            EXT_EMBEDDING_SERVICE,
            EXT_LLM_SERVICE,
            EXT_RELATION_GRAPH,
            EXT_WORKING_MEMORY,
            EXT_IMPORTANCE_SCORER,
            EXT_CONTRADICTION_SERVICE,
            EXT_HIERARCHY_SERVICE,
            EXT_VERSIONING_SERVICE,
            EXT_DUAL_MEMORY_SERVICE,
            EXT_CONSOLIDATION_SERVICE,
            EXT_REASONING_SERVICE,
            EXT_ANALYTICS_SERVICE,
        )
