"""Augmentation pipeline package."""
from .base import PipelineServicePluginBase, DEFAULT_GRAPH_RECALL_DEPTH, EXT_PIPELINE_SERVICE
from .default import AugmentedMemoryService

from scitrera_app_framework import Variables, get_extension


def get_pipeline_service(v: Variables = None) -> AugmentedMemoryService:
    """Get the augmented memory service instance."""
    return get_extension(EXT_PIPELINE_SERVICE, v)


__all__ = (
    'AugmentedMemoryService',
    'PipelineServicePluginBase',
    'DEFAULT_GRAPH_RECALL_DEPTH',
    'get_pipeline_service',
    'EXT_PIPELINE_SERVICE',
)
