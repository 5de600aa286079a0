from .base import HierarchyService, HierarchyServicePluginBase, HierarchyNode, EXT_HIERARCHY_SERVICE
from .default import DefaultHierarchyService

from scitrera_app_framework import Variables, get_extension


def get_hierarchy_service(v: Variables = None) -> HierarchyService:
    return get_extension(EXT_HIERARCHY_SERVICE, v)


__all__ = (
    'HierarchyService',
    'HierarchyServicePluginBase',
    'HierarchyNode',
    'DefaultHierarchyService',
    'get_hierarchy_service',
    'EXT_HIERARCHY_SERVICE',
)
