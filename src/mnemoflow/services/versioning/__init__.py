from .base import VersioningService, VersioningServicePluginBase, VersionSnapshot, EXT_VERSIONING_SERVICE
from .default import InMemoryVersioningService

from scitrera_app_framework import Variables, get_extension


def get_versioning_service(v: Variables = None) -> VersioningService:
    return get_extension(EXT_VERSIONING_SERVICE, v)


__all__ = (
    'VersioningService',
    'VersioningServicePluginBase',
    'VersionSnapshot',
    'InMemoryVersioningService',
    'get_versioning_service',
    'EXT_VERSIONING_SERVICE',
)
