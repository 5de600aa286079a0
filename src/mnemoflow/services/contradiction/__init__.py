from .base import (
    ContradictionService,
    ContradictionServicePluginBase,
    ContradictionRecord,
    ContradictionResolution,
    EXT_CONTRADICTION_SERVICE,
)
from .default import DefaultContradictionService, parse_contradiction_verdict, parse_resolution

from scitrera_app_framework import Variables, get_extension


def get_contradiction_service(v: Variables = None) -> ContradictionService:
    return get_extension(EXT_CONTRADICTION_SERVICE, v)


__all__ = (
    'ContradictionService',
    'ContradictionServicePluginBase',
    'ContradictionRecord',
    'ContradictionResolution',
    'DefaultContradictionService',
    'parse_contradiction_verdict',
    'parse_resolution',
    'get_contradiction_service',
    'EXT_CONTRADICTION_SERVICE',
)
