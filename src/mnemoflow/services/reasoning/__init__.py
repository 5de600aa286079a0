from .base import ReasoningService, ReasoningServicePluginBase, InferenceResult, EXT_REASONING_SERVICE
from .default import DefaultReasoningService

from scitrera_app_framework import Variables, get_extension


def get_reasoning_service(v: Variables = None) -> ReasoningService:
    return get_extension(EXT_REASONING_SERVICE, v)


__all__ = (
    'ReasoningService',
    'ReasoningServicePluginBase',
    'InferenceResult',
    'DefaultReasoningService',
    'get_reasoning_service',
    'EXT_REASONING_SERVICE',
)
