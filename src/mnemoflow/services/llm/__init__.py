"""LLM (generation) service package."""
from .base import (
    LLMProvider,
    LLMProviderPluginBase,
    LLMServicePluginBase,
    ConfigurationError,
    LLMNotConfiguredError,
    EXT_LLM_PROVIDER,
    EXT_LLM_SERVICE,
)
from .noop import NoOpLLMProvider
from .service_default import LLMService, generation_available

from scitrera_app_framework import Variables, get_extension


def get_llm_service(v: Variables = None) -> LLMService:
    """Get the LLM service instance."""
    return get_extension(EXT_LLM_SERVICE, v)


__all__ = (
    'LLMProvider',
    'LLMProviderPluginBase',
    'LLMServicePluginBase',
    'LLMService',
    'generation_available',
    'NoOpLLMProvider',
    'ConfigurationError',
    'LLMNotConfiguredError',
    'get_llm_service',
    'EXT_LLM_PROVIDER',
    'EXT_LLM_SERVICE',
)
