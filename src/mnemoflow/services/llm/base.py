"""LLM Service - Pluggable generation provider interface."""
from abc import ABC, abstractmethod

from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...config import (
    MNEMOFLOW_LLM_PROVIDER, DEFAULT_MNEMOFLOW_LLM_PROVIDER,
    MNEMOFLOW_LLM_SERVICE, DEFAULT_MNEMOFLOW_LLM_SERVICE,
)
from ...models.llm import LLMRequest, LLMResponse

from .._constants import EXT_LLM_PROVIDER, EXT_LLM_SERVICE


class ConfigurationError(Exception):
    """Raised when an operation needs a collaborator that was not configured."""
    pass


class LLMNotConfiguredError(ConfigurationError):
    """Raised when generation is requested but no LLM provider is configured."""
    pass


class LLMProvider(ABC):
    """Abstract LLM provider interface.

    Provides low-level access to completions; LLMService builds the text-in/text-out port on top.
    """

    # Subclasses should set these; used by resolve_params().
    default_max_tokens: int | None = None
    default_temperature: float | None = None

    def resolve_params(self, request: LLMRequest) -> tuple[int | None, float | None]:
        """Effective max_tokens and temperature: request values win over provider defaults."""
        max_tokens = request.max_tokens if request.max_tokens is not None else self.default_max_tokens
        temperature = request.temperature if request.temperature is not None else self.default_temperature
        return max_tokens, temperature

    @abstractmethod
    async def complete(self, request: LLMRequest) -> LLMResponse:
        """Generate completion from LLM.

        Args:
            request: LLM request with messages and parameters

        Returns:
            LLM response with content and token counts
        """
        pass

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Default model name for this provider."""
        pass

    @property
    def is_configured(self) -> bool:
        """Whether this provider can serve completions."""
        return True


# noinspection PyAbstractClass
class LLMProviderPluginBase(Plugin):
    """Base plugin for LLM providers."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_LLM_PROVIDER}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_LLM_PROVIDER

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MNEMOFLOW_LLM_PROVIDER, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MNEMOFLOW_LLM_PROVIDER, DEFAULT_MNEMOFLOW_LLM_PROVIDER)


# noinspection PyAbstractClass
class LLMServicePluginBase(Plugin):
    """Base plugin for LLM service."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_LLM_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_LLM_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MNEMOFLOW_LLM_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MNEMOFLOW_LLM_SERVICE, DEFAULT_MNEMOFLOW_LLM_SERVICE)

    def get_dependencies(self, v: Variables):
        return (EXT_LLM_PROVIDER,)
