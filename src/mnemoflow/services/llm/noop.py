"""No-op LLM provider - raises LLMNotConfiguredError (default)."""
from logging import Logger

from scitrera_app_framework import get_logger
from scitrera_app_framework.api import Variables

from ...config import LLMProviderType
from ...models.llm import LLMRequest, LLMResponse
from .base import LLMProvider, LLMProviderPluginBase, LLMNotConfiguredError

_NOT_CONFIGURED_MESSAGE = (
    "LLM provider not configured. Set MNEMOFLOW_LLM_PROVIDER=openai "
    "(and MNEMOFLOW_LLM_OPENAI_API_KEY) to enable generation features."
)


class NoOpLLMProvider(LLMProvider):
    """Default LLM provider that raises when called.

    Generation-dependent features (summaries, importance judgments, contradiction checks,
    categorization, fact extraction, consolidation, reasoning) require explicit configuration.
    """

    def __init__(self, v: Variables = None):
        self.logger = get_logger(v, name=self.__class__.__name__)
        self.logger.info("Initialized NoOpLLMProvider - generation calls will raise LLMNotConfiguredError.")

    async def complete(self, request: LLMRequest) -> LLMResponse:
        raise LLMNotConfiguredError(_NOT_CONFIGURED_MESSAGE)

    @property
    def default_model(self) -> str:
        return "not-configured"

    @property
    def is_configured(self) -> bool:
        return False


class NoOpLLMProviderPlugin(LLMProviderPluginBase):
    PROVIDER_NAME = LLMProviderType.NOOP

    def initialize(self, v: Variables, logger: Logger) -> NoOpLLMProvider:
        return NoOpLLMProvider(v=v)
