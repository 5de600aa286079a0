"""Default LLM service implementation."""
from logging import Logger
from typing import Optional

from scitrera_app_framework import get_logger, Variables

from ...models.llm import LLMRequest, LLMResponse, LLMMessage, LLMRole
from .base import LLMProvider, LLMServicePluginBase, EXT_LLM_PROVIDER


class LLMService:
    """Generation port: text in, text out.

    Similar to EmbeddingService wrapping EmbeddingProvider.
    """

    def __init__(self, provider: LLMProvider, v: Variables = None):
        self.provider = provider
        self.logger = get_logger(v, name=self.__class__.__name__)
        self.logger.info(
            "Initialized LLMService with provider: %s, configured: %s",
            provider.__class__.__name__, provider.is_configured,
        )

    @property
    def is_configured(self) -> bool:
        return self.provider.is_configured

    async def complete(self, request: LLMRequest) -> LLMResponse:
        return await self.provider.complete(request)

    async def generate(
            self,
            prompt: str,
            system: Optional[str] = None,
            max_tokens: int = None,
            temperature: float = None,
    ) -> str:
        """Single-prompt generation.

        Args:
            prompt: User prompt
            system: Optional system instruction
            max_tokens: Maximum response tokens (None = provider default)
            temperature: Sampling temperature (None = provider default)

        Returns:
            Generated text
        """
        messages = []
        if system:
            messages.append(LLMMessage(role=LLMRole.SYSTEM, content=system))
        messages.append(LLMMessage(role=LLMRole.USER, content=prompt))

        response = await self.complete(LLMRequest(
            messages=messages,
            max_tokens=max_tokens,
            temperature=temperature,
        ))
        self.logger.debug(
            "Generation complete: model=%s, tokens=%s, finish=%s",
            response.model, response.total_tokens, response.finish_reason,
        )
        return response.content


class DefaultLLMServicePlugin(LLMServicePluginBase):
    """Default LLM service plugin."""
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> LLMService:
        return LLMService(provider=self.get_extension(EXT_LLM_PROVIDER, v), v=v)


def generation_available(llm_service: Optional[LLMService]) -> bool:
    """True when a generation port is attached and backed by a real provider."""
    return llm_service is not None and bool(getattr(llm_service, "is_configured", True))
