"""Generation provider for OpenAI and OpenAI-compatible chat endpoints."""
from logging import Logger

from scitrera_app_framework import get_logger
from scitrera_app_framework.api import Variables

from ...config import LLMProviderType
from ...models.llm import LLMRequest, LLMResponse
from .base import LLMProvider, LLMProviderPluginBase

MNEMOFLOW_LLM_OPENAI_API_KEY = 'MNEMOFLOW_LLM_OPENAI_API_KEY'
MNEMOFLOW_LLM_OPENAI_BASE_URL = 'MNEMOFLOW_LLM_OPENAI_BASE_URL'
MNEMOFLOW_LLM_OPENAI_MODEL = 'MNEMOFLOW_LLM_OPENAI_MODEL'
MNEMOFLOW_LLM_MAX_TOKENS = 'MNEMOFLOW_LLM_MAX_TOKENS'
MNEMOFLOW_LLM_TEMPERATURE = 'MNEMOFLOW_LLM_TEMPERATURE'

DEFAULT_LLM_OPENAI_MODEL = 'gpt-4o-mini'


def _optional(type_fn):
    def parse(value):
        return None if value in (None, '') else type_fn(value)

    return parse


class OpenAILLMProvider(LLMProvider):
    """Chat-completions provider.

    ``base_url`` points it at Azure OpenAI, Ollama, vLLM or any other compatible server.
    """

    def __init__(
            self,
            api_key: str,
            base_url: str = None,
            model: str = DEFAULT_LLM_OPENAI_MODEL,
            default_max_tokens: int | None = None,
            default_temperature: float | None = None,
            v: Variables = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self.default_max_tokens = default_max_tokens
        self.default_temperature = default_temperature
        self._client = None
        self.logger = get_logger(v, name=self.__class__.__name__)
        self.logger.info("Initialized OpenAILLMProvider: base_url=%s, model=%s", base_url, model)

    @property
    def client(self):
        if self._client is None:
            try:
                from openai import AsyncOpenAI
            except ImportError:
                raise ImportError("openai package not installed. Install with: pip install mnemoflow[openai]")
            self._client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    @property
    def default_model(self) -> str:
        return self.model

    def _request_kwargs(self, request: LLMRequest) -> dict:
        max_tokens, temperature = self.resolve_params(request)
        kwargs = {
            'model': request.model or self.model,
            'messages': [{'role': m.role.value, 'content': m.content} for m in request.messages],
        }
        if request.stop:
            kwargs['stop'] = request.stop
        if max_tokens is not None:
            kwargs['max_completion_tokens'] = max_tokens
        if temperature is not None:
            kwargs['temperature'] = temperature
        return kwargs

    async def complete(self, request: LLMRequest) -> LLMResponse:
        kwargs = self._request_kwargs(request)
        self.logger.debug("Chat completion: model=%s, messages=%d", kwargs['model'], len(kwargs['messages']))

        response = await self.client.chat.completions.create(**kwargs)
        choice = response.choices[0]
        usage = response.usage

        result = LLMResponse(content=choice.message.content or "", model=response.model,
                             finish_reason=choice.finish_reason or "stop")
        if usage is not None:
            result.prompt_tokens = usage.prompt_tokens
            result.completion_tokens = usage.completion_tokens
            result.total_tokens = usage.total_tokens
        return result


class OpenAILLMProviderPlugin(LLMProviderPluginBase):
    PROVIDER_NAME = LLMProviderType.OPENAI

    def initialize(self, v: Variables, logger: Logger) -> OpenAILLMProvider:
        return OpenAILLMProvider(
            api_key=v.environ(MNEMOFLOW_LLM_OPENAI_API_KEY, default='x'),
            base_url=v.environ(MNEMOFLOW_LLM_OPENAI_BASE_URL, default=None),
            model=v.environ(MNEMOFLOW_LLM_OPENAI_MODEL, default=DEFAULT_LLM_OPENAI_MODEL),
            default_max_tokens=v.environ(MNEMOFLOW_LLM_MAX_TOKENS, default=None, type_fn=_optional(int)),
            default_temperature=v.environ(MNEMOFLOW_LLM_TEMPERATURE, default=None, type_fn=_optional(float)),
            v=v,
        )
