"""Tests for the OpenAI-compatible adapters with the client replaced by mocks."""
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from mnemoflow.models.llm import LLMMessage, LLMRequest, LLMRole

pytest.importorskip("openai")

from mnemoflow.services.embedding.openai import OpenAIEmbeddingProvider  # noqa: E402
from mnemoflow.services.llm.openai import OpenAILLMProvider  # noqa: E402


def _embedding_response(*vectors_by_index):
    return SimpleNamespace(data=[SimpleNamespace(index=i, embedding=vec) for i, vec in vectors_by_index])


class TestOpenAIEmbeddingProvider:
    @pytest.mark.asyncio
    async def test_batch_is_reordered_by_index(self, v):
        provider = OpenAIEmbeddingProvider(v=v, api_key="x", dimensions=2)
        provider.client = MagicMock()
        provider.client.embeddings.create = AsyncMock(return_value=_embedding_response((1, [0.0, 1.0]), (0, [1.0, 0.0])))

        assert await provider.embed_batch(["first", "second"]) == [[1.0, 0.0], [0.0, 1.0]]
        kwargs = provider.client.embeddings.create.await_args.kwargs
        assert kwargs["dimensions"] == 2

    @pytest.mark.asyncio
    async def test_other_models_get_no_dimensions(self, v):
        provider = OpenAIEmbeddingProvider(v=v, api_key="x", model="nomic-embed-text", dimensions=768)
        provider.client = MagicMock()
        provider.client.embeddings.create = AsyncMock(return_value=_embedding_response((0, [0.5])))

        assert await provider.embed("hello") == [0.5]
        assert "dimensions" not in provider.client.embeddings.create.await_args.kwargs

    @pytest.mark.asyncio
    async def test_empty_batch_skips_the_call(self, v):
        provider = OpenAIEmbeddingProvider(v=v, api_key="x")
        provider.client = MagicMock()
        provider.client.embeddings.create = AsyncMock()

        assert await provider.embed_batch([]) == []
        provider.client.embeddings.create.assert_not_awaited()


class TestOpenAILLMProvider:
    @pytest.mark.asyncio
    async def test_complete_maps_request_and_usage(self, v):
        provider = OpenAILLMProvider(api_key="x", model="small-model", default_max_tokens=64, v=v)
        completion = SimpleNamespace(
            model="small-model",
            choices=[SimpleNamespace(message=SimpleNamespace(content="hi"), finish_reason="stop")],
            usage=SimpleNamespace(prompt_tokens=3, completion_tokens=1, total_tokens=4),
        )
        provider._client = MagicMock()
        provider._client.chat.completions.create = AsyncMock(return_value=completion)

        response = await provider.complete(LLMRequest(
            messages=[LLMMessage(LLMRole.USER, "hello")], temperature=0.2,
        ))

        assert (response.content, response.total_tokens) == ("hi", 4)
        kwargs = provider._client.chat.completions.create.await_args.kwargs
        assert kwargs["messages"] == [{"role": "user", "content": "hello"}]
        assert kwargs["max_completion_tokens"] == 64
        assert kwargs["temperature"] == 0.2
        assert "stop" not in kwargs

    @pytest.mark.asyncio
    async def test_missing_usage_and_content(self, v):
        provider = OpenAILLMProvider(api_key="x", v=v)
        completion = SimpleNamespace(
            model="m", choices=[SimpleNamespace(message=SimpleNamespace(content=None), finish_reason=None)], usage=None,
        )
        provider._client = MagicMock()
        provider._client.chat.completions.create = AsyncMock(return_value=completion)

        response = await provider.complete(LLMRequest(messages=[LLMMessage(LLMRole.USER, "x")]))

        assert (response.content, response.finish_reason, response.total_tokens) == ("", "stop", 0)
