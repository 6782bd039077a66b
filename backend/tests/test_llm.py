"""
Unit tests for the LLM module.
Tests LLMMessage, LLMResponse, providers, and factory.
"""

import pytest
import httpx
from unittest.mock import AsyncMock, patch, MagicMock

from maintlog.llm.base import LLMMessage, LLMResponse
from maintlog.llm.anthropic_provider import AnthropicProvider
from maintlog.llm.openai_provider import OpenAIProvider
from maintlog.llm.factory import create_llm_provider


def mock_async_client(mock_client, mock_response):
    """Wire a patched httpx.AsyncClient to return ``mock_response`` from post()."""
    mock_instance = AsyncMock()
    mock_instance.post.return_value = mock_response
    mock_instance.__aenter__ = AsyncMock(return_value=mock_instance)
    mock_instance.__aexit__ = AsyncMock(return_value=False)
    mock_client.return_value = mock_instance
    return mock_instance


def json_response(data):
    response = MagicMock()
    response.json.return_value = data
    response.raise_for_status = MagicMock()
    return response


class TestLLMMessage:
    """Tests for LLMMessage dataclass."""

    def test_text_message(self):
        msg = LLMMessage.text("user", "Pump P-101 is leaking")
        assert msg.role == "user"
        assert msg.content == "Pump P-101 is leaking"


class TestLLMResponse:
    """Tests for LLMResponse dataclass."""

    def test_basic_response(self):
        resp = LLMResponse(content="Hello!", model="gpt-4o")
        assert resp.content == "Hello!"
        assert resp.model == "gpt-4o"
        assert resp.usage == {}
        assert resp.raw is None


class TestOpenAIProvider:
    """Tests for OpenAI-compatible provider."""

    def test_init_defaults(self):
        provider = OpenAIProvider(api_key="test-key")
        assert provider.api_key == "test-key"
        assert provider.model == "gpt-4o"
        assert provider.base_url == "https://api.openai.com/v1"
        assert provider.default_max_tokens == 4096

    def test_headers(self):
        provider = OpenAIProvider(api_key="sk-test123")
        headers = provider._get_headers()
        assert headers["Authorization"] == "Bearer sk-test123"
        assert headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_chat_completion_success(self):
        provider = OpenAIProvider(api_key="test-key")
        mock_response = json_response({
            "choices": [{"message": {"content": "Test response"}}],
            "model": "gpt-4o",
            "usage": {"prompt_tokens": 10, "completion_tokens": 5}
        })

        with patch("httpx.AsyncClient") as mock_client:
            mock_instance = mock_async_client(mock_client, mock_response)

            result = await provider.chat_completion(
                [LLMMessage.text("user", "Hello")],
                system="system prompt",
                max_tokens=100,
            )

            assert result.content == "Test response"
            assert result.model == "gpt-4o"
            url = mock_instance.post.call_args.args[0]
            payload = mock_instance.post.call_args.kwargs["json"]
            assert url == "https://api.openai.com/v1/chat/completions"
            assert payload["messages"][0] == {"role": "system", "content": "system prompt"}
            assert payload["messages"][1] == {"role": "user", "content": "Hello"}
            assert payload["max_tokens"] == 100
            assert payload["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_chat_completion_http_error_propagates(self):
        provider = OpenAIProvider(api_key="test-key")
        mock_response = MagicMock()
        mock_response.raise_for_status = MagicMock(side_effect=httpx.HTTPStatusError(
            "500 Server Error", request=MagicMock(), response=MagicMock()
        ))

        with patch("httpx.AsyncClient") as mock_client:
            mock_async_client(mock_client, mock_response)

            with pytest.raises(httpx.HTTPStatusError):
                await provider.chat_completion([LLMMessage.text("user", "Hello")])


class TestAnthropicProvider:
    """Tests for the Anthropic Messages API provider."""

    def test_init_defaults(self):
        provider = AnthropicProvider(api_key="test-key")
        assert provider.base_url == "https://api.anthropic.com/v1"
        assert provider.model.startswith("claude")

    def test_headers(self):
        provider = AnthropicProvider(api_key="ant-key")
        headers = provider._get_headers()
        assert headers["x-api-key"] == "ant-key"
        assert headers["anthropic-version"] == "2023-06-01"

    def test_format_messages_drops_leading_assistant_turns(self):
        provider = AnthropicProvider(api_key="test")
        formatted = provider._format_messages([
            LLMMessage.text("assistant", "Hello, what happened?"),
            LLMMessage.text("user", "The belt slipped"),
            LLMMessage.text("assistant", "What caused it?"),
        ])
        assert [m["role"] for m in formatted] == ["user", "assistant"]

    @pytest.mark.asyncio
    async def test_chat_completion_success(self):
        provider = AnthropicProvider(api_key="test-key")
        mock_response = json_response({
            "content": [
                {"type": "text", "text": '{"message": '},
                {"type": "text", "text": '"ok"}'},
            ],
            "model": "claude-3-5-sonnet-20241022",
            "usage": {"input_tokens": 12, "output_tokens": 4},
            "stop_reason": "end_turn",
        })

        with patch("httpx.AsyncClient") as mock_client:
            mock_instance = mock_async_client(mock_client, mock_response)

            result = await provider.chat_completion(
                [LLMMessage.text("user", "Hello")],
                system="system prompt",
            )

            assert result.content == '{"message": "ok"}'
            payload = mock_instance.post.call_args.kwargs["json"]
            assert payload["system"] == "system prompt"
            assert payload["max_tokens"] == 4096
            assert payload["messages"] == [{"role": "user", "content": "Hello"}]


class TestLLMFactory:
    """Tests for LLM provider factory."""

    def test_create_openai_provider(self):
        provider = create_llm_provider(
            provider="openai",
            api_key="test-key",
            model="gpt-4o-mini"
        )
        assert isinstance(provider, OpenAIProvider)
        assert provider.model == "gpt-4o-mini"

    def test_create_anthropic_provider(self):
        provider = create_llm_provider(provider="anthropic", api_key="test-key")
        assert isinstance(provider, AnthropicProvider)

    def test_extra_parameters_are_passed_through(self):
        provider = create_llm_provider(
            provider="anthropic", api_key="key", default_max_tokens=2048, timeout=30.0
        )
        assert provider.default_max_tokens == 2048
        assert provider.timeout == 30.0

    def test_no_api_key_returns_none(self):
        provider = create_llm_provider(provider="openai", api_key="")
        assert provider is None

    def test_unsupported_provider_raises(self):
        with pytest.raises(ValueError, match="Unsupported"):
            create_llm_provider(provider="unsupported", api_key="key")

    def test_custom_base_url(self):
        provider = create_llm_provider(
            provider="openai",
            api_key="key",
            base_url="https://custom.api.com/v1"
        )
        assert provider.base_url == "https://custom.api.com/v1"
