"""
Unit Tests — LLMGateway
════════════════════════
Coverage targets:
  ✅ build_messages: system first, history roles, user turn last
  ✅ API key resolution: per-request key beats settings; missing key → 401
  ✅ Provider dispatch and GatewayResponse metadata
  ✅ Empty completions replaced with the placeholder text
  ✅ SDK exceptions normalised to LLMServiceError
  ✅ Provider adapters: ChatOpenAI base_url, Anthropic system param, Gemini config
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from app.core.config import settings
from app.llm.errors import INVALID_API_KEY, LLMServiceError
from app.llm.gateway import EMPTY_COMPLETION, GatewayResponse, LLMGateway
from app.llm.router import MODEL_REGISTRY, Provider


class AuthenticationError(Exception):
    pass


def _messages():
    return LLMGateway.build_messages(
        "be nice", "how was it?", history=[("user", "hi"), ("assistant", "hello!")],
    )


# ─────────────────────────────────────────────────────────────────────────────
# Message building
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.unit
class TestBuildMessages:

    def test_order_and_types(self):
        messages = _messages()
        assert [type(m) for m in messages] == [SystemMessage, HumanMessage, AIMessage, HumanMessage]
        assert messages[0].content  == "be nice"
        assert messages[-1].content == "how was it?"

    def test_without_history(self):
        messages = LLMGateway.build_messages("sys", "user")
        assert len(messages) == 2


# ─────────────────────────────────────────────────────────────────────────────
# Key resolution
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.unit
class TestApiKeyResolution:

    def test_request_key_wins(self):
        assert LLMGateway._resolve_api_key(Provider.NVIDIA, "nvapi-request") == "nvapi-request"

    def test_configured_key_used_when_absent(self, monkeypatch):
        monkeypatch.setattr(settings, "anthropic_api_key", "sk-ant-configured")
        assert LLMGateway._resolve_api_key(Provider.ANTHROPIC, None) == "sk-ant-configured"

    def test_missing_key_raises_401(self, monkeypatch):
        monkeypatch.setattr(settings, "nvidia_api_key", "")
        with pytest.raises(LLMServiceError) as exc_info:
            LLMGateway._resolve_api_key(Provider.NVIDIA, "")
        assert exc_info.value.code        == INVALID_API_KEY
        assert exc_info.value.status_code == 401


# ─────────────────────────────────────────────────────────────────────────────
# complete()
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.unit
class TestComplete:

    async def test_dispatches_openai_compatible(self, monkeypatch):
        fake = AsyncMock(return_value="Great question!")
        monkeypatch.setattr(LLMGateway, "_call_openai_compatible", staticmethod(fake))

        response = await LLMGateway(timeout=5).complete(
            _messages(), MODEL_REGISTRY["llama"], temperature=0.6, max_tokens=100, api_key="k",
        )

        assert isinstance(response, GatewayResponse)
        assert response.content    == "Great question!"
        assert response.model_used == "meta/llama-3.1-70b-instruct"
        assert response.provider   == "nvidia"
        assert response.latency_ms >= 0
        assert response.request_id
        assert fake.await_args.args[2] == "k"

    async def test_dispatches_anthropic(self, monkeypatch):
        fake = AsyncMock(return_value="Sorry to hear that.")
        monkeypatch.setattr(LLMGateway, "_call_anthropic", staticmethod(fake))

        response = await LLMGateway().complete(
            _messages(), MODEL_REGISTRY["claude"], temperature=0.3, max_tokens=100, api_key="k",
        )
        assert response.provider == "anthropic"
        fake.assert_awaited_once()

    async def test_empty_completion_placeholder(self, monkeypatch):
        monkeypatch.setattr(LLMGateway, "_call_gemini", staticmethod(AsyncMock(return_value="")))

        response = await LLMGateway().complete(
            _messages(), MODEL_REGISTRY["gemini"], temperature=0.7, max_tokens=100, api_key="k",
        )
        assert response.content == EMPTY_COMPLETION

    async def test_unclassified_error_uses_operation_code(self, monkeypatch):
        fake = AsyncMock(side_effect=RuntimeError("connection reset"))
        monkeypatch.setattr(LLMGateway, "_call_openai_compatible", staticmethod(fake))

        with pytest.raises(LLMServiceError) as exc_info:
            await LLMGateway().complete(
                _messages(), MODEL_REGISTRY["gpt4"], temperature=0.4, max_tokens=100,
                api_key="k", error_code="ENHANCED_LLM_ERROR",
            )
        assert exc_info.value.code        == "ENHANCED_LLM_ERROR"
        assert exc_info.value.status_code == 500
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    async def test_auth_error_classified(self, monkeypatch):
        fake = AsyncMock(side_effect=AuthenticationError("invalid x-api-key"))
        monkeypatch.setattr(LLMGateway, "_call_openai_compatible", staticmethod(fake))

        with pytest.raises(LLMServiceError) as exc_info:
            await LLMGateway().complete(
                _messages(), MODEL_REGISTRY["llama"], temperature=0.6, max_tokens=100, api_key="k",
            )
        assert exc_info.value.code == INVALID_API_KEY


# ─────────────────────────────────────────────────────────────────────────────
# Provider adapters
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.unit
class TestProviderAdapters:

    async def test_chat_openai_uses_nvidia_base_url(self):
        with patch("langchain_openai.ChatOpenAI") as chat_cls:
            chat_cls.return_value.ainvoke = AsyncMock(return_value=AIMessage(content="hello"))

            content = await LLMGateway._call_openai_compatible(
                _messages(), MODEL_REGISTRY["llama"], "nvapi-k", 0.6, 100, 0.85, 5.0,
            )

        assert content == "hello"
        kwargs = chat_cls.call_args.kwargs
        assert kwargs["base_url"] == settings.nvidia_base_url
        assert kwargs["model"]    == "meta/llama-3.1-70b-instruct"
        assert kwargs["top_p"]    == 0.85

    async def test_chat_openai_uses_openai_base_url(self):
        with patch("langchain_openai.ChatOpenAI") as chat_cls:
            chat_cls.return_value.ainvoke = AsyncMock(return_value=AIMessage(content="ok"))
            await LLMGateway._call_openai_compatible(
                _messages(), MODEL_REGISTRY["gpt4"], "sk-k", 0.4, 100, None, 5.0,
            )
        assert chat_cls.call_args.kwargs["base_url"] == settings.openai_base_url

    async def test_anthropic_system_prompt_is_separate(self):
        with patch("anthropic.AsyncAnthropic") as client_cls:
            create = AsyncMock(return_value=SimpleNamespace(content=[SimpleNamespace(text="Hi there")]))
            client_cls.return_value.messages.create = create

            content = await LLMGateway._call_anthropic(
                _messages(), MODEL_REGISTRY["claude"], "sk-ant-k", 0.3, 100, 5.0,
            )

        assert content == "Hi there"
        kwargs = create.await_args.kwargs
        assert kwargs["system"] == "be nice"
        assert kwargs["messages"] == [
            {"role": "user",      "content": "hi"},
            {"role": "assistant", "content": "hello!"},
            {"role": "user",      "content": "how was it?"},
        ]
        assert client_cls.call_args.kwargs["default_headers"] == {
            "anthropic-version": settings.anthropic_version,
        }

    async def test_anthropic_empty_content(self):
        with patch("anthropic.AsyncAnthropic") as client_cls:
            client_cls.return_value.messages.create = AsyncMock(return_value=SimpleNamespace(content=[]))
            content = await LLMGateway._call_anthropic(
                _messages(), MODEL_REGISTRY["claude"], "sk-ant-k", 0.3, 100, 5.0,
            )
        assert content == ""

    async def test_gemini_flattens_prompt(self):
        model = MagicMock()
        model.generate_content_async = AsyncMock(return_value=SimpleNamespace(text="Creative answer"))

        with patch("google.generativeai.configure") as configure, \
             patch("google.generativeai.GenerativeModel", return_value=model):
            content = await LLMGateway._call_gemini(
                _messages(), MODEL_REGISTRY["gemini"], "gemini-k", 0.7, 256, None,
            )

        assert content == "Creative answer"
        configure.assert_called_once_with(api_key="gemini-k")
        prompt = model.generate_content_async.await_args.args[0]
        assert prompt == "be nice\n\nhi\n\nhello!\n\nhow was it?"
        config = model.generate_content_async.await_args.kwargs["generation_config"]
        assert config.max_output_tokens == 256
        assert config.top_p == 0.9
