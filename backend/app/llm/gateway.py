"""
LLM Gateway — Unified Entry Point for all upstream LLM calls

Every service call goes through LLMGateway.complete():

  ┌─────────────────────────────────────────────────────┐
  │  LLMGateway.complete(messages, model, ...)          │
  │       │                                             │
  │       ▼                                             │
  │  resolve API key   ← per-request key beats settings │
  │       │                                             │
  │       ▼                                             │
  │  provider dispatch                                  │
  │    NVIDIA / OpenAI → langchain ChatOpenAI           │
  │    Anthropic       → anthropic.AsyncAnthropic       │
  │    Gemini          → google.generativeai            │
  │       │                                             │
  │       ▼                                             │
  │  classify_provider_error()  ← on any SDK exception  │
  │       │                                             │
  │       ▼                                             │
  │  GatewayResponse (plain text + call metadata)       │
  └─────────────────────────────────────────────────────┘

NVIDIA's hosted Llama endpoint is OpenAI-compatible, so it shares the
ChatOpenAI client with a different base_url.

Provider SDKs are imported lazily inside the _call_* helpers; a deployment
that never routes to Gemini never imports google.generativeai.

Usage::

    gateway  = LLMGateway()
    messages = gateway.build_messages(system_prompt, user_text)
    response = await gateway.complete(messages, MODEL_REGISTRY["llama"], temperature=0.6, max_tokens=3072)
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from app.core.config import settings
from app.llm.errors import INVALID_API_KEY, LLMServiceError, classify_provider_error
from app.llm.router import ModelConfig, Provider

logger = logging.getLogger(__name__)

EMPTY_COMPLETION = "No response generated"


# ---------------------------------------------------------------------------
# Response dataclass
# ---------------------------------------------------------------------------

@dataclass
class GatewayResponse:
    """The result of a single upstream LLM call."""
    content:    str
    model_used: str
    provider:   str
    latency_ms: float
    request_id: str


# ---------------------------------------------------------------------------
# LLMGateway
# ---------------------------------------------------------------------------

class LLMGateway:
    """
    Provider-agnostic LLM interface.

    Instantiate once per application and share; it holds no per-request state.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout if timeout is not None else settings.llm_request_timeout

    async def complete(
        self,
        messages:    Sequence[BaseMessage],
        model:       ModelConfig,
        temperature: float,
        max_tokens:  int,
        api_key:     str | None = None,
        top_p:       float | None = None,
        error_code:  str = "LLM_ERROR",
    ) -> GatewayResponse:
        """
        Send one chat completion request and return its text.

        Args:
            messages:   LangChain message list (SystemMessage + HumanMessage, etc.)
            model:      Registry entry naming provider and model id.
            api_key:    Per-request key; falls back to the configured key.
            error_code: Code reported for failures that are not auth / quota / rate limit.

        Raises:
            LLMServiceError: For a missing key or any provider failure.
        """
        key = self._resolve_api_key(model.provider, api_key)

        t0 = time.perf_counter()
        try:
            if model.provider in (Provider.NVIDIA, Provider.OPENAI):
                content = await self._call_openai_compatible(
                    messages, model, key, temperature, max_tokens, top_p, self._timeout,
                )
            elif model.provider == Provider.ANTHROPIC:
                content = await self._call_anthropic(
                    messages, model, key, temperature, max_tokens, self._timeout,
                )
            elif model.provider == Provider.GEMINI:
                content = await self._call_gemini(
                    messages, model, key, temperature, max_tokens, top_p,
                )
            else:
                raise ValueError(f"Unsupported provider: {model.provider}")   # pragma: no cover
        except Exception as exc:
            logger.error(
                "LLMGateway | call failed model=%s provider=%s: %s",
                model.name, model.provider.value, exc,
            )
            raise classify_provider_error(exc, error_code) from exc

        latency = (time.perf_counter() - t0) * 1000

        response = GatewayResponse(
            content    = content or EMPTY_COMPLETION,
            model_used = model.name,
            provider   = model.provider.value,
            latency_ms = latency,
            request_id = str(uuid.uuid4()),
        )
        logger.info(
            "LLMGateway | model=%s provider=%s chars_out=%d latency_ms=%.1f",
            response.model_used, response.provider, len(response.content), response.latency_ms,
        )
        return response

    # -----------------------------------------------------------------------
    # Key resolution
    # -----------------------------------------------------------------------

    @staticmethod
    def _resolve_api_key(provider: Provider, api_key: str | None) -> str:
        if api_key:
            return api_key

        configured = {
            Provider.NVIDIA:    settings.nvidia_api_key,
            Provider.OPENAI:    settings.openai_api_key,
            Provider.ANTHROPIC: settings.anthropic_api_key,
            Provider.GEMINI:    settings.gemini_api_key,
        }.get(provider, "")
        if not configured:
            raise LLMServiceError(
                INVALID_API_KEY,
                "API key is required and must be a string",
                status_code=401,
            )
        return configured

    # -----------------------------------------------------------------------
    # Provider-specific calls
    # -----------------------------------------------------------------------

    @staticmethod
    async def _call_openai_compatible(
        messages:    Sequence[BaseMessage],
        model:       ModelConfig,
        api_key:     str,
        temperature: float,
        max_tokens:  int,
        top_p:       float | None,
        timeout:     float,
    ) -> str:
        from langchain_openai import ChatOpenAI

        base_url = settings.nvidia_base_url if model.provider == Provider.NVIDIA else settings.openai_base_url
        llm = ChatOpenAI(
            model=model.name,
            api_key=api_key,
            base_url=base_url,
            temperature=temperature,
            max_tokens=max_tokens,
            top_p=top_p,
            timeout=timeout,
        )
        result = await llm.ainvoke(list(messages))
        return result.content if isinstance(result.content, str) else ""

    @staticmethod
    async def _call_anthropic(
        messages:    Sequence[BaseMessage],
        model:       ModelConfig,
        api_key:     str,
        temperature: float,
        max_tokens:  int,
        timeout:     float,
    ) -> str:
        from anthropic import AsyncAnthropic

        # Anthropic takes the system prompt as a separate parameter.
        system = "\n\n".join(m.content for m in messages if isinstance(m, SystemMessage))
        turns = [
            {"role": "assistant" if isinstance(m, AIMessage) else "user", "content": m.content}
            for m in messages if not isinstance(m, SystemMessage)
        ]

        client = AsyncAnthropic(
            api_key=api_key,
            timeout=timeout,
            default_headers={"anthropic-version": settings.anthropic_version},
        )
        response = await client.messages.create(
            model=model.name,
            system=system,
            messages=turns,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        if not response.content:
            return ""
        return getattr(response.content[0], "text", "") or ""

    @staticmethod
    async def _call_gemini(
        messages:    Sequence[BaseMessage],
        model:       ModelConfig,
        api_key:     str,
        temperature: float,
        max_tokens:  int,
        top_p:       float | None,
    ) -> str:
        import google.generativeai as genai

        genai.configure(api_key=api_key)
        client = genai.GenerativeModel(model.name)
        # Gemini gets one flattened prompt: system text first, then the turns.
        prompt = "\n\n".join(str(m.content) for m in messages)
        generation_config = genai.types.GenerationConfig(
            temperature=temperature,
            max_output_tokens=max_tokens,
            top_p=top_p if top_p is not None else 0.9,
            top_k=40,
        )
        response = await client.generate_content_async(prompt, generation_config=generation_config)
        return response.text or ""

    # -----------------------------------------------------------------------
    # Convenience: build message list
    # -----------------------------------------------------------------------

    @staticmethod
    def build_messages(
        system_prompt: str,
        user_text:     str,
        history:       Sequence[tuple[str, str]] = (),
    ) -> list[BaseMessage]:
        """
        Build [SystemMessage, *history, HumanMessage].

        history items are (role, content) pairs; role "assistant" becomes an
        AIMessage, anything else a HumanMessage.
        """
        messages: list[BaseMessage] = [SystemMessage(content=system_prompt)]
        for role, content in history:
            if role == "assistant":
                messages.append(AIMessage(content=content))
            else:
                messages.append(HumanMessage(content=content))
        messages.append(HumanMessage(content=user_text))
        return messages
