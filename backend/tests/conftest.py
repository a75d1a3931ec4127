"""
Root conftest.py — Shared fixtures for ALL tests (unit + integration)

Fixture hierarchy:
  function-scoped : mock_gateway, seeded_rng, llm_service,
                    app_with_overrides, async_client

Environment strategy:
  - Provider keys are dummies; no test ever reaches a real provider.
  - The gateway is replaced by an AsyncMock whose complete() returns a
    canned GatewayResponse (override .return_value / .side_effect per test).
  - Random choices (review opening, staff persona) use a seeded Random.

How to run:
  pytest                                  # all tests
  pytest -m unit                          # unit tests only (fast, no I/O)
  pytest -m integration                   # API-level tests (still no network)
  pytest tests/unit/test_quality.py       # single file
"""

from __future__ import annotations

import os
import random
from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import AsyncClient

# ─────────────────────────────────────────────────────────────────────────────
# Patch settings BEFORE any app imports so modules read test config
# ─────────────────────────────────────────────────────────────────────────────

os.environ.setdefault("NVIDIA_API_KEY",    "nvapi-test-key")
os.environ.setdefault("OPENAI_API_KEY",    "sk-test-key")
os.environ.setdefault("ANTHROPIC_API_KEY", "sk-ant-test-key")
os.environ.setdefault("GEMINI_API_KEY",    "gemini-test-key")
os.environ.setdefault("APP_ENV",           "development")
os.environ.setdefault("DEBUG",             "true")


# ─────────────────────────────────────────────────────────────────────────────
# Canned completions
# ─────────────────────────────────────────────────────────────────────────────

DEFAULT_COMPLETION = (
    "Here's my take. I think the food was great and the staff were friendly. "
    "However, the wait was too long. I would recommend it overall."
)


def make_gateway_response(content: str = DEFAULT_COMPLETION, model: str = "meta/llama-3.1-70b-instruct"):
    from app.llm.gateway import GatewayResponse
    return GatewayResponse(
        content    = content,
        model_used = model,
        provider   = "nvidia",
        latency_ms = 12.5,
        request_id = "test-request-id",
    )


# ─────────────────────────────────────────────────────────────────────────────
# Service fixtures
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def mock_gateway():
    """
    LLMGateway stand-in.

    build_messages is the real static helper so tests can inspect the exact
    message list passed to complete().
    """
    from app.llm.gateway import LLMGateway

    gateway = AsyncMock(spec=LLMGateway)
    gateway.build_messages.side_effect = LLMGateway.build_messages
    gateway.complete.return_value = make_gateway_response()
    return gateway


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def llm_service(mock_gateway, seeded_rng):
    from app.services.enhanced_llm import EnhancedLLMService
    return EnhancedLLMService(gateway=mock_gateway, rng=seeded_rng)


# ─────────────────────────────────────────────────────────────────────────────
# FastAPI test client with service dependency override
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def app_with_overrides(llm_service):
    """
    FastAPI app with the LLM service overridden:
      - get_llm_service → llm_service (mock gateway, seeded RNG)

    Use this for fast API-level tests that never touch a provider.
    """
    from app.api.dependencies import get_llm_service
    from app.main import app

    app.dependency_overrides[get_llm_service] = lambda: llm_service

    yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(app_with_overrides) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP test client using the overridden app.

    httpx >= 0.28 removed the 'app=' shortcut; use ASGITransport explicitly.
    """
    from httpx import ASGITransport
    transport = ASGITransport(app=app_with_overrides)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
