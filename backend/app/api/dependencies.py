"""
Shared FastAPI dependencies.

The service is a process-wide singleton: it holds no per-request state, and
the provider SDK clients it creates are request-scoped. Tests replace it via
app.dependency_overrides[get_llm_service].
"""

from __future__ import annotations

from app.services.enhanced_llm import EnhancedLLMService

_service: EnhancedLLMService | None = None


def get_llm_service() -> EnhancedLLMService:
    global _service
    if _service is None:
        _service = EnhancedLLMService()
    return _service
