"""
LLM API — enhanced generation, selection, quality and chat endpoints

POST /api/enhanced-llm                 → select model, call upstream, post-process, score
POST /api/analyze-response-quality     → quality analysis only (no upstream call)
POST /api/select-model                 → strategy selection only (no upstream call)
POST /api/compare-models               → run the input through fixed models, score each reply
GET  /api/available-models             → model registry + response patterns
POST /api/llama                        → llama chat reply with history

Upstream failures are raised as LLMServiceError and rendered by the
application-level handler in app.main.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.dependencies import get_llm_service
from app.llm.router import MODEL_REGISTRY, RESPONSE_PATTERNS, StrategySelection
from app.schemas.llm import (
    AvailableModelsResponse,
    ChatRequest,
    ChatResponse,
    CompareModelsRequest,
    CompareModelsResponse,
    EnhancedLLMRequest,
    EnhancedLLMResponse,
    ErrorResponse,
    QualityRequest,
    QualityResponse,
    SelectModelRequest,
    SelectModelResponse,
)
from app.services.enhanced_llm import EnhancedLLMService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["LLM"])

ServiceDep = Annotated[EnhancedLLMService, Depends(get_llm_service)]

_UPSTREAM_ERRORS = {
    401: {"model": ErrorResponse, "description": "Invalid or missing API key"},
    422: {"model": ErrorResponse, "description": "Request validation failed"},
    429: {"model": ErrorResponse, "description": "Provider quota or rate limit exceeded"},
    500: {"model": ErrorResponse, "description": "Upstream call failed"},
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _selection_fields(selection: StrategySelection) -> dict:
    return {
        "analysis":   selection.analysis.to_dict(),
        "strategy":   selection.response_strategy.to_dict(),
        "confidence": selection.confidence,
    }


# ---------------------------------------------------------------------------
# Enhanced generation
# ---------------------------------------------------------------------------

@router.post(
    "/enhanced-llm",
    response_model=EnhancedLLMResponse,
    summary="Generate a response with content-aware model selection",
    responses=_UPSTREAM_ERRORS,
)
async def enhanced_llm(body: EnhancedLLMRequest, service: ServiceDep) -> EnhancedLLMResponse:
    text = body.input_text
    logger.info("EnhancedLLM API | chars=%d preview=%r", len(text), text[:100])

    result = await service.generate_enhanced_response(text, api_key=body.api_key, context=body.context)

    return EnhancedLLMResponse(
        response         = result.response,
        model            = result.selection.selected_model.name,
        quality_analysis = result.quality_analysis.to_dict(),
        timestamp        = result.timestamp,
        **_selection_fields(result.selection),
    )


@router.post(
    "/compare-models",
    response_model=CompareModelsResponse,
    summary="Run an input through the comparison models and score each reply",
    responses=_UPSTREAM_ERRORS,
)
async def compare_models(body: CompareModelsRequest, service: ServiceDep) -> CompareModelsResponse:
    logger.info("ModelComparison API | chars=%d preview=%r", len(body.text), body.text[:100])

    result    = await service.compare_models(body.text, api_key=body.api_key, context=body.context)
    selection = result.selection

    return CompareModelsResponse(
        comparison={
            "input":             result.input,
            "analysis":          selection.analysis.to_dict(),
            "recommended_model": selection.selected_model.name,
            "confidence":        selection.confidence,
            "comparisons":       [asdict(c) for c in result.comparisons],
        },
        timestamp=result.timestamp,
    )


@router.post(
    "/analyze-response-quality",
    response_model=QualityResponse,
    summary="Score a response on the eight quality metrics",
    responses={422: {"model": ErrorResponse}},
)
async def analyze_response_quality(body: QualityRequest, service: ServiceDep) -> QualityResponse:
    analysis = service.analyze_response_quality(body.response, body.content_type, body.context)
    logger.info("Quality API | content_type=%s score=%.2f", body.content_type, analysis.overall_score)
    return QualityResponse(quality_analysis=analysis.to_dict(), timestamp=_now())


@router.post(
    "/select-model",
    response_model=SelectModelResponse,
    summary="Preview model and strategy selection for an input",
    responses={422: {"model": ErrorResponse}},
)
async def select_model(body: SelectModelRequest, service: ServiceDep) -> SelectModelResponse:
    selection = service.select_model(body.text, body.context)
    return SelectModelResponse(
        selected_model = selection.selected_model.to_dict(),
        timestamp      = _now(),
        **_selection_fields(selection),
    )


@router.get(
    "/available-models",
    response_model=AvailableModelsResponse,
    summary="List registered models and per-content-type response patterns",
)
async def available_models() -> AvailableModelsResponse:
    patterns = {}
    for name, pattern in RESPONSE_PATTERNS.items():
        data = asdict(pattern)
        data["structure"] = list(pattern.structure)
        data["tone"]      = list(pattern.tone)
        patterns[name] = data

    return AvailableModelsResponse(
        models            = [m.to_dict() for m in MODEL_REGISTRY.values()],
        response_patterns = patterns,
        timestamp         = _now(),
    )


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------

@router.post(
    "/llama",
    response_model=ChatResponse,
    summary="Conversational reply using recent history",
    responses=_UPSTREAM_ERRORS,
)
async def chat(body: ChatRequest, service: ServiceDep) -> ChatResponse:
    history = [m.model_dump() for m in body.conversation_history]
    result  = await service.generate_chat_response(body.text, history=history, api_key=body.api_key)
    return ChatResponse(response=result.response, model=result.model, timestamp=result.timestamp)

