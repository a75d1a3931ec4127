"""
Voice API — transcript-driven endpoints

POST /api/voice/analyze               → structured transcript analysis (JSON, with fallback)
POST /api/voice/generate-review       → review written from a transcript
POST /api/voice/suggest-location      → places mentioned or implied by a transcript
POST /api/voice/customer-service-response → staff-persona reply to a review

Analysis and location endpoints always return 200 when the upstream call
succeeds: unparseable model output yields a neutral fallback record and
used_fallback=true.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.dependencies import get_llm_service
from app.schemas.llm import (
    CustomerServiceRequest,
    CustomerServiceResponse,
    ErrorResponse,
    GenerateReviewRequest,
    LocationRequest,
    LocationResponse,
    ReviewResponse,
    VoiceAnalysisResponse,
    VoiceAnalyzeRequest,
)
from app.services.enhanced_llm import EnhancedLLMService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/voice", tags=["Voice"])

ServiceDep = Annotated[EnhancedLLMService, Depends(get_llm_service)]

_ERRORS = {
    401: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/analyze", response_model=VoiceAnalysisResponse, responses=_ERRORS)
async def analyze_voice(body: VoiceAnalyzeRequest, service: ServiceDep) -> VoiceAnalysisResponse:
    result = await service.analyze_voice_input(body.transcript, api_key=body.api_key)
    logger.info("Voice API | analyze fallback=%s", result.used_fallback)
    return VoiceAnalysisResponse(
        analysis      = result.analysis,
        used_fallback = result.used_fallback,
        model         = result.model,
        timestamp     = result.timestamp,
    )


@router.post("/generate-review", response_model=ReviewResponse, responses=_ERRORS)
async def generate_review(body: GenerateReviewRequest, service: ServiceDep) -> ReviewResponse:
    result = await service.generate_review_from_voice(
        body.transcript, review_type=body.review_type, api_key=body.api_key,
    )
    return ReviewResponse(
        review      = result.review,
        review_type = result.review_type,
        opening     = result.opening,
        model       = result.model,
        timestamp   = result.timestamp,
    )


@router.post("/suggest-location", response_model=LocationResponse, responses=_ERRORS)
async def location_suggestions(body: LocationRequest, service: ServiceDep) -> LocationResponse:
    location = body.current_location.model_dump() if body.current_location else None
    result   = await service.generate_location_suggestions(
        body.transcript, current_location=location, api_key=body.api_key,
    )
    logger.info(
        "Voice API | locations=%d fallback=%s", len(result.suggestions), result.used_fallback,
    )
    return LocationResponse(
        suggestions   = result.suggestions,
        analysis      = result.analysis,
        used_fallback = result.used_fallback,
        model         = result.model,
        timestamp     = result.timestamp,
    )


@router.post("/customer-service-response", response_model=CustomerServiceResponse, responses=_ERRORS)
async def customer_service_response(body: CustomerServiceRequest, service: ServiceDep) -> CustomerServiceResponse:
    result = await service.generate_customer_service_response(body.review, api_key=body.api_key)
    logger.info("Voice API | customer service reply staff=%s", result.staff_name)
    return CustomerServiceResponse(
        response   = result.response,
        staff_name = result.staff_name,
        model      = result.model,
        timestamp  = result.timestamp,
    )
