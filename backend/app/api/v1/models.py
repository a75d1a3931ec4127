"""
Model catalog API

GET /api/models              → every use-case model configuration
GET /api/models/{use_case}   → configurations for one use case (404 when none)
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from app.llm.router import USE_CASE_DESCRIPTIONS, USE_CASE_MODELS, models_for_use_case
from app.schemas.llm import ErrorResponse, ModelCatalogResponse, UseCaseModelsResponse

router = APIRouter(prefix="/models", tags=["Models"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("", response_model=ModelCatalogResponse, summary="List use-case model configurations")
async def list_models() -> ModelCatalogResponse:
    return ModelCatalogResponse(
        models    = [m.to_dict() for m in USE_CASE_MODELS],
        use_cases = dict(USE_CASE_DESCRIPTIONS),
        timestamp = _now(),
    )


@router.get(
    "/{use_case}",
    response_model=UseCaseModelsResponse,
    summary="Model configurations for one use case",
    responses={404: {"model": ErrorResponse}},
)
async def models_by_use_case(use_case: str, request: Request):
    matches = models_for_use_case(use_case)
    if not matches:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=ErrorResponse(
                error_code="USE_CASE_NOT_FOUND",
                message=f"No models found for use case: {use_case}",
                request_id=request.headers.get("X-Request-ID"),
            ).model_dump(mode="json"),
        )

    return UseCaseModelsResponse(
        models      = [m.to_dict() for m in matches],
        use_case    = use_case,
        description = USE_CASE_DESCRIPTIONS.get(use_case, "No description available"),
        timestamp   = _now(),
    )
