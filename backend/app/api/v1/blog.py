"""
Blog API — restaurant blog post generation

POST /api/blog/generate   → blog post from a restaurant brief
GET  /api/blog/model      → the model configuration used for blog posts
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.dependencies import get_llm_service
from app.llm.prompts import BlogBrief
from app.llm.router import models_for_use_case
from app.schemas.llm import (
    BlogGenerateRequest,
    BlogModelResponse,
    BlogPostResponse,
    ErrorResponse,
)
from app.services.enhanced_llm import EnhancedLLMService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/blog", tags=["Blog"])

ServiceDep = Annotated[EnhancedLLMService, Depends(get_llm_service)]

BLOG_USE_CASE = "blog_generation"


@router.post(
    "/generate",
    response_model=BlogPostResponse,
    summary="Write a blog post for a restaurant",
    responses={
        401: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def generate_blog(body: BlogGenerateRequest, service: ServiceDep) -> BlogPostResponse:
    brief  = BlogBrief(**body.model_dump(exclude={"api_key"}))
    result = await service.generate_blog_post(brief, api_key=body.api_key)
    return BlogPostResponse(
        blog_post  = result.blog_post,
        word_count = result.word_count,
        model      = result.model,
        timestamp  = result.timestamp,
    )


@router.get("/model", response_model=BlogModelResponse, summary="Blog generation model configuration")
async def blog_model() -> BlogModelResponse:
    config = models_for_use_case(BLOG_USE_CASE)[0]
    return BlogModelResponse(
        model={
            "name":        config.name,
            "description": config.description,
            "use_case":    config.use_case,
            "strengths":   list(config.strengths),
            "temperature": config.temperature,
            "max_tokens":  config.max_tokens,
        },
    )
