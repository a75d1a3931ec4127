"""
FastAPI Application — Entry Point

Review & Response LLM Gateway API

Architecture:
  - All routes live under /api/
  - Every upstream call goes through app.llm.gateway.LLMGateway
  - Post-processing (cleaning, formatting, quality scoring) is pure Python
    and runs in-request
  - Structured JSON error responses on all 4xx/5xx

Middleware stack (innermost → outermost):
  1. CORS — restrict to configured origins
  2. Request ID injection — X-Request-ID header on every response
  3. Gzip — compress responses > 1 KB
  4. Request logging — one log line per request with latency

Error mapping:
  RequestValidationError → 422 VALIDATION_ERROR
  LLMServiceError        → its own status / code (401, 429, 500)
  anything else          → 500 INTERNAL_ERROR (no stack trace in the body)
"""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.blog import router as blog_router
from app.api.v1.llm import router as llm_router
from app.api.v1.models import router as models_router
from app.api.v1.voice import router as voice_router
from app.core.config import settings
from app.llm.errors import LLMServiceError
from app.schemas.llm import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


# ---------------------------------------------------------------------------
# Application lifespan: startup / shutdown hooks
# ---------------------------------------------------------------------------

def _configured_providers() -> list[str]:
    keys = {
        "nvidia":    settings.nvidia_api_key,
        "openai":    settings.openai_api_key,
        "anthropic": settings.anthropic_api_key,
        "gemini":    settings.gemini_api_key,
    }
    return [name for name, key in keys.items() if key]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log a config summary on startup; nothing to tear down."""
    logger.info(
        "Starting LLM Gateway | env=%s configured_providers=%s",
        settings.app_env, ",".join(_configured_providers()) or "-",
    )
    yield
    logger.info("Shutting down LLM Gateway")


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------

def create_app() -> FastAPI:
    app = FastAPI(
        title="Review & Response LLM Gateway",
        description=(
            "Multi-provider LLM gateway for review, analysis, conversation and "
            "customer-service text, with content-aware model selection, response "
            "formatting and heuristic quality scoring."
        ),
        version="1.0.0",
        docs_url="/api/docs" if not settings.is_production else None,
        redoc_url="/api/redoc" if not settings.is_production else None,
        openapi_url="/api/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
    )

    # ----------------------------------------------------------------
    # Middleware (applied in reverse order: last added is outermost)
    # ----------------------------------------------------------------

    app.add_middleware(GZipMiddleware, minimum_size=1024)

    allowed_origins = ["*"] if settings.app_env == "development" else settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )

    # ----------------------------------------------------------------
    # Request ID + logging middleware
    # ----------------------------------------------------------------

    @app.middleware("http")
    async def request_id_and_logging(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        start = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start) * 1000
        response.headers["X-Request-ID"] = request_id

        logger.info(
            "HTTP %s %s %d %.1fms | request_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            request_id,
        )
        return response

    # ----------------------------------------------------------------
    # Exception handlers: uniform structured error responses
    # ----------------------------------------------------------------

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Convert Pydantic/FastAPI validation errors to structured ErrorResponse."""
        details = [
            ErrorDetail(
                field=" → ".join(str(loc) for loc in err["loc"]),
                message=err["msg"],
                code="VALIDATION_ERROR",
            )
            for err in exc.errors()
        ]
        body = ErrorResponse(
            error_code="VALIDATION_ERROR",
            message="Request validation failed.",
            details=details,
            request_id=request.headers.get("X-Request-ID"),
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=body.model_dump(mode="json"),
        )

    @app.exception_handler(LLMServiceError)
    async def llm_service_exception_handler(request: Request, exc: LLMServiceError):
        """Upstream failures keep their mapped status and code."""
        logger.warning(
            "LLMServiceError | path=%s code=%s status=%d",
            request.url.path, exc.code, exc.status_code,
        )
        details = []
        if exc.detail and not settings.is_production:
            details.append(ErrorDetail(message=exc.detail, code=exc.code))
        body = ErrorResponse(
            error_code=exc.code,
            message=exc.message,
            details=details,
            request_id=request.headers.get("X-Request-ID"),
        )
        return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Catch-all for unhandled exceptions — never expose stack traces."""
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        logger.exception(
            "Unhandled exception | path=%s request_id=%s",
            request.url.path, request_id,
        )
        body = ErrorResponse(
            error_code="INTERNAL_ERROR",
            message="An unexpected error occurred.",
            request_id=request_id,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(mode="json"),
            headers={"X-Request-ID": request_id},
        )

    # ----------------------------------------------------------------
    # Routers
    # ----------------------------------------------------------------

    app.include_router(llm_router,    prefix="/api")
    app.include_router(voice_router,  prefix="/api")
    app.include_router(models_router, prefix="/api")
    app.include_router(blog_router,   prefix="/api")

    # ----------------------------------------------------------------
    # Health endpoint (used by load balancer)
    # ----------------------------------------------------------------

    @app.get(
        "/health",
        tags=["Operations"],
        summary="Liveness check",
        description="Returns 200 if the process is alive. No upstream checks.",
    )
    async def health() -> dict:
        return {
            "status":    "ok",
            "service":   "llm-gateway-api",
            "providers": _configured_providers(),
        }

    return app


# ---------------------------------------------------------------------------
# Application instance (imported by uvicorn)
# ---------------------------------------------------------------------------

app = create_app()


# ---------------------------------------------------------------------------
# Local development entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.app_env == "development",
        log_level="debug" if settings.debug else "info",
        access_log=True,
    )
