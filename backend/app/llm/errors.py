"""
Upstream error normalisation.

Every provider SDK raises its own exception hierarchy (openai, anthropic,
google.api_core). Route handlers should only ever see LLMServiceError, so
the gateway funnels every upstream failure through classify_provider_error().

Classification (first match wins):

  authentication failure (401, *AuthenticationError, Unauthenticated,
                          PermissionDenied)            → INVALID_API_KEY      401
  quota exhausted        (code "insufficient_quota",
                          ResourceExhausted)           → QUOTA_EXCEEDED       429
  rate limited           (code "rate_limit_exceeded",
                          429, *RateLimitError)        → RATE_LIMIT_EXCEEDED  429
  anything else                                        → <operation code>     500

Matching is by exception class name and duck-typed attributes, so the SDKs
stay optional imports.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

INVALID_API_KEY     = "INVALID_API_KEY"
QUOTA_EXCEEDED      = "QUOTA_EXCEEDED"
RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

_AUTH_EXCEPTION_TYPES  = ("AuthenticationError", "Unauthenticated", "PermissionDenied")
_QUOTA_EXCEPTION_TYPES = ("ResourceExhausted",)
_RATE_EXCEPTION_TYPES  = ("RateLimitError",)

_MESSAGES = {
    INVALID_API_KEY:     "Invalid or missing API key. Please check your API key configuration.",
    QUOTA_EXCEEDED:      "API quota exceeded. Please try again later.",
    RATE_LIMIT_EXCEEDED: "Rate limit exceeded. Please try again later.",
}


class LLMServiceError(Exception):
    """A failed upstream call, already mapped to an API error code."""

    def __init__(
        self,
        code:        str,
        message:     str,
        status_code: int = 500,
        detail:      str | None = None,
    ) -> None:
        super().__init__(message)
        self.code        = code
        self.message     = message
        self.status_code = status_code
        self.detail      = detail


def _error_code(exc: Exception) -> str | None:
    """Provider error code from `exc.code` or an OpenAI-style JSON body."""
    code = getattr(exc, "code", None)
    if isinstance(code, str):
        return code
    body = getattr(exc, "body", None)
    if isinstance(body, dict):
        inner = body.get("error", body)
        if isinstance(inner, dict):
            value = inner.get("code") or inner.get("type")
            if isinstance(value, str):
                return value
    return None


def _status_code(exc: Exception) -> int | None:
    status = getattr(exc, "status_code", None)
    if status is None:
        response = getattr(exc, "response", None)
        status = getattr(response, "status_code", None)
    return status if isinstance(status, int) else None


def classify_provider_error(
    exc:          Exception,
    default_code: str,
    default_message: str = "Failed to generate response",
) -> LLMServiceError:
    """Map any upstream exception onto an LLMServiceError."""
    if isinstance(exc, LLMServiceError):
        return exc

    name   = type(exc).__name__
    code   = _error_code(exc)
    status = _status_code(exc)

    if status == 401 or code == "authentication_error" or name.endswith(_AUTH_EXCEPTION_TYPES):
        mapped, http_status = INVALID_API_KEY, 401
    elif code == "insufficient_quota" or name.endswith(_QUOTA_EXCEPTION_TYPES):
        mapped, http_status = QUOTA_EXCEEDED, 429
    elif code == "rate_limit_exceeded" or status == 429 or name.endswith(_RATE_EXCEPTION_TYPES):
        mapped, http_status = RATE_LIMIT_EXCEEDED, 429
    else:
        logger.warning("LLMError | unclassified provider error type=%s: %s", name, exc)
        return LLMServiceError(default_code, default_message, 500, detail=str(exc))

    logger.warning("LLMError | provider error type=%s mapped=%s", name, mapped)
    return LLMServiceError(mapped, _MESSAGES[mapped], http_status, detail=str(exc))
