"""
LLM Gateway — Pydantic Request/Response Schemas

Covers every endpoint under /api:
  - enhanced generation, model selection and quality analysis
  - chat, voice analysis, review generation, location suggestions
  - customer-service replies, model comparison and the model catalogs
  - restaurant blog posts
  - the uniform error envelope for all 4xx/5xx responses

Design decisions:
  - Free-text inputs are stripped of "<" / ">" and then trimmed.
  - Length limits come from settings.max_input_chars and are checked on the
    raw value, before sanitising.
  - api_key is optional everywhere; a configured provider key is used when
    it is absent.
  - All timestamps are ISO-8601 UTC strings.
"""

from __future__ import annotations

import re
from typing import Annotated, Any, Literal

from pydantic import AfterValidator, BaseModel, Field, model_validator

from app.core.config import settings

_ANGLE_BRACKETS_RE = re.compile(r"[<>]")


def sanitize_text(value: str | None) -> str | None:
    """Length-check, trim and strip angle brackets; None passes through."""
    if value is None:
        return None
    if len(value) > settings.max_input_chars:
        raise ValueError(
            f"Text input is too long. Maximum {settings.max_input_chars} characters allowed."
        )
    cleaned = _ANGLE_BRACKETS_RE.sub("", value).strip()
    if not cleaned:
        raise ValueError("Text input is required and must not be blank")
    return cleaned


SanitizedText = Annotated[str, AfterValidator(sanitize_text)]


def sanitize_optional_text(value: str | None) -> str | None:
    """Like sanitize_text, but blank input becomes None instead of an error."""
    if value is None or not _ANGLE_BRACKETS_RE.sub("", value).strip():
        return None
    return sanitize_text(value)


OptionalText = Annotated[str | None, AfterValidator(sanitize_optional_text)]


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class EnhancedLLMRequest(BaseModel):
    """Either `text` or `prompt` must be provided; `text` wins when both are."""
    text:    SanitizedText | None = Field(None, description="User input")
    prompt:  SanitizedText | None = Field(None, description="Alias for text")
    api_key: str | None           = Field(None, description="Provider key; overrides the configured key")
    context: dict[str, Any]       = Field(default_factory=dict, description="Free-form context for relevance scoring")

    @model_validator(mode="after")
    def _require_input(self) -> "EnhancedLLMRequest":
        if not (self.text or self.prompt):
            raise ValueError("Text/prompt input is required and must be a string")
        return self

    @property
    def input_text(self) -> str:
        return self.text or self.prompt or ""


class SelectModelRequest(BaseModel):
    text:    SanitizedText
    context: dict[str, Any] = Field(default_factory=dict)


class QualityRequest(BaseModel):
    response:     str            = Field(..., min_length=1, description="Response text to score")
    content_type: str            = Field("general", description="conversation | analysis | customer_service | review | general")
    context:      dict[str, Any] = Field(default_factory=dict)


class ChatMessageIn(BaseModel):
    role:    Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    text:                 SanitizedText
    conversation_history: list[ChatMessageIn] = Field(default_factory=list)
    api_key:              str | None          = None


class VoiceAnalyzeRequest(BaseModel):
    transcript: SanitizedText
    api_key:    str | None = None


class GenerateReviewRequest(BaseModel):
    transcript:  SanitizedText
    review_type: str        = Field("general", description="restaurant | hotel | product | service | experience | app | place | general")
    api_key:     str | None = None


class GeoPoint(BaseModel):
    latitude:  float = Field(..., ge=-90.0,  le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class LocationRequest(BaseModel):
    transcript:       SanitizedText
    current_location: GeoPoint | None = None
    api_key:          str | None      = None


class CustomerServiceRequest(BaseModel):
    review:  SanitizedText
    api_key: str | None = None


class CompareModelsRequest(BaseModel):
    text:    SanitizedText
    api_key: str | None     = None
    context: dict[str, Any] = Field(default_factory=dict)


class BlogGenerateRequest(BaseModel):
    """Optional fields may be omitted or blank; the prompt fills in defaults."""
    topic:            SanitizedText
    restaurant_name:  SanitizedText
    restaurant_type:  OptionalText = None
    cuisine:          OptionalText = Field(None, description="Defaults to \"Various\"")
    location:         OptionalText = Field(None, description="Defaults to \"Not specified\"")
    target_audience:  OptionalText = None
    tone:             OptionalText = None
    length:           Literal["short", "medium", "long"] = Field(
        "medium", description="short 300-500, medium 600-800, long 900-1200 words",
    )
    key_points:       OptionalText = None
    special_features: OptionalText = None
    api_key:          str | None   = None


# ---------------------------------------------------------------------------
# Response building blocks
# ---------------------------------------------------------------------------

class InputAnalysisOut(BaseModel):
    content_type: str
    complexity:   str
    sentiment:    str
    urgency:      str
    domain:       str
    user_intent:  str


class ModelConfigOut(BaseModel):
    key:         str
    name:        str
    provider:    str
    strengths:   list[str]
    temperature: float
    max_tokens:  int


class ResponseStrategyOut(BaseModel):
    model:        ModelConfigOut
    temperature:  float
    max_tokens:   int
    structure:    list[str]
    tone:         list[str]
    length:       str
    complexity:   str
    enhancements: list[str]


class QualityMetricsOut(BaseModel):
    coherence:    float = Field(..., ge=0.0, le=1.0)
    relevance:    float = Field(..., ge=0.0, le=1.0)
    completeness: float = Field(..., ge=0.0, le=1.0)
    clarity:      float = Field(..., ge=0.0, le=1.0)
    engagement:   float = Field(..., ge=0.0, le=1.0)
    structure:    float = Field(..., ge=0.0, le=1.0)
    tone:         float = Field(..., ge=0.0, le=1.0)
    length:       float = Field(..., ge=0.0, le=1.0)


class QualityAnalysisOut(BaseModel):
    overall_score:      float = Field(..., ge=0.0, le=1.0)
    metrics:            QualityMetricsOut
    strengths:          list[str]
    weaknesses:         list[str]
    suggestions:        list[str]
    pattern_analysis:   dict[str, bool]
    structure_analysis: dict[str, Any]
    key_points:         list[str]
    sentiment:          str
    complexity:         str


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class EnhancedLLMResponse(BaseModel):
    success:          bool = True
    response:         str
    analysis:         InputAnalysisOut
    model:            str
    strategy:         ResponseStrategyOut
    confidence:       float
    quality_analysis: QualityAnalysisOut
    timestamp:        str


class QualityResponse(BaseModel):
    success:          bool = True
    quality_analysis: QualityAnalysisOut
    timestamp:        str


class SelectModelResponse(BaseModel):
    success:        bool = True
    analysis:       InputAnalysisOut
    selected_model: ModelConfigOut
    strategy:       ResponseStrategyOut
    confidence:     float
    timestamp:      str


class AvailableModelsResponse(BaseModel):
    success:           bool = True
    models:            list[ModelConfigOut]
    response_patterns: dict[str, dict[str, Any]]
    timestamp:         str


class UseCaseModelOut(BaseModel):
    key:         str
    name:        str
    use_case:    str
    description: str
    strengths:   list[str]
    temperature: float
    max_tokens:  int
    provider:    str


class ModelCatalogResponse(BaseModel):
    success:   bool = True
    models:    list[UseCaseModelOut]
    use_cases: dict[str, str]
    timestamp: str


class UseCaseModelsResponse(BaseModel):
    success:     bool = True
    models:      list[UseCaseModelOut]
    use_case:    str
    description: str
    timestamp:   str


class ChatResponse(BaseModel):
    success:   bool = True
    response:  str
    model:     str
    timestamp: str


class VoiceAnalysisResponse(BaseModel):
    success:       bool = True
    analysis:      dict[str, Any]
    used_fallback: bool = Field(False, description="True when the model output was not valid JSON")
    model:         str
    timestamp:     str


class ReviewResponse(BaseModel):
    success:     bool = True
    review:      str
    review_type: str
    opening:     str  = Field(..., description="Opening phrase the review was asked to start with")
    model:       str
    timestamp:   str


class LocationResponse(BaseModel):
    success:       bool = True
    suggestions:   list[dict[str, Any]]
    analysis:      dict[str, Any]
    used_fallback: bool = False
    model:         str
    timestamp:     str


class CustomerServiceResponse(BaseModel):
    success:    bool = True
    response:   str
    staff_name: str
    model:      str
    timestamp:  str


class ModelComparisonOut(BaseModel):
    model_key:     str
    model:         str
    response:      str
    quality_score: float = Field(..., ge=0.0, le=1.0)
    strengths:     list[str]
    weaknesses:    list[str]
    suggestions:   list[str]


class ComparisonOut(BaseModel):
    input:             str
    analysis:          InputAnalysisOut
    recommended_model: str
    confidence:        float
    comparisons:       list[ModelComparisonOut]


class CompareModelsResponse(BaseModel):
    success:    bool = True
    comparison: ComparisonOut
    timestamp:  str


class BlogPostResponse(BaseModel):
    success:    bool = True
    blog_post:  str
    word_count: int
    model:      str
    timestamp:  str


class BlogModelOut(BaseModel):
    name:        str
    description: str
    use_case:    str
    strengths:   list[str]
    temperature: float
    max_tokens:  int


class BlogModelResponse(BaseModel):
    success: bool = True
    model:   BlogModelOut


# ---------------------------------------------------------------------------
# Structured error bodies
# ---------------------------------------------------------------------------

class ErrorDetail(BaseModel):
    """Single structured error — may appear in a list."""
    field:   str | None = Field(None, description="Request field that caused the error, if applicable")
    message: str
    code:    str        = Field(..., description="Machine-readable error code for client handling")


class ErrorResponse(BaseModel):
    """
    Uniform error envelope for all 4xx/5xx responses.
    Clients should check `error_code` for programmatic handling.
    """
    success:    bool              = False
    error_code: str               = Field(..., description="Stable machine-readable code")
    message:    str               = Field(..., description="Human-readable summary")
    details:    list[ErrorDetail] = Field(default_factory=list)
    request_id: str | None        = Field(None, description="Trace ID for log correlation")
