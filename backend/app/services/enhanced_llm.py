"""
Enhanced LLM Service

Orchestrates every upstream-backed operation exposed by the API:

  generate_enhanced_response   content-aware model selection:
      1. StrategySelector.select_strategy()    pick model + strategy
      2. build_system_prompt()                 model-specific system prompt
      3. LLMGateway.complete()                 upstream call
      4. clean_ai_response()                   clean + sectioned formatting
      5. apply_response_enhancements()         urgency / empathy / domain prefixes
      6. ResponseQualityAnalyzer               eight-metric quality score

  generate_chat_response       llama reply with the last N history turns,
                               user turns prefixed with conversation hints
  analyze_voice_input          JSON transcript analysis with fallback record
  generate_review_from_voice   review in a per-type format, random opening
  generate_location_suggestions  JSON location analysis with fallback record
  generate_customer_service_response  reply in a random staff persona
  compare_models               run the input through fixed registry models and
                               score each reply; failed models are skipped
  generate_blog_post           restaurant blog post from a structured brief

Upstream failures surface as LLMServiceError with a per-operation code
(ENHANCED_LLM_ERROR, LLAMA_API_ERROR, ANALYSIS_ERROR, ...) unless they are
auth / quota / rate-limit failures, which keep their shared codes.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

from app.core.config import settings
from app.evaluation.quality import QualityAnalysis, ResponseQualityAnalyzer
from app.llm.errors import LLMServiceError
from app.llm.gateway import LLMGateway
from app.llm.parsing import build_location_suggestions, build_voice_analysis
from app.llm.prompts import (
    BLOG_SYSTEM_PROMPT,
    CHAT_SYSTEM_PROMPT,
    CUSTOMER_SERVICE_SYSTEM_PROMPT,
    LOCATION_SYSTEM_PROMPT,
    REVIEW_SYSTEM_PROMPT,
    VOICE_ANALYSIS_SYSTEM_PROMPT,
    BlogBrief,
    build_blog_prompt,
    build_customer_service_prompt,
    build_location_prompt,
    build_review_prompt,
    build_system_prompt,
    build_voice_analysis_prompt,
)
from app.llm.router import (
    MODEL_REGISTRY,
    InputAnalysis,
    Provider,
    ResponseStrategy,
    StrategySelection,
    StrategySelector,
)
from app.processing import clean_ai_response
from app.processing.conversation import analyze_conversation_flow, enhance_user_message

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Response enhancements
# ---------------------------------------------------------------------------

URGENT_PREFIX  = "⚡ "
EMPATHY_PREFIX = "🤝 "

DOMAIN_PREFIXES: dict[str, str] = {
    "restaurant":  "🍽️ ",
    "hospitality": "🏨 ",
    "retail":      "🛍️ ",
    "service":     "🛠️ ",
    "technology":  "💻 ",
}

# Tone words used by the quick post-generation check.
_QUICK_TONE_WORDS: dict[str, tuple[str, ...]] = {
    "professional": ("professional", "expert", "analysis", "recommendation"),
    "casual":       ("cool", "awesome", "great", "nice"),
    "empathetic":   ("understand", "sorry", "apologize", "care"),
}
_EXPECTED_WORDS = {"long": 200, "medium": 100}

LOW_QUALITY_THRESHOLD = 0.7

# Registry keys run side by side by compare_models().
COMPARISON_MODELS: tuple[str, ...] = ("llama",)

_TOP_P = {Provider.NVIDIA: 0.85, Provider.OPENAI: 0.9}


def apply_response_enhancements(text: str, analysis: InputAnalysis) -> str:
    """
    Prefix markers in this order: urgency, empathy, domain.

    Each marker is prepended, so the last one applied ends up first:
    "🍽️ 🤝 ⚡ <text>".
    """
    enhanced = text
    if analysis.urgency == "high":
        enhanced = URGENT_PREFIX + enhanced
    if analysis.sentiment == "negative":
        enhanced = EMPATHY_PREFIX + enhanced
    prefix = DOMAIN_PREFIXES.get(analysis.domain)
    if prefix:
        enhanced = prefix + enhanced
    return enhanced


def assess_response_quality(text: str, strategy: ResponseStrategy) -> float:
    """Quick 0.5–1.0 sanity score: length near target, structure words, tone words."""
    score = 0.5
    lowered = text.lower()

    expected = _EXPECTED_WORDS.get(strategy.length, 50)
    if abs(len(text.split(" ")) - expected) < 50:
        score += 0.2

    if any(s.replace("_", " ", 1) in lowered for s in strategy.structure):
        score += 0.2

    tone_words = _QUICK_TONE_WORDS.get(strategy.tone[0], ()) if strategy.tone else ()
    if any(w in lowered for w in tone_words):
        score += 0.1

    return min(score, 1.0)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Result dataclasses
# ---------------------------------------------------------------------------

@dataclass
class EnhancedResult:
    response:         str
    selection:        StrategySelection
    quality_analysis: QualityAnalysis
    timestamp:        str = field(default_factory=_now)


@dataclass
class ModelComparison:
    model_key:     str
    model:         str
    response:      str
    quality_score: float
    strengths:     list[str]
    weaknesses:    list[str]
    suggestions:   list[str]


@dataclass
class ComparisonResult:
    input:       str
    selection:   StrategySelection
    comparisons: list[ModelComparison]
    timestamp:   str = field(default_factory=_now)


@dataclass
class BlogResult:
    blog_post:  str
    word_count: int
    model:      str
    timestamp:  str = field(default_factory=_now)


@dataclass
class ChatResult:
    response:  str
    model:     str
    timestamp: str = field(default_factory=_now)


@dataclass
class VoiceAnalysisResult:
    analysis:      dict[str, Any]
    used_fallback: bool
    model:         str
    timestamp:     str = field(default_factory=_now)


@dataclass
class ReviewResult:
    review:      str
    review_type: str
    opening:     str
    model:       str
    timestamp:   str = field(default_factory=_now)


@dataclass
class LocationResult:
    suggestions:   list[dict[str, Any]]
    analysis:      dict[str, Any]
    used_fallback: bool
    model:         str
    timestamp:     str = field(default_factory=_now)


@dataclass
class CustomerServiceResult:
    response:   str
    staff_name: str
    model:      str
    timestamp:  str = field(default_factory=_now)


# ---------------------------------------------------------------------------
# EnhancedLLMService
# ---------------------------------------------------------------------------

class EnhancedLLMService:
    """
    Stateless orchestration over the selector, gateway and post-processing.

    rng drives the two random choices (review opening, staff persona); pass
    a seeded random.Random for reproducible output.
    """

    def __init__(
        self,
        gateway:  LLMGateway | None = None,
        selector: StrategySelector | None = None,
        analyzer: ResponseQualityAnalyzer | None = None,
        rng:      random.Random | None = None,
    ) -> None:
        self._gateway  = gateway or LLMGateway()
        self._selector = selector or StrategySelector()
        self._analyzer = analyzer or ResponseQualityAnalyzer()
        self._rng      = rng or random.Random()

    @property
    def selector(self) -> StrategySelector:
        return self._selector

    # -----------------------------------------------------------------------
    # Selection / scoring without an upstream call
    # -----------------------------------------------------------------------

    def select_model(self, text: str, context: Mapping[str, Any] | None = None) -> StrategySelection:
        return self._selector.select_strategy(text, context)

    def analyze_response_quality(
        self,
        response:     str,
        content_type: str = "general",
        context:      Mapping[str, Any] | None = None,
    ) -> QualityAnalysis:
        return self._analyzer.analyze_response_quality(response, content_type, context)

    # -----------------------------------------------------------------------
    # Enhanced response
    # -----------------------------------------------------------------------

    async def generate_enhanced_response(
        self,
        text:        str,
        api_key:     str | None = None,
        context:     Mapping[str, Any] | None = None,
        force_model: str | None = None,
        error_code:  str = "ENHANCED_LLM_ERROR",
    ) -> EnhancedResult:
        """
        force_model pins a registry key instead of the selected model; the
        strategy is still derived from the input analysis.
        """
        context   = context or {}
        selection = self._selector.select_strategy(text, context)
        if force_model is not None:
            selection = self._selector.force_model(selection, force_model)
        model     = selection.selected_model
        strategy  = selection.response_strategy

        messages = self._gateway.build_messages(build_system_prompt(model, strategy), text)
        upstream = await self._gateway.complete(
            messages,
            model,
            temperature = strategy.temperature,
            max_tokens  = strategy.max_tokens,
            api_key     = api_key,
            top_p       = _TOP_P.get(model.provider),
            error_code  = error_code,
        )

        response = apply_response_enhancements(clean_ai_response(upstream.content), selection.analysis)

        quick_score = assess_response_quality(response, strategy)
        if quick_score < LOW_QUALITY_THRESHOLD:
            logger.warning(
                "EnhancedLLM | low quick quality score=%.2f model=%s content_type=%s",
                quick_score, model.key, selection.analysis.content_type,
            )

        quality = self._analyzer.analyze_response_quality(
            response, selection.analysis.content_type, context,
        )
        logger.info(
            "EnhancedLLM | model=%s content_type=%s quality=%.2f confidence=%.2f",
            model.name, selection.analysis.content_type, quality.overall_score, selection.confidence,
        )
        return EnhancedResult(response=response, selection=selection, quality_analysis=quality)

    async def compare_models(
        self,
        text:    str,
        api_key: str | None = None,
        context: Mapping[str, Any] | None = None,
        models:  Sequence[str] = COMPARISON_MODELS,
    ) -> ComparisonResult:
        """
        Run the input through each model in `models` and score every reply.

        A model whose upstream call fails is logged and skipped. If every
        model fails, the last error is raised.
        """
        context   = context or {}
        selection = self._selector.select_strategy(text, context)

        comparisons: list[ModelComparison] = []
        last_error: LLMServiceError | None = None
        for key in models:
            try:
                result = await self.generate_enhanced_response(
                    text, api_key=api_key, context=context,
                    force_model=key, error_code="MODEL_COMPARISON_ERROR",
                )
            except LLMServiceError as exc:
                logger.warning("ModelComparison | model=%s failed code=%s", key, exc.code)
                last_error = exc
                continue

            quality = result.quality_analysis
            comparisons.append(ModelComparison(
                model_key     = key,
                model         = result.selection.selected_model.name,
                response      = result.response,
                quality_score = quality.overall_score,
                strengths     = list(quality.strengths),
                weaknesses    = list(quality.weaknesses),
                suggestions   = list(quality.suggestions),
            ))

        if not comparisons and last_error is not None:
            raise last_error

        logger.info(
            "ModelComparison | recommended=%s compared=%d",
            selection.selected_model.key, len(comparisons),
        )
        return ComparisonResult(input=text, selection=selection, comparisons=comparisons)

    # -----------------------------------------------------------------------
    # Chat
    # -----------------------------------------------------------------------

    async def generate_chat_response(
        self,
        text:    str,
        history: Sequence[Mapping[str, Any]] = (),
        api_key: str | None = None,
    ) -> ChatResult:
        model  = MODEL_REGISTRY["llama"]
        recent = list(history)[-settings.max_history_messages:] if history else []
        flow   = analyze_conversation_flow(recent)

        turns: list[tuple[str, str]] = []
        for index, message in enumerate(recent):
            role    = str(message.get("role", "user"))
            content = str(message.get("content", ""))
            # The first user turn has nothing to continue from.
            if role == "user" and index > 0:
                content = enhance_user_message(content, flow)
            turns.append((role, content))

        messages = self._gateway.build_messages(CHAT_SYSTEM_PROMPT, text, history=turns)
        upstream = await self._gateway.complete(
            messages, model,
            temperature=0.6, max_tokens=3072, top_p=0.85,
            api_key=api_key, error_code="LLAMA_API_ERROR",
        )
        return ChatResult(response=clean_ai_response(upstream.content), model=model.name)

    # -----------------------------------------------------------------------
    # Voice
    # -----------------------------------------------------------------------

    async def analyze_voice_input(self, transcript: str, api_key: str | None = None) -> VoiceAnalysisResult:
        model    = MODEL_REGISTRY["llama"]
        messages = self._gateway.build_messages(
            VOICE_ANALYSIS_SYSTEM_PROMPT, build_voice_analysis_prompt(transcript),
        )
        upstream = await self._gateway.complete(
            messages, model,
            temperature=0.2, max_tokens=3072, top_p=0.85,
            api_key=api_key, error_code="ANALYSIS_ERROR",
        )
        record, used_fallback = build_voice_analysis(upstream.content, transcript)
        return VoiceAnalysisResult(analysis=record, used_fallback=used_fallback, model=model.name)

    async def generate_review_from_voice(
        self,
        transcript:  str,
        review_type: str = "general",
        api_key:     str | None = None,
    ) -> ReviewResult:
        model = MODEL_REGISTRY["llama"]
        prompt, opening = build_review_prompt(transcript, review_type, self._rng)
        messages = self._gateway.build_messages(REVIEW_SYSTEM_PROMPT, prompt)
        upstream = await self._gateway.complete(
            messages, model,
            temperature=0.8, max_tokens=1500, top_p=0.9,
            api_key=api_key, error_code="REVIEW_GENERATION_ERROR",
        )
        return ReviewResult(
            review      = clean_ai_response(upstream.content),
            review_type = review_type,
            opening     = opening,
            model       = model.name,
        )

    async def generate_location_suggestions(
        self,
        transcript:       str,
        current_location: Mapping[str, Any] | None = None,
        api_key:          str | None = None,
    ) -> LocationResult:
        model    = MODEL_REGISTRY["llama"]
        messages = self._gateway.build_messages(
            LOCATION_SYSTEM_PROMPT, build_location_prompt(transcript, current_location),
        )
        upstream = await self._gateway.complete(
            messages, model,
            temperature=0.4, max_tokens=2048, top_p=0.85,
            api_key=api_key, error_code="LOCATION_SUGGESTION_ERROR",
        )
        record, used_fallback = build_location_suggestions(upstream.content)
        return LocationResult(
            suggestions   = record["suggestions"],
            analysis      = record["analysis"],
            used_fallback = used_fallback,
            model         = model.name,
        )

    # -----------------------------------------------------------------------
    # Customer service
    # -----------------------------------------------------------------------

    async def generate_customer_service_response(
        self,
        review:  str,
        api_key: str | None = None,
    ) -> CustomerServiceResult:
        model = MODEL_REGISTRY["llama"]
        prompt, staff_name = build_customer_service_prompt(review, self._rng)
        messages = self._gateway.build_messages(CUSTOMER_SERVICE_SYSTEM_PROMPT, prompt)
        upstream = await self._gateway.complete(
            messages, model,
            temperature=0.7, max_tokens=1024, top_p=0.85,
            api_key=api_key, error_code="CUSTOMER_SERVICE_ERROR",
        )
        return CustomerServiceResult(
            response   = upstream.content.strip(),
            staff_name = staff_name,
            model      = model.name,
        )

    # -----------------------------------------------------------------------
    # Blog posts
    # -----------------------------------------------------------------------

    async def generate_blog_post(self, brief: BlogBrief, api_key: str | None = None) -> BlogResult:
        # The post keeps its own headline and paragraphs; it is not re-sectioned.
        model    = MODEL_REGISTRY["llama"]
        messages = self._gateway.build_messages(BLOG_SYSTEM_PROMPT, build_blog_prompt(brief))
        upstream = await self._gateway.complete(
            messages, model,
            temperature=0.7, max_tokens=1500,
            api_key=api_key, error_code="BLOG_GENERATION_ERROR",
        )
        blog_post  = upstream.content.strip()
        word_count = len(blog_post.split())
        logger.info(
            "BlogGenerator | restaurant=%r length=%s words=%d",
            brief.restaurant_name, brief.length, word_count,
        )
        return BlogResult(blog_post=blog_post, word_count=word_count, model=model.name)
