"""
LLM Model Router — Content-Aware Model and Strategy Selection

The router is the decision engine that answers:
  "Which model should answer this input, and how should it answer?"

Input analysis (six independent keyword heuristics):

  content type  conversation → analysis → review → customer_service → inquiry → general
  complexity    high | medium | low           (word count + words per sentence)
  sentiment     positive | negative | neutral (keyword majority vote)
  urgency       high | normal
  domain        restaurant | hospitality | retail | service | technology | general
  user intent   question | support | feedback | complaint | recommendation | general

Selection policy (first match wins):

  1. customer_service content or complaint intent → claude  (empathy)
  2. analysis content or high complexity          → gpt4    (reasoning)
  3. review content or general domain             → gemini  (creative)
  4. otherwise                                    → llama   (conversation)

A selection can be re-targeted at a fixed registry model (force_model) for
model comparison; the strategy is rebuilt from that model's defaults.

Strategy adjustments:
  urgency high        → temperature +0.2 (capped at 1.0), "urgent_response"
  negative sentiment  → "empathetic_tone" enhancement + "empathetic" tone
  high complexity     → max_tokens ×1.5 (capped at 8000), "detailed_explanation"

The content-type detector here differs from the one in
app.processing.classifier (different keywords, different priority). The
classifier labels finished output, this one labels user input; both
are pinned by tests.

Design principles:
  - The router is pure Python with no I/O or network access.
  - The registry is immutable; strategies copy list fields from it so a
    request can never leak adjustments into another request.
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from app.processing.text import contains_any, count_present

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Provider(str, Enum):
    NVIDIA    = "nvidia"      # OpenAI-compatible endpoint
    OPENAI    = "openai"
    ANTHROPIC = "anthropic"
    GEMINI    = "gemini"


# ---------------------------------------------------------------------------
# ModelConfig: static metadata for each registered model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ModelConfig:
    """
    One upstream model the gateway can call.

    temperature / max_tokens are the defaults a ResponseStrategy starts from.
    """
    key:         str
    name:        str
    endpoint:    str
    provider:    Provider
    strengths:   tuple[str, ...]
    temperature: float
    max_tokens:  int

    def to_dict(self) -> dict[str, Any]:
        return {
            "key":         self.key,
            "name":        self.name,
            "provider":    self.provider.value,
            "strengths":   list(self.strengths),
            "temperature": self.temperature,
            "max_tokens":  self.max_tokens,
        }


MODEL_REGISTRY: Mapping[str, ModelConfig] = MappingProxyType({
    "llama": ModelConfig(
        key         = "llama",
        name        = "meta/llama-3.1-70b-instruct",
        endpoint    = "https://integrate.api.nvidia.com/v1/chat/completions",
        provider    = Provider.NVIDIA,
        strengths   = ("conversation", "creative_writing", "analysis"),
        temperature = 0.6,
        max_tokens  = 3072,
    ),
    "gpt4": ModelConfig(
        key         = "gpt4",
        name        = "gpt-4",
        endpoint    = "https://api.openai.com/v1/chat/completions",
        provider    = Provider.OPENAI,
        strengths   = ("reasoning", "structured_analysis", "technical"),
        temperature = 0.4,
        max_tokens  = 4000,
    ),
    "claude": ModelConfig(
        key         = "claude",
        name        = "claude-3-sonnet-20240229",
        endpoint    = "https://api.anthropic.com/v1/messages",
        provider    = Provider.ANTHROPIC,
        strengths   = ("empathy", "customer_service", "detailed_analysis"),
        temperature = 0.3,
        max_tokens  = 4000,
    ),
    "gemini": ModelConfig(
        key         = "gemini",
        name        = "gemini-pro",
        endpoint    = "https://generativelanguage.googleapis.com/v1beta/models/gemini-pro:generateContent",
        provider    = Provider.GEMINI,
        strengths   = ("multimodal", "creative", "diverse_responses"),
        temperature = 0.7,
        max_tokens  = 2048,
    ),
})

DEFAULT_MODEL_KEY = "llama"


@dataclass(frozen=True)
class ResponsePattern:
    structure:  tuple[str, ...]
    tone:       tuple[str, ...]
    length:     str
    complexity: str


RESPONSE_PATTERNS: Mapping[str, ResponsePattern] = MappingProxyType({
    "conversation": ResponsePattern(
        structure=("greeting", "main_content", "engagement", "closing"),
        tone=("friendly", "casual", "engaging"),
        length="medium",
        complexity="moderate",
    ),
    "analysis": ResponsePattern(
        structure=("summary", "key_findings", "insights", "recommendations"),
        tone=("professional", "objective", "detailed"),
        length="long",
        complexity="high",
    ),
    "customer_service": ResponsePattern(
        structure=("acknowledgment", "understanding", "solution", "follow_up"),
        tone=("empathetic", "professional", "helpful"),
        length="medium",
        complexity="moderate",
    ),
    "review": ResponsePattern(
        structure=("experience", "highlights", "details", "recommendation"),
        tone=("personal", "authentic", "informative"),
        length="medium",
        complexity="moderate",
    ),
})

MAX_STRATEGY_TOKENS = 8000


# ---------------------------------------------------------------------------
# Use-case catalog (exposed by GET /api/models)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UseCaseModel:
    key:         str
    name:        str
    use_case:    str
    description: str
    strengths:   tuple[str, ...]
    temperature: float
    max_tokens:  int
    provider:    str

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["strengths"] = list(self.strengths)
        return data


USE_CASE_MODELS: tuple[UseCaseModel, ...] = (
    UseCaseModel(
        key="llama-review", name="Meta Llama 3.1 70B", use_case="review_generation",
        description="Specialized for generating authentic, engaging reviews with natural language flow",
        strengths=("Natural Language", "Context Awareness", "Authentic Tone"),
        temperature=0.8, max_tokens=2048, provider="NVIDIA",
    ),
    UseCaseModel(
        key="llama-customer-service", name="Meta Llama 3.1 70B", use_case="customer_service",
        description="Optimized for empathetic customer service responses and conflict resolution",
        strengths=("Empathy", "Professional Tone", "Problem Solving"),
        temperature=0.6, max_tokens=1536, provider="NVIDIA",
    ),
    UseCaseModel(
        key="llama-voice-analysis", name="Meta Llama 3.1 70B", use_case="voice_analysis",
        description="Advanced voice transcript analysis with sentiment detection and key point extraction",
        strengths=("Sentiment Analysis", "Key Point Extraction", "Context Understanding"),
        temperature=0.4, max_tokens=3072, provider="NVIDIA",
    ),
    UseCaseModel(
        key="gpt4-analysis", name="GPT-4", use_case="detailed_analysis",
        description="High-performance analysis and reasoning for complex content evaluation",
        strengths=("Reasoning", "Structured Analysis", "Technical Accuracy"),
        temperature=0.3, max_tokens=4000, provider="OpenAI",
    ),
    UseCaseModel(
        key="claude-customer-service", name="Claude 3 Sonnet", use_case="customer_service",
        description="Empathetic customer service with advanced understanding of customer needs",
        strengths=("Empathy", "Customer Focus", "Detailed Responses"),
        temperature=0.5, max_tokens=4000, provider="Anthropic",
    ),
    UseCaseModel(
        key="llama-blog", name="Meta Llama 3.1 70B", use_case="blog_generation",
        description="Optimized for creating engaging, SEO-friendly blog content",
        strengths=("Content Creation", "SEO Optimization", "Brand Voice", "Engagement"),
        temperature=0.7, max_tokens=1500, provider="NVIDIA",
    ),
)

USE_CASE_DESCRIPTIONS: Mapping[str, str] = MappingProxyType({
    "review_generation": "Generate authentic, engaging reviews from user input or voice transcripts",
    "customer_service":  "Create empathetic, professional responses to customer feedback and complaints",
    "voice_analysis":    "Analyze voice transcripts for sentiment, key points, and actionable insights",
    "detailed_analysis": "Perform comprehensive content analysis with structured reasoning and insights",
    "blog_generation":   "Write engaging, SEO-friendly restaurant blog posts in the brand's voice",
})


def models_for_use_case(use_case: str) -> list[UseCaseModel]:
    return [m for m in USE_CASE_MODELS if m.use_case == use_case]


# ---------------------------------------------------------------------------
# Input analysis heuristics
# ---------------------------------------------------------------------------

# Priority order matters: the first matching entry decides the type.
_CONTENT_TYPE_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("conversation",     ("hello", "hi", "how are you")),
    ("analysis",         ("analyze", "analysis", "sentiment")),
    ("review",           ("review", "experience", "visit")),
    ("customer_service", ("problem", "issue", "complaint")),
    ("inquiry",          ("question", "help", "explain")),
)

_DOMAIN_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("restaurant",  ("restaurant", "food", "dining")),
    ("hospitality", ("hotel", "accommodation", "stay")),
    ("retail",      ("product", "purchase", "buy")),
    ("service",     ("service", "support", "help")),
    ("technology",  ("technology", "app", "software")),
)

_INTENT_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("question",       ("?",)),
    ("support",        ("help", "support")),
    ("feedback",       ("review", "feedback")),
    ("complaint",      ("complain", "issue")),
    ("recommendation", ("suggest", "recommend")),
)

_POSITIVE_WORDS = ("good", "great", "amazing", "excellent", "love", "like", "happy", "satisfied")
_NEGATIVE_WORDS = ("bad", "terrible", "awful", "hate", "disappointed", "angry", "frustrated")
_URGENT_WORDS   = ("urgent", "asap", "immediately", "emergency", "critical", "now")

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def _first_match(text: str, rules: tuple[tuple[str, tuple[str, ...]], ...], default: str) -> str:
    for label, keywords in rules:
        if contains_any(text, keywords):
            return label
    return default


def detect_content_type(text: str) -> str:
    return _first_match(text, _CONTENT_TYPE_RULES, "general")


def assess_complexity(text: str) -> str:
    """
    high   : > 100 words and > 15 words per sentence
    medium : >  50 words and > 10 words per sentence

    Words are space-separated tokens; the sentence count includes the empty
    tail after a final terminator, so "One. Two." counts as three.
    """
    word_count     = len(text.split(" "))
    sentence_count = len(_SENTENCE_SPLIT_RE.split(text))
    avg_words      = word_count / sentence_count

    if word_count > 100 and avg_words > 15:
        return "high"
    if word_count > 50 and avg_words > 10:
        return "medium"
    return "low"


def detect_sentiment(text: str) -> str:
    positive = count_present(text, _POSITIVE_WORDS)
    negative = count_present(text, _NEGATIVE_WORDS)
    if positive > negative:
        return "positive"
    if negative > positive:
        return "negative"
    return "neutral"


def assess_urgency(text: str) -> str:
    return "high" if contains_any(text, _URGENT_WORDS) else "normal"


def detect_domain(text: str) -> str:
    return _first_match(text, _DOMAIN_RULES, "general")


def infer_user_intent(text: str, context: Mapping[str, Any] | None = None) -> str:
    # context is accepted for call-site symmetry; intent is input-only today.
    return _first_match(text, _INTENT_RULES, "general")


# ---------------------------------------------------------------------------
# Result dataclasses
# ---------------------------------------------------------------------------

@dataclass
class InputAnalysis:
    content_type: str
    complexity:   str
    sentiment:    str
    urgency:      str
    domain:       str
    user_intent:  str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass
class ResponseStrategy:
    model:        ModelConfig
    temperature:  float
    max_tokens:   int
    structure:    list[str]
    tone:         list[str]
    length:       str
    complexity:   str
    enhancements: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "model":        self.model.to_dict(),
            "temperature":  self.temperature,
            "max_tokens":   self.max_tokens,
            "structure":    list(self.structure),
            "tone":         list(self.tone),
            "length":       self.length,
            "complexity":   self.complexity,
            "enhancements": list(self.enhancements),
        }


@dataclass
class StrategySelection:
    analysis:          InputAnalysis
    selected_model:    ModelConfig
    response_strategy: ResponseStrategy
    confidence:        float


# ---------------------------------------------------------------------------
# StrategySelector
# ---------------------------------------------------------------------------

class StrategySelector:
    """
    Pure-Python selection logic with no I/O.

    Usage::

        selector  = StrategySelector()
        selection = selector.select_strategy("The food was amazing!")
        selection.selected_model.key         # "llama"
        selection.response_strategy.tone     # ["professional"]
    """

    def __init__(self, registry: Mapping[str, ModelConfig] | None = None) -> None:
        self._registry = registry or MODEL_REGISTRY

    @property
    def models(self) -> Mapping[str, ModelConfig]:
        return self._registry

    def analyze_input(self, text: str, context: Mapping[str, Any] | None = None) -> InputAnalysis:
        lowered = text.lower()
        return InputAnalysis(
            content_type = detect_content_type(lowered),
            complexity   = assess_complexity(text),
            sentiment    = detect_sentiment(lowered),
            urgency      = assess_urgency(lowered),
            domain       = detect_domain(lowered),
            user_intent  = infer_user_intent(lowered, context),
        )

    def select_strategy(self, text: str, context: Mapping[str, Any] | None = None) -> StrategySelection:
        """Analyse the input, pick a model and derive the response strategy."""
        analysis = self.analyze_input(text, context)
        model    = self.select_optimal_model(analysis)
        strategy = self.generate_response_strategy(analysis, model)

        selection = StrategySelection(
            analysis          = analysis,
            selected_model    = model,
            response_strategy = strategy,
            confidence        = self.calculate_confidence(analysis),
        )
        logger.info(
            "StrategySelector | model=%s content_type=%s complexity=%s confidence=%.2f",
            model.key, analysis.content_type, analysis.complexity, selection.confidence,
        )
        return selection

    def force_model(self, selection: StrategySelection, model_key: str) -> StrategySelection:
        """
        Re-target a selection at a specific registry model, rebuilding the
        strategy from that model's defaults. Analysis and confidence are kept.
        Raises KeyError for an unknown key.
        """
        model = self._registry[model_key]
        return StrategySelection(
            analysis          = selection.analysis,
            selected_model    = model,
            response_strategy = self.generate_response_strategy(selection.analysis, model),
            confidence        = selection.confidence,
        )

    def select_optimal_model(self, analysis: InputAnalysis) -> ModelConfig:
        if analysis.content_type == "customer_service" or analysis.user_intent == "complaint":
            return self._registry["claude"]
        if analysis.content_type == "analysis" or analysis.complexity == "high":
            return self._registry["gpt4"]
        if analysis.content_type == "review" or analysis.domain == "general":
            return self._registry["gemini"]
        return self._registry[DEFAULT_MODEL_KEY]

    def generate_response_strategy(self, analysis: InputAnalysis, model: ModelConfig) -> ResponseStrategy:
        pattern = RESPONSE_PATTERNS.get(analysis.content_type)

        strategy = ResponseStrategy(
            model       = model,
            temperature = model.temperature,
            max_tokens  = model.max_tokens,
            structure   = list(pattern.structure) if pattern else ["main_content"],
            tone        = list(pattern.tone) if pattern else ["professional"],
            length      = pattern.length if pattern else "medium",
            complexity  = pattern.complexity if pattern else "moderate",
        )

        if analysis.urgency == "high":
            strategy.temperature = min(strategy.temperature + 0.2, 1.0)
            strategy.enhancements.append("urgent_response")

        if analysis.sentiment == "negative":
            strategy.enhancements.append("empathetic_tone")
            strategy.tone.append("empathetic")

        if analysis.complexity == "high":
            strategy.max_tokens = int(min(strategy.max_tokens * 1.5, MAX_STRATEGY_TOKENS))
            strategy.enhancements.append("detailed_explanation")

        return strategy

    @staticmethod
    def calculate_confidence(analysis: InputAnalysis) -> float:
        confidence = 0.5
        if analysis.content_type != "general":
            confidence += 0.2
        if analysis.sentiment != "neutral":
            confidence += 0.1
        if analysis.domain != "general":
            confidence += 0.1
        if analysis.user_intent != "general":
            confidence += 0.1
        return min(confidence, 1.0)
