"""
Content Classifier — rule-based content type and structure extraction.

Given the sentences of a (cleaned) LLM completion, decide what kind of text
it is and pull out the sentence subsets the formatter renders:

  type              review | analysis | conversation | customer_service | general
  key_points        sentences with emphasis words (important, key, main, ...)
  positive_aspects  sentences with praise words
  negative_aspects  sentences with complaint words
  suggestions       sentences with advisory words
  questions         sentences containing "?"
  statements        everything else
  topics            domain labels (restaurant, hotel, product, service, technology)

Type detection is an ordered priority match, first hit wins:

  review → analysis → conversation → customer_service → general

Keyword sets overlap ("service" is both a review and a customer_service word),
so a customer-service reply that mentions "service" is classified as a review.
This mirrors the behaviour the formatter templates were written against.

The model selector (app.llm.router.detect_content_type) has its own
classifier with a different keyword set and priority order. The two are kept
separate on purpose; see DESIGN.md.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from app.processing.text import contains_any, filter_sentences


class ContentType(str, Enum):
    REVIEW           = "review"
    ANALYSIS         = "analysis"
    CONVERSATION     = "conversation"
    CUSTOMER_SERVICE = "customer_service"
    GENERAL          = "general"


# ---------------------------------------------------------------------------
# Keyword catalogs
# ---------------------------------------------------------------------------

# Priority order matters: the first matching entry decides the type.
_TYPE_RULES: tuple[tuple[ContentType, tuple[str, ...]], ...] = (
    (ContentType.REVIEW,
     ("rating", "stars", "recommend", "experience", "food", "service", "quality")),
    (ContentType.ANALYSIS,
     ("analysis", "sentiment", "key points", "summary", "findings", "insights")),
    (ContentType.CONVERSATION,
     ("hello", "hi", "how are you", "chat", "conversation")),
    (ContentType.CUSTOMER_SERVICE,
     ("customer", "service", "apologize", "resolve", "issue", "problem")),
)

KEY_POINT_WORDS = ("important", "key", "main", "primary", "essential", "critical")
POSITIVE_WORDS  = ("like", "love", "good", "great", "amazing", "excellent", "outstanding", "fantastic")
NEGATIVE_WORDS  = (
    "disappointing", "bad", "poor", "terrible", "awful", "horrible", "unacceptable",
    # contrast / excess markers: "However, the wait was too long"
    "however", "too long",
)
SUGGESTION_WORDS = ("suggest", "recommend", "could", "should", "might", "consider")

# (trigger words, labels added when any trigger is present)
_TOPIC_GROUPS: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (("food", "restaurant", "dining", "meal"),          ("restaurant", "food", "dining")),
    (("hotel", "accommodation", "room", "stay"),        ("hotel", "accommodation", "travel")),
    (("product", "item", "purchase", "buy"),            ("product", "shopping", "consumer")),
    (("service", "support", "help", "assistance"),      ("service", "support", "customer care")),
    (("app", "software", "technology", "digital"),      ("technology", "software", "digital")),
)


# ---------------------------------------------------------------------------
# ContentStructure
# ---------------------------------------------------------------------------

@dataclass
class ContentStructure:
    """
    Derived view over an ordered sentence list.

    Buckets are independent keyword filters, so one sentence can sit in
    several of them (e.g. "I recommend it, the food was great" is both a
    suggestion and a positive aspect).
    """
    type:             ContentType
    key_points:       list[str] = field(default_factory=list)
    positive_aspects: list[str] = field(default_factory=list)
    negative_aspects: list[str] = field(default_factory=list)
    suggestions:      list[str] = field(default_factory=list)
    questions:        list[str] = field(default_factory=list)
    statements:       list[str] = field(default_factory=list)
    topics:           list[str] = field(default_factory=list)
    total_sentences:  int       = 0

    def to_dict(self) -> dict:
        return {
            "type":             self.type.value,
            "key_points":       list(self.key_points),
            "positive_aspects": list(self.positive_aspects),
            "negative_aspects": list(self.negative_aspects),
            "suggestions":      list(self.suggestions),
            "questions":        list(self.questions),
            "statements":       list(self.statements),
            "topics":           list(self.topics),
            "total_sentences":  self.total_sentences,
        }


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def detect_structure_type(text: str) -> ContentType:
    """Ordered-priority type detection over already-lowercased text."""
    for content_type, keywords in _TYPE_RULES:
        if contains_any(text, keywords):
            return content_type
    return ContentType.GENERAL


def extract_topic_keywords(text: str) -> list[str]:
    """
    Topic labels present in the text, deduplicated in first-seen order.

    Each group is all-or-nothing: one trigger word adds every label of the
    group. "service" appears both as a trigger and a label.
    """
    topics: list[str] = []
    lowered = text.lower()
    for triggers, labels in _TOPIC_GROUPS:
        if contains_any(lowered, triggers):
            topics.extend(labels)
    return list(dict.fromkeys(topics))


def analyze_content_structure(sentences: Sequence[str]) -> ContentStructure:
    """Classify an ordered sentence list and extract its sentence buckets."""
    text = " ".join(sentences).lower()

    return ContentStructure(
        type             = detect_structure_type(text),
        key_points       = filter_sentences(sentences, KEY_POINT_WORDS),
        positive_aspects = filter_sentences(sentences, POSITIVE_WORDS),
        negative_aspects = filter_sentences(sentences, NEGATIVE_WORDS),
        suggestions      = filter_sentences(sentences, SUGGESTION_WORDS),
        questions        = [s for s in sentences if "?" in s],
        statements       = [s for s in sentences if "?" not in s],
        topics           = extract_topic_keywords(text),
        total_sentences  = len(sentences),
    )
