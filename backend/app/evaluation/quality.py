"""
Response Quality Analyzer — heuristic scoring of a finished response.

Scores a response on eight independent metrics, each in [0.0, 1.0]:

  coherence      transition words + word overlap between adjacent sentences
  relevance      keyword overlap with the caller-supplied context mapping
  completeness   presence of the elements expected for the content type
  clarity        sentence length, complex vocabulary, passive voice
  engagement     questions, personal pronouns, emotional words, calls to action
  structure      paragraphs, ordinal markers, bullet / numbered lists
  tone           indicator words for the tones expected for the content type
  length         word count against the content type's optimal range

The overall score is a fixed-weight combination (weights sum to 1.0):

  coherence 0.15  relevance 0.15  completeness 0.15  clarity 0.15
  engagement 0.10 structure 0.10  tone 0.10          length 0.10

Scores are persisted alongside generated responses, so every threshold,
weight and word list here is frozen: changing one makes new scores
incomparable with stored ones. Word splitting deliberately uses
str.split(" ") (empty strings included) to keep historical scores
reproducible.

The analyzer is deterministic and never raises: empty or non-string input
gets baseline scores.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from app.processing.text import count_present, raw_sentences

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Fixed catalogs
# ---------------------------------------------------------------------------

METRIC_WEIGHTS: Mapping[str, float] = MappingProxyType({
    "coherence":    0.15,
    "relevance":    0.15,
    "completeness": 0.15,
    "clarity":      0.15,
    "engagement":   0.10,
    "structure":    0.10,
    "tone":         0.10,
    "length":       0.10,
})

STRENGTH_THRESHOLD   = 0.8
WEAKNESS_THRESHOLD   = 0.5
SUGGESTION_THRESHOLD = 0.6

STRENGTH_LABELS: Mapping[str, str] = MappingProxyType({
    "coherence":    "Excellent logical flow and coherence",
    "relevance":    "Highly relevant to the context",
    "completeness": "Comprehensive and complete response",
    "clarity":      "Clear and easy to understand",
    "engagement":   "Engaging and interactive",
    "structure":    "Well-structured and organized",
    "tone":         "Appropriate tone for the context",
    "length":       "Optimal length for the content type",
})

WEAKNESS_LABELS: Mapping[str, str] = MappingProxyType({
    "coherence":    "Poor logical flow and coherence",
    "relevance":    "Low relevance to the context",
    "completeness": "Incomplete response",
    "clarity":      "Unclear or confusing",
    "engagement":   "Not engaging enough",
    "structure":    "Poor structure and organization",
    "tone":         "Inappropriate tone",
    "length":       "Length not appropriate for content type",
})

SUGGESTION_LABELS: Mapping[str, str] = MappingProxyType({
    "coherence":    "Add transition words to improve flow between ideas",
    "relevance":    "Focus more on the specific context and user needs",
    "completeness": "Include more comprehensive information and details",
    "clarity":      "Use shorter sentences and simpler language",
    "engagement":   "Add questions or personal pronouns to increase engagement",
    "structure":    "Organize content with clear sections and bullet points",
    "tone":         "Adjust tone to better match the expected style",
    "length":       "Adjust response length to better fit the content type",
})


@dataclass(frozen=True)
class ResponsePattern:
    """Expectations for one content type."""
    required_elements: tuple[str, ...]
    optimal_length:    tuple[int, int]      # (min words, max words)
    tone:              tuple[str, ...]
    structure:         tuple[str, ...]


RESPONSE_PATTERNS: Mapping[str, ResponsePattern] = MappingProxyType({
    "conversation": ResponsePattern(
        required_elements=("greeting", "main_content", "engagement"),
        optimal_length=(50, 200),
        tone=("friendly", "casual", "engaging"),
        structure=("opening", "body", "closing"),
    ),
    "analysis": ResponsePattern(
        required_elements=("summary", "key_points", "insights", "recommendations"),
        optimal_length=(150, 500),
        tone=("professional", "objective", "detailed"),
        structure=("executive_summary", "detailed_analysis", "conclusions"),
    ),
    "customer_service": ResponsePattern(
        required_elements=("acknowledgment", "understanding", "solution", "follow_up"),
        optimal_length=(100, 300),
        tone=("empathetic", "professional", "helpful"),
        structure=("empathy", "problem_understanding", "solution", "next_steps"),
    ),
    "review": ResponsePattern(
        required_elements=("experience", "highlights", "details", "recommendation"),
        optimal_length=(100, 400),
        tone=("personal", "authentic", "informative"),
        structure=("context", "experience", "evaluation", "recommendation"),
    ),
})

# Unknown content types (general, inquiry, ...) are judged as conversation.
_DEFAULT_PATTERN = "conversation"

_SYNONYMS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "greeting":        ("hello", "hi", "hey", "welcome"),
    "main_content":    ("content", "information", "details", "explanation"),
    "engagement":      ("interaction", "participation", "involvement"),
    "summary":         ("overview", "recap", "summary", "brief"),
    "key_points":      ("main points", "important points", "key findings"),
    "insights":        ("observations", "findings", "discoveries"),
    "recommendations": ("suggestions", "advice", "recommendations"),
    "acknowledgment":  ("understand", "recognize", "acknowledge"),
    "understanding":   ("comprehend", "grasp", "understand"),
    "solution":        ("resolve", "fix", "address", "solve"),
    "follow_up":       ("next steps", "follow up", "continue"),
})

_TONE_INDICATORS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "professional": ("professional", "expert", "analysis", "recommendation", "assessment"),
    "casual":       ("cool", "awesome", "great", "nice", "fun"),
    "friendly":     ("hello", "hi", "thanks", "appreciate", "welcome"),
    "empathetic":   ("understand", "sorry", "apologize", "care", "concern"),
    "formal":       ("therefore", "consequently", "furthermore", "moreover", "thus"),
})

_TRANSITIONS = (
    "however", "therefore", "furthermore", "moreover", "in addition",
    "consequently", "as a result", "meanwhile", "subsequently",
)
_CLARITY_COMPLEX_WORDS = ("notwithstanding", "aforementioned", "subsequently", "consequently", "furthermore")
_COMPLEXITY_COMPLEX_WORDS = _CLARITY_COMPLEX_WORDS + ("moreover", "therefore")
_PASSIVE_MARKERS = ("is being", "are being", "was being", "were being", "has been", "have been")
_PERSONAL_PRONOUNS = ("you", "your", "we", "our", "us")
_EMOTIONAL_WORDS = ("amazing", "fantastic", "wonderful", "excellent", "great", "love", "enjoy", "appreciate")
_CALL_TO_ACTION = ("try", "consider", "think about", "imagine", "suppose")
_STRUCTURAL_INDICATORS = ("first", "second", "third", "finally", "in conclusion", "to summarize", "overall")
_KEY_INDICATORS = ("important", "key", "main", "primary", "essential", "critical", "significant", "notable")

_POSITIVE_WORDS = (
    "good", "great", "amazing", "excellent", "wonderful", "fantastic",
    "love", "like", "happy", "satisfied", "pleased",
)
_NEGATIVE_WORDS = (
    "bad", "terrible", "awful", "horrible", "hate", "disappointed",
    "angry", "frustrated", "upset", "unhappy",
)

_PARAGRAPH_RE      = re.compile(r"\n\s*\n")
_BULLET_RE         = re.compile(r"\n\s*[-*•]\s")
_NUMBERED_RE       = re.compile(r"\n\s*\d+[.)]\s")
_WORD_RE           = re.compile(r"\s+")
_PRONOUN_RE        = re.compile(r"\b(you|your|we|our|us)\b", re.IGNORECASE)
_EMOTIONAL_RE      = re.compile(r"\b(amazing|fantastic|wonderful|excellent|great|love|enjoy|appreciate)\b", re.IGNORECASE)
_CTA_RE            = re.compile(r"\b(try|consider|think about|imagine|suppose)\b", re.IGNORECASE)
_TRANSITION_RE     = re.compile(
    r"\b(however|therefore|furthermore|moreover|in addition|consequently|as a result|meanwhile|subsequently)\b",
    re.IGNORECASE,
)
_INTRODUCTION_RE   = re.compile(r"\b(introduction|overview|summary|first|initially)\b", re.IGNORECASE)
_CONCLUSION_RE     = re.compile(r"\b(conclusion|finally|in summary|overall|therefore)\b", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Result dataclasses
# ---------------------------------------------------------------------------

@dataclass
class QualityMetrics:
    """The eight metric scores, each in [0.0, 1.0]."""
    coherence:    float = 0.0
    relevance:    float = 0.0
    completeness: float = 0.0
    clarity:      float = 0.0
    engagement:   float = 0.0
    structure:    float = 0.0
    tone:         float = 0.0
    length:       float = 0.0

    def overall_score(self) -> float:
        """Weighted combination of the metrics, normalised by the weight total."""
        total_score  = 0.0
        total_weight = 0.0
        for name, weight in METRIC_WEIGHTS.items():
            total_score  += getattr(self, name) * weight
            total_weight += weight
        if total_weight <= 0:
            return 0.0
        return min(max(total_score / total_weight, 0.0), 1.0)

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass
class QualityAnalysis:
    overall_score:      float
    metrics:            QualityMetrics
    strengths:          list[str]      = field(default_factory=list)
    weaknesses:         list[str]      = field(default_factory=list)
    suggestions:        list[str]      = field(default_factory=list)
    pattern_analysis:   dict[str, bool] = field(default_factory=dict)
    structure_analysis: dict[str, Any] = field(default_factory=dict)
    key_points:         list[str]      = field(default_factory=list)
    sentiment:          str            = "neutral"
    complexity:         str            = "moderate"

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall_score":      self.overall_score,
            "metrics":            self.metrics.to_dict(),
            "strengths":          list(self.strengths),
            "weaknesses":         list(self.weaknesses),
            "suggestions":        list(self.suggestions),
            "pattern_analysis":   dict(self.pattern_analysis),
            "structure_analysis": dict(self.structure_analysis),
            "key_points":         list(self.key_points),
            "sentiment":          self.sentiment,
            "complexity":         self.complexity,
        }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _clamp(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def _pattern_for(content_type: str) -> ResponsePattern:
    return RESPONSE_PATTERNS.get(content_type) or RESPONSE_PATTERNS[_DEFAULT_PATTERN]


def _avg_sentence_words(sentences: list[str]) -> float:
    """Mean space-split word count; NaN when there are no sentences."""
    if not sentences:
        return math.nan
    return sum(len(s.split(" ")) for s in sentences) / len(sentences)


# ---------------------------------------------------------------------------
# ResponseQualityAnalyzer
# ---------------------------------------------------------------------------

class ResponseQualityAnalyzer:
    """
    Stateless heuristic scorer.

    Usage::

        analyzer = ResponseQualityAnalyzer()
        analysis = analyzer.analyze_response_quality(text, "review", {"topic": "pasta"})
        analysis.overall_score, analysis.strengths, analysis.suggestions
    """

    def analyze_response_quality(
        self,
        response:     str,
        content_type: str = "general",
        context:      Mapping[str, Any] | None = None,
    ) -> QualityAnalysis:
        if not isinstance(response, str):
            response = ""
        context = {} if context is None else context

        metrics = QualityMetrics(
            coherence    = self.analyze_coherence(response),
            relevance    = self.analyze_relevance(response, context),
            completeness = self.analyze_completeness(response, content_type),
            clarity      = self.analyze_clarity(response),
            engagement   = self.analyze_engagement(response),
            structure    = self.analyze_structure(response),
            tone         = self.analyze_tone(response, content_type),
            length       = self.analyze_length(response, content_type),
        )

        analysis = QualityAnalysis(
            overall_score      = metrics.overall_score(),
            metrics            = metrics,
            strengths          = self.identify_strengths(metrics),
            weaknesses         = self.identify_weaknesses(metrics),
            suggestions        = self.generate_suggestions(metrics),
            pattern_analysis   = self.analyze_response_patterns(response),
            structure_analysis = self.analyze_response_structure(response),
            key_points         = self.extract_key_points(response),
            sentiment          = self.analyze_sentiment(response),
            complexity         = self.analyze_complexity(response),
        )

        logger.debug(
            "QualityAnalyzer | content_type=%s overall=%.3f weaknesses=%d",
            content_type, analysis.overall_score, len(analysis.weaknesses),
        )
        return analysis

    # -----------------------------------------------------------------------
    # Metrics
    # -----------------------------------------------------------------------

    def analyze_coherence(self, response: str) -> float:
        if not response:
            return 0.0

        sentences = raw_sentences(response)
        if len(sentences) < 2:
            return 0.5

        continuity_score = 0.0
        transition_count = 0

        for i in range(1, len(sentences)):
            current = sentences[i].lower()
            if any(t in current for t in _TRANSITIONS):
                transition_count += 1

            prev_words    = sentences[i - 1].lower().split(" ")[-3:]
            current_words = current.split(" ")[:3]
            if any(w in current_words for w in prev_words):
                continuity_score += 0.2

        transition_part = min(transition_count / len(sentences), 1) * 0.3
        continuity_part = min(continuity_score / len(sentences), 1) * 0.7
        return min(transition_part + continuity_part, 1)

    def analyze_relevance(self, response: str, context: Mapping[str, Any] | None) -> float:
        if not response or context is None:
            return 0.5

        response_words = response.lower().split(" ")
        context_words  = " ".join(str(v) for v in context.values()).lower().split(" ")

        common = [w for w in response_words if w in context_words and len(w) > 3]
        score  = len(common) / max(len(response_words), 1)
        return min(score * 2, 1)

    def analyze_completeness(self, response: str, content_type: str) -> float:
        if not response:
            return 0.0

        required = _pattern_for(content_type).required_elements
        lowered  = response.lower()
        score    = 0.0

        for element in required:
            # Synonyms are looked up per underscore-separated word, so compound
            # elements ("main_content") only ever match on their parts.
            words = element.split("_")
            found = any(
                w in lowered or any(syn in lowered for syn in _SYNONYMS.get(w, ()))
                for w in words
            )
            if found:
                score += 1 / len(required)
        return score

    def analyze_clarity(self, response: str) -> float:
        if not response:
            return 0.0

        score = 0.5
        avg   = _avg_sentence_words(raw_sentences(response))

        if avg <= 15:
            score += 0.2
        elif avg <= 25:
            score += 0.1
        else:
            score -= 0.1

        complex_count = count_present(response, _CLARITY_COMPLEX_WORDS)
        if complex_count == 0:
            score += 0.2
        elif complex_count <= 2:
            score += 0.1
        else:
            score -= 0.1

        if count_present(response, _PASSIVE_MARKERS) == 0:
            score += 0.1
        else:
            score -= 0.1

        return _clamp(score)

    def analyze_engagement(self, response: str) -> float:
        if not response:
            return 0.0

        score = 0.5
        if "?" in response:
            score += 0.2

        pronouns = count_present(response, _PERSONAL_PRONOUNS)
        if pronouns >= 3:
            score += 0.2
        elif pronouns >= 1:
            score += 0.1

        if count_present(response, _EMOTIONAL_WORDS) >= 2:
            score += 0.1

        if count_present(response, _CALL_TO_ACTION) > 0:
            score += 0.1

        return _clamp(score)

    def analyze_structure(self, response: str) -> float:
        if not response:
            return 0.0

        score = 0.5
        paragraphs = [p for p in _PARAGRAPH_RE.split(response) if p.strip()]
        if len(paragraphs) >= 2:
            score += 0.2

        indicators = count_present(response, _STRUCTURAL_INDICATORS)
        if indicators >= 2:
            score += 0.2
        elif indicators >= 1:
            score += 0.1

        if _BULLET_RE.search(response) or _NUMBERED_RE.search(response):
            score += 0.1

        return _clamp(score)

    def analyze_tone(self, response: str, content_type: str) -> float:
        if not response:
            return 0.0

        score = 0.5
        for expected in _pattern_for(content_type).tone:
            if count_present(response, _TONE_INDICATORS.get(expected, ())) > 0:
                score += 0.2
        return _clamp(score)

    def analyze_length(self, response: str, content_type: str) -> float:
        if not response:
            return 0.0

        low, high = _pattern_for(content_type).optimal_length
        words = len(response.split(" "))

        if low <= words <= high:
            return 1.0
        if low * 0.8 <= words <= high * 1.2:
            return 0.8
        if low * 0.6 <= words <= high * 1.4:
            return 0.6
        return 0.3

    # -----------------------------------------------------------------------
    # Labels
    # -----------------------------------------------------------------------

    def identify_strengths(self, metrics: QualityMetrics) -> list[str]:
        return [label for name, label in STRENGTH_LABELS.items()
                if getattr(metrics, name) >= STRENGTH_THRESHOLD]

    def identify_weaknesses(self, metrics: QualityMetrics) -> list[str]:
        return [label for name, label in WEAKNESS_LABELS.items()
                if getattr(metrics, name) < WEAKNESS_THRESHOLD]

    def generate_suggestions(self, metrics: QualityMetrics) -> list[str]:
        return [label for name, label in SUGGESTION_LABELS.items()
                if getattr(metrics, name) < SUGGESTION_THRESHOLD]

    # -----------------------------------------------------------------------
    # Diagnostics
    # -----------------------------------------------------------------------

    def analyze_response_patterns(self, response: str) -> dict[str, bool]:
        if not response:
            return dict.fromkeys((
                "has_questions", "has_personal_pronouns", "has_emotional_words",
                "has_call_to_action", "has_transitions", "has_bullet_points",
                "has_numbered_list", "has_paragraphs",
            ), False)

        return {
            "has_questions":         "?" in response,
            "has_personal_pronouns": bool(_PRONOUN_RE.search(response)),
            "has_emotional_words":   bool(_EMOTIONAL_RE.search(response)),
            "has_call_to_action":    bool(_CTA_RE.search(response)),
            "has_transitions":       bool(_TRANSITION_RE.search(response)),
            "has_bullet_points":     bool(_BULLET_RE.search(response)),
            "has_numbered_list":     bool(_NUMBERED_RE.search(response)),
            "has_paragraphs":        bool(_PARAGRAPH_RE.search(response)),
        }

    def analyze_response_structure(self, response: str) -> dict[str, Any]:
        structure: dict[str, Any] = {
            "paragraphs":           0,
            "sentences":            0,
            "words":                0,
            "avg_sentence_length":  0.0,
            "avg_paragraph_length": 0.0,
            "has_introduction":     False,
            "has_conclusion":       False,
            "has_body":             False,
        }
        if not response:
            return structure

        paragraphs = [p for p in _PARAGRAPH_RE.split(response) if p.strip()]
        sentences  = raw_sentences(response)
        words      = [w for w in _WORD_RE.split(response) if w]

        structure["paragraphs"] = len(paragraphs)
        structure["sentences"]  = len(sentences)
        structure["words"]      = len(words)
        structure["avg_sentence_length"]  = len(words) / len(sentences) if sentences else 0.0
        structure["avg_paragraph_length"] = len(sentences) / len(paragraphs) if paragraphs else 0.0
        structure["has_introduction"] = bool(_INTRODUCTION_RE.search(response))
        structure["has_conclusion"]   = bool(_CONCLUSION_RE.search(response))
        structure["has_body"]         = len(sentences) > 2
        return structure

    def extract_key_points(self, response: str) -> list[str]:
        if not response:
            return []

        sentences  = raw_sentences(response)
        key_points = [
            s.strip() for s in sentences
            if any(k in s.lower() for k in _KEY_INDICATORS) and len(s.strip()) > 10
        ]
        if not key_points:
            key_points = [s.strip() for s in sentences[:3]]
        return key_points[:5]

    def analyze_sentiment(self, response: str) -> str:
        if not response:
            return "neutral"

        positive = count_present(response, _POSITIVE_WORDS)
        negative = count_present(response, _NEGATIVE_WORDS)
        if positive > negative:
            return "positive"
        if negative > positive:
            return "negative"
        return "neutral"

    def analyze_complexity(self, response: str) -> str:
        if not response:
            return "moderate"

        avg = _avg_sentence_words(raw_sentences(response))
        complex_count = count_present(response, _COMPLEXITY_COMPLEX_WORDS)

        if avg > 20 or complex_count > 3:
            return "high"
        if avg < 10 and complex_count == 0:
            return "low"
        return "moderate"
