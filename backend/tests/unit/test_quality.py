"""
Unit Tests — ResponseQualityAnalyzer
═════════════════════════════════════
Coverage targets:
  ✅ Overall score: bounded to [0, 1] and equal to the weighted sum
  ✅ Empty / non-string responses get baseline scores, never raise
  ✅ Individual metrics (coherence, relevance, completeness, clarity,
     engagement, structure, tone, length)
  ✅ Strength / weakness / suggestion thresholds
  ✅ Diagnostics: patterns, structure, key points, sentiment, complexity
"""

from __future__ import annotations

import random

import pytest

from app.evaluation.quality import (
    METRIC_WEIGHTS,
    STRENGTH_LABELS,
    SUGGESTION_LABELS,
    WEAKNESS_LABELS,
    QualityMetrics,
    ResponseQualityAnalyzer,
)

METRIC_NAMES = list(METRIC_WEIGHTS)


@pytest.fixture
def analyzer() -> ResponseQualityAnalyzer:
    return ResponseQualityAnalyzer()


# ─────────────────────────────────────────────────────────────────────────────
# Overall score
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.unit
class TestOverallScore:

    def test_weights_sum_to_one(self):
        assert sum(METRIC_WEIGHTS.values()) == pytest.approx(1.0)

    @pytest.mark.parametrize("seed", range(20))
    def test_bounded_and_equal_to_weighted_sum(self, seed):
        rng = random.Random(seed)
        metrics = QualityMetrics(**{name: rng.random() for name in METRIC_NAMES})

        expected = sum(getattr(metrics, n) * w for n, w in METRIC_WEIGHTS.items())

        score = metrics.overall_score()
        assert 0.0 <= score <= 1.0
        assert score == pytest.approx(expected, abs=1e-9)

    def test_all_ones_scores_one(self):
        metrics = QualityMetrics(**dict.fromkeys(METRIC_NAMES, 1.0))
        assert metrics.overall_score() == pytest.approx(1.0)

    def test_to_dict_lists_every_metric(self):
        assert set(QualityMetrics().to_dict()) == set(METRIC_NAMES)


# ─────────────────────────────────────────────────────────────────────────────
# Baseline behaviour
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.unit
class TestEmptyResponse:

    @pytest.mark.parametrize("value", ["", None, 42])
    def test_baseline_scores(self, analyzer, value):
        analysis = analyzer.analyze_response_quality(value, "review", {"topic": "pasta"})

        metrics = analysis.metrics
        assert metrics.relevance == 0.5
        for name in METRIC_NAMES:
            if name != "relevance":
                assert getattr(metrics, name) == 0.0

        assert analysis.overall_score == pytest.approx(0.075)
        assert analysis.sentiment  == "neutral"
        assert analysis.complexity == "moderate"
        assert analysis.key_points == []
        assert analysis.strengths  == []
        assert len(analysis.weaknesses)  == 7
        assert len(analysis.suggestions) == 8
        assert not any(analysis.pattern_analysis.values())
        assert analysis.structure_analysis["words"] == 0

    def test_to_dict_shape(self, analyzer):
        data = analyzer.analyze_response_quality("Hello there. Thanks for asking!").to_dict()
        assert set(data) == {
            "overall_score", "metrics", "strengths", "weaknesses", "suggestions",
            "pattern_analysis", "structure_analysis", "key_points", "sentiment", "complexity",
        }
        assert set(data["metrics"]) == set(METRIC_NAMES)


# ─────────────────────────────────────────────────────────────────────────────
# Metrics
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.unit
class TestMetrics:

    def test_coherence_single_sentence_is_neutral(self, analyzer):
        assert analyzer.analyze_coherence("Just one sentence here") == 0.5

    def test_coherence_rewards_transitions_and_overlap(self, analyzer):
        plain  = analyzer.analyze_coherence("Cats sleep. Dogs bark.")
        linked = analyzer.analyze_coherence("The food was cold. However, the food was cheap.")
        assert linked > plain
        assert 0.0 <= linked <= 1.0

    def test_relevance_uses_context_words(self, analyzer):
        assert analyzer.analyze_relevance("The pasta was lovely", {"topic": "pasta dinner"}) == pytest.approx(0.5)

    def test_relevance_without_context_is_neutral(self, analyzer):
        assert analyzer.analyze_relevance("The pasta was lovely", None) == 0.5

    def test_relevance_ignores_short_words(self, analyzer):
        assert analyzer.analyze_relevance("the was", {"a": "the was"}) == 0.0

    def test_completeness_customer_service(self, analyzer):
        text = "I understand your concern. We will resolve this and follow up tomorrow."
        assert analyzer.analyze_completeness(text, "customer_service") == pytest.approx(1.0)

    def test_completeness_unknown_type_uses_conversation(self, analyzer):
        assert analyzer.analyze_completeness("hello", "inquiry") == pytest.approx(1 / 3)

    def test_clarity_short_plain_sentences(self, analyzer):
        assert analyzer.analyze_clarity("The room was clean. The bed was soft.") == pytest.approx(1.0)

    def test_clarity_penalises_passive_and_jargon(self, analyzer):
        text = (
            "Notwithstanding the aforementioned delays, the order has been shipped; "
            "furthermore it was being tracked and subsequently consequently delivered."
        )
        assert analyzer.analyze_clarity(text) < 0.5

    def test_engagement(self, analyzer):
        text = "Do you love it? You should try the amazing pasta."
        assert analyzer.analyze_engagement(text) == pytest.approx(1.0)

    def test_engagement_flat_statement(self, analyzer):
        assert analyzer.analyze_engagement("The table was wooden.") == pytest.approx(0.5)

    def test_structure_paragraphs_and_lists(self, analyzer):
        text = "First, the intro.\n\nThe list:\n- one\n- two\n\nFinally, done."
        assert analyzer.analyze_structure(text) == pytest.approx(1.0)

    def test_tone_conversation(self, analyzer):
        # friendly (hello) + casual (awesome); no indicators exist for "engaging".
        assert analyzer.analyze_tone("hello, this is awesome", "conversation") == pytest.approx(0.9)

    @pytest.mark.parametrize("words,expected", [
        (100, 1.0),
        (45,  0.8),
        (35,  0.6),
        (5,   0.3),
    ])
    def test_length_bands_for_conversation(self, analyzer, words, expected):
        text = " ".join(["word"] * words)
        assert analyzer.analyze_length(text, "conversation") == expected

    def test_every_metric_in_unit_interval(self, analyzer):
        text = (
            "Hello! First, we reviewed your order. However, the delivery was late.\n\n"
            "- We apologize\n- We will fix it\n\nFinally, what do you think?"
        )
        metrics = analyzer.analyze_response_quality(text, "customer_service", {"order": "late delivery"}).metrics
        for name in METRIC_NAMES:
            assert 0.0 <= getattr(metrics, name) <= 1.0


# ─────────────────────────────────────────────────────────────────────────────
# Labels
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.unit
class TestLabels:

    def test_thresholds(self, analyzer):
        metrics = QualityMetrics(
            coherence=0.9, relevance=0.8, completeness=0.79,
            clarity=0.6, engagement=0.55, structure=0.5,
            tone=0.49, length=0.0,
        )
        assert analyzer.identify_strengths(metrics) == [
            STRENGTH_LABELS["coherence"], STRENGTH_LABELS["relevance"],
        ]
        assert analyzer.identify_weaknesses(metrics) == [
            WEAKNESS_LABELS["tone"], WEAKNESS_LABELS["length"],
        ]
        assert analyzer.generate_suggestions(metrics) == [
            SUGGESTION_LABELS["engagement"], SUGGESTION_LABELS["structure"],
            SUGGESTION_LABELS["tone"], SUGGESTION_LABELS["length"],
        ]


# ─────────────────────────────────────────────────────────────────────────────
# Diagnostics
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.unit
class TestDiagnostics:

    def test_patterns(self, analyzer):
        patterns = analyzer.analyze_response_patterns("Would you try it?\n1. Yes\n\nHowever, wait.")
        assert patterns["has_questions"]
        assert patterns["has_personal_pronouns"]
        assert patterns["has_call_to_action"]
        assert patterns["has_numbered_list"]
        assert patterns["has_paragraphs"]
        assert patterns["has_transitions"]
        assert not patterns["has_bullet_points"]
        assert not patterns["has_emotional_words"]

    def test_structure_counts(self, analyzer):
        structure = analyzer.analyze_response_structure("Overall it works. It is fast. It is cheap.")
        assert structure["sentences"]  == 3
        assert structure["words"]      == 9
        assert structure["paragraphs"] == 1
        assert structure["avg_sentence_length"] == pytest.approx(3.0)
        assert structure["has_conclusion"]
        assert not structure["has_introduction"]
        assert structure["has_body"]

    def test_key_points_prefer_indicator_sentences(self, analyzer):
        text = "This is an important point to note. Other text here. The key idea matters."
        assert analyzer.extract_key_points(text) == [
            "This is an important point to note",
            "The key idea matters",
        ]

    def test_key_points_fall_back_to_first_three(self, analyzer):
        text = "One. Two. Three. Four."
        assert analyzer.extract_key_points(text) == ["One", "Two", "Three"]

    def test_key_points_capped_at_five(self, analyzer):
        text = ". ".join(f"The main point number {i}" for i in range(8))
        assert len(analyzer.extract_key_points(text)) == 5

    @pytest.mark.parametrize("text,expected", [
        ("great and amazing but bad", "positive"),
        ("bad and terrible but good", "negative"),
        ("good but bad",              "neutral"),
        ("the chair is brown",        "neutral"),
    ])
    def test_sentiment_majority_vote(self, analyzer, text, expected):
        assert analyzer.analyze_sentiment(text) == expected

    def test_complexity_low(self, analyzer):
        assert analyzer.analyze_complexity("Hi. Ok.") == "low"

    def test_complexity_high_from_vocabulary(self, analyzer):
        text = "Moreover, therefore, furthermore and consequently it failed."
        assert analyzer.analyze_complexity(text) == "high"

    def test_complexity_moderate(self, analyzer):
        text = "This sentence has exactly twelve words in it to land in between."
        assert analyzer.analyze_complexity(text) == "moderate"
