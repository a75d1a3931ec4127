"""
Unit Tests — Sentence Splitting and Content Classifier
═══════════════════════════════════════════════════════
Coverage targets:
  ✅ split_sentences: terminator runs, trimming, empty pieces dropped
  ✅ Type priority: review → analysis → conversation → customer_service → general
  ✅ Overlapping keywords ("service") resolve to the higher-priority type
  ✅ Sentence buckets (positive / negative / suggestions / questions / statements)
  ✅ Topic groups are all-or-nothing and deduplicated in first-seen order
  ✅ Output classifier vs input selector divergence is pinned
"""

from __future__ import annotations

import pytest

from app.llm.router import StrategySelector, detect_content_type
from app.processing.classifier import (
    ContentType,
    analyze_content_structure,
    detect_structure_type,
    extract_topic_keywords,
)
from app.processing.text import count_present, raw_sentences, split_sentences


# ─────────────────────────────────────────────────────────────────────────────
# Sentence splitting
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.unit
class TestSplitSentences:

    def test_terminator_runs_form_one_boundary(self):
        assert split_sentences("Great food!! Slow service... Worth it?") == [
            "Great food", "Slow service", "Worth it",
        ]

    def test_whitespace_only_pieces_dropped(self):
        assert split_sentences("One.   . Two.") == ["One", "Two"]

    @pytest.mark.parametrize("value", [None, "", 42])
    def test_non_string_yields_empty_list(self, value):
        assert split_sentences(value) == []

    def test_raw_sentences_keep_leading_space(self):
        assert raw_sentences("One. Two.") == ["One", " Two"]

    def test_count_present_counts_distinct_keywords(self):
        assert count_present("good good great", ("good", "great", "bad")) == 2


# ─────────────────────────────────────────────────────────────────────────────
# Type detection
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.unit
class TestContentTypeDetection:

    def test_review_checked_before_analysis(self):
        structure = analyze_content_structure(["5 stars, great food", "sentiment analysis"])
        assert structure.type is ContentType.REVIEW

    @pytest.mark.parametrize("text,expected", [
        ("the key findings are below",        ContentType.ANALYSIS),
        ("hello, nice to chat",               ContentType.CONVERSATION),
        ("we apologize for the problem",      ContentType.CUSTOMER_SERVICE),
        ("the weather today is mild",         ContentType.GENERAL),
    ])
    def test_each_type_detected(self, text, expected):
        assert detect_structure_type(text) is expected

    def test_service_overlap_resolves_to_review(self):
        # "service" is both a review and a customer_service keyword.
        assert detect_structure_type("we apologize for the poor service") is ContentType.REVIEW

    def test_substring_matching_applies(self):
        # "hi" inside "this" is enough for the conversation bucket.
        assert detect_structure_type("this is fine") is ContentType.CONVERSATION

    def test_content_type_is_str_enum(self):
        assert ContentType.CUSTOMER_SERVICE == "customer_service"


@pytest.mark.unit
class TestClassifierDivergence:
    """
    The output classifier and the model selector use different keyword sets
    and priority orders. This input is pinned to keep both behaviours.
    """

    TEXT = "Hi there, how's it going? I wanted to get your analysis on this."

    def test_output_classifier_says_analysis(self):
        structure = analyze_content_structure(split_sentences(self.TEXT))
        assert structure.type is ContentType.ANALYSIS

    def test_input_selector_says_conversation(self):
        assert detect_content_type(self.TEXT.lower()) == "conversation"
        assert StrategySelector().analyze_input(self.TEXT).content_type == "conversation"


# ─────────────────────────────────────────────────────────────────────────────
# Sentence buckets
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.unit
class TestSentenceBuckets:

    SENTENCES = [
        "I visited this restaurant last week",
        "The food was amazing and the staff was great",
        "However, the wait was too long",
        "I would recommend trying the pasta",
        "Would you go back?",
    ]

    @pytest.fixture
    def structure(self):
        return analyze_content_structure(self.SENTENCES)

    def test_positive_aspects(self, structure):
        assert structure.positive_aspects == ["The food was amazing and the staff was great"]

    def test_negative_aspects(self, structure):
        assert structure.negative_aspects == ["However, the wait was too long"]

    def test_suggestions(self, structure):
        assert structure.suggestions == ["I would recommend trying the pasta"]

    def test_questions_and_statements_partition(self, structure):
        assert structure.questions == ["Would you go back?"]
        assert len(structure.statements) == 4
        assert set(structure.questions).isdisjoint(structure.statements)

    def test_total_sentences(self, structure):
        assert structure.total_sentences == 5

    def test_contrast_marker_lands_in_both_polarity_buckets(self):
        # "however" is a negative marker, so praise after it counts twice.
        structure = analyze_content_structure(["However, the food was great"])
        assert structure.positive_aspects == ["However, the food was great"]
        assert structure.negative_aspects == ["However, the food was great"]

    def test_key_points(self):
        structure = analyze_content_structure(["The main issue is cost", "Nothing else"])
        assert structure.key_points == ["The main issue is cost"]

    def test_empty_sentence_list(self):
        structure = analyze_content_structure([])
        assert structure.type is ContentType.GENERAL
        assert structure.total_sentences == 0
        assert structure.to_dict()["type"] == "general"


# ─────────────────────────────────────────────────────────────────────────────
# Topics
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.unit
class TestTopicExtraction:

    def test_restaurant_and_app_groups(self):
        assert extract_topic_keywords("The restaurant app was slick") == [
            "restaurant", "food", "dining",
            "technology", "software", "digital",
        ]

    def test_group_is_all_or_nothing(self):
        topics = extract_topic_keywords("We had a meal")
        assert topics == ["restaurant", "food", "dining"]

    def test_topics_deduplicated(self):
        topics = extract_topic_keywords("Food, dining, restaurant, meal, support and service")
        assert len(topics) == len(set(topics))
        assert topics[:3] == ["restaurant", "food", "dining"]
        assert "customer care" in topics

    def test_no_topics(self):
        assert extract_topic_keywords("The weather is mild") == []
