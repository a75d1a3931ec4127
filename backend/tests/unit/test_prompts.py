"""
Unit Tests — Prompt catalog
════════════════════════════
Coverage targets:
  ✅ Per-model system prompts carry the strategy characteristics
  ✅ Unknown model keys fall back to the llama approach
  ✅ Review prompt: per-type format, seeded opening choice, general fallback
  ✅ Customer-service prompt: seeded staff persona
  ✅ Voice / location prompts render braces and placeholders correctly
  ✅ Blog prompt: word targets, defaults, optional information lines
"""

from __future__ import annotations

import random
from dataclasses import replace

import pytest

from app.llm.prompts import (
    BLOG_WORD_TARGETS,
    REVIEW_FORMATS,
    BlogBrief,
    blog_word_target,
    build_blog_prompt,
    STAFF_NAMES,
    build_customer_service_prompt,
    build_location_prompt,
    build_review_prompt,
    build_system_prompt,
    build_voice_analysis_prompt,
    review_format_for,
)
from app.llm.router import MODEL_REGISTRY, StrategySelector


# ─────────────────────────────────────────────────────────────────────────────
# System prompts
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.unit
class TestSystemPrompt:

    def test_model_specific_approach(self):
        selection = StrategySelector().select_strategy("The customer complaint about my order")
        prompt = build_system_prompt(selection.selected_model, selection.response_strategy)

        assert "EMPATHETIC APPROACH" in prompt
        assert "- Structure: acknowledgment, understanding, solution, follow_up" in prompt
        assert "- Tone: empathetic, professional, helpful" in prompt

    def test_enhancements_listed_when_present(self):
        selection = StrategySelector().select_strategy("The food was terrible, fix it now")
        prompt = build_system_prompt(selection.selected_model, selection.response_strategy)
        assert "- Enhancements: urgent_response, empathetic_tone" in prompt

    def test_no_enhancements_line_when_empty(self):
        selection = StrategySelector().select_strategy("The food was great")
        prompt = build_system_prompt(selection.selected_model, selection.response_strategy)
        assert "Enhancements" not in prompt

    def test_unknown_model_falls_back_to_llama_approach(self):
        strategy = StrategySelector().select_strategy("The food was great").response_strategy
        custom   = replace(MODEL_REGISTRY["llama"], key="custom")
        assert "CONVERSATION STRUCTURE APPROACH" in build_system_prompt(custom, strategy)


# ─────────────────────────────────────────────────────────────────────────────
# Review prompts
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.unit
class TestReviewPrompt:

    def test_opening_comes_from_type_format(self):
        prompt, opening = build_review_prompt("great pasta", "restaurant", random.Random(3))

        assert opening in REVIEW_FORMATS["restaurant"].openings
        assert f'Starts naturally with "{opening}"' in prompt
        assert 'Voice input: "great pasta"' in prompt
        assert "Review type: restaurant" in prompt

    def test_seeded_choice_is_reproducible(self):
        first  = build_review_prompt("t", "hotel", random.Random(42))
        second = build_review_prompt("t", "hotel", random.Random(42))
        assert first == second

    def test_unknown_type_uses_general_format(self):
        assert review_format_for("spaceship") is REVIEW_FORMATS["general"]
        _, opening = build_review_prompt("t", "spaceship", random.Random(0))
        assert opening in REVIEW_FORMATS["general"].openings

    def test_every_format_has_five_openings(self):
        assert len(REVIEW_FORMATS) == 8
        assert all(len(f.openings) == 5 for f in REVIEW_FORMATS.values())


# ─────────────────────────────────────────────────────────────────────────────
# Customer service
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.unit
class TestCustomerServicePrompt:

    def test_staff_persona(self):
        prompt, staff_name = build_customer_service_prompt("Cold soup.", random.Random(9))

        assert staff_name in STAFF_NAMES
        assert prompt.startswith(f"You are {staff_name},")
        assert 'The customer left this review: "Cold soup."' in prompt

    def test_seeded_choice_is_reproducible(self):
        names = {build_customer_service_prompt("x", random.Random(5))[1] for _ in range(3)}
        assert len(names) == 1

    def test_staff_roster(self):
        assert len(STAFF_NAMES) == 35
        assert len(set(STAFF_NAMES)) == 35


# ─────────────────────────────────────────────────────────────────────────────
# Voice analysis / location
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.unit
class TestStructuredOutputPrompts:

    def test_voice_prompt_renders_json_braces(self):
        prompt = build_voice_analysis_prompt("we loved it")
        assert 'Transcript: "we loved it"' in prompt
        assert '"keyPoints": ["point1", "point2", "point3"]' in prompt
        assert "{{" not in prompt

    def test_location_prompt_without_position(self):
        assert "Current Location: Not provided" in build_location_prompt("near the park")

    def test_location_prompt_with_position(self):
        prompt = build_location_prompt("near the park", {"latitude": 42.36, "longitude": -71.06})
        assert "Current Location: 42.36, -71.06" in prompt
        assert '"locationMentioned": true' in prompt


# ─────────────────────────────────────────────────────────────────────────────
# Blog posts
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.unit
class TestBlogPrompt:

    @pytest.mark.parametrize("length,expected", [
        ("short",  "300-500"),
        ("medium", "600-800"),
        ("long",   "900-1200"),
        ("epic",   "600-800"),
    ])
    def test_word_target(self, length, expected):
        assert blog_word_target(length) == expected

    def test_word_targets_are_read_only(self):
        with pytest.raises(TypeError):
            BLOG_WORD_TARGETS["huge"] = "5000"

    def test_full_brief(self):
        prompt = build_blog_prompt(BlogBrief(
            topic="Summer menu launch", restaurant_name="Blue Harbor",
            restaurant_type="Seafood bistro", cuisine="Mediterranean",
            location="Portland, ME", target_audience="Local foodies",
            tone="playful", length="long",
            key_points="oysters, rooftop seating", special_features="live jazz on Fridays",
        ))

        assert "- Name: Blue Harbor" in prompt
        assert "- Type: Seafood bistro" in prompt
        assert "- Cuisine: Mediterranean" in prompt
        assert "- Location: Portland, ME" in prompt
        assert "- Topic: Summer menu launch" in prompt
        assert "- Target Audience: Local foodies" in prompt
        assert "- Writing Tone: playful" in prompt
        assert "- Target Length: 900-1200 words" in prompt
        assert "- Key Points to Include: oysters, rooftop seating" in prompt
        assert "- Special Features: live jazz on Fridays" in prompt
        assert "8. Uses conversational language" in prompt

    def test_minimal_brief_uses_defaults(self):
        prompt = build_blog_prompt(BlogBrief(topic="Grand opening", restaurant_name="Casa Verde"))

        assert "- Cuisine: Various" in prompt
        assert "- Location: Not specified" in prompt
        assert "- Target Length: 600-800 words" in prompt
        assert "Key Points to Include" not in prompt
        assert "Special Features:" not in prompt
        assert "ADDITIONAL INFORMATION:\n- None\n" in prompt

    def test_braces_in_user_text_are_kept(self):
        prompt = build_blog_prompt(BlogBrief(topic="{chef} specials", restaurant_name="Casa"))
        assert "- Topic: {chef} specials" in prompt
