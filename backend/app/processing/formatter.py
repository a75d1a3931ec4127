"""
Response Formatter — templated, section-based rendering of LLM output.

One renderer per content type, chosen through an enum-keyed dispatch table:

  review            📝 opening, ✨ liked, ⚠️ disliked, 🌟 highlights, 🏠 atmosphere,
                    💰 value, 💡 recommendations, 🎯 conclusion
  analysis          📊 summary, 🔍 findings, 😊 sentiment, 📋 topic insights,
                    💡 recommendations, 🚀 action items, 📈 impact
  conversation      greeting, main response, 💭 perspective, 💬 follow-up
  customer_service  🤝 acknowledgment, 📋 situation, 🔧 solutions, 🚀 improvements,
                    🎁 goodwill, 📞 follow-up
  general           📌 main point, 📋 explanation, 💡 insights, 🔍 examples, 🎯 conclusion

Rendering rules shared by all renderers:
  - a section is emitted only when it has at least one sentence;
  - list sections are truncated to a fixed per-section cap;
  - sections are separated by one blank line and the result is trimmed;
  - closing sections (🎯, 💬, 📞) never go missing: when no sentence
    matches, a canned line is used instead.

The headings and canned lines are a public contract: API clients and tests
assert on them literally.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Mapping, Sequence

from app.processing.classifier import ContentStructure, ContentType, analyze_content_structure
from app.processing.conversation import ConversationContext, analyze_conversation_context
from app.processing.text import capitalize_first, filter_sentences, find_sentence, split_sentences

# ---------------------------------------------------------------------------
# Canned closing lines
# ---------------------------------------------------------------------------

REVIEW_CONCLUSION_POSITIVE = "🎯 Overall, this was a positive experience that I would recommend to others."
REVIEW_CONCLUSION_NEGATIVE = "🎯 While there were some issues, there's potential for improvement with the right changes."
REVIEW_CONCLUSION_MIXED    = "🎯 This was a mixed experience with both positive and negative aspects to consider."

CONVERSATION_FOLLOW_UP_QUESTION   = "💬 What are your thoughts on this? I'd love to hear your perspective!"
CONVERSATION_FOLLOW_UP_CASUAL     = "💬 How about you? What's your take on this?"
CONVERSATION_FOLLOW_UP_THOUGHTFUL = "💬 What do you think about this? I'm curious about your viewpoint."
CONVERSATION_FOLLOW_UP_DEFAULT    = "💬 What are your thoughts? I'd love to continue this conversation!"

CUSTOMER_SERVICE_FOLLOW_UP = "📞 Please don't hesitate to reach out if you need any further assistance."

GENERAL_CONCLUSION = (
    "🎯 In summary, this topic encompasses multiple important aspects "
    "that deserve careful consideration and thoughtful discussion."
)

_INDENT = "   "


# ---------------------------------------------------------------------------
# Section builders
# ---------------------------------------------------------------------------

def _bulleted(heading: str, items: Sequence[str], cap: int) -> str | None:
    if not items:
        return None
    lines = [f"{_INDENT}• {capitalize_first(s)}." for s in items[:cap]]
    return "\n".join([heading, *lines])


def _numbered(heading: str, items: Sequence[str], cap: int) -> str | None:
    if not items:
        return None
    lines = [f"{_INDENT}{i}. {capitalize_first(s)}." for i, s in enumerate(items[:cap], start=1)]
    return "\n".join([heading, *lines])


def _plain(heading: str, items: Sequence[str], cap: int) -> str | None:
    if not items:
        return None
    lines = [f"{_INDENT}{capitalize_first(s)}." for s in items[:cap]]
    return "\n".join([heading, *lines])


def _join(sections: Sequence[str | None]) -> str:
    return "\n\n".join(s for s in sections if s).strip()


# ---------------------------------------------------------------------------
# Review
# ---------------------------------------------------------------------------

def format_review_response(sentences: Sequence[str], structure: ContentStructure) -> str:
    opening = find_sentence(sentences, ("experience", "visit", "tried", "went", "recently", "last"))

    highlights = filter_sentences(sentences, ("highlight", "memorable", "standout", "impressive", "notable"))
    atmosphere = filter_sentences(sentences, ("atmosphere", "ambiance", "environment", "setting", "vibe", "feel"))
    value      = filter_sentences(sentences, ("price", "cost", "value", "worth", "expensive", "affordable"))

    conclusion = find_sentence(sentences, ("recommend", "return", "worth", "overall", "conclusion", "final"))
    if conclusion:
        closing = f"🎯 {capitalize_first(conclusion)}."
    else:
        closing = _review_fallback_conclusion(structure)

    return _join([
        f"📝 {capitalize_first(opening)}." if opening else None,
        _bulleted("✨ What I Really Enjoyed:", structure.positive_aspects, 4),
        _bulleted("⚠️ Areas for Improvement:", structure.negative_aspects, 3),
        _numbered("🌟 Memorable Highlights:", highlights, 3),
        _plain("🏠 Atmosphere & Environment:", atmosphere, 2),
        _plain("💰 Value & Pricing:", value, 2),
        _bulleted("💡 Recommendations:", structure.suggestions, 3),
        closing,
    ])


def _review_fallback_conclusion(structure: ContentStructure) -> str:
    positive = len(structure.positive_aspects)
    negative = len(structure.negative_aspects)
    if positive > negative:
        return REVIEW_CONCLUSION_POSITIVE
    if negative > positive:
        return REVIEW_CONCLUSION_NEGATIVE
    return REVIEW_CONCLUSION_MIXED


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------

def format_analysis_response(sentences: Sequence[str], structure: ContentStructure) -> str:
    summary   = find_sentence(sentences, ("overall", "summary", "in conclusion", "main takeaway"))
    findings  = filter_sentences(sentences, ("found", "discovered", "identified", "detected", "observed", "noticed"))
    sentiment = filter_sentences(sentences, ("positive", "negative", "neutral", "sentiment", "emotion", "tone"))
    actions   = filter_sentences(sentences, ("action", "next", "step", "plan", "implement", "improve"))
    impact    = filter_sentences(sentences, ("impact", "effect", "result", "outcome", "consequence"))

    topic_section = None
    if structure.topics:
        # Heading names the first topic; lines may match any of them.
        heading = f"📋 {capitalize_first(structure.topics[0])}-Specific Insights:"
        topic_section = _numbered(heading, filter_sentences(sentences, structure.topics), 3)

    return _join([
        f"📊 Executive Summary:\n{capitalize_first(summary)}." if summary else None,
        _numbered("🔍 Detailed Findings:", findings, 5),
        _bulleted("😊 Sentiment Analysis:", sentiment, 3),
        topic_section,
        _bulleted("💡 Strategic Recommendations:", structure.suggestions, 4),
        _numbered("🚀 Action Items & Next Steps:", actions, 4),
        _bulleted("📈 Impact Assessment:", impact, 2),
    ])


# ---------------------------------------------------------------------------
# Conversation
# ---------------------------------------------------------------------------

def format_conversation_response(sentences: Sequence[str], structure: ContentStructure) -> str:
    context = analyze_conversation_context(sentences)

    greeting = None
    if context.has_greeting:
        found = find_sentence(sentences, ("hello", "hi", "hey", "thanks", "thank you", "appreciate"))
        if found:
            greeting = f"{capitalize_first(found)}."

    main = [s for s in sentences if len(s) > 10]

    perspective = None
    if context.has_personal_insights:
        insights = filter_sentences(sentences, ("think", "believe", "feel", "experience", "opinion", "view"))
        perspective = _plain("💭 My Perspective:", insights, 2)

    return _join([
        greeting,
        _structure_main_response(main, context) if main else None,
        perspective,
        _conversational_closing(sentences, context),
    ])


def _structure_main_response(sentences: Sequence[str], context: ConversationContext) -> str:
    """Lay the reply out as opening (2) / main body (3) / closing (2) paragraphs."""
    opening = sentences[0:2]
    body    = sentences[2:5]
    closing = sentences[5:7]

    parts: list[str] = []
    if opening:
        parts.append(" ".join(capitalize_first(s) for s in opening))
    if body:
        if context.has_question:
            lead = "🤔 Here's what I think:\n"
        elif context.is_casual:
            lead = "😊 "
        else:
            lead = "💭 "
        parts.append(lead + " ".join(capitalize_first(s) for s in body))
    if closing:
        parts.append(" ".join(capitalize_first(s) for s in closing))
    return "\n\n".join(parts)


def _conversational_closing(sentences: Sequence[str], context: ConversationContext) -> str:
    existing = find_sentence(sentences, (
        "what about you", "how about", "what do you think",
        "any thoughts", "your experience", "your opinion",
    ))
    if existing:
        return f"💬 {capitalize_first(existing)}"
    if context.has_question:
        return CONVERSATION_FOLLOW_UP_QUESTION
    if context.is_casual:
        return CONVERSATION_FOLLOW_UP_CASUAL
    if context.is_thoughtful:
        return CONVERSATION_FOLLOW_UP_THOUGHTFUL
    return CONVERSATION_FOLLOW_UP_DEFAULT


# ---------------------------------------------------------------------------
# Customer service
# ---------------------------------------------------------------------------

def format_customer_service_response(sentences: Sequence[str], structure: ContentStructure) -> str:
    acknowledgment = find_sentence(sentences, ("understand", "apologize", "sorry", "concern", "issue", "problem"))
    situation    = filter_sentences(sentences, ("situation", "circumstance", "experience", "issue", "problem", "concern"))
    solutions    = filter_sentences(sentences, ("solution", "resolve", "fix", "address", "correct", "improve"))
    improvements = filter_sentences(sentences, ("improve", "enhance", "better", "upgrade", "develop", "advance"))
    goodwill     = filter_sentences(sentences, ("compensate", "refund", "discount", "credit", "offer", "gesture"))
    follow_up    = find_sentence(sentences, ("contact", "reach", "follow up", "get in touch", "available"))

    return _join([
        f"🤝 {capitalize_first(acknowledgment)}." if acknowledgment else None,
        _bulleted("📋 Understanding Your Situation:", situation, 3),
        _numbered("🔧 Immediate Solutions:", solutions, 4),
        _bulleted("🚀 Long-term Improvements:", improvements, 3),
        _bulleted("🎁 Goodwill Gestures:", goodwill, 2),
        f"📞 {capitalize_first(follow_up)}" if follow_up else CUSTOMER_SERVICE_FOLLOW_UP,
    ])


# ---------------------------------------------------------------------------
# General
# ---------------------------------------------------------------------------

def format_general_response(sentences: Sequence[str], structure: ContentStructure) -> str:
    main_point   = sentences[0] if sentences else None
    explanations = sentences[1:6]
    insights     = filter_sentences(sentences, ("important", "key", "essential", "critical", "significant", "notable"))
    examples     = filter_sentences(sentences, ("example", "instance", "case", "scenario", "situation", "application"))
    conclusion   = find_sentence(sentences, ("therefore", "thus", "in summary", "overall", "conclusion", "final"))

    return _join([
        f"📌 Main Point:\n{capitalize_first(main_point)}." if main_point else None,
        _numbered("📋 Detailed Explanation:", explanations, 5),
        _bulleted("💡 Key Insights:", insights, 3),
        _numbered("🔍 Practical Examples:", examples, 2),
        f"🎯 {capitalize_first(conclusion)}" if conclusion else GENERAL_CONCLUSION,
    ])


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

Renderer = Callable[[Sequence[str], ContentStructure], str]

RENDERERS: Mapping[ContentType, Renderer] = MappingProxyType({
    ContentType.REVIEW:           format_review_response,
    ContentType.ANALYSIS:         format_analysis_response,
    ContentType.CONVERSATION:     format_conversation_response,
    ContentType.CUSTOMER_SERVICE: format_customer_service_response,
    ContentType.GENERAL:          format_general_response,
})


def format_response(sentences: Sequence[str], structure: ContentStructure) -> str:
    """Render sentences with the renderer registered for structure.type."""
    return RENDERERS[structure.type](sentences, structure)


def format_for_depth_and_relevance(text):
    """Split → classify → render. Non-string or empty input is returned unchanged."""
    if not text or not isinstance(text, str):
        return text
    sentences = split_sentences(text)
    structure = analyze_content_structure(sentences)
    return format_response(sentences, structure)
