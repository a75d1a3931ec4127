"""
Conversation context helpers.

Two consumers:
  - the conversation renderer, which needs tone flags for a single reply
    (analyze_conversation_context);
  - the chat endpoint, which looks at the recent message history to add
    short context hints to user turns before they go upstream
    (analyze_conversation_flow + enhance_user_message).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from app.processing.text import contains_any

_CONTINUITY_TOPICS = ("ai", "technology", "future", "personal", "help", "question", "think", "feel")


@dataclass(frozen=True)
class ConversationContext:
    """Tone flags for a single conversational reply."""
    has_greeting:          bool
    has_question:          bool
    has_personal_insights: bool
    is_casual:             bool
    is_thoughtful:         bool
    topic:                 str
    sentiment:             str


def analyze_conversation_context(sentences: Sequence[str]) -> ConversationContext:
    text = " ".join(sentences).lower()
    return ConversationContext(
        has_greeting          = contains_any(text, ("hello", "hi", "hey", "thanks")),
        has_question          = "?" in text,
        has_personal_insights = contains_any(text, ("think", "believe", "feel")),
        is_casual             = contains_any(text, ("cool", "awesome", "great")),
        is_thoughtful         = contains_any(text, ("interesting", "fascinating", "consider")),
        topic                 = extract_conversation_topic(text),
        sentiment             = extract_conversation_sentiment(text),
    )


def extract_conversation_topic(text: str) -> str:
    if contains_any(text, ("ai", "artificial intelligence")):
        return "technology"
    if contains_any(text, ("future", "tomorrow")):
        return "future"
    if contains_any(text, ("story", "joke")):
        return "entertainment"
    if contains_any(text, ("day", "going")):
        return "personal"
    if contains_any(text, ("help", "understand")):
        return "assistance"
    return "general"


def extract_conversation_sentiment(text: str) -> str:
    if contains_any(text, ("amazing", "awesome", "great")):
        return "positive"
    if contains_any(text, ("worried", "concerned", "problem")):
        return "concerned"
    if contains_any(text, ("curious", "wonder", "think")):
        return "thoughtful"
    return "neutral"


# ---------------------------------------------------------------------------
# Multi-turn flow (chat history)
# ---------------------------------------------------------------------------

@dataclass
class ConversationFlow:
    """Aggregate view over recent chat turns."""
    topics:     set[str]   = field(default_factory=set)
    tone:       str        = "neutral"      # neutral | curious | enthusiastic
    complexity: str        = "simple"       # simple | detailed
    engagement: str        = "medium"       # medium | high
    continuity: list[bool] = field(default_factory=list)


def has_topic_continuity(prev_text: str, current_text: str) -> bool:
    """True if both messages mention at least one shared tracked topic."""
    return any(t in prev_text and t in current_text for t in _CONTINUITY_TOPICS)


def analyze_conversation_flow(history: Sequence[dict]) -> ConversationFlow:
    """
    Walk the history in order and accumulate topic / tone / engagement state.

    Each history item is a {"role": ..., "content": ...} mapping. Later
    messages override earlier tone decisions, except that "curious" only
    replaces a still-neutral tone.
    """
    flow = ConversationFlow()

    for index, message in enumerate(history):
        text = str(message.get("content", "")).lower()

        if contains_any(text, ("ai", "technology")):
            flow.topics.add("technology")
        if contains_any(text, ("future", "tomorrow")):
            flow.topics.add("future")
        if contains_any(text, ("personal", "day")):
            flow.topics.add("personal")
        if contains_any(text, ("help", "question")):
            flow.topics.add("assistance")

        if "!" in text or "amazing" in text:
            flow.tone = "enthusiastic"
        if "?" in text and flow.tone == "neutral":
            flow.tone = "curious"

        if len(text.split(" ")) > 20:
            flow.complexity = "detailed"

        if contains_any(text, ("what about you", "your thoughts")):
            flow.engagement = "high"

        if index > 0:
            prev_text = str(history[index - 1].get("content", "")).lower()
            flow.continuity.append(has_topic_continuity(prev_text, text))

    return flow


def enhance_user_message(content: str, flow: ConversationFlow) -> str:
    """Prefix a user turn with a short bracketed hint about the conversation state."""
    if "technology" in flow.topics and "ai" in content.lower():
        return f"[Continuing our AI discussion] {content}"
    if flow.engagement == "high" and "?" in content:
        return f"[Following up on your question] {content}"
    if flow.continuity and flow.continuity[-1] is False:
        return f"[New topic] {content}"
    return content
