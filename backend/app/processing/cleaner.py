"""
Text Cleaner — normalisation of raw LLM completions.

Providers wrap useful content in markdown, assistant boilerplate
("Here's ...", "I hope this helps!") and punctuation / emoji spam. The
cleaner strips that in a fixed sequence of regex passes; the formatter then
re-structures the plain text into sections.

Callers normally use clean_ai_response(), which runs both stages. clean_text()
is exposed on its own for callers that want plain normalised text (and for
tests: it is idempotent, the formatter is not).
"""

from __future__ import annotations

import logging
import re

from app.processing.formatter import format_for_depth_and_relevance

logger = logging.getLogger(__name__)

_PREFIXES = (
    "Here's", "Here is", "I'll", "I will", "Let me", "Based on", "According to",
    "As an AI", "As a customer service representative", "As a helpful assistant",
)
_SUFFIXES = (
    "I hope this helps", "Let me know if you need anything else", "Feel free to ask",
    "Is there anything else I can help you with",
)

# (pattern, replacement) applied strictly in this order.
_PASSES: tuple[tuple[re.Pattern[str], str], ...] = (
    # fenced code blocks
    (re.compile(r"```[\s\S]*?```"), ""),
    # **bold**, then *italic*
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),
    (re.compile(r"\*(.*?)\*"), r"\1"),
    # `inline code`
    (re.compile(r"`(.*?)`"), r"\1"),
    # 3+ newlines → paragraph break
    (re.compile(r"\n{3,}"), "\n\n"),
    # trim
    (re.compile(r"^\s+|\s+$"), ""),
    # assistant boilerplate
    (re.compile(r"^(" + "|".join(map(re.escape, _PREFIXES)) + r")[,\s]*", re.IGNORECASE), ""),
    (re.compile(r"(" + "|".join(map(re.escape, _SUFFIXES)) + r")[.!]*$", re.IGNORECASE), ""),
    # punctuation runs
    (re.compile(r"!{2,}"), "!"),
    (re.compile(r"\?{2,}"), "?"),
    (re.compile(r"\.{2,}"), "."),
    # character / emoji spam: "soooo" → "so", "🔥🔥🔥" → "🔥"
    (re.compile(r"(\S)\1{2,}"), r"\1"),
    # whitespace runs
    (re.compile(r"\s{2,}"), " "),
    # one wrapping quote at each end
    (re.compile(r"^[\"']|[\"']$"), ""),
    # list markers at line start
    (re.compile(r"^\s*[-*•]\s*", re.MULTILINE), ""),
    (re.compile(r"^\s*\d+[.)]\s*", re.MULTILINE), ""),
    # ALL CAPS section headers
    (re.compile(r"^[A-Z][A-Z\s]+:$", re.MULTILINE), ""),
    # one blank line at start / end
    (re.compile(r"^\s*\n"), ""),
    (re.compile(r"\n\s*$"), ""),
)


def clean_text(text):
    """
    Apply every normalisation pass in order, repeating the sequence until
    the text stops changing ("- - item" and "Here's here's ..." need two
    rounds). Every substitution shortens the text, so the loop terminates.

    Non-string or empty input is returned unchanged, so None stays None and
    42 stays 42.
    """
    if not text or not isinstance(text, str):
        return text

    cleaned = text
    while True:
        previous = cleaned
        for pattern, replacement in _PASSES:
            cleaned = pattern.sub(replacement, cleaned)
        if cleaned == previous:
            return cleaned


def clean_ai_response(text):
    """Clean a raw completion and render it into the sectioned output format."""
    if not text or not isinstance(text, str):
        return text

    cleaned = clean_text(text)
    formatted = format_for_depth_and_relevance(cleaned)
    logger.debug(
        "ResponseCleaner | raw_chars=%d cleaned_chars=%d formatted_chars=%d",
        len(text), len(cleaned or ""), len(formatted or ""),
    )
    return formatted
