"""
Structured-output parsing for JSON-shaped LLM completions.

Voice analysis and location suggestions ask the model for a JSON document.
Models regularly wrap it in markdown fences, prepend prose, or return
something that is not JSON at all. parse_llm_json() never raises: it returns
a ParseResult carrying either the decoded value or the error, and the
record builders below recover with fixed neutral fallbacks.

The prompts ask for camelCase keys (keyPoints, actionItems, ...); records
are normalised to snake_case before they leave this module.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*")
_JSON_BLOCK_RE = re.compile(r"[\[{].*[\]}]", re.DOTALL)
_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass(frozen=True)
class ParseResult:
    value: Any        = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_llm_json(text: Any) -> ParseResult:
    """
    Extract and parse the first JSON object or array from a completion.
    LLMs sometimes wrap JSON in markdown code fences.
    """
    if not isinstance(text, str) or not text.strip():
        return ParseResult(error="empty completion")

    cleaned = _FENCE_RE.sub("", text).strip().rstrip("`").strip()
    try:
        return ParseResult(value=json.loads(cleaned))
    except json.JSONDecodeError as exc:
        # Try to find the first JSON structure
        match = _JSON_BLOCK_RE.search(cleaned)
        if match:
            try:
                return ParseResult(value=json.loads(match.group()))
            except json.JSONDecodeError:
                pass
        return ParseResult(error=f"invalid JSON: {exc.msg}")


def _snake(key: str) -> str:
    return _CAMEL_RE.sub("_", key).lower()


def _snake_keys(data: dict[str, Any]) -> dict[str, Any]:
    return {_snake(str(k)): v for k, v in data.items()}


def _word_count(transcript: str) -> int:
    return len(transcript.split(" "))


# ---------------------------------------------------------------------------
# Voice analysis
# ---------------------------------------------------------------------------

def voice_analysis_defaults(transcript: str) -> dict[str, Any]:
    """Field defaults merged under every voice analysis record."""
    return {
        "sentiment":     "neutral",
        "confidence":    0.5,
        "key_points":    [],
        "topics":        [],
        "suggestions":   [],
        "tone":          "neutral",
        "action_items":  [],
        "summary":       "Analysis completed",
        "word_count":    _word_count(transcript),
        "speaking_pace": "normal",
    }


def voice_analysis_fallback(transcript: str) -> dict[str, Any]:
    """Record used when the model's output is not a JSON object."""
    return {
        "sentiment":     "neutral",
        "confidence":    0.5,
        "key_points":    ["Content analyzed"],
        "topics":        ["General"],
        "suggestions":   ["Consider providing more context"],
        "tone":          "neutral",
        "action_items":  ["Review transcript"],
        "summary":       "Voice content was processed",
        "word_count":    _word_count(transcript),
        "speaking_pace": "normal",
    }


def build_voice_analysis(completion: str, transcript: str) -> tuple[dict[str, Any], bool]:
    """
    Voice analysis record from a raw completion.

    Returns (record, used_fallback). Parsed fields override the defaults;
    missing fields keep them.
    """
    result = parse_llm_json(completion)
    if result.ok and isinstance(result.value, dict):
        return {**voice_analysis_defaults(transcript), **_snake_keys(result.value)}, False

    logger.warning("VoiceAnalysis | unparseable completion, using fallback: %s",
                   result.error or "not a JSON object")
    return {**voice_analysis_defaults(transcript), **voice_analysis_fallback(transcript)}, True


# ---------------------------------------------------------------------------
# Location suggestions
# ---------------------------------------------------------------------------

def location_fallback() -> dict[str, Any]:
    return {
        "suggestions": [],
        "analysis": {
            "location_mentioned": False,
            "location_type":      "unknown",
            "specific_place":     None,
            "city_or_area":       None,
            "confidence":         0.0,
        },
    }


def build_location_suggestions(completion: str) -> tuple[dict[str, Any], bool]:
    """Location suggestions record from a raw completion; (record, used_fallback)."""
    result = parse_llm_json(completion)
    if not (result.ok and isinstance(result.value, dict)):
        logger.warning("LocationSuggestions | unparseable completion, using fallback: %s",
                       result.error or "not a JSON object")
        return location_fallback(), True

    raw_suggestions = result.value.get("suggestions")
    raw_analysis    = result.value.get("analysis")

    suggestions = [
        _snake_keys(s) for s in raw_suggestions if isinstance(s, dict)
    ] if isinstance(raw_suggestions, list) else []
    analysis = _snake_keys(raw_analysis) if isinstance(raw_analysis, dict) else {}

    return {"suggestions": suggestions, "analysis": analysis}, False
