"""
Sentence tokenizer and keyword matcher shared by the post-processing stages.

Every heuristic in the pipeline reduces to two questions:
  "what are the sentences?"  and  "does this text mention any of these words?"
Both are answered here so the classifier, the formatter and the quality
analyzer agree on what a sentence is.

Matching is plain substring containment on lowercased text (so "hi" matches
inside "this"). The keyword catalogs were tuned against that behaviour and
must not be switched to word-boundary matching without re-tuning them.
"""

from __future__ import annotations

import re
from typing import Iterable, Sequence

# Runs of sentence terminators collapse into a single boundary.
_SENTENCE_BOUNDARY_RE = re.compile(r"[.!?]+")


def split_sentences(text: str) -> list[str]:
    """
    Split free text into trimmed, non-empty sentences in source order.

    "Great food!! Slow service... Worth it?" → ["Great food", "Slow service", "Worth it"]
    """
    if not text or not isinstance(text, str):
        return []
    return [s.strip() for s in _SENTENCE_BOUNDARY_RE.split(text) if s.strip()]


def raw_sentences(text: str) -> list[str]:
    """
    Split on terminators without trimming; only whitespace-only pieces are
    dropped. The quality heuristics count words per untrimmed fragment.
    """
    if not text:
        return []
    return [s for s in _SENTENCE_BOUNDARY_RE.split(text) if s.strip()]


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """True if the lowercased text contains any keyword as a substring."""
    lowered = text.lower()
    return any(k in lowered for k in keywords)


def count_present(text: str, keywords: Iterable[str]) -> int:
    """Number of distinct keywords present in the text (not occurrences)."""
    lowered = text.lower()
    return sum(1 for k in keywords if k in lowered)


def filter_sentences(sentences: Sequence[str], keywords: Iterable[str]) -> list[str]:
    """All sentences mentioning any keyword, order preserved."""
    keywords = tuple(keywords)
    return [s for s in sentences if contains_any(s, keywords)]


def find_sentence(sentences: Sequence[str], keywords: Iterable[str]) -> str | None:
    """First sentence mentioning any keyword, or None."""
    keywords = tuple(keywords)
    for s in sentences:
        if contains_any(s, keywords):
            return s
    return None


def capitalize_first(text: str) -> str:
    """Upper-case the first character only; the rest is left untouched."""
    if not text or not isinstance(text, str):
        return text
    return text[0].upper() + text[1:]
