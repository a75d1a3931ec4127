"""
Response Processing Package
════════════════════════════

Turns a raw LLM completion into structured, sectioned text:

  Text Cleaner → Sentence Split → Content Classifier → Response Formatter

Modules
───────
  text.py          Sentence tokenizer and keyword matching helpers
  cleaner.py       Regex normalisation passes + pipeline entry point
  classifier.py    Content type detection and sentence bucket extraction
  formatter.py     One renderer per content type, enum-keyed dispatch
  conversation.py  Conversation tone flags and chat-history hints

Design principles
─────────────────
  • Every function is pure and synchronous: no I/O, no shared mutable state.
  • Non-string or empty input passes through unchanged instead of raising.
  • Keyword catalogs and canned lines are module-level constants.
"""

from app.processing.classifier import ContentStructure, ContentType, analyze_content_structure
from app.processing.cleaner import clean_ai_response, clean_text
from app.processing.formatter import format_for_depth_and_relevance, format_response
from app.processing.text import split_sentences

__all__ = [
    "ContentStructure",
    "ContentType",
    "analyze_content_structure",
    "clean_ai_response",
    "clean_text",
    "format_for_depth_and_relevance",
    "format_response",
    "split_sentences",
]
