"""
Article summarizer.
A pure text -> text function; the ingestion pipeline accepts any callable with the same shape.
"""

from typing import Callable

from ..constants import SUMMARY_LENGTH, SUMMARY_MIN_WORD_BREAK

Summarizer = Callable[[str], str]


def summarize(text: str, max_length: int = SUMMARY_LENGTH, min_word_break: int = SUMMARY_MIN_WORD_BREAK) -> str:
    """
    Truncate ``text`` to ``max_length`` characters, ending at a word boundary
    when one exists past ``min_word_break``, and append an ellipsis.
    """
    if not text or not text.strip():
        return ""

    if len(text) <= max_length:
        return text

    truncated = text[:max_length]
    last_space = truncated.rfind(" ")
    if last_space > min_word_break:
        truncated = truncated[:last_space]

    return truncated + "..."
