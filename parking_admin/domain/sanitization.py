"""Input sanitization for admin free text.

Two entry points:
- ``sanitize_search_input``: clean arbitrary text (search box, rejection
  reason). Never fails, always returns a string.
- ``sanitize_search_query``: clean a search query and report whether it is
  acceptable to send to the backend.
"""

import re
import unicodedata
from typing import NamedTuple

DEFAULT_MAX_SEARCH_QUERY_LENGTH = 100

_TAG_PATTERN = re.compile(r"<[^>]*>")
_CONTROL_PATTERN = re.compile(r"[\x00-\x1f\x7f]")
_UNSAFE_CHARS_PATTERN = re.compile(r"[<>\"'`;\\]")
_WHITESPACE_PATTERN = re.compile(r"\s+")

# Emails, plate numbers, slot numbers and names
_SEARCH_QUERY_PATTERN = re.compile(r"[\w\s@.\-+#/,:()]*")


class SanitizedQuery(NamedTuple):
    """Result of sanitizing a search query."""

    sanitized: str
    is_valid: bool


def sanitize_search_input(text: str | None) -> str:
    """Clean free text typed by the admin.

    Applies NFKC normalisation, strips markup tags, control characters and
    quoting/escaping characters, collapses whitespace runs and trims.

    Args:
        text: Raw text (None is treated as empty)

    Returns:
        Cleaned text
    """
    if not text:
        return ""
    cleaned = unicodedata.normalize("NFKC", str(text))
    cleaned = _TAG_PATTERN.sub("", cleaned)
    cleaned = _CONTROL_PATTERN.sub(" ", cleaned)
    cleaned = _UNSAFE_CHARS_PATTERN.sub("", cleaned)
    cleaned = _WHITESPACE_PATTERN.sub(" ", cleaned)
    return cleaned.strip()


def sanitize_search_query(
    query: str | None, max_length: int = DEFAULT_MAX_SEARCH_QUERY_LENGTH
) -> SanitizedQuery:
    """Clean a search query and decide whether it may be sent.

    An empty (or whitespace-only) query is always valid and means "no
    filter". A non-empty query is invalid when cleaning leaves nothing,
    when it is longer than ``max_length``, or when it contains characters
    outside letters, digits, whitespace and ``@ . - _ + # / , : ( )``.

    Args:
        query: Raw query as typed
        max_length: Maximum accepted length after cleaning

    Returns:
        SanitizedQuery(sanitized, is_valid)
    """
    if not query or not query.strip():
        return SanitizedQuery("", True)

    sanitized = sanitize_search_input(query)
    if not sanitized:
        return SanitizedQuery("", False)

    if len(sanitized) > max_length:
        return SanitizedQuery(sanitized[:max_length], False)

    if not _SEARCH_QUERY_PATTERN.fullmatch(sanitized):
        return SanitizedQuery(sanitized, False)

    return SanitizedQuery(sanitized, True)
