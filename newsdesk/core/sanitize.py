"""
Input sanitization for search queries and tracked keywords.

These run before values are sent to the news service. Both sanitizers are
total: any input, including ``None``, produces a string and nothing is
ever raised.
"""
import re
import unicodedata
from typing import Any

MAX_SEARCH_LENGTH = 200
MAX_KEYWORD_LENGTH = 60
MIN_KEYWORD_LENGTH = 2

# Punctuation allowed on top of letters, digits and whitespace
SEARCH_OPERATORS = frozenset("-_'\".,!?:;&|()+*")
KEYWORD_PUNCTUATION = frozenset("-'")

_WHITESPACE = re.compile(r"\s")
_WHITESPACE_RUN = re.compile(r"\s{2,}")


def _is_letter_or_digit(char: str) -> bool:
    # L* and N* general categories
    return unicodedata.category(char)[0] in ("L", "N")


def _clean(raw: Any, max_length: int, allowed: frozenset) -> str:
    if not isinstance(raw, str):
        return ""
    text = raw.strip()[:max_length]
    text = "".join(
        char for char in text
        if char in allowed or _is_letter_or_digit(char) or _WHITESPACE.match(char)
    )
    return _WHITESPACE_RUN.sub(" ", text).strip()


def sanitize_search_query(raw: Any) -> str:
    """
    Sanitize a free-text search query.

    Trims, truncates to ``MAX_SEARCH_LENGTH`` characters, drops anything
    that is not a letter, digit, whitespace or query operator, then
    collapses whitespace runs. Truncation happens before stripping.
    """
    return _clean(raw, MAX_SEARCH_LENGTH, SEARCH_OPERATORS)


def sanitize_keyword(raw: Any) -> str:
    """
    Sanitize a tracked keyword.

    Stricter than search: only hyphen and apostrophe survive besides
    letters, digits and whitespace.
    """
    return _clean(raw, MAX_KEYWORD_LENGTH, KEYWORD_PUNCTUATION)


def is_valid_search_query(raw: Any) -> bool:
    return len(sanitize_search_query(raw)) > 0


def is_valid_keyword(raw: Any) -> bool:
    cleaned = sanitize_keyword(raw)
    return MIN_KEYWORD_LENGTH <= len(cleaned) <= MAX_KEYWORD_LENGTH
