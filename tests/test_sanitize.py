"""Tests for search query and keyword sanitization."""

import re

import pytest

from newsdesk.core.sanitize import (
    is_valid_keyword,
    is_valid_search_query,
    sanitize_keyword,
    sanitize_search_query,
)

SAMPLES = [
    "",
    "   ",
    "  hello   world  ",
    "<script>alert(1)</script>",
    "< a",
    "AI OR \"machine learning\" AND NOT crypto",
    "café résumé 東京 ١٢٣",
    "tabs\t\tand\nnewlines",
    "x" * 250,
    " " + "<" * 199 + " tail",
    "e-commerce couldn't; price: $100 @home #tag",
]


def test_search_query_trims_and_collapses_whitespace():
    assert sanitize_search_query("  hello   world  ") == "hello world"


def test_search_query_enforces_max_length():
    assert len(sanitize_search_query("a" * 250)) == 200


def test_search_query_truncates_before_stripping():
    # 195 stripped characters spend the budget, only 5 letters survive
    raw = "<" * 195 + "abcdefghij"
    assert sanitize_search_query(raw) == "abcde"


def test_search_query_keeps_query_operators():
    query = "(climate OR weather) AND NOT politics"
    assert sanitize_search_query(query) == query
    operators = "a - _ ' \" . , ! ? : ; & | ( ) + *"
    assert sanitize_search_query(operators) == operators


def test_search_query_strips_markup():
    result = sanitize_search_query("<script>alert(1)</script>")
    assert "<" not in result
    assert ">" not in result
    assert result == "scriptalert(1)script"


def test_search_query_all_special_characters_is_empty():
    assert sanitize_search_query("<<<>>>") == ""
    assert not is_valid_search_query("<<<>>>")


def test_search_query_preserves_unicode_letters_and_digits():
    assert sanitize_search_query("café résumé") == "café résumé"
    assert sanitize_search_query("東京 2024 ١٢٣") == "東京 2024 ١٢٣"


@pytest.mark.parametrize("raw", [None, 42, ["a"]])
def test_sanitizers_never_raise_on_non_strings(raw):
    assert sanitize_search_query(raw) == ""
    assert sanitize_keyword(raw) == ""
    assert not is_valid_search_query(raw)
    assert not is_valid_keyword(raw)


@pytest.mark.parametrize("raw", SAMPLES)
def test_search_query_is_bounded_and_idempotent(raw):
    once = sanitize_search_query(raw)
    assert len(once) <= 200
    assert sanitize_search_query(once) == once


@pytest.mark.parametrize("raw", SAMPLES)
def test_keyword_charset_length_and_idempotence(raw):
    once = sanitize_keyword(raw)
    assert len(once) <= 60
    assert re.fullmatch(r"[\w\s\-']*", once)
    assert "_" not in once
    assert sanitize_keyword(once) == once


def test_keyword_trims_and_strips():
    assert sanitize_keyword("  bitcoin  ") == "bitcoin"
    assert sanitize_keyword("hello<world>") == "helloworld"
    assert sanitize_keyword("AI (OR) ML!") == "AI OR ML"


def test_keyword_allows_hyphen_and_apostrophe():
    assert sanitize_keyword("e-commerce couldn't") == "e-commerce couldn't"


def test_keyword_enforces_max_length():
    assert len(sanitize_keyword("a" * 80)) == 60


def test_is_valid_search_query():
    assert is_valid_search_query("AI news")
    assert not is_valid_search_query("")
    assert not is_valid_search_query("   ")


def test_is_valid_keyword_bounds():
    assert is_valid_keyword("AI")
    assert not is_valid_keyword("a")
    assert not is_valid_keyword("")
    assert is_valid_keyword("a" * 60)
    # truncated to exactly 60 characters
    assert is_valid_keyword("a" * 61)
