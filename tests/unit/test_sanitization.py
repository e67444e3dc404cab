"""Tests for admin input sanitization."""

import pytest

from parking_admin.domain.sanitization import (
    SanitizedQuery,
    sanitize_search_input,
    sanitize_search_query,
)


class TestSanitizeSearchInput:
    """Tests for sanitize_search_input."""

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_empty(self, text) -> None:
        assert sanitize_search_input(text) == ""

    def test_strips_tags(self) -> None:
        assert sanitize_search_input("<b>ABC</b>-123") == "ABC-123"

    def test_strips_script_markup(self) -> None:
        assert sanitize_search_input('<script>alert("x")</script>') == "alert(x)"

    def test_removes_quotes_and_semicolons(self) -> None:
        assert sanitize_search_input("a'; DROP TABLE`x`") == "a DROP TABLEx"

    def test_control_characters_become_spaces(self) -> None:
        assert sanitize_search_input("ABC\x00123\tXYZ") == "ABC 123 XYZ"

    def test_collapses_whitespace(self) -> None:
        assert sanitize_search_input("  john   doe \n ") == "john doe"

    def test_nfkc_normalisation(self) -> None:
        assert sanitize_search_input("ＡＢＣ１２３") == "ABC123"

    def test_keeps_non_ascii_letters(self) -> None:
        assert sanitize_search_input("José Müller") == "José Müller"


class TestSanitizeSearchQuery:
    """Tests for sanitize_search_query."""

    @pytest.mark.parametrize("query", ["", "   ", None])
    def test_empty_query_is_valid(self, query) -> None:
        assert sanitize_search_query(query) == SanitizedQuery("", True)

    @pytest.mark.parametrize(
        "query",
        [
            "driver@example.com",
            "ABC-123",
            "A/12",
            "Slot #4",
            "Doe, John",
            "level:2 (north)",
            "john+parking@example.com",
        ],
    )
    def test_valid_queries(self, query) -> None:
        result = sanitize_search_query(query)

        assert result.is_valid
        assert result.sanitized == query

    def test_trims_and_collapses(self) -> None:
        assert sanitize_search_query("  ABC   123 ") == SanitizedQuery("ABC 123", True)

    def test_markup_only_is_invalid(self) -> None:
        assert sanitize_search_query("<img src=x>") == SanitizedQuery("", False)

    @pytest.mark.parametrize("query", ["name=1", "50%", "a*b", "x|y", "{}"])
    def test_disallowed_characters(self, query) -> None:
        assert not sanitize_search_query(query).is_valid

    def test_too_long(self) -> None:
        result = sanitize_search_query("a" * 101)

        assert not result.is_valid
        assert result.sanitized == "a" * 100

    def test_at_max_length(self) -> None:
        assert sanitize_search_query("a" * 100).is_valid

    def test_custom_max_length(self) -> None:
        assert not sanitize_search_query("abcdef", max_length=5).is_valid
