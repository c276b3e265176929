"""Tests for incidental indentation removal and quote selection."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from xmq.quoting import (
    choose_quote,
    normalize_quote,
    quote_depth,
    quote_text,
    split_for_quoting,
)


class TestNormalizeQuote:
    """Literal dedent scenarios."""

    @pytest.mark.parametrize(
        ("content", "expected"),
        [
            ("HejsanHoppsan", "HejsanHoppsan"),
            ("   ", "   "),
            ("\n    x\n  y\n    z\n", "  x\ny\n  z"),
            ("abc\n def", "abc\ndef"),
            ("\n  a\n  ", "a"),
            ("\n\n  a\n\n  ", "\na\n"),
            ("\n\n", "\n"),
            ("\n", ""),
            ("\r\n  a\r\n  ", "a"),
            ("\n    a\n\n    b\n    ", "a\n\nb"),
            ("\n      a\n        b\n    ", "  a\n    b"),
        ],
    )
    def test_literal_cases(self, content: str, expected: str) -> None:
        assert normalize_quote(content) == expected

    def test_last_line_caps_removed_indent(self) -> None:
        # The closing quote sits at column 2, so only two spaces go.
        assert normalize_quote("\n    a\n    b\n  ") == "  a\n  b"

    def test_first_line_without_newline_is_kept(self) -> None:
        assert normalize_quote("  a\n  b") == "  a\nb"

    @pytest.mark.parametrize("text", ["HejsanHoppsan", "  x\ny\n  z", "abc\ndef", " x"])
    def test_idempotent_on_flat_text(self, text: str) -> None:
        once = normalize_quote(text)
        assert normalize_quote(once) == once

    @given(st.text(alphabet="ab \n", min_size=1).filter(lambda s: s.strip(" \n") == s))
    @settings(max_examples=500)
    def test_idempotent_without_edge_runs(self, text: str) -> None:
        once = normalize_quote(text)
        assert normalize_quote(once) == once


class TestQuoteSelection:
    """Quote character and depth."""

    @pytest.mark.parametrize(
        ("text", "char", "depth"),
        [
            ("abc", "'", 1),
            ("it's", "'", 3),
            ("a''b", "'", 3),
            ("a'''b", "'", 4),
            ('say "hi"', '"', 3),
        ],
    )
    def test_quote_depth(self, text: str, char: str, depth: int) -> None:
        assert quote_depth(text, char) == depth

    def test_prefers_the_other_quote(self) -> None:
        assert choose_quote("it's") == ('"', 1)

    def test_tie_goes_to_single_quote(self) -> None:
        assert choose_quote("plain") == ("'", 1)

    def test_both_edges_blocked(self) -> None:
        assert choose_quote("'a\"") is None
        assert choose_quote("'a\"", at_edges=True) is not None


class TestQuoteText:
    """Laying text out as one quote."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("", "''"),
            ("hello world", "'hello world'"),
            ("it's", '"it\'s"'),
            ("'", '"\'"'),
            ("\n\n", "'\n\n\n'"),
        ],
    )
    def test_simple(self, text: str, expected: str) -> None:
        assert quote_text(text) == expected

    def test_block_layout(self) -> None:
        assert quote_text("a\nb", 4) == "'\n    a\n    b\n    '"

    def test_block_layout_zero_indent_uses_one_space(self) -> None:
        assert quote_text("a\nb", 0) == "'\n a\n b\n '"

    def test_carriage_return_needs_splitting(self) -> None:
        assert quote_text("a\rb") is None

    def test_single_line_mode(self) -> None:
        assert quote_text("a\nb", multiline=False) is None
        assert quote_text("ab", multiline=False) == "'ab'"

    def test_space_only_edge_line_needs_splitting(self) -> None:
        assert quote_text(" \na", 4) is None
        assert quote_text("a\n ", 4) is None

    @given(st.text(alphabet="ab '\"\n", max_size=20))
    @settings(max_examples=300)
    def test_normalizing_the_quote_gives_the_text_back(self, text: str) -> None:
        quoted = quote_text(text, 2)
        if quoted is None:
            return
        char = quoted[0]
        depth = len(quoted) - len(quoted.lstrip(char))
        if quoted in ("''", '""'):
            assert text == ""
            return
        assert normalize_quote(quoted[depth:-depth]) == text


class TestSplitForQuoting:
    """Splitting text into quotes and character references."""

    def test_newline(self) -> None:
        assert split_for_quoting("a\nb") == ["'a'", "&#10;", "'b'"]

    def test_only_newline(self) -> None:
        assert split_for_quoting("\n") == ["&#10;"]

    def test_carriage_return(self) -> None:
        assert split_for_quoting("a\r\n") == ["'a'", "&#13;", "&#10;"]

    def test_colliding_edges(self) -> None:
        assert split_for_quoting("'x\"") == ["&#39;", "'x\"'"]
