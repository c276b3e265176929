"""Tests for the character cursor and character classes."""

import pytest

from xmq.scanner import (
    END,
    Scanner,
    is_comment_start,
    is_element_start,
    is_text_name,
    is_text_value_char,
    is_token_whitespace,
    is_unsafe_value_start,
    is_whitespace,
)


class TestScannerMovement:
    """Offset, line and column move together."""

    def test_advance_tracks_lines(self) -> None:
        s = Scanner("a\nb")
        assert s.advance("a") == "a"
        assert (s.line, s.col) == (1, 2)
        s.advance("\n")
        assert (s.offset, s.line, s.col) == (2, 2, 1)

    def test_advance_at_end_returns_end(self) -> None:
        s = Scanner("")
        assert s.at_end()
        assert s.advance() == END
        assert s.offset == 0

    def test_advance_to_counts_newlines(self) -> None:
        s = Scanner("ab\ncd")
        assert s.advance_to(4) == "ab\nc"
        assert (s.offset, s.line, s.col) == (4, 2, 2)

    def test_advance_to_same_line(self) -> None:
        s = Scanner("abcdef")
        s.advance_to(3)
        assert (s.line, s.col) == (1, 4)

    def test_advance_while(self) -> None:
        s = Scanner("abc def")
        assert s.advance_while(is_text_name) == "abc"
        assert s.current() == " "

    def test_peek_past_end(self) -> None:
        s = Scanner("ab")
        assert s.peek() == "b"
        assert s.peek(2) == END

    def test_count_run(self) -> None:
        s = Scanner("'''x''")
        assert s.count_run("'") == 3
        assert s.count_run("'", 4) == 2
        assert s.count_run("x") == 0

    def test_mark(self) -> None:
        s = Scanner("a\nbc")
        s.advance_to(3)
        mark = s.mark()
        assert (mark.offset, mark.line, mark.col) == (3, 2, 2)

    @pytest.mark.parametrize(
        ("offset", "expected"),
        [(0, "ab"), (1, "ab"), (3, "cd"), (5, "cd"), (6, "")],
    )
    def test_line_text(self, offset: int, expected: str) -> None:
        assert Scanner("ab\ncd\n").line_text(offset) == expected


class TestCharacterClasses:
    """Character classification used by the lexer and printer."""

    @pytest.mark.parametrize("c", [" ", "\n", "\r"])
    def test_token_whitespace(self, c: str) -> None:
        assert is_token_whitespace(c)

    def test_tab_is_not_token_whitespace(self) -> None:
        assert not is_token_whitespace("\t")
        assert is_whitespace("\t")

    @pytest.mark.parametrize("c", ["\u00a0", "\u2000", "\u2001", "\u2002", "\u2003"])
    def test_unicode_whitespace_is_not_value_char(self, c: str) -> None:
        assert is_whitespace(c)
        assert not is_text_value_char(c)

    @pytest.mark.parametrize("c", ["a", "Z", "0", "-", "_", ".", ":", "#", "\u00e9"])
    def test_text_name(self, c: str) -> None:
        assert is_text_name(c)

    @pytest.mark.parametrize("c", ["=", "(", "{", "'", " ", "&", "/", END])
    def test_not_text_name(self, c: str) -> None:
        assert not is_text_name(c)

    def test_element_start(self) -> None:
        assert is_element_start("a")
        assert is_element_start("_")
        assert not is_element_start("1")
        assert not is_element_start("-")

    @pytest.mark.parametrize("c", ["'", '"', "(", ")", "{", "}", " ", "\t", END])
    def test_value_stop_chars(self, c: str) -> None:
        assert not is_text_value_char(c)

    @pytest.mark.parametrize("c", ["a", "1", "=", "&", "/", "*", ";", ","])
    def test_value_chars(self, c: str) -> None:
        assert is_text_value_char(c)

    def test_comment_start(self) -> None:
        assert is_comment_start("/", "/")
        assert is_comment_start("/", "*")
        assert not is_comment_start("/", "x")
        assert not is_comment_start("*", "/")

    @pytest.mark.parametrize(
        ("c", "cc", "unsafe"),
        [
            ("=", "x", True),
            ("&", "x", True),
            ("/", "/", True),
            ("/", "*", True),
            ("/", "x", False),
            ("a", "=", False),
        ],
    )
    def test_unsafe_value_start(self, c: str, cc: str, unsafe: bool) -> None:
        assert is_unsafe_value_start(c, cc) is unsafe
