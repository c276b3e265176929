"""Tests for comment delimiter balancing and comment layout."""

import pytest

from xmq.comments import (
    count_slashes,
    format_comment,
    match_block_close,
    necessary_slashes,
    uncomment_block,
    uncomment_line,
)
from xmq.errors import ErrorKind


class TestDelimiters:
    """Opening and closing runs."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [("// x", (2, False)), ("/* x", (1, True)), ("///* x", (3, True)), ("x", (0, False))],
    )
    def test_count_slashes(self, source: str, expected: tuple[int, bool]) -> None:
        assert count_slashes(source, 0) == expected

    def test_simple_close(self) -> None:
        close = match_block_close("/* a */", 2, 1)
        assert (close.content_stop, close.stop, close.continues, close.error) == (5, 7, False, None)

    def test_continuation(self) -> None:
        close = match_block_close("/* a */* b */", 2, 1)
        assert close.stop == 7
        assert close.continues

    def test_shorter_close_is_content(self) -> None:
        source = "//* a */ b *//"
        close = match_block_close(source, 3, 2)
        assert close.content_stop == 11
        assert close.stop == len(source)

    def test_too_many_slashes(self) -> None:
        close = match_block_close("/* a *//", 2, 1)
        assert close.error is ErrorKind.COMMENT_CLOSED_WITH_TOO_MANY_SLASHES

    def test_not_closed(self) -> None:
        close = match_block_close("/* a", 2, 1)
        assert close.error is ErrorKind.COMMENT_NOT_CLOSED

    @pytest.mark.parametrize(
        ("text", "slashes"),
        [("plain", 1), ("a */ b", 2), ("x *// y", 3), ("* / *", 1)],
    )
    def test_necessary_slashes(self, text: str, slashes: int) -> None:
        assert necessary_slashes(text) == slashes


class TestCommentText:
    """Extracting comment text."""

    def test_uncomment_line(self) -> None:
        assert uncomment_line(" hello  ") == "hello"
        assert uncomment_line("  two") == " two"

    def test_uncomment_block(self) -> None:
        assert uncomment_block(" a ") == "a"
        assert uncomment_block("a") == "a"
        assert uncomment_block("  ") == ""

    def test_uncomment_block_dedents(self) -> None:
        assert uncomment_block("\n   a\n     b\n    ") == "a\n  b"

    def test_uncomment_block_without_trim(self) -> None:
        assert uncomment_block("\n   a\n    ", trim=False) == "\n   a\n   "


class TestFormatComment:
    """Writing comments so they read back unchanged."""

    def test_single_line(self) -> None:
        assert format_comment("hello") == "// hello"

    def test_single_line_compact(self) -> None:
        assert format_comment("hello", compact=True) == "/* hello */"

    def test_trailing_blank_uses_block(self) -> None:
        assert format_comment("hello ") == "/* hello  */"

    def test_empty(self) -> None:
        assert format_comment("") == "/*  */"

    def test_more_slashes_when_text_closes(self) -> None:
        assert format_comment("a */ b", compact=True) == "//* a */ b *//"

    def test_multi_line_block(self) -> None:
        assert format_comment("a\nb") == "/*\n   a\n   b\n    */"

    def test_multi_line_block_indented(self) -> None:
        assert format_comment("a\nb", 4) == "/*\n       a\n       b\n        */"

    def test_multi_line_compact(self) -> None:
        assert format_comment("a\nb", compact=True) == "/* a */* b */"
