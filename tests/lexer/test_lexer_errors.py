"""Tests for lexer error kinds and where they are reported."""

import pytest

from xmq.errors import ErrorKind, ParseError
from xmq.lexer import Lexer

E = ErrorKind


def lex_error(source: str, source_name: str | None = None) -> ParseError:
    with pytest.raises(ParseError) as info:
        list(Lexer(source, source_name).tokenize())
    return info.value


@pytest.mark.parametrize(
    ("source", "kind", "line", "col"),
    [
        # Quotes
        ("a = 'x", E.QUOTE_NOT_CLOSED, 1, 5),
        ("a = '''x''''", E.QUOTE_CLOSED_WITH_TOO_MANY_QUOTES, 1, 9),
        ("a {\n  b = \"x\n}", E.QUOTE_NOT_CLOSED, 2, 7),
        # Entities
        ("&amp", E.ENTITY_NOT_CLOSED, 1, 1),
        ("&#10", E.ENTITY_NOT_CLOSED, 1, 1),
        ("a = &", E.ENTITY_NOT_CLOSED, 1, 5),
        ("a = & b", E.ENTITY_NOT_CLOSED, 1, 5),
        # Comments
        ("/* a", E.COMMENT_NOT_CLOSED, 1, 1),
        ("x\n/* a *// b", E.COMMENT_CLOSED_WITH_TOO_MANY_SLASHES, 2, 1),
        ("a\n  //* b */", E.COMMENT_NOT_CLOSED, 2, 3),
        # Bodies and attribute lists
        ("a {", E.BODY_NOT_CLOSED, 1, 3),
        ("a {\n  b {\n}", E.BODY_NOT_CLOSED, 2, 5),
        ("a {\n  b { }\n  c = 1\n", E.BODY_NOT_CLOSED, 2, 5),
        ("}", E.UNEXPECTED_CLOSING_BRACE, 1, 1),
        ("a { } }", E.UNEXPECTED_CLOSING_BRACE, 1, 7),
        ("a(x=1", E.ATTRIBUTES_NOT_CLOSED, 1, 2),
        ("a(x=1 {", E.ATTRIBUTES_NOT_CLOSED, 1, 2),
        # Values
        ("a =", E.EXPECTED_CONTENT_AFTER_EQUALS, 1, 3),
        ("a = {", E.EXPECTED_CONTENT_AFTER_EQUALS, 1, 3),
        ("a { b = }", E.EXPECTED_CONTENT_AFTER_EQUALS, 1, 7),
        ("a(x=)", E.EXPECTED_CONTENT_AFTER_EQUALS, 1, 4),
        ("a = (b)", E.VALUE_CANNOT_START_WITH, 1, 5),
        ("a = =", E.VALUE_CANNOT_START_WITH, 1, 5),
        ("a = //x", E.VALUE_CANNOT_START_WITH, 1, 5),
        ("a = /*x*/", E.VALUE_CANNOT_START_WITH, 1, 5),
        # Whitespace
        ("a\tb", E.UNEXPECTED_TAB, 1, 2),
        ("a = 1\n  \tb", E.UNEXPECTED_TAB, 2, 3),
        # Foreign content
        ("  <xml/>", E.NOT_XMQ, 1, 3),
        ("\n{ }", E.NOT_XMQ, 2, 1),
        ("[1, 2]", E.NOT_XMQ, 1, 1),
    ],
)
def test_error_location(source: str, kind: ErrorKind, line: int, col: int) -> None:
    err = lex_error(source)
    assert err.kind is kind
    assert (err.lineno, err.col_offset) == (line, col)


class TestInvalidChar:
    """INVALID_CHAR carries the offending character."""

    def test_stray_character(self) -> None:
        err = lex_error("a = b\n%")
        assert err.kind is E.INVALID_CHAR
        assert err.char == "%"
        assert (err.lineno, err.col_offset) == (2, 1)

    def test_message_names_the_character(self) -> None:
        assert str(lex_error("a = b\n%")) == "2:1: unexpected character '%' U+0025"

    @pytest.mark.parametrize(("source", "char"), [("?pi(x)", "("), ("?pi {", "{"), ("!DOCTYPE {", "{")])
    def test_special_names_take_no_attributes_or_body(self, source: str, char: str) -> None:
        err = lex_error(source)
        assert err.kind is E.INVALID_CHAR
        assert err.char == char

    def test_doctype_needs_separator(self) -> None:
        err = lex_error("!DOCTYPEx")
        assert err.kind is E.INVALID_CHAR
        assert err.char == "!"


class TestDanglingEquals:
    """A value that swallowed the next line is reported at its ``=``."""

    def test_next_key(self) -> None:
        err = lex_error("alfa =\nbeta = 123")
        assert err.kind is E.EXPECTED_CONTENT_AFTER_EQUALS
        assert (err.lineno, err.col_offset) == (1, 6)

    def test_next_body(self) -> None:
        err = lex_error("root {\n  alfa =\n  beta {\n  }\n}")
        assert err.kind is E.EXPECTED_CONTENT_AFTER_EQUALS
        assert (err.lineno, err.col_offset) == (2, 8)

    def test_same_line_is_a_value_error(self) -> None:
        err = lex_error("alfa = beta = 1")
        assert err.kind is E.INVALID_CHAR
        assert err.char == "="


class TestErrorDetails:
    """Message and context carried by the exception."""

    def test_message_with_source_name(self) -> None:
        err = lex_error("a {", "conf.xmq")
        assert str(err) == "conf.xmq:1:3: body is not closed"
        assert err.source_file == "conf.xmq"

    def test_source_line(self) -> None:
        err = lex_error("a {\n  b = 'x\n}")
        assert err.source_line == "  b = 'x"

    def test_tokens_before_the_error_are_yielded(self) -> None:
        tokens = Lexer("a = 1 }").tokenize()
        assert next(tokens).value == "a"
        with pytest.raises(ParseError):
            list(tokens)

    def test_line_after_byte_order_mark(self) -> None:
        err = lex_error("\ufeff}")
        assert (err.lineno, err.col_offset) == (1, 1)
