"""Element scanner mixin.

Scans everything from an element name up to (but not including) the
contents of its body: the name, an optional attribute list, and either
``= value`` or the opening brace. The body itself is handled by the Lexer's
main loop, which keeps the stack of open braces.
"""

from __future__ import annotations

from collections.abc import Iterator

from xmq.errors import ErrorKind, ParseError
from xmq.lexer.modes import DOCTYPE, PI_MARKER, ValueLevel, is_namespace_declaration
from xmq.nodes import QName
from xmq.scanner import (
    Mark,
    Scanner,
    is_comment_start,
    is_compound_start,
    is_element_start,
    is_entity_start,
    is_quote_start,
    is_text_name,
    is_text_value_char,
    is_unsafe_value_start,
)
from xmq.tokens import Token, TokenType


class ElementScannerMixin:
    """Mixin scanning elements, attribute lists and values."""

    # These will be set by the Lexer class
    _scanner: Scanner
    _open_braces: list[Mark]
    _last_body_start: Mark | None

    def _token(
        self,
        token_type: TokenType,
        value: str,
        start: Mark,
        stop_offset: int,
        stop_suffix_offset: int | None = None,
    ) -> Token:
        """Create token with raw coordinates. Implemented by Lexer."""
        raise NotImplementedError

    def _error(self, kind: ErrorKind, at: Mark | None = None, *, char: str | None = None) -> ParseError:
        """Build a positioned ParseError. Implemented by Lexer."""
        raise NotImplementedError

    def _scan_whitespace(self) -> Iterator[Token]:
        """Scan separating whitespace. Implemented by Lexer."""
        raise NotImplementedError

    def _scan_quote(self) -> Token:
        """Scan a quote. Implemented by QuoteScannerMixin."""
        raise NotImplementedError

    def _scan_entity(self) -> Token:
        """Scan an entity. Implemented by QuoteScannerMixin."""
        raise NotImplementedError

    def _at_doctype(self) -> bool:
        """``!DOCTYPE`` followed by ``=``, whitespace or the end."""
        sc = self._scanner
        if not sc.source.startswith(DOCTYPE, sc.offset):
            return False
        after = sc.peek(len(DOCTYPE))
        return after in ("", "=", " ", "\n", "\r")

    def _at_processing_instruction(self) -> bool:
        sc = self._scanner
        return sc.current() == PI_MARKER and is_element_start(sc.peek())

    def _scan_element(self) -> Iterator[Token]:
        """Scan an element head starting at the cursor.

        The name is classified as ELEMENT_KEY when ``=`` follows the name and
        any attribute list, otherwise as ELEMENT_NAME. Since the name token
        comes first in the stream, the attribute tokens are collected before
        anything is yielded.

        Yields:
            Name tokens, attribute tokens, then EQUALS and a value token or
            BRACE_LEFT. Whitespace between them is yielded as well.
        """
        sc = self._scanner
        start = sc.mark()
        special = False
        if self._at_doctype():
            sc.advance_to(start.offset + len(DOCTYPE))
            special = True
        elif self._at_processing_instruction():
            sc.advance(PI_MARKER)
            sc.advance_while(is_text_name)
            special = True
        else:
            sc.advance_while(is_text_name)
        name = sc.source[start.offset : sc.offset]

        pending: list[Token] = list(self._scan_whitespace())
        if sc.current() == "(":
            if special:
                raise self._error(ErrorKind.INVALID_CHAR, char="(")
            pending.extend(self._scan_attributes())
            pending.extend(self._scan_whitespace())

        is_key = sc.current() == "="
        yield from self._name_tokens(name, start, key=is_key, special=special)
        yield from pending

        c = sc.current()
        if c == "=":
            equals = sc.mark()
            sc.advance()
            yield self._token(TokenType.EQUALS, "=", equals, sc.offset)
            yield from self._scan_value(ValueLevel.ELEMENT, equals)
        elif c == "{":
            if special:
                raise self._error(ErrorKind.INVALID_CHAR, char="{")
            brace = sc.mark()
            sc.advance()
            self._open_braces.append(brace)
            self._last_body_start = brace
            yield self._token(TokenType.BRACE_LEFT, "{", brace, sc.offset)

    def _name_tokens(self, name: str, start: Mark, *, key: bool, special: bool) -> Iterator[Token]:
        """Yield ``prefix``, ``:`` and ``local`` tokens for an element name."""
        name_type = TokenType.ELEMENT_KEY if key else TokenType.ELEMENT_NAME
        qname = QName.parse(name)
        if special or qname.prefix is None:
            stop = start.offset + len(name)
            yield self._token(name_type, name, start, stop)
            return
        yield from self._split_name(
            qname, start, TokenType.ELEMENT_NS, TokenType.COLON, name_type
        )

    def _split_name(
        self,
        qname: QName,
        start: Mark,
        prefix_type: TokenType,
        colon_type: TokenType,
        local_type: TokenType,
    ) -> Iterator[Token]:
        assert qname.prefix is not None
        colon = start.offset + len(qname.prefix)
        yield self._token(prefix_type, qname.prefix, start, colon)
        colon_mark = Mark(colon, start.line, start.col + len(qname.prefix))
        yield self._token(colon_type, ":", colon_mark, colon + 1)
        local_mark = Mark(colon + 1, start.line, colon_mark.col + 1)
        yield self._token(local_type, qname.local, local_mark, colon + 1 + len(qname.local))

    def _scan_attributes(self) -> Iterator[Token]:
        """Scan ``( name = value name ... )``.

        Raises:
            ParseError: ATTRIBUTES_NOT_CLOSED at the opening parenthesis when
                anything other than an attribute or ``)`` turns up
        """
        sc = self._scanner
        left = sc.mark()
        sc.advance("(")
        yield self._token(TokenType.APAR_LEFT, "(", left, sc.offset)

        while True:
            yield from self._scan_whitespace()
            c = sc.current()
            if c == ")":
                right = sc.mark()
                sc.advance()
                yield self._token(TokenType.APAR_RIGHT, ")", right, sc.offset)
                return
            if not is_text_name(c):
                raise self._error(ErrorKind.ATTRIBUTES_NOT_CLOSED, left)

            start = sc.mark()
            name = sc.advance_while(is_text_name)
            qname = QName.parse(name)
            if is_namespace_declaration(name):
                yield self._token(TokenType.NS_DECLARATION, name, start, sc.offset)
            elif qname.prefix is None:
                yield self._token(TokenType.ATTR_KEY, name, start, sc.offset)
            else:
                yield from self._split_name(
                    qname, start, TokenType.ATTR_NS, TokenType.NS_COLON, TokenType.ATTR_KEY
                )

            yield from self._scan_whitespace()
            if sc.current() == "=":
                equals = sc.mark()
                sc.advance()
                yield self._token(TokenType.EQUALS, "=", equals, sc.offset)
                yield from self._scan_value(ValueLevel.ATTRIBUTE, equals)

    def _scan_value(self, level: ValueLevel, equals: Mark) -> Iterator[Token]:
        """Scan the value after ``=``: a quote, an entity or unquoted text.

        Args:
            level: Whether the value belongs to an element or an attribute
            equals: Position of the ``=``, used for a missing value

        Raises:
            ParseError: EXPECTED_CONTENT_AFTER_EQUALS, VALUE_CANNOT_START_WITH
                or INVALID_CHAR
        """
        sc = self._scanner
        yield from self._scan_whitespace()
        c = sc.current()
        cc = sc.peek()

        if is_quote_start(c):
            yield self._scan_quote()
            return
        if is_entity_start(c):
            yield self._scan_entity()
            return
        if c in ("", "{", "}", ")"):
            raise self._error(ErrorKind.EXPECTED_CONTENT_AFTER_EQUALS, equals)
        if is_compound_start(c) or is_unsafe_value_start(c, cc) or is_comment_start(c, cc):
            raise self._error(ErrorKind.VALUE_CANNOT_START_WITH)
        if not is_text_value_char(c):
            raise self._error(ErrorKind.INVALID_CHAR, char=c)

        start = sc.mark()
        text = sc.advance_while(is_text_value_char)
        yield self._token(level.text_token, text, start, sc.offset)
