"""Quote and entity scanner mixin."""

from __future__ import annotations

from xmq.errors import ErrorKind, ParseError
from xmq.quoting import normalize_quote
from xmq.scanner import Mark, Scanner, is_lowercase_hex, is_text_name
from xmq.tokens import Token, TokenType


class QuoteScannerMixin:
    """Mixin scanning ``'quotes'`` and ``&entities;``.

    A quote opens with a run of N identical quote characters and closes at
    the next run of exactly N. Shorter runs are content, a longer run is an
    error. Exactly two quotes are the empty string.

    """

    # These will be set by the Lexer class
    _scanner: Scanner
    _trim_none: bool

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

    def _scan_quote(self) -> Token:
        """Scan a quote starting at the cursor.

        Returns:
            QUOTE token whose value is the normalized content

        Raises:
            ParseError: QUOTE_NOT_CLOSED or QUOTE_CLOSED_WITH_TOO_MANY_QUOTES
        """
        sc = self._scanner
        source = sc.source
        start = sc.mark()
        char = sc.current()
        depth = sc.count_run(char)

        if depth == 2:
            sc.advance_to(start.offset + 2)
            return self._token(TokenType.QUOTE, "", start, sc.offset, sc.offset)

        sc.advance_to(start.offset + depth)
        content_start = sc.offset
        while True:
            pos = source.find(char, sc.offset)
            if pos == -1:
                raise self._error(ErrorKind.QUOTE_NOT_CLOSED, start)
            run = sc.count_run(char, pos)
            if run > depth:
                sc.advance_to(pos)
                raise self._error(ErrorKind.QUOTE_CLOSED_WITH_TOO_MANY_QUOTES)
            sc.advance_to(pos + run)
            if run == depth:
                break

        content = source[content_start:pos]
        if not self._trim_none:
            content = normalize_quote(content)
        return self._token(TokenType.QUOTE, content, start, pos, sc.offset)

    def _scan_entity(self) -> Token:
        """Scan ``&name;``.

        The semicolon may be left out only when the name is made of
        lowercase hex digits, as in ``&a0``. Numeric references such as
        ``&#10;`` always need it.

        Raises:
            ParseError: ENTITY_NOT_CLOSED
        """
        sc = self._scanner
        start = sc.mark()
        sc.advance("&")
        name = sc.advance_while(is_text_name)
        stop = sc.offset
        if sc.current() == ";":
            sc.advance()
        elif not name or not all(is_lowercase_hex(c) for c in name):
            raise self._error(ErrorKind.ENTITY_NOT_CLOSED, start)
        if not name:
            raise self._error(ErrorKind.ENTITY_NOT_CLOSED, start)
        return self._token(TokenType.ENTITY, name, start, stop, sc.offset)
