"""Iterative lexer for xmq.

Produces a flat stream of typed tokens. Bodies are not scanned
recursively: the lexer keeps a stack of open braces, so nesting depth is
bounded only by memory.

No regex in the hot path. Runs of quotes, comments and whitespace are
skipped with ``str.find`` and committed to the Scanner in one step.

Thread Safety:
Lexer instances are single-use. Create one per source string.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

from collections.abc import Iterator

from xmq.config import get_parse_config
from xmq.errors import ErrorKind, ParseError
from xmq.lexer.modes import BOM, FOREIGN_CONTENT_STARTS
from xmq.lexer.scanners import (
    CommentScannerMixin,
    ElementScannerMixin,
    QuoteScannerMixin,
)
from xmq.scanner import (
    Mark,
    Scanner,
    is_comment_start,
    is_element_start,
    is_entity_start,
    is_quote_start,
    is_tab,
    is_text_name,
    is_token_whitespace,
)
from xmq.tokens import Token, TokenType


class Lexer(
    QuoteScannerMixin,
    CommentScannerMixin,
    ElementScannerMixin,
):
    """Tokenizer for xmq source text.

    Usage:
            >>> lexer = Lexer("config { speed = 123 }")
            >>> for token in lexer.tokenize():
            ...     print(token)
        Token(ELEMENT_NAME, 'config', 1:1)
        Token(WHITESPACE, ' ', 1:7)
        Token(BRACE_LEFT, '{', 1:8)
        Token(WHITESPACE, ' ', 1:9)
        Token(ELEMENT_KEY, 'speed', 1:10)
        Token(WHITESPACE, ' ', 1:15)
        Token(EQUALS, '=', 1:16)
        Token(WHITESPACE, ' ', 1:17)
        Token(ELEMENT_VALUE_TEXT, '123', 1:18)
        Token(WHITESPACE, ' ', 1:21)
        Token(BRACE_RIGHT, '}', 1:22)

    Thread Safety:
        Lexer instances are single-use. Create one per source string.

    """

    __slots__ = (
        "_scanner",
        "_source_name",
        "_trim_none",
        "_start",  # First offset after an optional byte order mark
        "_open_braces",  # Marks of the unclosed { in nesting order
        "_last_body_start",  # Most recently opened {, closed or not
    )

    def __init__(
        self,
        source: str,
        source_name: str | None = None,
        *,
        trim_none: bool | None = None,
    ) -> None:
        """Initialize lexer with source text.

        Args:
            source: xmq source text
            source_name: Optional name used in token locations and errors
            trim_none: Keep quote and comment content verbatim. Defaults to
                the value in the current ParseConfig.
        """
        self._start = 1 if source.startswith(BOM) else 0
        self._scanner = Scanner(source, self._start)
        self._source_name = source_name
        self._trim_none = get_parse_config().trim_none if trim_none is None else trim_none
        self._open_braces: list[Mark] = []
        self._last_body_start: Mark | None = None

    def tokenize(self) -> Iterator[Token]:
        """Tokenize source into a token stream.

        Yields:
            Token objects one at a time

        Raises:
            ParseError: On the first malformed construct. Tokens already
                yielded stay valid.
        """
        self._check_content()
        sc = self._scanner
        while True:
            c = sc.current()
            if c == "":
                if self._open_braces:
                    raise self._error(ErrorKind.BODY_NOT_CLOSED, self._last_body_start)
                return

            if is_token_whitespace(c) or is_tab(c):
                yield from self._scan_whitespace()
            elif is_quote_start(c):
                yield self._scan_quote()
            elif is_entity_start(c):
                yield self._scan_entity()
            elif is_comment_start(c, sc.peek()):
                yield from self._scan_comment()
            elif is_element_start(c) or self._at_doctype() or self._at_processing_instruction():
                yield from self._scan_element()
            elif c == "}":
                if not self._open_braces:
                    raise self._error(ErrorKind.UNEXPECTED_CLOSING_BRACE)
                self._open_braces.pop()
                brace = sc.mark()
                sc.advance()
                yield self._token(TokenType.BRACE_RIGHT, "}", brace, sc.offset)
            else:
                equals = self._dangling_equals()
                if equals is not None:
                    raise self._error(ErrorKind.EXPECTED_CONTENT_AFTER_EQUALS, equals)
                raise self._error(ErrorKind.INVALID_CHAR, char=c)

    # =========================================================================
    # Shared helpers used by the scanner mixins
    # =========================================================================

    def _scan_whitespace(self) -> Iterator[Token]:
        """Yield a WHITESPACE token for a run of spaces and newlines, if any.

        Raises:
            ParseError: UNEXPECTED_TAB when the run is followed by a tab
        """
        sc = self._scanner
        if is_token_whitespace(sc.current()):
            start = sc.mark()
            text = sc.advance_while(is_token_whitespace)
            yield self._token(TokenType.WHITESPACE, text, start, sc.offset)
        if is_tab(sc.current()):
            raise self._error(ErrorKind.UNEXPECTED_TAB)

    def _token(
        self,
        token_type: TokenType,
        value: str,
        start: Mark,
        stop_offset: int,
        stop_suffix_offset: int | None = None,
    ) -> Token:
        """Create token with raw coordinates."""
        return Token(
            type=token_type,
            value=value,
            start_line=start.line,
            start_col=start.col,
            start_offset=start.offset,
            stop_offset=stop_offset,
            stop_suffix_offset=stop_offset if stop_suffix_offset is None else stop_suffix_offset,
            source_name=self._source_name,
        )

    def _error(self, kind: ErrorKind, at: Mark | None = None, *, char: str | None = None) -> ParseError:
        """Build a ParseError at ``at`` (default: the cursor)."""
        sc = self._scanner
        if at is None:
            at = sc.mark()
        return ParseError(
            kind,
            lineno=at.line,
            col_offset=at.col,
            source_file=self._source_name,
            source_line=sc.line_text(at.offset),
            char=char,
        )

    def _mark_at(self, offset: int) -> Mark:
        """Line and column of an offset behind the cursor."""
        source = self._scanner.source
        line_start = max(source.rfind("\n", 0, offset) + 1, self._start)
        line = source.count("\n", 0, offset) + 1
        return Mark(offset, line, offset - line_start + 1)

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def _check_content(self) -> None:
        """Reject input that is obviously XML, HTML or JSON.

        Raises:
            ParseError: NOT_XMQ at the first non-whitespace character
        """
        sc = self._scanner
        source = sc.source
        i = self._start
        n = len(source)
        while i < n and source[i] in " \t\r\n":
            i += 1
        if i < n and source[i] in FOREIGN_CONTENT_STARTS:
            raise self._error(ErrorKind.NOT_XMQ, self._mark_at(i))

    def _dangling_equals(self) -> Mark | None:
        """Find the ``=`` whose value swallowed the following line.

        In::

            alfa =
            beta = 123

        ``beta`` becomes the value of ``alfa`` and the lexer then trips over
        the second ``=``. When the unexpected character is ``{``, ``(`` or
        ``=`` and only a name and whitespace separate it from a previous line
        that ends in ``=``, that ``=`` is where the real problem is.
        """
        sc = self._scanner
        source = sc.source
        if sc.current() not in ("{", "(", "="):
            return None

        i = sc.offset - 1
        while i > self._start and source[i] != "\n" and (is_text_name(source[i]) or source[i] in " \t\r"):
            i -= 1
        if i <= self._start or source[i] != "\n":
            return None
        while i > self._start and source[i] in " \t\r\n":
            i -= 1
        if source[i] != "=":
            return None
        return self._mark_at(i)
