"""Comment scanner mixin."""

from __future__ import annotations

from collections.abc import Iterator

from xmq.comments import count_slashes, match_block_close, uncomment_block, uncomment_line
from xmq.errors import ErrorKind, ParseError
from xmq.scanner import Mark, Scanner
from xmq.tokens import Token, TokenType


class CommentScannerMixin:
    """Mixin scanning ``// line`` and ``/* block */`` comments.

    A block comment closed with ``*/*`` continues with another segment, each
    yielded as a COMMENT_CONTINUATION token after the first COMMENT.

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

    def _scan_comment(self) -> Iterator[Token]:
        """Scan a comment starting at the cursor.

        Yields:
            One COMMENT token, then COMMENT_CONTINUATION tokens if any

        Raises:
            ParseError: COMMENT_NOT_CLOSED or COMMENT_CLOSED_WITH_TOO_MANY_SLASHES,
                located at the start of the comment
        """
        sc = self._scanner
        source = sc.source
        start = sc.mark()
        num_slashes, block = count_slashes(source, start.offset)

        if not block:
            eol = source.find("\n", start.offset)
            if eol == -1:
                eol = len(source)
            text = source[start.offset + 2 : eol]
            sc.advance_to(eol)
            yield self._token(TokenType.COMMENT, uncomment_line(text), start, eol, eol)
            return

        token_type = TokenType.COMMENT
        content_start = start.offset + num_slashes + 1
        while True:
            close = match_block_close(source, content_start, num_slashes)
            if close.error is not None:
                raise self._error(close.error, start)
            text = uncomment_block(source[content_start : close.content_stop], trim=not self._trim_none)
            segment_start = sc.mark()
            sc.advance_to(close.stop)
            yield self._token(token_type, text, segment_start, close.content_stop, close.stop)
            if not close.continues:
                return
            token_type = TokenType.COMMENT_CONTINUATION
            # The continuation opens with the asterisk right after the close.
            content_start = close.stop + 1
