"""Exception classes for xmq.

Parsing stops at the first error and raises a ParseError carrying an
ErrorKind from a closed set. ``format_error`` turns a ParseError into the
usual three-line compiler-style diagnostic.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Every way a parse can fail. The value is the human readable message."""

    # Malformed input
    NOT_XMQ = "input file is not xmq"
    INVALID_CHAR = "unexpected character"
    UNEXPECTED_TAB = "unexpected tab character (remember tabs must be quoted)"
    VALUE_CANNOT_START_WITH = "value cannot start with = ( // or /*"
    UNEXPECTED_CLOSING_BRACE = "unexpected closing brace"
    EXPECTED_CONTENT_AFTER_EQUALS = "expected content after equals"

    # Unterminated constructs
    QUOTE_NOT_CLOSED = "quote is not closed"
    ENTITY_NOT_CLOSED = "entity is not closed"
    COMMENT_NOT_CLOSED = "comment is not closed"
    BODY_NOT_CLOSED = "body is not closed"
    ATTRIBUTES_NOT_CLOSED = "attributes are not closed"

    # Over-terminated constructs
    QUOTE_CLOSED_WITH_TOO_MANY_QUOTES = "quote closed with too many quotes"
    COMMENT_CLOSED_WITH_TOO_MANY_SLASHES = "comment closed with too many slashes"

    # Resources
    CANNOT_READ_FILE = "cannot read file"
    OOM = "out of memory"


class XmqError(Exception):
    """Base exception for all xmq errors."""

    pass


class ParseError(XmqError):
    """Error while parsing xmq source.

    Raised on the first problem found; no partial tree is produced.
    """

    def __init__(
        self,
        kind: ErrorKind,
        lineno: int | None = None,
        col_offset: int | None = None,
        source_file: str | None = None,
        source_line: str | None = None,
        char: str | None = None,
    ) -> None:
        """Initialize parse error with optional location.

        Args:
            kind: What went wrong
            lineno: Line number where the error occurred (1-indexed)
            col_offset: Column where the error occurred (1-indexed)
            source_file: Source name used in messages
            source_line: Text of the offending line, without its newline
            char: The offending character for INVALID_CHAR errors
        """
        self.kind = kind
        self.message = kind.value
        self.lineno = lineno
        self.col_offset = col_offset
        self.source_file = source_file
        self.source_line = source_line
        self.char = char

        location = ""
        if source_file:
            location = f"{source_file}:"
        if lineno is not None:
            location += f"{lineno}:"
            if col_offset is not None:
                location += f"{col_offset}:"
        if location:
            location += " "

        super().__init__(f"{location}{self.message}{_describe_char(char)}")


class RenderError(XmqError):
    """Error while rendering a tree.

    Raised when the renderer meets something that is not an xmq node.
    """

    pass


def _describe_char(char: str | None) -> str:
    if not char:
        return ""
    return f" {char!r} U+{ord(char):04X}"


def format_error(error: ParseError) -> str:
    """Render a ParseError as ``source:line:col: message``, source line and caret.

    Example:
        >>> err = ParseError(ErrorKind.BODY_NOT_CLOSED, 1, 7, "a.xmq", "config{ x=1")
        >>> print(format_error(err))
        a.xmq:1:7: body is not closed
        config{ x=1
              ^
    """
    source = error.source_file or "-"
    head = f"{source}:{error.lineno or 0}:{error.col_offset or 0}: {error.message}"
    head += _describe_char(error.char)
    if error.source_line is None or error.col_offset is None:
        return head
    caret = " " * (error.col_offset - 1) + "^"
    return f"{head}\n{error.source_line}\n{caret}"


__all__ = [
    "ErrorKind",
    "ParseError",
    "RenderError",
    "XmqError",
    "format_error",
]
