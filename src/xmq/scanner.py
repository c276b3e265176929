"""Character cursor and character classes for the xmq lexer.

The Scanner is the only place that moves through the source. Its offset,
line and column change together in ``advance()``, so they can never drift
apart.

Thread Safety:
Scanner instances are single-use and owned by one Lexer.

"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

#: Returned by ``Scanner.current()`` and ``Scanner.peek()`` past the end.
END = ""

TOKEN_WHITESPACE = frozenset(" \n\r")
UNICODE_WHITESPACE = frozenset("\u00a0\u2000\u2001\u2002\u2003")
QUOTE_CHARS = frozenset("'\"")
NAME_PUNCTUATION = frozenset("-_.:#")
LOWERCASE_HEX = frozenset("0123456789abcdef")
# Characters that end an unquoted value besides whitespace.
VALUE_STOP_CHARS = frozenset("'\"(){}")


def is_token_whitespace(c: str) -> bool:
    """Space, newline or carriage return. Tab is never separating whitespace."""
    return c in TOKEN_WHITESPACE


def is_tab(c: str) -> bool:
    return c == "\t"


def is_unicode_whitespace(c: str) -> bool:
    """No-break space and the en/em quads and spaces."""
    return c in UNICODE_WHITESPACE


def is_whitespace(c: str) -> bool:
    """Any whitespace that must be quoted inside a value."""
    return c in TOKEN_WHITESPACE or c == "\t" or c in UNICODE_WHITESPACE


def is_text_name(c: str) -> bool:
    """Letters, digits and ``- _ . : #``."""
    return c.isalnum() or c in NAME_PUNCTUATION


def is_element_start(c: str) -> bool:
    return c.isalpha() or c == "_"


def is_quote_start(c: str) -> bool:
    return c in QUOTE_CHARS


def is_entity_start(c: str) -> bool:
    return c == "&"


def is_comment_start(c: str, cc: str) -> bool:
    return c == "/" and (cc == "/" or cc == "*")


def is_compound_start(c: str) -> bool:
    return c == "("


def is_text_value_char(c: str) -> bool:
    """Characters allowed in an unquoted value."""
    return c != END and not is_whitespace(c) and c not in VALUE_STOP_CHARS


def is_lowercase_hex(c: str) -> bool:
    return c in LOWERCASE_HEX


def is_unsafe_value_start(c: str, cc: str) -> bool:
    """Characters an unquoted value may not start with."""
    return c == "=" or c == "&" or is_comment_start(c, cc)


@dataclass(frozen=True, slots=True)
class Mark:
    """A saved cursor position."""

    offset: int
    line: int
    col: int


class Scanner:
    """Cursor over an immutable source string.

    Usage:
            >>> s = Scanner("a\\nb")
            >>> s.advance("a"), s.advance("\\n")
            ('a', '\\n')
            >>> s.line, s.col
            (2, 1)

    """

    __slots__ = ("_source", "_source_len", "offset", "line", "col")

    def __init__(self, source: str, offset: int = 0) -> None:
        self._source = source
        self._source_len = len(source)
        self.offset = offset
        self.line = 1
        self.col = 1

    @property
    def source(self) -> str:
        return self._source

    def at_end(self) -> bool:
        return self.offset >= self._source_len

    def current(self) -> str:
        """Character at the cursor, or END."""
        if self.offset >= self._source_len:
            return END
        return self._source[self.offset]

    def peek(self, k: int = 1) -> str:
        """Character ``k`` positions after the cursor, or END."""
        pos = self.offset + k
        if pos >= self._source_len:
            return END
        return self._source[pos]

    def advance(self, expected: str | None = None) -> str:
        """Consume one character and update line/column.

        Args:
            expected: When given, the character the caller already knows is
                at the cursor. Checked with ``assert`` only, so it documents
                an internal invariant and is not input validation.

        Returns:
            The consumed character (END at the end of the source).
        """
        if self.offset >= self._source_len:
            return END
        char = self._source[self.offset]
        assert expected is None or char == expected, f"expected {expected!r}, got {char!r}"
        self.offset += 1
        if char == "\n":
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return char

    def advance_while(self, predicate: Callable[[str], bool]) -> str:
        """Consume characters while ``predicate(char)`` holds; return them."""
        start = self.offset
        while self.offset < self._source_len and predicate(self._source[self.offset]):
            self.advance()
        return self._source[start : self.offset]

    def advance_to(self, offset: int) -> str:
        """Jump forward to ``offset``; return the skipped text.

        Line and column are recomputed from the skipped segment in one go
        instead of character by character.
        """
        start = self.offset
        segment = self._source[start:offset]
        newlines = segment.count("\n")
        if newlines:
            self.line += newlines
            self.col = len(segment) - segment.rfind("\n")
        else:
            self.col += len(segment)
        self.offset = max(start, min(offset, self._source_len))
        return segment

    def count_run(self, char: str, offset: int | None = None) -> int:
        """Length of the run of ``char`` starting at ``offset`` (default: cursor)."""
        pos = self.offset if offset is None else offset
        end = pos
        while end < self._source_len and self._source[end] == char:
            end += 1
        return end - pos

    def mark(self) -> Mark:
        return Mark(self.offset, self.line, self.col)

    def line_text(self, offset: int) -> str:
        """The full source line containing ``offset``, without its newline."""
        start = self._source.rfind("\n", 0, offset) + 1
        end = self._source.find("\n", offset)
        if end == -1:
            end = self._source_len
        return self._source[start:end]


__all__ = [
    "END",
    "Mark",
    "Scanner",
    "is_comment_start",
    "is_compound_start",
    "is_element_start",
    "is_entity_start",
    "is_lowercase_hex",
    "is_quote_start",
    "is_tab",
    "is_text_name",
    "is_text_value_char",
    "is_token_whitespace",
    "is_unicode_whitespace",
    "is_unsafe_value_start",
    "is_whitespace",
]
