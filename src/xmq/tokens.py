"""Token and TokenType definitions for the xmq lexer.

The lexer produces a stream of Token objects. The tree builder consumes them,
but any other consumer (a syntax highlighter, a token dump) can subscribe to
the same stream instead.

Thread Safety:
Token is frozen (immutable) and safe to share across threads.
TokenType is an enum (inherently immutable).

Performance Note:
Token stores raw coordinates and lazily creates SourceLocation on demand.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from xmq.location import SourceLocation


class TokenType(Enum):
    """Token kinds produced by the lexer (closed set)."""

    WHITESPACE = auto()  # spaces, newlines, carriage returns
    QUOTE = auto()  # 'text' at body level
    ENTITY = auto()  # &name; or &#10; at body level
    COMMENT = auto()  # // text  or  /* text */
    COMMENT_CONTINUATION = auto()  # the * text */ part of /* a */* b */

    # Elements
    ELEMENT_NAME = auto()  # name of an element without =
    ELEMENT_KEY = auto()  # name followed by =
    ELEMENT_NS = auto()  # prefix in prefix:name
    COLON = auto()  # the colon after ELEMENT_NS

    # Attributes
    ATTR_NS = auto()  # prefix in prefix:attr
    ATTR_KEY = auto()  # attribute name
    NS_COLON = auto()  # the colon after ATTR_NS
    NS_DECLARATION = auto()  # xmlns or xmlns:prefix

    # Punctuation
    APAR_LEFT = auto()  # (
    APAR_RIGHT = auto()  # )
    BRACE_LEFT = auto()  # {
    BRACE_RIGHT = auto()  # }
    EQUALS = auto()  # =

    # Unquoted values
    ATTR_VALUE_TEXT = auto()
    ELEMENT_VALUE_TEXT = auto()

    @property
    def label(self) -> str:
        """Lower-case name, e.g. ``element_key``."""
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class Token:
    """A classified, positioned span of source text.

    Attributes:
        type: The token kind
        value: Decoded content. For quotes the normalized text, for comments
            the comment text, for entities the name between & and ;, for
            names the name itself, for punctuation the character.
        start_line: Line of the first character (1-indexed)
        start_col: Column of the first character (1-indexed)
        start_offset: Offset of the first character, delimiters included
        stop_offset: Offset just after the content
        stop_suffix_offset: Offset just after the closing delimiters
        source_name: Optional source name used in locations

    Thread Safety:
        Frozen dataclass. The lazy location cache uses an idempotent write.

    """

    type: TokenType
    value: str
    start_line: int
    start_col: int
    start_offset: int
    stop_offset: int
    stop_suffix_offset: int
    source_name: str | None = None
    _location_cache: SourceLocation | None = field(
        default=None, repr=False, compare=False, hash=False
    )

    @property
    def location(self) -> SourceLocation:
        """Source location of the whole token (lazily created and cached)."""
        if self._location_cache is not None:
            return self._location_cache
        loc = SourceLocation(
            lineno=self.start_line,
            col_offset=self.start_col,
            offset=self.start_offset,
            end_offset=self.stop_suffix_offset,
            source_file=self.source_name,
        )
        object.__setattr__(self, "_location_cache", loc)
        return loc

    def text(self, source: str) -> str:
        """Raw source text of the token, delimiters included."""
        return source[self.start_offset : self.stop_suffix_offset]

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        val = self.value
        if len(val) > 20:
            val = val[:17] + "..."
        return f"Token({self.type.name}, {val!r}, {self.start_line}:{self.start_col})"
