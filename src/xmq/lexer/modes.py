"""Lexer contexts and name constants.

The lexer has no modes of its own. What changes with context is how an
unquoted value is classified, so that is the only state kept here.
"""

from __future__ import annotations

from enum import Enum, auto

from xmq.tokens import TokenType


class ValueLevel(Enum):
    """Where a value after ``=`` appears.

    - ELEMENT: ``key = value`` inside a body or at the top level
    - ATTRIBUTE: ``(name = value)`` inside an attribute list

    """

    ELEMENT = auto()
    ATTRIBUTE = auto()

    @property
    def text_token(self) -> TokenType:
        """Token type for an unquoted value at this level."""
        if self is ValueLevel.ATTRIBUTE:
            return TokenType.ATTR_VALUE_TEXT
        return TokenType.ELEMENT_VALUE_TEXT


# Attribute names that declare a namespace rather than set a value.
XMLNS = "xmlns"
XMLNS_PREFIX = "xmlns:"

# Element-like constructs that are not elements.
DOCTYPE = "!DOCTYPE"
PI_MARKER = "?"

# First non-whitespace characters that mean the input is XML, HTML or JSON.
FOREIGN_CONTENT_STARTS = frozenset("<[{")

BOM = "\ufeff"


def is_namespace_declaration(name: str) -> bool:
    """``xmlns`` or ``xmlns:prefix``."""
    return name == XMLNS or (name.startswith(XMLNS_PREFIX) and len(name) > len(XMLNS_PREFIX))
