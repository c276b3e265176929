"""Lexer for xmq source text.

Architecture:
lexer/
├── __init__.py          # Re-exports Lexer, ValueLevel
├── core.py              # Lexer class (main loop, brace stack, errors)
├── modes.py             # ValueLevel enum, name constants
└── scanners/            # Construct scanners
    ├── quote.py         # 'quotes' and &entities;
    ├── comment.py       # // and /* */ comments
    └── element.py       # names, attribute lists, values

Usage:
    >>> from xmq.lexer import Lexer
    >>> [t.type.name for t in Lexer("a=1").tokenize()]
    ['ELEMENT_KEY', 'EQUALS', 'ELEMENT_VALUE_TEXT']

"""

from xmq.lexer.core import Lexer
from xmq.lexer.modes import ValueLevel

__all__ = ["Lexer", "ValueLevel"]
