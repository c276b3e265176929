"""Construct scanners for the xmq lexer.

Each scanner is a mixin that knows how to consume one kind of construct
(quotes and entities, comments, elements with their attributes and values).
The Lexer composes them and supplies the shared cursor and token factory.
"""

from __future__ import annotations

from xmq.lexer.scanners.comment import CommentScannerMixin
from xmq.lexer.scanners.element import ElementScannerMixin
from xmq.lexer.scanners.quote import QuoteScannerMixin

__all__ = [
    "CommentScannerMixin",
    "ElementScannerMixin",
    "QuoteScannerMixin",
]
