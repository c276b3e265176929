"""Token listing for debugging.

Writes one line per token instead of building a tree, showing where each
token starts, its type and its decoded value::

    1:1 element_key 'speed'
    1:6 equals '='
    1:7 element_value_text '123'

"""

from collections.abc import Iterable

from xmq.stringbuilder import StringBuilder
from xmq.tokens import Token
from xmq.visitor import TokenVisitor


class TokenPrinter(TokenVisitor[None]):
    """Render a token stream as text, one token per line.

    Args:
        skip_whitespace: Leave WHITESPACE tokens out of the listing

    """

    __slots__ = ("_sb", "_skip_whitespace")

    def __init__(self, *, skip_whitespace: bool = False) -> None:
        self._sb = StringBuilder()
        self._skip_whitespace = skip_whitespace

    def render(self, tokens: Iterable[Token]) -> str:
        """Listing of ``tokens``."""
        self._sb = StringBuilder()
        self.feed(tokens)
        return self._sb.build()

    def visit_whitespace(self, token: Token) -> None:
        if not self._skip_whitespace:
            self.visit_default(token)

    def visit_default(self, token: Token) -> None:
        self._sb.append(f"{token.start_line}:{token.start_col} {token.type.label} {token.value!r}").newline()
