"""Output buffer for the xmq renderer.

Pieces are collected in a list and joined once by ``build()``. The buffer
also knows the column the next character will be written to, because
multi-line quotes and comments are laid out relative to where they start.

Thread Safety:
One buffer per render() call; nothing is shared.

"""

from __future__ import annotations


class StringBuilder:
    """List-backed string buffer with column tracking.

    Usage:
            >>> sb = StringBuilder()
            >>> _ = sb.append("config {").newline(4).append("speed = 1")
            >>> sb.column
            13
            >>> sb.newline().append("}").build()
            'config {\\n    speed = 1\\n}'

    """

    __slots__ = ("_parts", "_column")

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._column = 0

    @property
    def column(self) -> int:
        """0-based column after the last character written."""
        return self._column

    def append(self, s: str) -> StringBuilder:
        """Add ``s`` (which may contain newlines); returns self for chaining."""
        if not s:
            return self
        self._parts.append(s)
        last_line_start = s.rfind("\n") + 1
        if last_line_start:
            self._column = len(s) - last_line_start
        else:
            self._column += len(s)
        return self

    def newline(self, indent: int = 0) -> StringBuilder:
        """End the line and indent the next one by ``indent`` spaces."""
        return self.append("\n" + " " * max(indent, 0))

    def build(self) -> str:
        return "".join(self._parts)

    def __bool__(self) -> bool:
        """True once anything has been written."""
        return bool(self._parts)
