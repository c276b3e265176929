"""Where things are in xmq source text.

Tokens create locations lazily, tree nodes keep the location of the name or
text they were built from, and ParseError reports the same line and column.

"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """A span of xmq source.

    ``lineno`` and ``col_offset`` are 1-based and count code points, not
    bytes. ``offset`` and ``end_offset`` index the source ``str`` (the end is
    exclusive). Nodes made up by the library, such as an implicit root, use
    line 0.

    Examples:
            >>> loc = SourceLocation(3, 7, source_file="config.xmq")
            >>> str(loc)
            'config.xmq:3:7'
            >>> str(SourceLocation(1, 1))
            '1:1'

    """

    lineno: int
    col_offset: int
    offset: int = 0
    end_offset: int = 0
    end_lineno: int | None = None
    end_col_offset: int | None = None
    source_file: str | None = None

    def __str__(self) -> str:
        position = f"{self.lineno}:{self.col_offset}"
        return f"{self.source_file}:{position}" if self.source_file else position

    def span_to(self, end: SourceLocation) -> SourceLocation:
        """This location stretched to cover ``end`` as well.

        Used when a prefix token and a name token form one qualified name,
        and when neighbouring text nodes are merged.
        """
        return replace(
            self,
            end_offset=end.end_offset or end.offset,
            end_lineno=end.end_lineno or end.lineno,
            end_col_offset=end.end_col_offset or end.col_offset,
        )

    @classmethod
    def unknown(cls) -> SourceLocation:
        return cls(0, 0)
