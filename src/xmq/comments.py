"""Comment delimiter balancing.

Block comments open with one or more slashes followed by an asterisk and
close with an asterisk followed by the same number of slashes::

    /* plain */
    ///* may contain */ and *// inside *///

A closing run with fewer slashes is part of the comment text, a closing run
with more slashes is an error. A close immediately followed by ``*`` starts
a continuation segment using the same slash count, which is how a
multi-line comment is written on a single line::

    /* first line */* second line */

Thread Safety:
All functions are pure.

"""

from __future__ import annotations

from dataclasses import dataclass

from xmq.errors import ErrorKind
from xmq.quoting import edges_survive, normalize_quote


@dataclass(frozen=True, slots=True)
class BlockClose:
    """Where a block comment (or continuation segment) ends.

    Attributes:
        content_stop: Offset of the closing asterisk
        stop: Offset just after the closing slashes
        continues: The close is directly followed by ``*``
        error: Set when no balanced close was found

    """

    content_stop: int
    stop: int
    continues: bool = False
    error: ErrorKind | None = None


def count_slashes(source: str, pos: int) -> tuple[int, bool]:
    """Count slashes at ``pos``; also report whether an asterisk follows."""
    end = pos
    n = len(source)
    while end < n and source[end] == "/":
        end += 1
    return end - pos, end < n and source[end] == "*"


def match_block_close(source: str, content_start: int, num_slashes: int) -> BlockClose:
    """Find the close matching an opener of ``num_slashes`` slashes.

    Args:
        source: The whole source text
        content_start: Offset just after the opening asterisk
        num_slashes: Slash count of the opener

    Returns:
        The close position, or a BlockClose with ``error`` set to
        COMMENT_NOT_CLOSED or COMMENT_CLOSED_WITH_TOO_MANY_SLASHES.
    """
    n = len(source)
    i = content_start
    while i < n:
        star = source.find("*/", i)
        if star == -1:
            break
        count, followed_by_star = count_slashes(source, star + 1)
        if count < num_slashes:
            i = star + 1 + count
            continue
        if count > num_slashes:
            return BlockClose(star, star + 1 + count, error=ErrorKind.COMMENT_CLOSED_WITH_TOO_MANY_SLASHES)
        return BlockClose(star, star + 1 + count, continues=followed_by_star)
    return BlockClose(n, n, error=ErrorKind.COMMENT_NOT_CLOSED)


def uncomment_line(text: str) -> str:
    """Text of a ``//`` comment: one leading space and trailing blanks dropped."""
    if text.startswith(" "):
        text = text[1:]
    return text.rstrip(" \r")


def uncomment_block(text: str, *, trim: bool = True) -> str:
    """Text of a block comment segment.

    One space after the opener and one before the closer are dropped; a
    multi-line comment then loses its incidental indentation like a quote.
    """
    if text.startswith(" "):
        text = text[1:]
    if text.endswith(" "):
        text = text[:-1]
    if trim and "\n" in text:
        return normalize_quote(text)
    return text


def necessary_slashes(text: str) -> int:
    """Slashes needed so that no ``*`` + slashes inside ``text`` closes the comment."""
    longest = 0
    i = text.find("*")
    while i != -1:
        count, _ = count_slashes(text, i + 1)
        longest = max(longest, count)
        i = text.find("*", i + 1)
    return longest + 1


def format_comment(text: str, indent: int = 0, *, compact: bool = False) -> str:
    """Write comment ``text`` so that parsing it gives back ``text``.

    Single-line text becomes ``// text`` (or ``/* text */`` when compact or
    when the text has trailing blanks). Multi-line text becomes an indented
    block, or a chain of continuation segments when compact or when the text
    cannot survive re-indentation.

    Args:
        text: Comment text
        indent: Column (0-based) where the comment starts
        compact: Keep the comment on one line
    """
    slashes = "/" * necessary_slashes(text)
    opener = f"{slashes}*"
    closer = f"*{slashes}"
    if "\n" not in text:
        if not compact and text == text.rstrip(" \r") and text.strip():
            return f"// {text}"
        return f"{opener} {text} {closer}"

    if not compact and "\r" not in text and text.strip(" \n") and edges_survive(text):
        pad = " " * (indent + len(opener) + 1)
        body = "\n".join(pad + line for line in text.split("\n"))
        return f"{opener}\n{body}\n{pad} {closer}"

    segments = text.split("\n")
    return opener + f" {closer}*".join(f" {segment}" for segment in segments) + f" {closer}"


__all__ = [
    "BlockClose",
    "count_slashes",
    "format_comment",
    "match_block_close",
    "necessary_slashes",
    "uncomment_block",
    "uncomment_line",
]
