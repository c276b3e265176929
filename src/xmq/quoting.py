"""Quoted text: incidental indentation removal and its inverse.

A quote that spans several lines is written indented along with the
surrounding document::

    message = '''
              Hello
                World
              '''

``normalize_quote`` removes the newline after the opening quote, the newline
before the closing quote and the common indentation, giving
``"Hello\\n  World"``. The last line (the one holding the closing quote)
acts as a ceiling for how much indentation is removed.

``quote_text`` goes the other way: given arbitrary text it picks the quote
character and depth and lays the text out so that ``normalize_quote``
restores it exactly, or reports that no single quote can.

Thread Safety:
All functions are pure.

"""

from __future__ import annotations

from dataclasses import dataclass, field

QUOTE_CHARS = ("'", '"')


@dataclass(slots=True)
class Line:
    """One physical line of the working region of a quote."""

    start: int
    stop: int
    indent: int
    trim: bool
    blank: bool


@dataclass(slots=True)
class QuoteSpan:
    """Working structure for one quote being normalized."""

    text: str
    leading_newlines: int = 0
    trailing_newlines: int = 0
    min_indent: int = 0
    lines: list[Line] = field(default_factory=list)


def _leading_run_end(text: str) -> int:
    i = 0
    n = len(text)
    while i < n and text[i] in " \n":
        i += 1
    return i


def _trailing_run_start(text: str) -> int:
    i = len(text)
    while i > 0 and text[i - 1] in " \n":
        i -= 1
    return i


def _indent(text: str, start: int, stop: int) -> int:
    i = start
    while i < stop and text[i] == " ":
        i += 1
    return i - start


def split_quote(content: str) -> QuoteSpan | None:
    """Analyse multi-line quote content.

    Returns None when the content has no newline (it is used verbatim).
    A span without lines means the content was whitespace only.
    """
    text = content.replace("\r\n", "\n").replace("\r", "\n")
    if "\n" not in text:
        return None

    span = QuoteSpan(text)
    n = len(text)
    lead_end = _leading_run_end(text)
    span.leading_newlines = text.count("\n", 0, lead_end)
    if lead_end == n:
        return span

    trail_start = _trailing_run_start(text)
    span.trailing_newlines = text.count("\n", trail_start)

    last_lead_nl = text.rfind("\n", 0, lead_end)
    region_start = last_lead_nl + 1
    first_trail_nl = text.find("\n", trail_start)
    region_stop = first_trail_nl if first_trail_nl != -1 else n

    last_line_start = text.rfind("\n") + 1
    ceiling = _indent(text, last_line_start, n)

    first_trimmed = last_lead_nl != -1
    min_indent: int | None = None
    start = region_start
    while True:
        stop = text.find("\n", start, region_stop)
        if stop == -1:
            stop = region_stop
        indent = _indent(text, start, stop)
        blank = start + indent == stop
        trim = first_trimmed or bool(span.lines)
        span.lines.append(Line(start, stop, indent, trim, blank))
        if trim and not blank and (min_indent is None or indent < min_indent):
            min_indent = indent
        if stop == region_stop:
            break
        start = stop + 1

    span.min_indent = min_indent or 0
    if ceiling > 0 and ceiling < span.min_indent:
        span.min_indent = ceiling
    return span


def normalize_quote(content: str) -> str:
    """Remove incidental indentation from quote content.

    Examples:
        >>> normalize_quote("HejsanHoppsan")
        'HejsanHoppsan'
        >>> normalize_quote("\\n    x\\n  y\\n    z\\n")
        '  x\\ny\\n  z'
        >>> normalize_quote("abc\\n def")
        'abc\\ndef'

    """
    span = split_quote(content)
    if span is None:
        return content
    if not span.lines:
        return "\n" * (span.leading_newlines - 1)

    text = span.text
    out: list[str] = []
    if span.leading_newlines > 1:
        out.append("\n" * (span.leading_newlines - 1))
    for i, line in enumerate(span.lines):
        if i:
            out.append("\n")
        start = line.start
        if line.trim:
            start += min(line.indent, span.min_indent)
        out.append(text[start : line.stop])
    if span.trailing_newlines > 1:
        out.append("\n" * (span.trailing_newlines - 1))
    return "".join(out)


# =============================================================================
# Inverse: choosing and laying out quotes
# =============================================================================


def longest_run(text: str, char: str) -> int:
    """Length of the longest run of ``char`` in ``text``."""
    best = 0
    current = 0
    for c in text:
        if c == char:
            current += 1
            if current > best:
                best = current
        else:
            current = 0
    return best


def quote_depth(text: str, char: str) -> int:
    """Number of ``char`` needed to quote ``text``.

    One more than the longest run inside the text. Two quotes always mean the
    empty string, so a depth of two becomes three.
    """
    depth = longest_run(text, char) + 1
    if depth == 2:
        depth = 3
    return depth


def choose_quote(text: str, *, at_edges: bool = False) -> tuple[str, int] | None:
    """Pick the quote character with the smallest depth.

    Args:
        text: Text to quote
        at_edges: The text is separated from the quotes by a newline, so it
            may start or end with the quote character

    Returns:
        (char, depth), or None when every quote character touches an edge.
        Ties go to the single quote.
    """
    best: tuple[str, int] | None = None
    for char in QUOTE_CHARS:
        if not at_edges and text and (text[0] == char or text[-1] == char):
            continue
        depth = quote_depth(text, char)
        if best is None or depth < best[1]:
            best = (char, depth)
    return best


def edges_survive(text: str) -> bool:
    """True when leading and trailing whitespace-only lines are newlines only.

    ``normalize_quote`` drops spaces on whitespace-only lines at the start and
    end of a quote, so such text cannot be laid out as one block.
    """
    lead_end = _leading_run_end(text)
    last_nl = text.rfind("\n", 0, lead_end)
    if last_nl != -1 and " " in text[:last_nl]:
        return False
    trail_start = _trailing_run_start(text)
    first_nl = text.find("\n", trail_start)
    if first_nl != -1 and " " in text[first_nl:]:
        return False
    return True


def quote_inline(text: str) -> str | None:
    """Quote single-line text on one line, or None if the edges collide."""
    choice = choose_quote(text)
    if choice is None:
        return None
    char, depth = choice
    delim = char * depth
    return f"{delim}{text}{delim}"


def quote_block(text: str, indent: int) -> str | None:
    """Quote text as a block whose lines start at column ``indent + 1``.

    The opening quote is followed by a newline, each line is prefixed with
    ``indent`` spaces and the closing quote sits on its own line at the same
    indentation. ``indent`` is raised to 1 since a zero indent on the closing
    line does not cap the indentation removed.

    Returns None for text that cannot survive normalization this way.
    """
    if "\r" in text or not text.strip(" \n") or not edges_survive(text):
        return None
    char, depth = choose_quote(text, at_edges=True)  # type: ignore[misc]
    delim = char * depth
    pad = " " * max(indent, 1)
    body = "\n".join(pad + line for line in text.split("\n"))
    return f"{delim}\n{body}\n{pad}{delim}"


def quote_text(text: str, indent: int = 0, *, multiline: bool = True) -> str | None:
    """Quote ``text`` as a single quote token.

    Args:
        text: Text to quote
        indent: Column (0-based) where continuation lines should start
        multiline: Whether the result may contain newlines

    Returns:
        The quote including delimiters, or None when the text needs to be
        split into several quotes and character references.
    """
    if not text:
        return "''"
    if "\r" in text:
        return None
    if "\n" not in text:
        inline = quote_inline(text)
        if inline is not None or not multiline:
            return inline
        return quote_block(text, indent)
    if not multiline:
        return None
    if text.strip("\n") == "":
        # Newlines only: one extra newline, the normalizer removes one.
        return "'" + "\n" * (len(text) + 1) + "'"
    return quote_block(text, indent)


def char_ref(char: str) -> str:
    """Numeric character reference, e.g. ``&#10;``."""
    return f"&#{ord(char)};"


def split_for_quoting(text: str) -> list[str]:
    """Split text into quotes and character references that concatenate to it.

    Newlines and carriage returns become ``&#10;``/``&#13;``. Quote characters
    at the start of a piece that prevent inline quoting become references too.
    Every part is single-line, so this works in compact output.
    """
    parts: list[str] = []
    piece_start = 0
    for i, c in enumerate(text + "\n"):
        if c not in "\r\n":
            continue
        piece = text[piece_start:i]
        while piece:
            quoted = quote_inline(piece)
            if quoted is not None:
                parts.append(quoted)
                break
            parts.append(char_ref(piece[0]))
            piece = piece[1:]
        if i < len(text):
            parts.append(char_ref(c))
        piece_start = i + 1
    return parts


__all__ = [
    "Line",
    "QuoteSpan",
    "char_ref",
    "choose_quote",
    "edges_survive",
    "longest_run",
    "normalize_quote",
    "quote_block",
    "quote_depth",
    "quote_inline",
    "quote_text",
    "split_for_quoting",
    "split_quote",
]
