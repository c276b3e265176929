"""xmq renderer using StringBuilder pattern.

Turns a Document back into xmq text such that parsing the output gives an
equal tree (for trees the parser can produce, with text merging enabled).

Layout:
- ``name`` for an element without children
- ``name = value`` when the only child is a Text or Entity that fits a value
- ``name { ... }`` otherwise, children one level deeper
- ``name(a=1 b='x y' xmlns:p=uri)`` for attributes and namespaces

In the default layout the ``=`` of consecutive ``key = value`` siblings is
aligned. ``compact`` output is a single line.

Thread Safety:
All per-render state lives in local variables of ``render()``. One
XmqRenderer can be shared by many threads.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from xmq.comments import format_comment
from xmq.config import RenderConfig, get_render_config
from xmq.errors import RenderError
from xmq.nodes import (
    Attribute,
    Comment,
    DocType,
    Document,
    Element,
    Entity,
    Namespace,
    Node,
    ProcessingInstruction,
    Text,
)
from xmq.quoting import choose_quote, quote_text, split_for_quoting
from xmq.scanner import is_text_value_char, is_unsafe_value_start
from xmq.stringbuilder import StringBuilder

logger = logging.getLogger(__name__)


def is_bare_value(text: str) -> bool:
    """True when ``text`` can be written as a value without quotes.

    Examples:
        >>> is_bare_value("123"), is_bare_value("a b"), is_bare_value("=x")
        (True, False, False)

    """
    if not text:
        return False
    if is_unsafe_value_start(text[0], text[1:2]):
        return False
    return all(is_text_value_char(c) for c in text)


@dataclass(frozen=True, slots=True)
class _Item:
    """A node waiting to be written."""

    node: Node
    depth: int
    first: bool
    # Width the head is padded to so that ``=`` lines up; 0 means no padding
    align: int = 0


@dataclass(frozen=True, slots=True)
class _Close:
    """The closing brace of a body at ``depth``."""

    depth: int


class XmqRenderer:
    """Render a Document (or any single node) to xmq text.

    Usage:
            >>> from xmq import parse
            >>> XmqRenderer().render(parse("a{b=1 c{d}}"))
            'a {\\n    b = 1\\n    c {\\n        d\\n    }\\n}\\n'

    """

    __slots__ = ("_config",)

    def __init__(self, config: RenderConfig | None = None) -> None:
        """Initialize renderer.

        Args:
            config: Layout options; defaults to the current RenderConfig
        """
        self._config = config if config is not None else get_render_config()

    def render(self, node: Node) -> str:
        """Render ``node`` to a string.

        Raises:
            RenderError: When the tree contains something that is not an
                xmq node
        """
        compact = self._config.compact
        sb = StringBuilder()
        stack: list[_Item | _Close] = []

        if isinstance(node, Document):
            self._push_children(stack, node.children, 0)
        else:
            stack.append(_Item(node, 0, True))

        while stack:
            work = stack.pop()
            if isinstance(work, _Close):
                if not compact:
                    sb.newline(self._indent(work.depth))
                sb.append("}")
                continue

            if compact:
                if not work.first:
                    sb.append(" ")
            elif work.depth > 0:
                sb.newline(self._indent(work.depth))
            elif not work.first:
                sb.newline()
            self._render_node(work, sb, stack)

        if sb and not compact:
            sb.append("\n")
        return sb.build()

    # =========================================================================
    # Layout helpers
    # =========================================================================

    def _indent(self, depth: int) -> int:
        return depth * self._config.indent_width

    def _push_children(self, stack: list[_Item | _Close], children: tuple[Node, ...], depth: int) -> None:
        """Schedule ``children`` so that they pop in document order."""
        aligns = self._alignments(children, depth)
        for i in range(len(children) - 1, -1, -1):
            stack.append(_Item(children[i], depth, i == 0, aligns[i]))

    def _alignments(self, children: tuple[Node, ...], depth: int) -> list[int]:
        """Head widths for runs of consecutive single-line ``key = value`` siblings."""
        aligns = [0] * len(children)
        if self._config.compact:
            return aligns
        run: list[int] = []
        widths: list[int] = []

        def flush() -> None:
            if len(run) > 1:
                width = max(widths)
                for i in run:
                    aligns[i] = width
            run.clear()
            widths.clear()

        for i, child in enumerate(children):
            if isinstance(child, Element):
                value = self._element_value(child, depth)
                head = self._head(child, depth)
                if value is not None and "\n" not in value and "\n" not in head:
                    run.append(i)
                    widths.append(len(head))
                    continue
            flush()
        flush()
        return aligns

    # =========================================================================
    # Nodes
    # =========================================================================

    def _render_node(self, item: _Item, sb: StringBuilder, stack: list[_Item | _Close]) -> None:
        compact = self._config.compact
        node = item.node
        match node:
            case Element():
                head = self._head(node, item.depth)
                sb.append(head)
                if not node.children:
                    return
                value = self._element_value(node, item.depth)
                if value is not None:
                    if item.align > len(head):
                        sb.append(" " * (item.align - len(head)))
                    sb.append(self._equals()).append(value)
                    return
                sb.append("{" if compact else " {")
                stack.append(_Close(item.depth))
                self._push_children(stack, node.children, item.depth + 1)
            case Text():
                sb.append(self._body_text(node.content, sb.column))
            case Entity():
                sb.append(f"&{node.name};")
            case Comment():
                sb.append(format_comment(node.content, sb.column, compact=compact))
            case DocType():
                sb.append("!DOCTYPE")
                if node.content:
                    sb.append(self._equals()).append(self._scalar(node.content, item.depth + 1))
            case ProcessingInstruction():
                sb.append(f"?{node.target}")
                if node.content:
                    sb.append(self._equals()).append(self._scalar(node.content, item.depth + 1))
            case Document():
                raise RenderError("a Document can only be rendered at the top")
            case _:
                raise RenderError(f"cannot render {type(node).__name__} as xmq")

    def _equals(self) -> str:
        return "=" if self._config.compact else " = "

    def _head(self, element: Element, depth: int) -> str:
        """``name`` or ``name(attributes)``."""
        parts: list[str] = []
        for attr in element.attributes:
            parts.append(self._attribute(attr, depth))
        for ns in element.namespaces:
            parts.append(self._namespace(ns, depth))
        if not parts:
            return element.tag
        return f"{element.tag}({' '.join(parts)})"

    def _attribute(self, attr: Attribute, depth: int) -> str:
        if attr.value is None:
            return str(attr.name)
        return f"{attr.name}={self._scalar(attr.value, depth + 1)}"

    def _namespace(self, ns: Namespace, depth: int) -> str:
        if not ns.uri:
            return ns.attribute_name
        return f"{ns.attribute_name}={self._scalar(ns.uri, depth + 1)}"

    def _element_value(self, element: Element, depth: int) -> str | None:
        """The value written after ``=``, or None if the element needs a body."""
        if len(element.children) != 1:
            return None
        child = element.children[0]
        if isinstance(child, Entity):
            return f"&{child.name};"
        if not isinstance(child, Text):
            return None
        text = child.content
        if is_bare_value(text):
            return text
        return quote_text(text, self._indent(depth + 1), multiline=not self._config.compact)

    def _body_text(self, text: str, column: int) -> str:
        """Text in a body: always quoted, split into pieces if necessary."""
        quoted = quote_text(text, column, multiline=not self._config.compact)
        if quoted is not None:
            return quoted
        return " ".join(split_for_quoting(text))

    def _scalar(self, text: str, depth: int) -> str:
        """An attribute, doctype or processing instruction value.

        These hold a single token, so text that no single quote can represent
        is written approximately and a warning is logged.
        """
        if is_bare_value(text):
            return text
        compact = self._config.compact
        quoted = quote_text(text, self._indent(depth), multiline=not compact)
        if quoted is not None:
            return quoted

        logger.warning("Value %r cannot be written exactly; writing an approximation", text)
        flat = text.replace("\r\n", "\n").replace("\r", "\n")
        if compact:
            flat = flat.replace("\n", " ")
        quoted = quote_text(flat, self._indent(depth), multiline=not compact)
        if quoted is not None:
            return quoted
        char, depth_needed = choose_quote(flat, at_edges=True)  # type: ignore[misc]
        delim = char * depth_needed
        return f"{delim} {flat} {delim}"


__all__ = ["XmqRenderer", "is_bare_value"]
