"""Tree builder: turns a token stream into a Document.

The builder is a plain consumer of tokens. Anything that can produce the
token stream (normally ``Lexer.tokenize()``) can drive it, one token at a
time, through ``feed()``.

Elements are collected in mutable frames while their content is still
arriving, and frozen into immutable nodes when they close. Open bodies live
on an explicit stack, so nesting depth is not limited by recursion.

Usage:
    builder = TreeBuilder()
    for token in Lexer(source).tokenize():
        builder.feed(token)
    doc = builder.finish()

Thread Safety:
TreeBuilder instances are single-use and not thread-safe. The Document
returned by ``finish()`` is immutable.

"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, auto

from xmq.config import ParseConfig, get_parse_config
from xmq.lexer.modes import DOCTYPE, PI_MARKER, XMLNS_PREFIX
from xmq.location import SourceLocation
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
    QName,
    Text,
    link_parents,
)
from xmq.tokens import Token, TokenType

# The five entities every XML processor knows.
PREDEFINED_ENTITIES = {
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
}


def decode_char_ref(name: str) -> str | None:
    """Decode ``#123`` or ``#x1F`` to a character; None if it is not one.

    Examples:
        >>> decode_char_ref("#10")
        '\\n'
        >>> decode_char_ref("#x41")
        'A'
        >>> decode_char_ref("nbsp") is None
        True

    """
    if not name.startswith("#"):
        return None
    digits = name[1:]
    base = 10
    if digits[:1] in ("x", "X"):
        digits = digits[1:]
        base = 16
    if not digits:
        return None
    try:
        code = int(digits, base)
    except ValueError:
        return None
    if code <= 0 or code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
        return None
    return chr(code)


def decode_attribute_entity(name: str) -> str:
    """Text of an entity used as an attribute value.

    Character references and the predefined entities decode, any other name
    is kept as written.
    """
    char = decode_char_ref(name)
    if char is not None:
        return char
    return PREDEFINED_ENTITIES.get(name, f"&{name};")


class FrameKind(Enum):
    """What a frame will freeze into."""

    DOCUMENT = auto()
    ELEMENT = auto()
    DOCTYPE = auto()
    PROCESSING_INSTRUCTION = auto()


@dataclass(slots=True)
class ElementFrame:
    """An element (or the document) whose content is still being read.

    Attributes:
        kind: Node type produced by ``freeze()``
        location: Where the element name starts
        name: Qualified name (None for the document)
        attributes: Attributes and namespace declarations in source order
        children: Finished child nodes
        value: Value of a doctype or processing instruction

    """

    kind: FrameKind
    location: SourceLocation
    name: QName | None = None
    attributes: list[Attribute | Namespace] = field(default_factory=list)
    children: list[Node] = field(default_factory=list)
    value: str | None = None

    def freeze(self) -> Node:
        """Build the immutable node for this frame."""
        match self.kind:
            case FrameKind.DOCUMENT:
                return Document(location=self.location, children=tuple(self.children))
            case FrameKind.DOCTYPE:
                return DocType(location=self.location, content=self.value or "")
            case FrameKind.PROCESSING_INSTRUCTION:
                assert self.name is not None
                return ProcessingInstruction(
                    location=self.location,
                    target=self.name.local[len(PI_MARKER) :],
                    content=self.value or "",
                )
            case _:
                assert self.name is not None
                return Element(
                    location=self.location,
                    name=self.name,
                    attributes=tuple(a for a in self.attributes if isinstance(a, Attribute)),
                    namespaces=tuple(a for a in self.attributes if isinstance(a, Namespace)),
                    children=tuple(self.children),
                )


class TreeBuilder:
    """Builds a Document from tokens.

    Usage:
            >>> from xmq.lexer import Lexer
            >>> builder = TreeBuilder()
            >>> for token in Lexer("a { b = 1 }").tokenize():
            ...     builder.feed(token)
            >>> [child.tag for child in builder.finish().root.elements()]
            ['b']

    Thread Safety:
        Single-use; not thread-safe. Configuration is read once from the
        ParseConfig ContextVar when the builder is created.

    """

    __slots__ = (
        "_config",
        "_source_name",
        "_stack",  # [document, open bodies...]; top is the insertion parent
        "_head",  # Element whose name was read but whose body has not opened
        "_prefix",  # Buffered namespace prefix token
        "_in_attributes",
        "_expect_value",
        "_seen_element",
        "_finished",
    )

    def __init__(self, source_name: str | None = None, config: ParseConfig | None = None) -> None:
        self._config = config if config is not None else get_parse_config()
        self._source_name = source_name
        document = ElementFrame(
            FrameKind.DOCUMENT, SourceLocation(1, 1, source_file=source_name)
        )
        self._stack: list[ElementFrame] = [document]
        self._head: ElementFrame | None = None
        self._prefix: Token | None = None
        self._in_attributes = False
        self._expect_value = False
        self._seen_element = False
        self._finished = False

    def feed(self, token: Token) -> None:
        """Consume one token."""
        if self._finished:
            raise RuntimeError("TreeBuilder.feed() called after finish()")

        match token.type:
            case TokenType.WHITESPACE | TokenType.COLON | TokenType.NS_COLON:
                pass
            case TokenType.ELEMENT_NS:
                self._close_head()
                self._prefix = token
            case TokenType.ELEMENT_NAME | TokenType.ELEMENT_KEY:
                self._start_element(token)
            case TokenType.APAR_LEFT:
                self._in_attributes = True
            case TokenType.APAR_RIGHT:
                self._in_attributes = False
            case TokenType.ATTR_NS:
                self._prefix = token
            case TokenType.ATTR_KEY:
                self._add_attribute(token)
            case TokenType.NS_DECLARATION:
                prefix = token.value[len(XMLNS_PREFIX) :] or None
                self._require_head().attributes.append(Namespace(prefix, ""))
            case TokenType.EQUALS:
                self._expect_value = True
            case TokenType.BRACE_LEFT:
                self._stack.append(self._require_head())
                self._head = None
            case TokenType.BRACE_RIGHT:
                self._close_head()
                frame = self._stack.pop()
                self._append(self._stack[-1], frame.freeze())
            case TokenType.COMMENT:
                self._close_head()
                self._append(self._stack[-1], Comment(location=token.location, content=token.value))
            case TokenType.COMMENT_CONTINUATION:
                self._continue_comment(token)
            case (
                TokenType.QUOTE
                | TokenType.ENTITY
                | TokenType.ATTR_VALUE_TEXT
                | TokenType.ELEMENT_VALUE_TEXT
            ):
                self._add_content(token)

    def finish(self) -> Document:
        """Close everything still open and return the Document.

        Only an implicit root may legitimately still be open here; the lexer
        rejects unclosed bodies.
        """
        self._close_head()
        while len(self._stack) > 1:
            frame = self._stack.pop()
            self._append(self._stack[-1], frame.freeze())
        self._finished = True
        document = self._stack[0].freeze()
        link_parents(document)
        assert isinstance(document, Document)
        return document

    # =========================================================================
    # Elements and attributes
    # =========================================================================

    def _start_element(self, token: Token) -> None:
        prefix = self._prefix
        self._prefix = None
        if prefix is not None:
            name = QName(prefix.value, token.value)
            location = prefix.location.span_to(token.location)
        else:
            self._close_head()
            name = QName(None, token.value)
            location = token.location

        if token.value == DOCTYPE:
            kind = FrameKind.DOCTYPE
        elif token.value.startswith(PI_MARKER):
            kind = FrameKind.PROCESSING_INSTRUCTION
        else:
            kind = FrameKind.ELEMENT
            self._maybe_open_implicit_root(str(name))
            self._seen_element = True

        self._head = ElementFrame(kind, location, name)

    def _maybe_open_implicit_root(self, name: str) -> None:
        implicit_root = self._config.implicit_root
        if self._seen_element or not implicit_root or name == implicit_root:
            return
        if len(self._stack) != 1:
            return
        location = SourceLocation.unknown()
        if self._source_name:
            location = SourceLocation(0, 0, source_file=self._source_name)
        self._stack.append(ElementFrame(FrameKind.ELEMENT, location, QName.parse(implicit_root)))

    def _add_attribute(self, token: Token) -> None:
        prefix = self._prefix
        self._prefix = None
        name = QName(prefix.value if prefix is not None else None, token.value)
        self._require_head().attributes.append(Attribute(name))

    def _require_head(self) -> ElementFrame:
        if self._head is None:
            raise RuntimeError("token stream has attributes or a body without an element")
        return self._head

    def _close_head(self) -> None:
        head = self._head
        if head is None:
            return
        self._head = None
        self._append(self._stack[-1], head.freeze())

    # =========================================================================
    # Content
    # =========================================================================

    def _add_content(self, token: Token) -> None:
        if not self._expect_value:
            # Body level: the text belongs to the innermost open element.
            self._close_head()
            self._append(self._stack[-1], self._content_node(token))
            return

        self._expect_value = False
        head = self._require_head()
        if self._in_attributes:
            attr = head.attributes[-1]
            value = self._value_text(token)
            if isinstance(attr, Namespace):
                head.attributes[-1] = replace(attr, uri=value)
            else:
                head.attributes[-1] = replace(attr, value=value)
            return

        if head.kind is FrameKind.ELEMENT:
            self._append(head, self._content_node(token))
        else:
            head.value = self._value_text(token)
        self._close_head()

    def _content_node(self, token: Token) -> Node:
        """Text or Entity node for a value token."""
        if token.type is TokenType.ENTITY:
            char = decode_char_ref(token.value)
            if char is None:
                return Entity(location=token.location, name=token.value)
            return Text(location=token.location, content=char)
        return Text(location=token.location, content=token.value)

    def _value_text(self, token: Token) -> str:
        """Plain string value of a token (attribute, doctype and PI values)."""
        if token.type is TokenType.ENTITY:
            return decode_attribute_entity(token.value)
        return token.value

    def _continue_comment(self, token: Token) -> None:
        children = self._stack[-1].children
        if not children or not isinstance(children[-1], Comment):
            raise RuntimeError("comment continuation without a preceding comment")
        previous = children[-1]
        children[-1] = Comment(
            location=previous.location.span_to(token.location),
            content=f"{previous.content}\n{token.value}",
        )

    def _append(self, frame: ElementFrame, node: Node) -> None:
        children = frame.children
        if (
            self._config.merge_adjacent_text
            and isinstance(node, Text)
            and children
            and isinstance(children[-1], Text)
        ):
            previous = children[-1]
            children[-1] = Text(
                location=previous.location.span_to(node.location),
                content=previous.content + node.content,
            )
            return
        children.append(node)


__all__ = [
    "PREDEFINED_ENTITIES",
    "ElementFrame",
    "FrameKind",
    "TreeBuilder",
    "decode_attribute_entity",
    "decode_char_ref",
]
