"""Document tree nodes for xmq.

All nodes are frozen dataclasses with slots:
- Immutability: a parsed tree can be shared and rendered from many threads
- Pattern matching: ``match node: case Element(name=QName(local="x")): ...``
- Structural equality: two trees compare equal when their content does,
  regardless of where in the source they came from

Node Hierarchy:
Node (base)
├── Document
├── Element
├── Text
├── Comment
├── Entity
├── ProcessingInstruction
└── DocType

Children are owned through the ``children`` tuple. The ``parent`` of a node
is a weak reference set when the tree is assembled, so it never keeps a tree
alive and is ignored by equality, repr and serialization.

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

import weakref
from collections.abc import Iterator
from dataclasses import dataclass, field

from xmq.location import SourceLocation

# =============================================================================
# Names
# =============================================================================


@dataclass(frozen=True, slots=True)
class QName:
    """A possibly namespace-prefixed name.

    Examples:
            >>> QName.parse("svg:rect")
            QName(prefix='svg', local='rect')
            >>> str(QName.parse("a:b:c"))
            'a:b:c'

    """

    prefix: str | None
    local: str

    @classmethod
    def parse(cls, name: str) -> QName:
        """Split ``name`` at its last colon.

        A leading or trailing colon does not split, since one side would be
        empty.
        """
        colon = name.rfind(":")
        if colon <= 0 or colon == len(name) - 1:
            return cls(None, name)
        return cls(name[:colon], name[colon + 1 :])

    def __str__(self) -> str:
        if self.prefix is None:
            return self.local
        return f"{self.prefix}:{self.local}"


@dataclass(frozen=True, slots=True)
class Attribute:
    """An attribute. ``value`` is None for a bare ``name`` without ``=``."""

    name: QName
    value: str | None = None


@dataclass(frozen=True, slots=True)
class Namespace:
    """A namespace declaration: ``xmlns=uri`` (prefix None) or ``xmlns:p=uri``."""

    prefix: str | None
    uri: str

    @property
    def attribute_name(self) -> str:
        return "xmlns" if self.prefix is None else f"xmlns:{self.prefix}"


# =============================================================================
# Base Node
# =============================================================================


@dataclass(frozen=True, slots=True, weakref_slot=True)
class Node:
    """Base class for all tree nodes.

    Every node tracks where it came from for error messages and tooling.
    The location does not take part in equality.

    """

    location: SourceLocation = field(compare=False)
    _parent: weakref.ref[Node] | None = field(
        default=None, init=False, repr=False, compare=False, hash=False
    )

    @property
    def parent(self) -> Node | None:
        """The node containing this one, if it is still alive."""
        ref = self._parent
        return ref() if ref is not None else None


# =============================================================================
# Leaf Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Character data, already unquoted and normalized."""

    content: str


@dataclass(frozen=True, slots=True)
class Comment(Node):
    """A comment. Continuation segments are joined with newlines."""

    content: str


@dataclass(frozen=True, slots=True)
class Entity(Node):
    """A named entity reference such as ``&nbsp;`` (name without & and ;)."""

    name: str


@dataclass(frozen=True, slots=True)
class ProcessingInstruction(Node):
    """``?target = 'content'``."""

    target: str
    content: str = ""


@dataclass(frozen=True, slots=True)
class DocType(Node):
    """``!DOCTYPE = html``."""

    content: str


# =============================================================================
# Container Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Element(Node):
    """An element with attributes, namespace declarations and children.

    Attributes:
        name: Qualified element name
        attributes: Attributes in source order
        namespaces: Namespace declarations in source order
        children: Child nodes in source order

    """

    name: QName
    attributes: tuple[Attribute, ...] = ()
    namespaces: tuple[Namespace, ...] = ()
    children: tuple[Node, ...] = ()

    @property
    def tag(self) -> str:
        """The qualified name as written, e.g. ``svg:rect``."""
        return str(self.name)

    @property
    def text(self) -> str:
        """Concatenated content of the direct Text children."""
        return "".join(c.content for c in self.children if isinstance(c, Text))

    def get(self, name: str, default: str | None = None) -> str | None:
        """Value of the attribute written as ``name``."""
        for attr in self.attributes:
            if str(attr.name) == name:
                return attr.value
        return default

    def elements(self) -> Iterator[Element]:
        """Direct child elements."""
        return (c for c in self.children if isinstance(c, Element))


@dataclass(frozen=True, slots=True)
class Document(Node):
    """Root of a parsed tree.

    Holds the top-level element(s) together with any comments, doctype and
    processing instructions before or after them.

    """

    children: tuple[Node, ...] = ()

    @property
    def root(self) -> Element | None:
        """The first top-level element."""
        for child in self.children:
            if isinstance(child, Element):
                return child
        return None


def child_nodes(node: Node) -> tuple[Node, ...]:
    """Children of a container node, or an empty tuple for leaves."""
    if isinstance(node, Element | Document):
        return node.children
    return ()


def link_parents(root: Node) -> None:
    """Point the ``parent`` of every node below ``root`` at its container.

    Iterative, so arbitrarily deep trees are fine.
    """
    stack = [root]
    while stack:
        node = stack.pop()
        ref = weakref.ref(node)
        for child in child_nodes(node):
            object.__setattr__(child, "_parent", ref)
            stack.append(child)


def iter_tree(root: Node) -> Iterator[Node]:
    """All nodes below and including ``root`` in document order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(child_nodes(node)))


__all__ = [
    "Attribute",
    "Comment",
    "DocType",
    "Document",
    "Element",
    "Entity",
    "Namespace",
    "Node",
    "ProcessingInstruction",
    "QName",
    "Text",
    "child_nodes",
    "iter_tree",
    "link_parents",
]
