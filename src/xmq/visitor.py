"""Tree and token visitors for xmq.

``BaseVisitor`` walks a Document with match-based dispatch, ``transform``
rewrites a frozen tree, and ``TokenVisitor`` is the token-level
counterpart: one ``visit_*`` method per token type, so a consumer such as a
syntax highlighter can subscribe to the lexer instead of building a tree.

Example — collect all element names:

    class NameCollector(BaseVisitor[None]):
        def __init__(self) -> None:
            self.names: list[str] = []

        def visit_element(self, node: Element) -> None:
            self.names.append(node.tag)

    collector = NameCollector()
    collector.visit(doc)

Example — upper-case all text:

    def shout(node: Node) -> Node:
        if isinstance(node, Text):
            return dataclasses.replace(node, content=node.content.upper())
        return node

    new_doc = transform(doc, shout)

Thread Safety:
    A visitor usually collects results in its own attributes, so give each
    thread its own instance. transform() never mutates the input tree apart
    from the parent links of shared nodes.

"""

import dataclasses
from collections.abc import Callable, Iterable, Iterator
from typing import Generic, TypeVar

from xmq.nodes import (
    Comment,
    DocType,
    Document,
    Element,
    Entity,
    Node,
    ProcessingInstruction,
    Text,
    child_nodes,
    iter_tree,
    link_parents,
)
from xmq.tokens import Token, TokenType

T = TypeVar("T")


class BaseVisitor(Generic[T]):
    """Walks a tree and calls one ``visit_*`` method per node kind.

    Override the methods for the kinds of interest; the rest go to
    ``visit_default``. Every node below the starting one is visited too, in
    document order, so overrides never recurse themselves. ``T`` is what the
    methods return, ``None`` for visitors that only collect.

    """

    def visit(self, node: Node) -> T:
        """Dispatch ``node``, then every node below it; return the first result.

        The walk uses an explicit stack, so deep trees are fine.
        """
        nodes = iter_tree(node)
        result = self._dispatch(next(nodes))
        for descendant in nodes:
            self._dispatch(descendant)
        return result

    def visit_default(self, node: Node) -> T:
        """Fallback for every kind that has no override. Returns None."""
        return None  # type: ignore[return-value]

    def visit_document(self, node: Document) -> T:
        return self.visit_default(node)

    def visit_element(self, node: Element) -> T:
        return self.visit_default(node)

    def visit_text(self, node: Text) -> T:
        return self.visit_default(node)

    def visit_comment(self, node: Comment) -> T:
        return self.visit_default(node)

    def visit_entity(self, node: Entity) -> T:
        return self.visit_default(node)

    def visit_processing_instruction(self, node: ProcessingInstruction) -> T:
        return self.visit_default(node)

    def visit_doctype(self, node: DocType) -> T:
        return self.visit_default(node)

    def _dispatch(self, node: Node) -> T:
        match node:
            case Document():
                return self.visit_document(node)
            case Element():
                return self.visit_element(node)
            case Text():
                return self.visit_text(node)
            case Comment():
                return self.visit_comment(node)
            case Entity():
                return self.visit_entity(node)
            case ProcessingInstruction():
                return self.visit_processing_instruction(node)
            case DocType():
                return self.visit_doctype(node)
            case _:
                return self.visit_default(node)


def transform(doc: Document, fn: Callable[[Node], Node | None]) -> Document:
    """Rebuild ``doc`` with ``fn`` applied to every node, leaves first.

    ``fn`` sees each container after its children have been replaced, and
    may return the node unchanged, a new node, or None to drop it. Dropping
    the Document itself raises TypeError.

    Subtrees that ``fn`` leaves untouched are shared with the original tree.
    Parent references are set for the new tree, so shared nodes report
    their parent in the new tree afterwards.

    """
    result = _transform_node(doc, fn)
    if result is None or not isinstance(result, Document):
        msg = "transform() needs a Document back for the root node"
        raise TypeError(msg)
    link_parents(result)
    return result


def _transform_node(root: Node, fn: Callable[[Node], Node | None]) -> Node | None:
    """Post-order transform with an explicit stack."""
    # Each frame: (node, transformed children so far, children still to do)
    stack: list[tuple[Node, list[Node], Iterator[Node]]] = [(root, [], iter(child_nodes(root)))]
    while True:
        node, done, pending = stack[-1]
        child = next(pending, None)
        if child is not None:
            stack.append((child, [], iter(child_nodes(child))))
            continue

        stack.pop()
        original = child_nodes(node)
        if len(done) != len(original) or any(a is not b for a, b in zip(done, original, strict=True)):
            node = dataclasses.replace(node, children=tuple(done))  # type: ignore[call-arg]
        result = fn(node)
        if not stack:
            return result
        if result is not None:
            stack[-1][1].append(result)


class TokenVisitor(Generic[T]):
    """Token consumer with one ``visit_*`` method per token type.

    Every method receives the Token, which carries the start line, column
    and offset, the content stop offset and the suffix stop offset. Unhandled
    types fall through to ``visit_default``.

    Usage:
            >>> class Names(TokenVisitor[None]):
            ...     def __init__(self) -> None:
            ...         self.names: list[str] = []
            ...     def visit_element_name(self, token: Token) -> None:
            ...         self.names.append(token.value)
            >>> from xmq import tokenize
            >>> v = Names()
            >>> v.feed(tokenize("a { b c }"))
            >>> v.names
            ['a', 'b', 'c']

    """

    def feed(self, tokens: Iterable[Token]) -> None:
        """Visit every token of a stream."""
        for token in tokens:
            self.visit(token)

    def visit(self, token: Token) -> T:
        """Match-based dispatch to visit_* methods."""
        match token.type:
            case TokenType.WHITESPACE:
                return self.visit_whitespace(token)
            case TokenType.QUOTE:
                return self.visit_quote(token)
            case TokenType.ENTITY:
                return self.visit_entity(token)
            case TokenType.COMMENT:
                return self.visit_comment(token)
            case TokenType.COMMENT_CONTINUATION:
                return self.visit_comment_continuation(token)
            case TokenType.ELEMENT_NAME:
                return self.visit_element_name(token)
            case TokenType.ELEMENT_KEY:
                return self.visit_element_key(token)
            case TokenType.ELEMENT_NS:
                return self.visit_element_ns(token)
            case TokenType.COLON:
                return self.visit_colon(token)
            case TokenType.ATTR_NS:
                return self.visit_attr_ns(token)
            case TokenType.ATTR_KEY:
                return self.visit_attr_key(token)
            case TokenType.NS_COLON:
                return self.visit_ns_colon(token)
            case TokenType.NS_DECLARATION:
                return self.visit_ns_declaration(token)
            case TokenType.APAR_LEFT:
                return self.visit_apar_left(token)
            case TokenType.APAR_RIGHT:
                return self.visit_apar_right(token)
            case TokenType.BRACE_LEFT:
                return self.visit_brace_left(token)
            case TokenType.BRACE_RIGHT:
                return self.visit_brace_right(token)
            case TokenType.EQUALS:
                return self.visit_equals(token)
            case TokenType.ATTR_VALUE_TEXT:
                return self.visit_attr_value_text(token)
            case TokenType.ELEMENT_VALUE_TEXT:
                return self.visit_element_value_text(token)
            case _:
                return self.visit_default(token)

    def visit_default(self, token: Token) -> T:
        return None  # type: ignore[return-value]

    def visit_whitespace(self, token: Token) -> T:
        return self.visit_default(token)

    def visit_quote(self, token: Token) -> T:
        return self.visit_default(token)

    def visit_entity(self, token: Token) -> T:
        return self.visit_default(token)

    def visit_comment(self, token: Token) -> T:
        return self.visit_default(token)

    def visit_comment_continuation(self, token: Token) -> T:
        return self.visit_default(token)

    def visit_element_name(self, token: Token) -> T:
        return self.visit_default(token)

    def visit_element_key(self, token: Token) -> T:
        return self.visit_default(token)

    def visit_element_ns(self, token: Token) -> T:
        return self.visit_default(token)

    def visit_colon(self, token: Token) -> T:
        return self.visit_default(token)

    def visit_attr_ns(self, token: Token) -> T:
        return self.visit_default(token)

    def visit_attr_key(self, token: Token) -> T:
        return self.visit_default(token)

    def visit_ns_colon(self, token: Token) -> T:
        return self.visit_default(token)

    def visit_ns_declaration(self, token: Token) -> T:
        return self.visit_default(token)

    def visit_apar_left(self, token: Token) -> T:
        return self.visit_default(token)

    def visit_apar_right(self, token: Token) -> T:
        return self.visit_default(token)

    def visit_brace_left(self, token: Token) -> T:
        return self.visit_default(token)

    def visit_brace_right(self, token: Token) -> T:
        return self.visit_default(token)

    def visit_equals(self, token: Token) -> T:
        return self.visit_default(token)

    def visit_attr_value_text(self, token: Token) -> T:
        return self.visit_default(token)

    def visit_element_value_text(self, token: Token) -> T:
        return self.visit_default(token)
