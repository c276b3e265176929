"""Tests for tree visitors, transform and token visitors."""

import dataclasses

import pytest

from xmq import parse, render, tokenize
from xmq.nodes import Comment, Element, Node, Text
from xmq.renderers.tokens import TokenPrinter
from xmq.tokens import Token
from xmq.visitor import BaseVisitor, TokenVisitor, transform


class NameCollector(BaseVisitor[None]):
    def __init__(self) -> None:
        self.names: list[str] = []

    def visit_element(self, node: Element) -> None:
        self.names.append(node.tag)


class KindCounter(BaseVisitor[str]):
    def __init__(self) -> None:
        self.kinds: list[str] = []

    def visit_default(self, node: Node) -> str:
        self.kinds.append(type(node).__name__)
        return type(node).__name__


class TestBaseVisitor:
    def test_document_order(self) -> None:
        collector = NameCollector()
        collector.visit(parse("a { b { c } d }"))
        assert collector.names == ["a", "b", "c", "d"]

    def test_default_sees_every_node(self) -> None:
        counter = KindCounter()
        result = counter.visit(parse("!DOCTYPE = html\n?pi = x\na { 'x' &nbsp; // c\n}"))
        assert result == "Document"
        assert counter.kinds == [
            "Document",
            "DocType",
            "ProcessingInstruction",
            "Element",
            "Text",
            "Entity",
            "Comment",
        ]

    def test_deep_tree(self) -> None:
        collector = NameCollector()
        collector.visit(parse("a{" * 3000 + "}" * 3000))
        assert len(collector.names) == 3000


class TestTransform:
    def test_rewrite_text(self) -> None:
        def shout(node: Node) -> Node:
            if isinstance(node, Text):
                return dataclasses.replace(node, content=node.content.upper())
            return node

        doc = transform(parse("a { b = x c = y }"), shout)
        assert render(doc, compact=True) == "a{b=X c=Y}"

    def test_remove_nodes(self) -> None:
        doc = transform(parse("a { // c\n b }"), lambda n: None if isinstance(n, Comment) else n)
        assert render(doc, compact=True) == "a{b}"

    def test_untouched_subtrees_are_shared(self) -> None:
        original = parse("a { b = 1 }")
        doc = transform(original, lambda n: n)
        assert doc is original
        assert doc.root is original.root

    def test_parents_point_into_new_tree(self) -> None:
        def rename(node: Node) -> Node:
            if isinstance(node, Element) and node.tag == "b":
                return dataclasses.replace(node, name=dataclasses.replace(node.name, local="z"))
            return node

        doc = transform(parse("a { b { c } }"), rename)
        root = doc.root
        assert root is not None
        z = next(root.elements())
        assert z.tag == "z"
        assert z.parent is root
        assert next(z.elements()).parent is z

    def test_removing_root_fails(self) -> None:
        with pytest.raises(TypeError):
            transform(parse("a"), lambda n: None)


class ValueTypes(TokenVisitor[None]):
    def __init__(self) -> None:
        self.seen: list[str] = []

    def visit_element_key(self, token: Token) -> None:
        self.seen.append(f"key:{token.value}")

    def visit_quote(self, token: Token) -> None:
        self.seen.append(f"quote:{token.value}")

    def visit_attr_key(self, token: Token) -> None:
        self.seen.append(f"attr:{token.value}")


class TestTokenVisitor:
    def test_dispatch(self) -> None:
        visitor = ValueTypes()
        visitor.feed(tokenize("a(x=1) { b = 'two' }"))
        assert visitor.seen == ["attr:x", "key:b", "quote:two"]

    def test_default_returns_none(self) -> None:
        token = next(tokenize("a"))
        assert TokenVisitor[None]().visit(token) is None


class TestTokenPrinter:
    def test_listing(self) -> None:
        out = TokenPrinter().render(tokenize("a = 1"))
        assert out == (
            "1:1 element_key 'a'\n"
            "1:2 whitespace ' '\n"
            "1:3 equals '='\n"
            "1:4 whitespace ' '\n"
            "1:5 element_value_text '1'\n"
        )

    def test_skip_whitespace(self) -> None:
        out = TokenPrinter(skip_whitespace=True).render(tokenize("a {\n  b\n}"))
        assert out == "1:1 element_name 'a'\n1:3 brace_left '{'\n2:3 element_name 'b'\n3:1 brace_right '}'\n"

    def test_reusable(self) -> None:
        printer = TokenPrinter(skip_whitespace=True)
        printer.render(tokenize("a"))
        assert printer.render(tokenize("b")) == "1:1 element_name 'b'\n"
