"""Tests for the top-level API."""

from pathlib import Path

import pytest

import xmq
from xmq import ErrorKind, ParseError, Xmq, parse, parse_file, render, tokenize


class TestParseFile:
    def test_reads_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "car.xmq"
        path.write_text("car { name = 'Søren' }", encoding="utf-8")
        doc = parse_file(path)
        assert doc.root is not None
        assert next(doc.root.elements()).text == "Søren"
        assert doc.root.location.source_file == str(path)

    def test_options(self, tmp_path: Path) -> None:
        path = tmp_path / "bare.xmq"
        path.write_text("speed = 1", encoding="utf-8")
        doc = parse_file(path, implicit_root="config")
        assert doc.root is not None and doc.root.tag == "config"

    def test_missing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "missing.xmq"
        with pytest.raises(ParseError) as info:
            parse_file(path)
        assert info.value.kind is ErrorKind.CANNOT_READ_FILE
        assert info.value.source_file == str(path)
        assert isinstance(info.value.__cause__, FileNotFoundError)

    def test_not_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "latin1.xmq"
        path.write_bytes(b"a = '\xff'")
        with pytest.raises(ParseError) as info:
            parse_file(path)
        assert info.value.kind is ErrorKind.CANNOT_READ_FILE
        assert isinstance(info.value.__cause__, UnicodeDecodeError)

    def test_syntax_error_names_file(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.xmq"
        path.write_text("a {", encoding="utf-8")
        with pytest.raises(ParseError) as info:
            parse_file(path)
        assert str(info.value).startswith(f"{path}:1:3:")


class TestXmq:
    def test_reformat(self) -> None:
        fmt = Xmq(indent_width=2)
        assert fmt("a{b{c=1}}") == "a {\n  b {\n    c = 1\n  }\n}\n"

    def test_options_are_exposed(self) -> None:
        fmt = Xmq(implicit_root="r", compact=True)
        assert fmt.parse_config.implicit_root == "r"
        assert fmt.render_config.compact is True
        assert fmt("a = 1") == "r{a=1}"

    def test_parse_and_render(self) -> None:
        fmt = Xmq(merge_adjacent_text=False)
        doc = fmt.parse("a { 'x' 'y' }")
        assert doc.root is not None and len(doc.root.children) == 2
        assert fmt.render(doc) == "a {\n    'x'\n    'y'\n}\n"

    def test_trim_none(self) -> None:
        root = Xmq(trim_none=True).parse("a = '\n x\n '").root
        assert root is not None and root.text == "\n x\n "


class TestModule:
    def test_tokenize(self) -> None:
        assert [t.type.name for t in tokenize("a=1")] == ["ELEMENT_KEY", "EQUALS", "ELEMENT_VALUE_TEXT"]

    def test_tokenize_trim_none(self) -> None:
        assert [t.value for t in tokenize("'\n x\n '", trim_none=True)] == ["\n x\n "]

    def test_render_compact(self) -> None:
        assert render(parse("a { b = 1 }"), compact=True) == "a{b=1}"

    def test_exports(self) -> None:
        for name in xmq.__all__:
            assert hasattr(xmq, name), name

    def test_version(self) -> None:
        assert xmq.__version__ == "0.1.0"
