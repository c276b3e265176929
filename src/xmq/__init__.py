"""
xmq — a compact, human-friendly notation for XML-shaped trees

Parses xmq text into an immutable document tree and prints trees back to
xmq. Zero runtime dependencies.

Quick Start:
    >>> from xmq import parse, render
    >>> doc = parse("config { speed = 123 name = 'Fast car' }")
    >>> doc.root.tag
    'config'
    >>> print(render(doc), end="")
    config {
        speed = 123
        name  = 'Fast car'
    }

    >>> # Bare key/value lines with a wrapping root element
    >>> parse("speed = 123", implicit_root="config").root.tag
    'config'

    >>> # Or use the high-level Xmq class
    >>> from xmq import Xmq
    >>> fmt = Xmq(compact=True)
    >>> fmt("a { b = 1 }")
    'a{b=1}'

Syntax:
    name                    element without content
    key = value             element with text content
    key = 'quoted value'    quotes take any text; ''' for text with '
    name(a=1 b=2) { ... }   attributes and a body with child nodes
    // comment              comments, /* block */ comments too
    &nbsp;                  entities
"""

from collections.abc import Iterator
from os import PathLike

from xmq.builder import TreeBuilder
from xmq.config import (
    DEFAULT_INDENT_WIDTH,
    ParseConfig,
    RenderConfig,
    get_parse_config,
    get_render_config,
    parse_config_context,
    render_config_context,
)
from xmq.errors import ErrorKind, ParseError, RenderError, XmqError, format_error
from xmq.lexer import Lexer
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
)
from xmq.renderers.protocol import TreeRenderer
from xmq.renderers.tokens import TokenPrinter
from xmq.renderers.xmq import XmqRenderer
from xmq.serialization import from_dict, from_json, to_dict, to_json
from xmq.tokens import Token, TokenType
from xmq.utils.logger import get_logger
from xmq.visitor import BaseVisitor, TokenVisitor, transform

__version__ = "0.1.0"

logger = get_logger(__name__)


def _build(source: str, source_name: str | None, config: ParseConfig) -> Document:
    with parse_config_context(config):
        builder = TreeBuilder(source_name)
        for token in Lexer(source, source_name).tokenize():
            builder.feed(token)
        return builder.finish()


def parse(
    source: str,
    source_name: str | None = None,
    *,
    implicit_root: str | None = None,
    trim_none: bool = False,
    merge_adjacent_text: bool = True,
) -> Document:
    """Parse xmq source into a document tree.

    Args:
        source: xmq source text
        source_name: Name used in locations and error messages
        implicit_root: Wrap the content in an element of this name unless
            the source already starts with it
        trim_none: Keep quoted text and comments exactly as written
        merge_adjacent_text: Join neighbouring text nodes

    Returns:
        Document root node

    Raises:
        ParseError: On the first syntax error

    Example:
        >>> doc = parse("a(x=1) { b = 'two' }")
        >>> doc.root.get("x"), doc.root.children[0].text
        ('1', 'two')
    """
    config = ParseConfig(
        implicit_root=implicit_root,
        trim_none=trim_none,
        merge_adjacent_text=merge_adjacent_text,
    )
    return _build(source, source_name, config)


def parse_file(
    path: str | PathLike[str],
    *,
    implicit_root: str | None = None,
    trim_none: bool = False,
    merge_adjacent_text: bool = True,
) -> Document:
    """Read a UTF-8 file and parse it. The path is used as the source name.

    Raises:
        ParseError: CANNOT_READ_FILE when the file cannot be read or decoded,
            or any syntax error in its content
    """
    name = str(path)
    logger.debug("Reading xmq file %s", name)
    try:
        with open(path, encoding="utf-8") as f:
            source = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Cannot read %s", name, exc_info=True)
        raise ParseError(ErrorKind.CANNOT_READ_FILE, source_file=name) from e
    return parse(
        source,
        name,
        implicit_root=implicit_root,
        trim_none=trim_none,
        merge_adjacent_text=merge_adjacent_text,
    )


def tokenize(source: str, source_name: str | None = None, *, trim_none: bool = False) -> Iterator[Token]:
    """Token stream of ``source`` without building a tree.

    Example:
        >>> [t.type.name for t in tokenize("a=1")]
        ['ELEMENT_KEY', 'EQUALS', 'ELEMENT_VALUE_TEXT']
    """
    return Lexer(source, source_name, trim_none=trim_none).tokenize()


def render(doc: Node, *, compact: bool = False, indent_width: int = DEFAULT_INDENT_WIDTH) -> str:
    """Render a document tree to xmq.

    Args:
        doc: Document (or single node) to render
        compact: Put everything on one line
        indent_width: Spaces per nesting level; negative values count as 0

    Returns:
        xmq text; ends with a newline unless compact

    Example:
        >>> render(parse("a { b = 1 }"), compact=True)
        'a{b=1}'
    """
    config = RenderConfig(compact=compact, indent_width=indent_width)
    with render_config_context(config):
        return XmqRenderer().render(doc)


class Xmq:
    """High-level xmq processor holding one set of parse and render options.

    Usage:
        >>> fmt = Xmq(indent_width=2)
        >>> print(fmt("a{b{c=1}}"), end="")
        a {
          b {
            c = 1
          }
        }

        >>> # Access the tree
        >>> fmt.parse("speed=123").root.text
        '123'

    Thread Safety:
        The configuration is immutable and applied through ContextVars for
        each call. Safe to use one instance from several threads.

    """

    __slots__ = ("_parse_config", "_render_config")

    def __init__(
        self,
        *,
        implicit_root: str | None = None,
        trim_none: bool = False,
        merge_adjacent_text: bool = True,
        compact: bool = False,
        indent_width: int = DEFAULT_INDENT_WIDTH,
    ) -> None:
        # Build immutable configs once (thread-safe, reused across calls)
        self._parse_config = ParseConfig(
            implicit_root=implicit_root,
            trim_none=trim_none,
            merge_adjacent_text=merge_adjacent_text,
        )
        self._render_config = RenderConfig(compact=compact, indent_width=indent_width)

    @property
    def parse_config(self) -> ParseConfig:
        return self._parse_config

    @property
    def render_config(self) -> RenderConfig:
        return self._render_config

    def __call__(self, source: str, source_name: str | None = None) -> str:
        """Parse and render in one call, i.e. reformat ``source``."""
        return self.render(self.parse(source, source_name))

    def parse(self, source: str, source_name: str | None = None) -> Document:
        """Parse xmq source with this instance's options."""
        return _build(source, source_name, self._parse_config)

    def render(self, doc: Node) -> str:
        """Render a tree with this instance's options."""
        with render_config_context(self._render_config):
            return XmqRenderer().render(doc)


__all__ = [
    "DEFAULT_INDENT_WIDTH",
    "Attribute",
    "BaseVisitor",
    "Comment",
    "DocType",
    "Document",
    "Element",
    "Entity",
    "ErrorKind",
    "Lexer",
    "Namespace",
    "Node",
    "ParseConfig",
    "ParseError",
    "ProcessingInstruction",
    "QName",
    "RenderConfig",
    "RenderError",
    "SourceLocation",
    "Text",
    "Token",
    "TokenPrinter",
    "TokenType",
    "TokenVisitor",
    "TreeBuilder",
    "TreeRenderer",
    "Xmq",
    "XmqError",
    "XmqRenderer",
    "__version__",
    "format_error",
    "from_dict",
    "from_json",
    "get_parse_config",
    "get_render_config",
    "parse",
    "parse_file",
    "render",
    "to_dict",
    "to_json",
    "tokenize",
    "transform",
]
