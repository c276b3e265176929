"""ContextVar-based parse and render configuration for xmq.

Configuration is immutable and lives in ContextVars (PEP 567), so concurrent
parses in different threads or asyncio tasks never see each other's options.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed.

Usage:
    # Through the API (the usual way)
    doc = parse("speed=123", implicit_root="config")

    # Direct use of the lexer and builder
    from xmq.config import ParseConfig, parse_config_context

    with parse_config_context(ParseConfig(implicit_root="config")):
        builder = TreeBuilder()
        for token in Lexer(source).tokenize():
            builder.feed(token)
        doc = builder.finish()

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any

DEFAULT_INDENT_WIDTH = 4


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Immutable parse configuration.

    Attributes:
        implicit_root: Name of an element wrapping the whole document when the
            source does not start with an element of that name
        trim_none: Keep quoted text exactly as written (no incidental
            indentation removal)
        merge_adjacent_text: Join neighbouring text nodes into one

    """

    implicit_root: str | None = None
    trim_none: bool = False
    merge_adjacent_text: bool = True

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> ParseConfig:
        """Create ParseConfig from a dictionary, ignoring unknown keys.

        Example:
            >>> ParseConfig.from_dict({"implicit_root": "config", "x": 1}).implicit_root
            'config'

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        return cls(**{k: v for k, v in config_dict.items() if k in valid_fields})


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Immutable render configuration.

    Attributes:
        compact: Emit everything on one line with no inserted newlines
        indent_width: Spaces per nesting level; negative values clamp to 0

    """

    compact: bool = False
    indent_width: int = DEFAULT_INDENT_WIDTH

    def __post_init__(self) -> None:
        if self.indent_width < 0:
            object.__setattr__(self, "indent_width", 0)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> RenderConfig:
        """Create RenderConfig from a dictionary, ignoring unknown keys."""
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        return cls(**{k: v for k, v in config_dict.items() if k in valid_fields})


# Module-level defaults (reused, never recreated)
_DEFAULT_PARSE_CONFIG: ParseConfig = ParseConfig()
_DEFAULT_RENDER_CONFIG: RenderConfig = RenderConfig()

_parse_config: ContextVar[ParseConfig] = ContextVar(
    "xmq_parse_config",
    default=_DEFAULT_PARSE_CONFIG,
)
_render_config: ContextVar[RenderConfig] = ContextVar(
    "xmq_render_config",
    default=_DEFAULT_RENDER_CONFIG,
)


def get_parse_config() -> ParseConfig:
    """Get the parse configuration active in this context."""
    return _parse_config.get()


def set_parse_config(config: ParseConfig) -> None:
    """Set the parse configuration for the current context."""
    _parse_config.set(config)


def reset_parse_config() -> None:
    """Reset the parse configuration to the defaults."""
    _parse_config.set(_DEFAULT_PARSE_CONFIG)


def get_render_config() -> RenderConfig:
    """Get the render configuration active in this context."""
    return _render_config.get()


def set_render_config(config: RenderConfig) -> None:
    """Set the render configuration for the current context."""
    _render_config.set(config)


def reset_render_config() -> None:
    """Reset the render configuration to the defaults."""
    _render_config.set(_DEFAULT_RENDER_CONFIG)


@contextmanager
def parse_config_context(config: ParseConfig) -> Iterator[None]:
    """Use ``config`` for parsing inside the ``with`` block.

    The previous configuration is restored even if an exception is raised.

    """
    token = _parse_config.set(config)
    try:
        yield
    finally:
        _parse_config.reset(token)


@contextmanager
def render_config_context(config: RenderConfig) -> Iterator[None]:
    """Use ``config`` for rendering inside the ``with`` block."""
    token = _render_config.set(config)
    try:
        yield
    finally:
        _render_config.reset(token)


__all__ = [
    "DEFAULT_INDENT_WIDTH",
    "ParseConfig",
    "RenderConfig",
    "get_parse_config",
    "get_render_config",
    "parse_config_context",
    "render_config_context",
    "reset_parse_config",
    "reset_render_config",
    "set_parse_config",
    "set_render_config",
]
