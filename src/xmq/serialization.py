"""JSON form of xmq document trees.

Every node and every small value object inside it (qualified names,
attributes, namespace declarations, locations) becomes a dict tagged with
its class name under ``_type``. Child tuples become lists. Parent links are
left out and rebuilt when a Document is loaded again.

Typical uses are storing a parsed configuration next to its source or
passing a tree to a program that reads JSON but not xmq.

Example:
    from xmq import parse
    from xmq.serialization import from_json, to_json

    doc = parse("config { speed = 123 }")
    assert from_json(to_json(doc)) == doc

Thread Safety:
    Module functions keep no state and may be called from any thread.

"""

import json
from dataclasses import fields
from typing import Any

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

_NODE_CLASSES: dict[str, type[Node]] = {
    cls.__name__: cls
    for cls in (Document, Element, Text, Comment, Entity, ProcessingInstruction, DocType)
}
_VALUE_CLASSES: dict[str, type] = {
    cls.__name__: cls for cls in (QName, Attribute, Namespace, SourceLocation)
}


def to_dict(node: Node) -> dict[str, Any]:
    """Tagged dict for ``node`` and everything below it.

    Example:
        >>> from xmq import parse
        >>> to_dict(parse("a").children[0])["name"]
        {'_type': 'QName', 'prefix': None, 'local': 'a'}

    """
    return _encode_object(node)


def _encode_object(obj: Any) -> dict[str, Any]:
    data: dict[str, Any] = {"_type": type(obj).__name__}
    data.update((f.name, _encode(getattr(obj, f.name))) for f in fields(obj) if f.init)
    return data


def _encode(value: Any) -> Any:
    if isinstance(value, tuple):
        return [_encode(item) for item in value]
    if isinstance(value, Node) or type(value).__name__ in _VALUE_CLASSES:
        return _encode_object(value)
    return value


def from_dict(data: dict[str, Any]) -> Node:
    """Node rebuilt from the output of ``to_dict``.

    Parent links are not restored here; ``from_json`` does that, or call
    ``xmq.nodes.link_parents`` on the result.

    Raises:
        ValueError: The ``_type`` tag is missing or names no node class.

    """
    tag = data.get("_type")
    if tag is None:
        msg = "Missing '_type' field in serialized node"
        raise ValueError(msg)
    if tag not in _NODE_CLASSES:
        msg = f"Unknown node type: {tag!r}"
        raise ValueError(msg)
    return _decode_object(_NODE_CLASSES[tag], data)


def _decode_object(cls: type, data: dict[str, Any]) -> Any:
    kwargs = {f.name: _decode(data[f.name]) for f in fields(cls) if f.init and f.name in data}
    return cls(**kwargs)


def _decode(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(_decode(item) for item in value)
    if not isinstance(value, dict):
        return value
    tag = value.get("_type")
    if tag in _VALUE_CLASSES:
        return _decode_object(_VALUE_CLASSES[tag], value)
    return value if tag is None else from_dict(value)


def to_json(doc: Document, *, indent: int | None = None) -> str:
    """JSON text for ``doc`` with sorted keys, so equal trees give equal text."""
    return json.dumps(to_dict(doc), sort_keys=True, indent=indent)


def from_json(data: str) -> Document:
    """Document loaded from ``to_json`` output, with parent links set.

    Raises:
        ValueError: The JSON holds something other than a Document.

    """
    doc = from_dict(json.loads(data))
    if not isinstance(doc, Document):
        msg = f"Expected Document, got {type(doc).__name__}"
        raise ValueError(msg)
    link_parents(doc)
    return doc


__all__ = ["from_dict", "from_json", "to_dict", "to_json"]
