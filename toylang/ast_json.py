"""JSON serialization/deserialization for ToyLang ASTs.

This module converts between AST dataclasses and plain Python dict/list
structures suitable for JSON encoding. Each node becomes an object with a
``"type"`` key naming its class, one key per field, and its ``start`` /
``end`` offsets. The conversion round-trips every node type.
"""

from __future__ import annotations

from dataclasses import MISSING, fields
from typing import Any, Dict

from . import ast as nodes
from .ast import Node

NODE_TYPES: Dict[str, type] = {
    cls.__name__: cls
    for cls in vars(nodes).values()
    if isinstance(cls, type) and issubclass(cls, Node) and cls is not Node
}


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None or isinstance(node, (bool, int, float, str)):
        return node
    if isinstance(node, list):
        return [ast_to_obj(n) for n in node]
    if isinstance(node, Node):
        obj: Dict[str, Any] = {"type": type(node).__name__}
        for f in fields(node):
            obj[f.name] = ast_to_obj(getattr(node, f.name))
        return obj
    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, list):
        return [ast_from_obj(o) for o in obj]
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    cls = NODE_TYPES.get(t)
    if cls is None:
        raise ValueError(f"Unknown AST node type: {t}")
    values = {}
    for f in fields(cls):
        if f.name in obj:
            values[f.name] = ast_from_obj(obj[f.name])
        elif f.default is MISSING:
            raise ValueError(f"{t} object is missing field {f.name!r}")
    return cls(**values)
