"""Conversion between native Python values and ``JsonNode`` trees.

``to_tree`` is strict on purpose: anything without an unambiguous JSON
form is rejected rather than coerced.

Supported types:
    None, bool, int, float (finite only), Decimal (finite only), str, bytes,
    RawNumber, datetime, date, Enum, Path, dataclass instances, Mapping,
    list, tuple, set, frozenset, and any object with an .item() method
    (numpy/pandas scalars).

Usage:
    from treejson.convert import to_tree, from_tree, loads_tree

    root = to_tree({"a": 1, "b": [True, None]})
    from_tree(root)  # {"a": 1, "b": [True, None]}
"""

from __future__ import annotations

import dataclasses
import json
import math
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from treejson.nodes import JsonNode, NodeType, iter_siblings


class RawNumber(str):
    """A JSON number literal that is written out exactly as given."""


class _Members(list):
    """Ordered (key, value) pairs of an object; duplicate keys are kept."""


def to_tree(x: Any, key: str | bytes | None = None) -> JsonNode:
    """Build a ``JsonNode`` tree from a native Python value.

    Raises:
        ValueError: For non-finite floats or Decimals.
        TypeError: For unsupported types or dataclass classes (not instances).
    """
    if x is None:
        return JsonNode.null(key=key)
    if isinstance(x, bool):
        return JsonNode.true(key=key) if x else JsonNode.false(key=key)
    if isinstance(x, RawNumber):
        return JsonNode.number(str(x), key=key)
    if isinstance(x, int):
        return JsonNode.number(str(x), key=key)

    if isinstance(x, float):
        if not math.isfinite(x):
            raise ValueError(f"Non-finite float ({x!r}) has no JSON representation.")
        return JsonNode.number(repr(x), key=key)

    if isinstance(x, Decimal):
        if not x.is_finite():
            raise ValueError(f"Non-finite Decimal ({x!r}) has no JSON representation.")
        return JsonNode.number(str(x), key=key)

    if isinstance(x, (str, bytes)):
        return JsonNode.string(x, key=key)

    if isinstance(x, (datetime, date)):
        return JsonNode.string(x.isoformat(), key=key)

    if isinstance(x, Enum):
        return to_tree(x.value, key=key)

    if isinstance(x, Path):
        return JsonNode.string(x.as_posix(), key=key)

    if dataclasses.is_dataclass(x):
        if isinstance(x, type):
            raise TypeError("Dataclass class objects cannot be converted to JSON.")
        return to_tree(dataclasses.asdict(x), key=key)

    if isinstance(x, _Members):
        return JsonNode.object(*(to_tree(v, key=k) for k, v in x), key=key)

    if isinstance(x, Mapping):
        return JsonNode.object(
            *(to_tree(v, key=_key_text(k)) for k, v in x.items()), key=key
        )

    if isinstance(x, (list, tuple)):
        return JsonNode.array(*(to_tree(v) for v in x), key=key)

    if isinstance(x, (set, frozenset)):
        items = list(x)
        try:
            items.sort()
        except TypeError:
            items.sort(key=repr)
        return JsonNode.array(*(to_tree(v) for v in items), key=key)

    # numpy/pandas scalars (best-effort without importing numpy/pandas)
    item = getattr(x, "item", None)
    if callable(item):
        return to_tree(x.item(), key=key)

    raise TypeError(f"Unsupported type for JSON conversion: {type(x).__name__}")


def _key_text(k: Any) -> str | bytes:
    if isinstance(k, (str, bytes)):
        return k
    if isinstance(k, Enum):
        return str(k.value)
    return str(k)


def from_tree(node: JsonNode | None) -> Any:
    """Convert a single node (its siblings are ignored) back to native values.

    Strings are returned as ``str`` (bytes decoded as UTF-8 with replacement),
    numbers via ``float`` when the literal has a fraction, an exponent or is
    ``-0``, else ``int``. Later
    duplicate object keys win, as with ``json.loads``.
    """
    if node is None:
        return None
    t = node.type
    if t is NodeType.OBJECT:
        return {_text(c.key): from_tree(c) for c in node.iter_children()}
    if t is NodeType.ARRAY:
        return [from_tree(c) for c in node.iter_children()]
    if t is NodeType.STRING:
        return _text(node.value)
    if t is NodeType.NUMBER:
        literal = _text(node.value)
        # "-0" keeps its sign only as a float
        if literal == "-0" or any(c in literal for c in ".eE"):
            return float(literal)
        return int(literal)
    if t is NodeType.TRUE:
        return True
    if t is NodeType.FALSE:
        return False
    if t is NodeType.NULL:
        return None
    raise TypeError(f"unknown JSON node type: {t!r}")


def _text(v: str | bytes | None) -> str:
    if v is None:
        return ""
    if isinstance(v, bytes):
        return v.decode("utf-8", "replace")
    return v


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def loads_tree(text: str | bytes) -> JsonNode | None:
    """Parse JSON text into a tree, keeping number literals and member order.

    Parsing itself is delegated to the standard ``json`` module; numbers
    come through as ``RawNumber`` so they are re-emitted byte-for-byte.
    Empty or whitespace-only input yields None.

    Raises:
        json.JSONDecodeError: If *text* is not valid JSON.
        ValueError: For ``NaN`` / ``Infinity`` constants.
    """
    if isinstance(text, bytes):
        text = text.decode("utf-8")
    if not text.strip():
        return None
    value = json.loads(
        text,
        object_pairs_hook=_Members,
        parse_int=RawNumber,
        parse_float=RawNumber,
        parse_constant=_reject_constant,
    )
    return to_tree(value)


def count_nodes(root: JsonNode | None) -> int:
    """Number of nodes reachable from *root* through ``child`` and ``next``."""
    total = 0
    for node in iter_siblings(root):
        total += 1
        if node.child is not None:
            total += count_nodes(node.child)
    return total
