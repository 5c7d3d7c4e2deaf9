"""Input tree for the JSON writer.

A tree is a chain of ``JsonNode`` objects linked through ``child`` (first
child of a container) and ``next`` (following sibling). ``key`` only matters
when the parent is an object. ``value`` holds the raw text of a string, or
the pre-formatted literal of a number.

Usage:
    from treejson.nodes import JsonNode

    root = JsonNode.object(
        JsonNode.number("1", key="a"),
        JsonNode.array(JsonNode.true(), JsonNode.null(), key="b"),
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator


class NodeType(Enum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"


@dataclass(eq=False, slots=True)
class JsonNode:
    """One node of the tree handed to the writer.

    Identity-compared: two nodes are the same only if they are the same
    object, so cyclic links never recurse through ``__eq__``.
    """

    type: NodeType
    key: str | bytes | None = None
    value: str | bytes | None = None
    child: JsonNode | None = None
    next: JsonNode | None = None

    @classmethod
    def object(cls, *members: JsonNode, key: str | bytes | None = None) -> JsonNode:
        """Object node whose members are *members*; each must carry a key."""
        return cls(NodeType.OBJECT, key=key, child=link(members))

    @classmethod
    def array(cls, *items: JsonNode, key: str | bytes | None = None) -> JsonNode:
        return cls(NodeType.ARRAY, key=key, child=link(items))

    @classmethod
    def string(cls, value: str | bytes, key: str | bytes | None = None) -> JsonNode:
        return cls(NodeType.STRING, key=key, value=value)

    @classmethod
    def number(cls, literal: str | bytes, key: str | bytes | None = None) -> JsonNode:
        """Number node. *literal* is emitted verbatim and is not validated."""
        return cls(NodeType.NUMBER, key=key, value=literal)

    @classmethod
    def true(cls, key: str | bytes | None = None) -> JsonNode:
        return cls(NodeType.TRUE, key=key)

    @classmethod
    def false(cls, key: str | bytes | None = None) -> JsonNode:
        return cls(NodeType.FALSE, key=key)

    @classmethod
    def null(cls, key: str | bytes | None = None) -> JsonNode:
        return cls(NodeType.NULL, key=key)

    def iter_children(self) -> Iterator[JsonNode]:
        """Yield direct children in sibling order."""
        return iter_siblings(self.child)


def link(nodes: Iterable[JsonNode]) -> JsonNode | None:
    """Chain *nodes* through ``next`` and return the first one (None if empty).

    Raises:
        ValueError: If the same node object appears twice (that would make a cycle).
    """
    head: JsonNode | None = None
    prev: JsonNode | None = None
    seen: set[int] = set()
    for node in nodes:
        if id(node) in seen:
            raise ValueError("node appears twice in sibling list")
        seen.add(id(node))
        if prev is None:
            head = node
        else:
            prev.next = node
        prev = node
    if prev is not None:
        prev.next = None
    return head


def iter_siblings(node: JsonNode | None) -> Iterator[JsonNode]:
    """Walk a ``next`` chain starting at *node*."""
    while node is not None:
        yield node
        node = node.next
