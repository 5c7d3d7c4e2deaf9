"""Push-style JSON writer.

``JsonWriter`` holds the formatting state (depth, indent width, whether the
open container is still empty, whether a key was just written) and decides
where commas, newlines and indentation go. ``dump`` walks a ``JsonNode``
tree depth-first and drives a fresh writer for each call, so concurrent
calls share nothing.

Usage:
    from treejson import JsonNode, dump

    root = JsonNode.object(JsonNode.number("1", key="a"))
    dump(root)            # b'{"a":1}'
    dump(root, indent=2)  # b'{\\n  "a": 1\\n}'
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from treejson.buffer import OutputBuffer
from treejson.escape import escape_into, to_utf8
from treejson.nodes import JsonNode, NodeType

logger = logging.getLogger(__name__)

_BLANKS = b" " * 64

_LITERALS = {
    NodeType.TRUE: b"true",
    NodeType.FALSE: b"false",
    NodeType.NULL: b"null",
}


class UnreachableNodeTypeError(AssertionError):
    """Raised when a tree node carries a type the writer does not know.

    This signals a bug in whoever built the tree, not bad data.
    """


@dataclass(frozen=True, slots=True)
class WriterOptions:
    """Output settings for one dump.

    Attributes:
        indent: Spaces per nesting level; 0 gives compact output.
        strict_utf8: Raise ``InvalidUTF8Error`` instead of truncating strings.
        null_terminated: Append a single 0x00 byte after the JSON text.
    """

    indent: int = 0
    strict_utf8: bool = False
    null_terminated: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.indent, bool) or not isinstance(self.indent, int):
            raise TypeError(f"indent must be an int, got {type(self.indent).__name__}")
        if self.indent < 0:
            raise ValueError(f"indent must be >= 0, got {self.indent}")


class JsonWriter:
    """Formatting state machine on top of an ``OutputBuffer``.

    The top level behaves like an already-open empty container, so the first
    token gets no leading separator.
    """

    def __init__(self, options: WriterOptions | None = None) -> None:
        self.options = options or WriterOptions()
        self.indent = self.options.indent
        self.depth = 0
        self.container_empty = True
        self.got_key = False
        self.buffer = OutputBuffer()

    def _value_end(self) -> None:
        if self.container_empty:
            self.container_empty = False
            if self.indent == 0 or self.depth == 0:
                return
            self.buffer.append_byte(0x0A)
        else:
            self.buffer.append_byte(0x2C)
            if self.indent == 0:
                return
            self.buffer.append_byte(0x0A)

    def _output_indent(self) -> None:
        if self.indent == 0:
            return
        if self.got_key:
            self.buffer.append_byte(0x20)
            return
        spaces = self.depth * self.indent
        while spaces >= len(_BLANKS):
            self.buffer.append_bytes(_BLANKS)
            spaces -= len(_BLANKS)
        if spaces:
            self.buffer.append_bytes(_BLANKS[:spaces])

    def begin_container(self, kind: NodeType) -> None:
        if not self.got_key:
            self._value_end()
        self._output_indent()
        self.buffer.append_byte(0x7B if kind is NodeType.OBJECT else 0x5B)
        self.container_empty = True
        self.got_key = False
        self.depth += 1

    def end_container(self, kind: NodeType) -> None:
        if self.depth == 0:
            raise RuntimeError("end_container called with no open container")
        if self.indent and not self.container_empty:
            self.buffer.append_byte(0x0A)
        self.depth -= 1
        if not self.container_empty:
            self._output_indent()
        self.buffer.append_byte(0x7D if kind is NodeType.OBJECT else 0x5D)
        self.container_empty = False
        self.got_key = False

    def object_key(self, key: str | bytes) -> None:
        self._value_end()
        self._output_indent()
        escape_into(self.buffer, key, strict=self.options.strict_utf8)
        self.buffer.append_byte(0x3A)
        self.got_key = True

    def value_raw(self, literal: str | bytes) -> None:
        """Emit *literal* verbatim (numbers, ``true``, ``false``, ``null``)."""
        if not self.got_key:
            self._value_end()
        self._output_indent()
        self.buffer.append_bytes(to_utf8(literal))
        self.got_key = False

    def value_string(self, text: str | bytes) -> None:
        if not self.got_key:
            self._value_end()
        self._output_indent()
        escape_into(self.buffer, text, strict=self.options.strict_utf8)
        self.got_key = False

    def write_tree(self, node: JsonNode | None, in_object: bool = False) -> None:
        """Emit *node* and all of its following siblings."""
        while node is not None:
            if in_object:
                if node.key is None:
                    raise ValueError("object member is missing its key")
                self.object_key(node.key)
            t = node.type
            if t is NodeType.OBJECT or t is NodeType.ARRAY:
                self.begin_container(t)
                if node.child is not None:
                    self.write_tree(node.child, t is NodeType.OBJECT)
                self.end_container(t)
            elif t is NodeType.STRING or t is NodeType.NUMBER:
                if node.value is None:
                    raise ValueError(f"{t.value} node has no value")
                if t is NodeType.STRING:
                    self.value_string(node.value)
                else:
                    self.value_raw(node.value)
            elif t in _LITERALS:
                self.value_raw(_LITERALS[t])
            else:
                raise UnreachableNodeTypeError(f"unknown JSON node type: {t!r}")
            node = node.next

    def getvalue(self) -> bytes:
        return self.buffer.getvalue()


def dump(
    root: JsonNode | None,
    indent: int = 0,
    *,
    strict_utf8: bool = False,
    null_terminated: bool = False,
    options: WriterOptions | None = None,
) -> bytes:
    """Serialize the tree at *root* (and its siblings) to ASCII JSON bytes.

    Args:
        root: First node to write; None produces empty output.
        indent: Spaces per nesting level; 0 gives compact output.
        strict_utf8: Raise on malformed UTF-8 instead of truncating.
        null_terminated: Append a 0x00 marker byte.
        options: Ready-made options; overrides the keyword arguments.

    Raises:
        InvalidUTF8Error: In strict mode, for a malformed key or string value.
        UnreachableNodeTypeError: If a node has an unknown type.
        ValueError: If an object member has no key, or a string/number no value.
    """
    if options is None:
        options = WriterOptions(
            indent=indent,
            strict_utf8=strict_utf8,
            null_terminated=null_terminated,
        )
    writer = JsonWriter(options)
    writer.write_tree(root, in_object=False)
    if options.null_terminated:
        writer.buffer.append_byte(0x00)
    out = writer.getvalue()
    logger.debug(
        "[dump] wrote %d bytes (indent=%d, capacity=%d)",
        len(out),
        options.indent,
        writer.buffer.total_capacity,
    )
    return out


def dumps(root: JsonNode | None, indent: int = 0, **kwargs) -> str:
    """Like ``dump`` but returns ``str``. The output is always pure ASCII."""
    return dump(root, indent, **kwargs).decode("ascii")
