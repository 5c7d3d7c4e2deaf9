"""treejson — ASCII-only JSON writer for linked node trees."""

__version__ = "0.1.0"

from treejson.buffer import GROWTH_CHUNK, OutputBuffer
from treejson.convert import RawNumber, count_nodes, from_tree, loads_tree, to_tree
from treejson.escape import InvalidUTF8Error, escape_into, escape_string
from treejson.json_utils import write_json_atomically
from treejson.nodes import JsonNode, NodeType, iter_siblings, link
from treejson.writer import (
    JsonWriter,
    UnreachableNodeTypeError,
    WriterOptions,
    dump,
    dumps,
)

__all__ = [
    "GROWTH_CHUNK",
    "InvalidUTF8Error",
    "JsonNode",
    "JsonWriter",
    "NodeType",
    "OutputBuffer",
    "RawNumber",
    "UnreachableNodeTypeError",
    "WriterOptions",
    "count_nodes",
    "dump",
    "dumps",
    "escape_into",
    "escape_string",
    "from_tree",
    "iter_siblings",
    "link",
    "loads_tree",
    "to_tree",
    "write_json_atomically",
]
