"""Atomic file output for dumped trees.

Writes go to a sibling temp file that is renamed into place, so readers
never see a partial document after a crash.

Usage:
    from treejson.json_utils import write_json_atomically

    write_json_atomically(path, root, indent=2)
"""

from __future__ import annotations

import logging
from pathlib import Path

from treejson.nodes import JsonNode
from treejson.writer import WriterOptions, dump

logger = logging.getLogger(__name__)


def write_json_atomically(
    path: Path,
    root: JsonNode | None,
    *,
    indent: int = 2,
    strict_utf8: bool = False,
    trailing_newline: bool = True,
) -> int:
    """Write the JSON text for *root* to *path* via temp-file + rename.

    Creates parent directories if they don't exist.

    Args:
        path: Target file path.
        root: Tree to serialize.
        indent: Spaces per nesting level (0 for compact).
        strict_utf8: Raise on malformed UTF-8 instead of truncating strings.
        trailing_newline: End the file with a single LF.

    Returns:
        Number of bytes written.
    """
    path = Path(path)
    data = dump(root, options=WriterOptions(indent=indent, strict_utf8=strict_utf8))
    if trailing_newline:
        data += b"\n"
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        tmp_path.write_bytes(data)
        tmp_path.replace(path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise
    logger.info("[write_json] %s (%d bytes, indent=%d)", path, len(data), indent)
    return len(data)
