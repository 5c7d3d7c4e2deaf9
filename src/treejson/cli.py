"""treejson CLI — re-emit JSON through the tree writer.

Usage:
    treejson format data.json                 Compact, ASCII-only JSON on stdout
    treejson format data.json --indent 2      Pretty-printed
    treejson format - --output out.json       Read stdin, write a file atomically
    treejson format data.json --strict        Fail on malformed UTF-8 strings
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from treejson.convert import count_nodes, loads_tree
from treejson.escape import InvalidUTF8Error
from treejson.json_utils import write_json_atomically
from treejson.writer import WriterOptions, dump

logger = logging.getLogger(__name__)


def _read_input(source: str) -> bytes:
    if source == "-":
        return sys.stdin.buffer.read()
    return Path(source).read_bytes()


def cmd_format(args: argparse.Namespace) -> int:
    try:
        root = loads_tree(_read_input(args.input))
    except (OSError, ValueError) as e:
        # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
        print(f"error: cannot read {args.input}: {e}", file=sys.stderr)
        return 2

    logger.debug("[format] parsed %d nodes from %s", count_nodes(root), args.input)

    try:
        if args.output:
            write_json_atomically(
                Path(args.output),
                root,
                indent=args.indent,
                strict_utf8=args.strict,
            )
        else:
            options = WriterOptions(indent=args.indent, strict_utf8=args.strict)
            sys.stdout.buffer.write(dump(root, options=options) + b"\n")
            sys.stdout.flush()
    except InvalidUTF8Error as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        target = args.output or "stdout"
        print(f"error: cannot write {target}: {e}", file=sys.stderr)
        return 3
    return 0


def _non_negative(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError("indent must be >= 0")
    return value


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="treejson",
        description="ASCII-only JSON writer for node trees.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command")

    fmt_p = sub.add_parser("format", help="Re-emit a JSON document")
    fmt_p.add_argument("input", help="Input JSON file, or - for stdin")
    fmt_p.add_argument("--indent", type=_non_negative, default=0)
    fmt_p.add_argument("--output", help="Write to this file instead of stdout")
    fmt_p.add_argument("--strict", action="store_true")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "format":
        rc = cmd_format(args)
        if rc:
            sys.exit(rc)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
