"""UTF-8 to ASCII-only JSON string escaping.

Input is decoded one byte at a time. Every character outside printable
ASCII is re-encoded as a ``\\uXXXX`` escape, with code points above U+FFFF
split into a UTF-16 surrogate pair. Malformed input is truncated at the
first defect (the quoted literal is still closed), unless ``strict`` is set,
in which case ``InvalidUTF8Error`` is raised.

Usage:
    from treejson.escape import escape_string

    escape_string("tab\\there")      # "tab\\there" with the tab escaped
    escape_string("\\U0001f600")     # surrogate pair: \\ud83d\\ude00
"""

from __future__ import annotations

import logging

from treejson.buffer import OutputBuffer

logger = logging.getLogger(__name__)

_HEX = b"0123456789abcdef"

_SHORT_ESCAPES = {
    0x08: b"\\b",
    0x0C: b"\\f",
    0x0A: b"\\n",
    0x0D: b"\\r",
    0x09: b"\\t",
}


class InvalidUTF8Error(ValueError):
    """Raised in strict mode when a string is not valid UTF-8."""

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(message)
        self.offset = offset


def to_utf8(text: str | bytes) -> bytes:
    """Return *text* as UTF-8 bytes; lone surrogates are kept as 3-byte sequences.

    Raises:
        TypeError: If *text* is not str or a bytes-like object.
    """
    if isinstance(text, str):
        return text.encode("utf-8", "surrogatepass")
    if isinstance(text, (bytes, bytearray, memoryview)):
        return bytes(text)
    raise TypeError(f"expected str or bytes, got {type(text).__name__}")


def _escape_utf16(buf: OutputBuffer, unit: int) -> None:
    buf.append_bytes(b"\\u")
    buf.append_byte(_HEX[(unit >> 12) & 0x0F])
    buf.append_byte(_HEX[(unit >> 8) & 0x0F])
    buf.append_byte(_HEX[(unit >> 4) & 0x0F])
    buf.append_byte(_HEX[unit & 0x0F])


def _decode_sequence(data: bytes, pos: int) -> tuple[int, int] | None:
    """Decode the multi-byte sequence whose lead byte sits at *pos*.

    Returns ``(code_point, next_pos)``, or None when the sequence is
    malformed or decodes to a surrogate / out-of-range value.
    """
    c = data[pos]
    if c & 0xE0 == 0xC0:
        cp, extra = c & 0x1F, 1
    elif c & 0xF0 == 0xE0:
        cp, extra = c & 0x0F, 2
    elif c & 0xF8 == 0xF0:
        cp, extra = c & 0x07, 3
    else:
        return None

    end = len(data)
    for i in range(pos + 1, pos + 1 + extra):
        # End of input and NUL both fail the continuation pattern.
        if i >= end or data[i] & 0xC0 != 0x80:
            return None
        cp = (cp << 6) | (data[i] & 0x3F)

    if 0xD800 <= cp <= 0xDFFF or cp >= 0x110000:
        return None
    return cp, pos + 1 + extra


def escape_into(buf: OutputBuffer, text: str | bytes, *, strict: bool = False) -> None:
    """Append *text* to *buf* as a double-quoted, ASCII-only JSON literal.

    A 0x00 byte ends the string. On a malformed sequence, everything from the
    defect onward is dropped and the literal is closed. With ``strict=True``
    an ``InvalidUTF8Error`` is raised instead, leaving *buf* partially written.

    Raises:
        InvalidUTF8Error: Only when *strict* is set and the input is malformed.
    """
    data = to_utf8(text)
    buf.append_byte(0x22)

    pos = 0
    end = len(data)
    while pos < end:
        c = data[pos]
        if c == 0:
            break
        if 0x20 <= c <= 0x7E:
            if c == 0x22 or c == 0x5C:
                buf.append_byte(0x5C)
            buf.append_byte(c)
            pos += 1
        elif c < 0x20 or c == 0x7F:
            short = _SHORT_ESCAPES.get(c)
            if short is not None:
                buf.append_bytes(short)
            else:
                _escape_utf16(buf, c)
            pos += 1
        else:
            decoded = _decode_sequence(data, pos)
            if decoded is None:
                if strict:
                    raise InvalidUTF8Error(
                        f"invalid UTF-8 sequence at byte offset {pos}", pos
                    )
                logger.debug(
                    "[escape] truncating string at byte %d of %d (invalid UTF-8)",
                    pos,
                    end,
                )
                break
            cp, pos = decoded
            if cp > 0xFFFF:
                v = cp - 0x10000
                _escape_utf16(buf, 0xD800 | (v >> 10))
                _escape_utf16(buf, 0xDC00 | (v & 0x3FF))
            else:
                _escape_utf16(buf, cp)

    buf.append_byte(0x22)


def escape_string(text: str | bytes, *, strict: bool = False) -> str:
    """Return the escaped JSON literal for *text* as a ``str``."""
    buf = OutputBuffer()
    escape_into(buf, text, strict=strict)
    return buf.getvalue().decode("ascii")
