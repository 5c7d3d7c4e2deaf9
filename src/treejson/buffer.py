"""Growable output buffer for the JSON writer.

The writer never reads back what it wrote, so the buffer is append-only.
Capacity is tracked explicitly so that ``used_length + free_capacity ==
total_capacity`` holds after every operation.

Usage:
    from treejson.buffer import OutputBuffer

    buf = OutputBuffer()
    buf.append_bytes(b"[1,2]")
    buf.getvalue()  # b"[1,2]"
"""

from __future__ import annotations

GROWTH_CHUNK = 256


class OutputBuffer:
    """Contiguous byte region grown in ``GROWTH_CHUNK``-sized steps."""

    __slots__ = ("_data", "_used")

    def __init__(self) -> None:
        self._data = bytearray()
        self._used = 0

    @property
    def used_length(self) -> int:
        return self._used

    @property
    def total_capacity(self) -> int:
        return len(self._data)

    @property
    def free_capacity(self) -> int:
        return len(self._data) - self._used

    def ensure_capacity(self, needed: int) -> None:
        """Guarantee room for *needed* more bytes.

        Grows by the deficit rounded up to the next multiple of
        ``GROWTH_CHUNK``. Previously written bytes are preserved.
        """
        free = self.free_capacity
        if free >= needed:
            return
        deficit = needed - free
        deficit = (deficit + GROWTH_CHUNK - 1) // GROWTH_CHUNK * GROWTH_CHUNK
        self._data.extend(bytes(deficit))

    def append_byte(self, b: int) -> None:
        self.ensure_capacity(1)
        self._data[self._used] = b
        self._used += 1

    def append_bytes(self, data: bytes) -> None:
        n = len(data)
        if n == 0:
            return
        self.ensure_capacity(n)
        self._data[self._used : self._used + n] = data
        self._used += n

    def getvalue(self) -> bytes:
        """Return a copy of the written bytes (capacity slack excluded)."""
        return bytes(self._data[: self._used])

    def __len__(self) -> int:
        return self._used
