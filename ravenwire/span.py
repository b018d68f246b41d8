"""A byte view stretched over several separately allocated buffers."""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterator, Sequence


class NonContiguousSpan:
    """A window over a list of buffers, indexed as one run of bytes.

    The window starts ``begin`` bytes into the first buffer and stops
    ``end`` bytes into the last one (the whole last buffer by default).
    The buffers are not copied, so writes go through to them and need
    buffers that are mutable, such as ``bytearray``.
    """

    def __init__(self, buffers: Sequence, begin: int = 0, end: int | None = None) -> None:
        self._buffers = list(buffers)
        if not self._buffers:
            raise ValueError("a span needs at least one buffer")
        first, last = self._buffers[0], self._buffers[-1]
        if end is None:
            end = len(last)
        if begin < 0 or len(first) <= begin:
            raise ValueError("begin index out of bounds")
        if end < 0 or len(last) < end:
            raise ValueError("end index out of bounds")

        # _cumulative[i] is the number of span bytes held by buffers 0..i.
        total = len(first) - begin
        cumulative = []
        for buffer in self._buffers[1:]:
            cumulative.append(total)
            total += len(buffer)
        total += end - len(last)
        if total < 0:
            raise ValueError("end index lies before begin index")
        cumulative.append(total)

        self._begin = begin
        self._cumulative = cumulative

    def __len__(self) -> int:
        return self._cumulative[-1] if self._cumulative else 0

    def _locate(self, index: int) -> tuple[int, int]:
        position = bisect_right(self._cumulative, index)
        if position:
            return position, index - self._cumulative[position - 1]
        return 0, index + self._begin

    def _normalise(self, index: int) -> int:
        size = len(self)
        if index < 0:
            index += size
        if not 0 <= index < size:
            raise IndexError("span index out of range")
        return index

    def __getitem__(self, index):
        if isinstance(index, slice):
            return bytes(self._read(i) for i in range(*index.indices(len(self))))
        return self._read(self._normalise(index))

    def _read(self, index: int) -> int:
        position, offset = self._locate(index)
        return self._buffers[position][offset]

    def __setitem__(self, index: int, value: int) -> None:
        if not 0 <= value <= 0xFF:
            raise ValueError("byte value must be in range 0..255")
        position, offset = self._locate(self._normalise(index))
        self._buffers[position][offset] = value

    def __iter__(self) -> Iterator[int]:
        for index in range(len(self)):
            yield self._read(index)

    def __bytes__(self) -> bytes:
        return self.copy_to(len(self))

    def at(self, index: int) -> int:
        """Return the byte at a non-negative ``index``, checking bounds."""
        if not 0 <= index < len(self):
            raise IndexError("span index out of range")
        return self._read(index)

    def advance(self, count: int) -> None:
        """Drop ``count`` bytes from the front of the span."""
        if count < 0:
            raise ValueError("cannot advance by a negative count")
        if count >= len(self):
            self._buffers = []
            self._cumulative = []
            self._begin = 0
            return

        new_begin = self._begin + count
        dropped = 0
        while new_begin >= len(self._buffers[dropped]):
            new_begin -= len(self._buffers[dropped])
            dropped += 1

        self._begin = new_begin
        self._buffers = self._buffers[dropped:]
        self._cumulative = [size - count for size in self._cumulative[dropped:]]

    def copy_into(self, data: bytes, at: int = 0) -> None:
        """Write ``data`` into the span starting at offset ``at``."""
        if at < 0 or at + len(data) > len(self):
            raise IndexError("write runs past the end of the span")
        for offset, value in enumerate(data, start=at):
            self[offset] = value

    def copy_to(self, count: int, start: int = 0) -> bytes:
        """Return ``count`` bytes read from offset ``start``."""
        if count < 0 or start < 0 or start + count > len(self):
            raise IndexError("read runs past the end of the span")
        return bytes(self._read(index) for index in range(start, start + count))