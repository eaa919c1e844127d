from __future__ import annotations

from ..errors import EndOfStream, InvalidBitCount

MAX_READ_BITS = 16
LITERAL_GROUP_BITS = 5


class Cursor:
    __slots__ = ("buf", "_pos", "_nbits")

    def __init__(self, data: bytes | bytearray | memoryview):
        self.buf = memoryview(data).toreadonly()
        self._pos = 0
        self._nbits = 8 * len(self.buf)

    @property
    def pos(self) -> int: return self._pos
    @property
    def bit_length(self) -> int: return self._nbits

    def tell(self) -> int: return self._pos
    def remaining(self) -> int: return self._nbits - self._pos

    # bits (MSB-first), may straddle byte boundaries
    def read_bits(self, n: int) -> int:
        if not (0 < n <= MAX_READ_BITS): raise InvalidBitCount(n)
        end = self._pos + n
        if end > self._nbits: raise EndOfStream(self._pos, n, self.remaining())
        first, last = self._pos >> 3, (end - 1) >> 3
        chunk = int.from_bytes(self.buf[first:last + 1], "big")
        shift = 8 * (last + 1) - end
        self._pos = end
        return (chunk >> shift) & ((1 << n) - 1)

    def read_literal_value(self) -> int:
        """
        Read a literal payload: 5-bit groups, top bit set while more groups
        follow, low 4 bits appended most-significant group first.
        """
        value = 0
        while True:
            group = self.read_bits(LITERAL_GROUP_BITS)
            value = (value << 4) | (group & 0xF)
            if not group & 0x10:
                return value
