from typing import Tuple

EncodedLine = Tuple[int, bytes]  # (nbits, MSB-first bytes, zero padded)


class BitWriter:
    """Accumulates variable-length codes into MSB-first bytes."""

    def __init__(self):
        self._buf = bytearray()
        self._acc = 0
        self._pending = 0  # bits held in _acc, always < 8 between calls
        self.nbits = 0

    def write_code(self, code: int, length: int):
        """Append the low 'length' bits of code, most significant first."""
        self._acc = (self._acc << length) | (code & ((1 << length) - 1))
        self._pending += length
        self.nbits += length
        while self._pending >= 8:
            self._pending -= 8
            self._buf.append((self._acc >> self._pending) & 0xFF)
        self._acc &= (1 << self._pending) - 1

    def finish(self) -> EncodedLine:
        """Flush the partial byte (zero padded) and return (nbits, data)."""
        if self._pending:
            self._buf.append((self._acc << (8 - self._pending)) & 0xFF)
            self._acc = 0
            self._pending = 0
        return self.nbits, bytes(self._buf)


class BitReader:
    """
    Reads single bits MSB-first. With limit set, reading past 'limit' bits
    raises EOFError even if padding bits remain in the last byte.
    """

    def __init__(self, data: bytes, limit: int = None):
        self.data = data
        self.limit = len(data) * 8 if limit is None else limit
        self.pos = 0

    def read_bit(self) -> int:
        if self.pos >= self.limit or (self.pos >> 3) >= len(self.data):
            raise EOFError("Unexpected end of bitstream")
        b = (self.data[self.pos >> 3] >> (7 - (self.pos & 7))) & 1
        self.pos += 1
        return b
