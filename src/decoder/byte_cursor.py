"""
Forward-only big-endian reader over a bytes-like buffer.
"""
import struct

from .exceptions import TruncatedHeader

_U16 = struct.Struct("!H")
_U32 = struct.Struct("!I")


class ByteCursor:
    """
    Reads network byte-order integers and advances its own position.

    The cursor never moves backwards; ``skip`` and the ``read_*`` methods
    raise ``TruncatedHeader`` instead of reading past the end.
    """

    def __init__(self, data, position: int = 0):
        self._data = memoryview(data)
        self._position = position

    @property
    def position(self) -> int:
        return self._position

    @property
    def remaining(self) -> int:
        return len(self._data) - self._position

    def _require(self, count: int):
        if count > self.remaining:
            raise TruncatedHeader(count, self.remaining)

    def read_u8(self) -> int:
        self._require(1)
        value = self._data[self._position]
        self._position += 1
        return value

    def read_u16(self) -> int:
        self._require(2)
        value = _U16.unpack_from(self._data, self._position)[0]
        self._position += 2
        return value

    def read_u32(self) -> int:
        self._require(4)
        value = _U32.unpack_from(self._data, self._position)[0]
        self._position += 4
        return value

    def read_bytes(self, count: int) -> bytes:
        self._require(count)
        start = self._position
        self._position += count
        return self._data[start:self._position].tobytes()

    def skip(self, count: int):
        if count < 0:
            raise ValueError(f"cannot skip backwards ({count} bytes)")
        self._require(count)
        self._position += count

    def release(self):
        """Drop the buffer export so an underlying mmap can be closed."""
        self._data.release()
