"""Little-endian binary primitives shared by the encoder and decoder."""

import struct
from typing import Union

from .errors import TruncatedInput


class BufferTooShort(TruncatedInput):
    """Raised when attempting to read past the end of the buffer."""


class Decoder:
    def __init__(self, buf: Union[bytes, bytearray, memoryview], pos: int = 0) -> None:
        self.buf, self.pos = bytes(buf), pos

    def get_pos(self) -> int:
        return self.pos

    def remaining(self) -> int:
        return len(self.buf) - self.pos

    def _unpack(self, fmt: str) -> Union[int, float]:
        size = struct.calcsize(fmt)
        if len(self.buf) - self.pos < size:
            raise BufferTooShort(self.pos, size, self.remaining())
        fmt = "<" + fmt if fmt[0] != ">" else fmt
        items = struct.unpack_from(fmt, self.buf, self.pos)
        self.pos += size
        if len(items) == 1:
            return items[0]
        raise ValueError("Unpacking more than one item is not supported")

    def unsigned_byte(self) -> int:
        return self._unpack("B")  # type: ignore[return-value]

    def unsigned_quad_le(self) -> int:
        return self._unpack("Q")  # type: ignore[return-value]

    def double_le(self) -> float:
        return self._unpack("d")  # type: ignore[return-value]

    def raw(self, count: int) -> bytes:
        if len(self.buf) - self.pos < count:
            raise BufferTooShort(self.pos, count, self.remaining())
        data = self.buf[self.pos : self.pos + count]
        self.pos += count
        return data


class Encoder:
    def __init__(self) -> None:
        self.buf = bytearray()

    def _pack(self, fmt: str, item: Union[int, float]) -> None:
        offset = len(self.buf)
        self.buf += b"\x00" * struct.calcsize(fmt)
        fmt = "<" + fmt if fmt[0] != ">" else fmt
        struct.pack_into(fmt, self.buf, offset, item)

    def unsigned_byte(self, value: int) -> None:
        self._pack("B", value)

    def unsigned_quad_le(self, value: int) -> None:
        self._pack("Q", value)

    def double_le(self, value: float) -> None:
        self._pack("d", value)

    def raw(self, data: bytes) -> None:
        self.buf += data
