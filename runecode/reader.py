from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union

from .coding import Decoder


@dataclass(frozen=True)
class LayoutEntry:
    offset: int
    length: int
    kind: str
    depth: int


@dataclass
class ByteReader:
    """
    Sequential reader over a bytecode buffer.

    Wraps the little-endian primitives and optionally records where each
    decoded node starts and how many bytes it spans, so tooling can produce a
    listing without re-implementing the descent.
    """

    data: Union[bytes, bytearray, memoryview]
    start: int = 0
    record_layout: bool = False
    _decoder: Decoder = field(init=False, repr=False)
    _layout: List[LayoutEntry] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self._decoder = Decoder(self.data, self.start)

    @property
    def pos(self) -> int:
        return self._decoder.get_pos()

    def remaining(self) -> int:
        return self._decoder.remaining()

    def read_u8(self) -> int:
        return self._decoder.unsigned_byte()

    def read_u64(self) -> int:
        return self._decoder.unsigned_quad_le()

    def read_f64(self) -> float:
        return self._decoder.double_le()

    def read_bytes(self, count: int) -> bytes:
        return self._decoder.raw(count)

    def record_node(self, offset: int, kind: str, depth: int) -> None:
        if not self.record_layout:
            return
        self._layout.append(
            LayoutEntry(offset=offset, length=self.pos - offset, kind=kind, depth=depth)
        )

    def bytes_consumed(self) -> int:
        return self.pos - self.start

    def snapshot_layout(self) -> tuple[LayoutEntry, ...]:
        return tuple(self._layout)
