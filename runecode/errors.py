"""Error taxonomy for bytecode decoding.

Every failure the decoder can report is a :class:`DecodeError` carrying the
absolute byte offset at which it was detected.  Encoder contract violations
are programming errors and use the built-in ``TypeError``/``ValueError``.
"""

from __future__ import annotations

from typing import Optional


class DecodeError(Exception):
    """Base class for all structural decoding failures."""

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(f"{message} at offset {offset}")
        self.message = message
        self.offset = offset


class MalformedTag(DecodeError):
    def __init__(self, tag: int, offset: int, expected: str = "item") -> None:
        super().__init__(f"malformed tag {tag:#04x} (expected {expected})", offset)
        self.tag = tag
        self.expected = expected


class UnknownOpcode(DecodeError):
    def __init__(self, category: str, code: int, offset: int) -> None:
        super().__init__(f"unknown {category} opcode {code:#04x}", offset)
        self.category = category
        self.code = code


class TruncatedInput(DecodeError):
    def __init__(self, offset: int, needed: int, available: int) -> None:
        super().__init__(
            f"truncated input: need {needed} bytes, have {available} remaining",
            offset,
        )
        self.needed = needed
        self.available = available


class ExcessiveLength(DecodeError):
    def __init__(self, declared: int, offset: int, limit: Optional[int] = None) -> None:
        detail = f" (limit {limit})" if limit is not None else ""
        super().__init__(f"declared length {declared} is implausible{detail}", offset)
        self.declared = declared
        self.limit = limit


class RecursionLimitExceeded(DecodeError):
    def __init__(self, depth: int, offset: int, limit: int) -> None:
        super().__init__(f"nesting depth {depth} exceeds limit {limit}", offset)
        self.depth = depth
        self.limit = limit


class InvalidChar(DecodeError):
    def __init__(self, offset: int, raw: bytes) -> None:
        super().__init__(f"invalid UTF-8 character payload {raw.hex()}", offset)
        self.raw = raw


__all__ = [
    "DecodeError",
    "MalformedTag",
    "UnknownOpcode",
    "TruncatedInput",
    "ExcessiveLength",
    "RecursionLimitExceeded",
    "InvalidChar",
]
