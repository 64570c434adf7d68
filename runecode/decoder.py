"""
Validating bytecode decoder.

A single cursor-based recursive descent: read a discriminant, check that its
tag category is allowed at the current position, decode the operands the
variant declares and return the node.  Length prefixes are checked for
plausibility before anything is materialized and an explicit depth counter
bounds nesting, so arbitrary input either yields a tree or a
:class:`~runecode.errors.DecodeError`.
"""

from __future__ import annotations

import logging
from typing import FrozenSet, List, NamedTuple, Optional, Tuple, Union

from . import ast
from .config import DecodeLimits, load_decode_limits
from .errors import (
    DecodeError,
    ExcessiveLength,
    InvalidChar,
    MalformedTag,
    RecursionLimitExceeded,
    UnknownOpcode,
)
from .reader import ByteReader, LayoutEntry
from .registry import DEFAULT_REGISTRY, Category, Identity, OpcodeRegistry
from .tags import Tag, TagCategory, assigned_tag, category_of

logger = logging.getLogger(__name__)

Buffer = Union[bytes, bytearray, memoryview]

# Only the tag byte is guaranteed; it is read and classified before any payload.
MIN_ITEM_SIZE = 1
# Array elements carry no tag; a char payload can be a single byte.
MIN_ELEMENT_SIZE = 1


class _Slot(NamedTuple):
    name: str
    categories: FrozenSet[TagCategory]


_ITEM_SLOT = _Slot("item", frozenset({TagCategory.VALUE, TagCategory.FUNCTION}))
_VALUE_SLOT = _Slot("value", frozenset({TagCategory.VALUE}))
_FUNCTION_SLOT = _Slot("function", frozenset({TagCategory.FUNCTION}))


def _utf8_width(lead: int) -> int:
    if lead < 0x80:
        return 1
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    return 0


class ProgramReader:
    """Decodes items and programs from one buffer."""

    def __init__(
        self,
        data: Buffer,
        *,
        registry: OpcodeRegistry = DEFAULT_REGISTRY,
        limits: Optional[DecodeLimits] = None,
        start: int = 0,
        record_layout: bool = False,
    ) -> None:
        self.registry = registry
        self.limits = limits if limits is not None else load_decode_limits()
        self.reader = ByteReader(data, start=start, record_layout=record_layout)

    def read_program(self) -> ast.Program:
        start = self.reader.pos
        try:
            program = self._read_program(0)
        except DecodeError as exc:
            logger.debug("program decode failed: %s", exc)
            raise
        logger.debug(
            "decoded program of %d items (%d bytes) at offset %d",
            len(program),
            self.reader.pos - start,
            start,
        )
        return program

    def read_item(self) -> ast.Item:
        try:
            return self._read_item(0, _ITEM_SLOT)
        except DecodeError as exc:
            logger.debug("item decode failed: %s", exc)
            raise

    def bytes_consumed(self) -> int:
        return self.reader.bytes_consumed()

    def snapshot_layout(self) -> Tuple[LayoutEntry, ...]:
        return self.reader.snapshot_layout()

    # Structure

    def _read_count(self, min_size: int) -> int:
        offset = self.reader.pos
        count = self.reader.read_u64()
        limit = self.limits.max_length
        if count > limit:
            raise ExcessiveLength(count, offset, limit)
        if count * min_size > self.reader.remaining():
            raise ExcessiveLength(count, offset)
        return count

    def _read_program(self, depth: int) -> ast.Program:
        count = self._read_count(MIN_ITEM_SIZE)
        items: List[ast.Item] = []
        for _ in range(count):
            items.append(self._read_item(depth, _ITEM_SLOT))
        return tuple(items)

    def _read_item(self, depth: int, slot: _Slot) -> ast.Item:
        offset = self.reader.pos
        self._check_depth(depth, offset)
        tag = self.reader.read_u8()
        if not assigned_tag(tag) or category_of(tag) not in slot.categories:
            raise MalformedTag(tag, offset, slot.name)
        return self._read_node(Tag(tag), depth, offset)

    def _check_depth(self, depth: int, offset: int) -> None:
        if depth > self.limits.max_depth:
            raise RecursionLimitExceeded(depth, offset, self.limits.max_depth)

    def _read_node(self, tag: Tag, depth: int, offset: int) -> ast.Item:
        inner = depth + 1
        node: ast.Item
        if tag is Tag.NUMBER:
            node = ast.Number(self.reader.read_f64())
        elif tag is Tag.CHAR:
            node = self._read_char()
        elif tag is Tag.STATIC_ARRAY:
            node = self._read_array(inner)
        elif tag is Tag.UNARY_APPLY:
            node = ast.UnaryApply(
                function=self._read_item(inner, _FUNCTION_SLOT),
                operand=self._read_item(inner, _VALUE_SLOT),
            )
        elif tag is Tag.BINARY_APPLY:
            node = ast.BinaryApply(
                function=self._read_item(inner, _FUNCTION_SLOT),
                left=self._read_item(inner, _VALUE_SLOT),
                right=self._read_item(inner, _VALUE_SLOT),
            )
        elif tag is Tag.OPERATOR:
            node = ast.Operator(self._read_opcode(Category.OPERATOR))
        elif tag is Tag.FUNCTION_LITERAL:
            node = ast.FunctionLiteral(self._read_program(inner))
        elif tag is Tag.UNARY_MODIFIED:
            node = ast.UnaryModified(
                modifier=self._read_opcode(Category.UNARY_MODIFIER),
                function=self._read_item(inner, _FUNCTION_SLOT),
            )
        elif tag is Tag.BINARY_MODIFIED:
            node = ast.BinaryModified(
                modifier=self._read_opcode(Category.BINARY_MODIFIER),
                first=self._read_item(inner, _ITEM_SLOT),
                second=self._read_item(inner, _ITEM_SLOT),
            )
        elif tag is Tag.ATOP:
            node = ast.Atop(
                first=self._read_item(inner, _FUNCTION_SLOT),
                second=self._read_item(inner, _FUNCTION_SLOT),
            )
        elif tag is Tag.FORK:
            node = ast.Fork(
                left=self._read_item(inner, _ITEM_SLOT),
                center=self._read_item(inner, _FUNCTION_SLOT),
                right=self._read_item(inner, _FUNCTION_SLOT),
            )
        else:  # pragma: no cover - every assigned tag is handled above
            raise MalformedTag(tag, offset)
        self.reader.record_node(offset, tag.name.lower(), depth)
        return node

    # Payloads

    def _read_opcode(self, category: Category) -> Identity:
        offset = self.reader.pos
        code = self.reader.read_u8()
        identity = self.registry.lookup(category, code)
        if identity is None:
            raise UnknownOpcode(category.value, code, offset)
        return identity

    def _read_char(self) -> ast.Char:
        offset = self.reader.pos
        lead = self.reader.read_u8()
        width = _utf8_width(lead)
        if width == 0:
            raise InvalidChar(offset, bytes([lead]))
        raw = bytes([lead]) + self.reader.read_bytes(width - 1)
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            raise InvalidChar(offset, raw) from None
        return ast.Char(text)

    def _read_array(self, depth: int) -> ast.StaticArray:
        length_offset = self.reader.pos
        length = self.reader.read_u64()
        tag_offset = self.reader.pos
        element_tag = self.reader.read_u8()
        if not assigned_tag(element_tag) or category_of(element_tag) is not TagCategory.VALUE:
            raise MalformedTag(element_tag, tag_offset, "array element")
        limit = self.limits.max_length
        if length > limit:
            raise ExcessiveLength(length, length_offset, limit)
        if length * MIN_ELEMENT_SIZE > self.reader.remaining():
            raise ExcessiveLength(length, length_offset)
        tag = Tag(element_tag)
        items: List[ast.Item] = []
        for _ in range(length):
            offset = self.reader.pos
            self._check_depth(depth, offset)
            items.append(self._read_node(tag, depth, offset))
        return ast.StaticArray(tag, items)


def decode_program(
    data: Buffer,
    *,
    registry: OpcodeRegistry = DEFAULT_REGISTRY,
    limits: Optional[DecodeLimits] = None,
) -> Tuple[ast.Program, int]:
    """Decode a count-prefixed program; returns it with the bytes consumed."""
    reader = ProgramReader(data, registry=registry, limits=limits)
    program = reader.read_program()
    return program, reader.bytes_consumed()


def decode(
    data: Buffer,
    *,
    registry: OpcodeRegistry = DEFAULT_REGISTRY,
    limits: Optional[DecodeLimits] = None,
) -> Tuple[ast.Item, int]:
    """Decode a single tagged item; returns it with the bytes consumed."""
    reader = ProgramReader(data, registry=registry, limits=limits)
    item = reader.read_item()
    return item, reader.bytes_consumed()


__all__ = [
    "ProgramReader",
    "decode",
    "decode_program",
    "MIN_ITEM_SIZE",
    "MIN_ELEMENT_SIZE",
]
