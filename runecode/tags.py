from __future__ import annotations

from enum import Enum, IntEnum

# Tag-space partition.  Each range is [start, end).
VALUE_TAGS = range(0, 16)
FUNCTION_TAGS = range(16, 32)
UNARY_MODIFIER_CODES = range(32, 40)
BINARY_MODIFIER_CODES = range(40, 256)


class Tag(IntEnum):
    """Structural discriminants that may start an item."""

    NUMBER = 0
    CHAR = 1
    STATIC_ARRAY = 2
    UNARY_APPLY = 3
    BINARY_APPLY = 4
    OPERATOR = 16
    FUNCTION_LITERAL = 17
    UNARY_MODIFIED = 18
    BINARY_MODIFIED = 19
    ATOP = 20
    FORK = 21


class TagCategory(str, Enum):
    VALUE = "value"
    FUNCTION = "function"
    UNARY_MODIFIER = "unary_modifier"
    BINARY_MODIFIER = "binary_modifier"


def category_of(tag: int) -> TagCategory:
    if not 0 <= tag <= 0xFF:
        raise ValueError(f"tag out of byte range: {tag}")
    if tag < FUNCTION_TAGS.start:
        return TagCategory.VALUE
    if tag < UNARY_MODIFIER_CODES.start:
        return TagCategory.FUNCTION
    if tag < BINARY_MODIFIER_CODES.start:
        return TagCategory.UNARY_MODIFIER
    return TagCategory.BINARY_MODIFIER


def assigned_tag(tag: int) -> bool:
    return tag in Tag._value2member_map_


__all__ = [
    "Tag",
    "TagCategory",
    "category_of",
    "assigned_tag",
    "VALUE_TAGS",
    "FUNCTION_TAGS",
    "UNARY_MODIFIER_CODES",
    "BINARY_MODIFIER_CODES",
]
