"""
Opcode registry: immutable code → identity tables for operators and modifiers.

The registry knows nothing about glyphs or source text.  Identities are
enumerated names; the numeric codes only exist on the wire.  Operators carry
two independent meaning tables keyed by the same code because a single
operator denotes different operations in unary and binary position.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple, Type, Union

from .tags import TagCategory, category_of


class Category(str, Enum):
    OPERATOR = "operator"
    UNARY_MODIFIER = "unary_modifier"
    BINARY_MODIFIER = "binary_modifier"


class OperatorName(str, Enum):
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    MAXIMUM = "maximum"
    MINIMUM = "minimum"
    MODULUS = "modulus"
    EQUAL = "equal"
    NOT_EQUAL = "not_equal"
    LESS = "less"
    LESS_OR_EQUAL = "less_or_equal"
    GREATER = "greater"
    GREATER_OR_EQUAL = "greater_or_equal"
    RIGHT = "right"
    LEFT = "left"
    RANGE = "range"
    REVERSE = "reverse"
    JOIN = "join"


class UnaryModifierName(str, Enum):
    SCAN = "scan"
    FOLD = "fold"
    TABLE = "table"
    EACH = "each"
    CONSTANT = "constant"
    FLIP = "flip"
    CELLS = "cells"


class BinaryModifierName(str, Enum):
    OVER = "over"
    BESIDE = "beside"
    CHOOSE = "choose"
    CATCH = "catch"
    ATOP = "atop"
    BEFORE = "before"
    AFTER = "after"
    REPEAT = "repeat"
    UNDER = "under"


Identity = Union[OperatorName, UnaryModifierName, BinaryModifierName]

_IDENTITY_TYPES: Dict[Category, Type[Enum]] = {
    Category.OPERATOR: OperatorName,
    Category.UNARY_MODIFIER: UnaryModifierName,
    Category.BINARY_MODIFIER: BinaryModifierName,
}

_CODE_CATEGORIES = {
    Category.UNARY_MODIFIER: TagCategory.UNARY_MODIFIER,
    Category.BINARY_MODIFIER: TagCategory.BINARY_MODIFIER,
}

# (code, identity, unary meaning, binary meaning)
_OPERATOR_TABLE: Tuple[Tuple[int, OperatorName, Optional[str], Optional[str]], ...] = (
    (0x00, OperatorName.ADD, "identity", "add"),
    (0x01, OperatorName.SUBTRACT, "negate", "subtract"),
    (0x02, OperatorName.MULTIPLY, "sign", "multiply"),
    (0x03, OperatorName.DIVIDE, "reciprocal", "divide"),
    (0x04, OperatorName.MAXIMUM, "ceiling", "maximum"),
    (0x05, OperatorName.MINIMUM, "floor", "minimum"),
    (0x06, OperatorName.MODULUS, "absolute", "modulus"),
    (0x07, OperatorName.EQUAL, "rank", "equal"),
    (0x08, OperatorName.NOT_EQUAL, "length", "not_equal"),
    (0x09, OperatorName.LESS, "enclose", "less"),
    (0x0A, OperatorName.LESS_OR_EQUAL, None, "less_or_equal"),
    (0x0B, OperatorName.GREATER, "merge", "greater"),
    (0x0C, OperatorName.GREATER_OR_EQUAL, None, "greater_or_equal"),
    (0x0D, OperatorName.RIGHT, "identity", "right"),
    (0x0E, OperatorName.LEFT, "identity", "left"),
    (0x0F, OperatorName.RANGE, "range", "windows"),
    (0x10, OperatorName.REVERSE, "reverse", "rotate"),
    (0x11, OperatorName.JOIN, "join", "join_to"),
)

_UNARY_MODIFIER_TABLE: Tuple[Tuple[int, UnaryModifierName], ...] = (
    (0x20, UnaryModifierName.SCAN),
    (0x21, UnaryModifierName.FOLD),
    (0x22, UnaryModifierName.TABLE),
    (0x23, UnaryModifierName.EACH),
    (0x24, UnaryModifierName.CONSTANT),
    (0x25, UnaryModifierName.FLIP),
    (0x26, UnaryModifierName.CELLS),
)

_BINARY_MODIFIER_TABLE: Tuple[Tuple[int, BinaryModifierName], ...] = (
    (0x28, BinaryModifierName.OVER),
    (0x29, BinaryModifierName.BESIDE),
    (0x2A, BinaryModifierName.CHOOSE),
    (0x2B, BinaryModifierName.CATCH),
    (0x2C, BinaryModifierName.ATOP),
    (0x2D, BinaryModifierName.BEFORE),
    (0x2E, BinaryModifierName.AFTER),
    (0x2F, BinaryModifierName.REPEAT),
    (0x30, BinaryModifierName.UNDER),
)


def _freeze(
    category: Category, entries: Iterable[Tuple[int, Identity]]
) -> Tuple[Mapping[int, Identity], Mapping[Identity, int]]:
    identity_type = _IDENTITY_TYPES[category]
    forward: Dict[int, Identity] = {}
    reverse: Dict[Identity, int] = {}
    for code, identity in entries:
        if not 0 <= code <= 0xFF:
            raise ValueError(f"{category.value} code out of byte range: {code}")
        if not isinstance(identity, identity_type):
            raise ValueError(f"{identity!r} is not a {category.value} identity")
        expected = _CODE_CATEGORIES.get(category)
        if expected is not None and category_of(code) is not expected:
            raise ValueError(
                f"{category.value} code {code:#04x} falls in the "
                f"{category_of(code).value} range"
            )
        if code in forward:
            raise ValueError(f"duplicate {category.value} code {code:#04x}")
        if identity in reverse:
            raise ValueError(f"{identity.value} registered twice")
        forward[code] = identity
        reverse[identity] = code
    return MappingProxyType(forward), MappingProxyType(reverse)


class OpcodeRegistry:
    """Read-only opcode tables for one dialect of the bytecode."""

    def __init__(
        self,
        operators: Iterable[Tuple[int, OperatorName]],
        unary_modifiers: Iterable[Tuple[int, UnaryModifierName]],
        binary_modifiers: Iterable[Tuple[int, BinaryModifierName]],
        *,
        unary_meanings: Optional[Mapping[int, str]] = None,
        binary_meanings: Optional[Mapping[int, str]] = None,
    ) -> None:
        tables = {
            Category.OPERATOR: _freeze(Category.OPERATOR, operators),
            Category.UNARY_MODIFIER: _freeze(Category.UNARY_MODIFIER, unary_modifiers),
            Category.BINARY_MODIFIER: _freeze(
                Category.BINARY_MODIFIER, binary_modifiers
            ),
        }
        self._forward = MappingProxyType({k: v[0] for k, v in tables.items()})
        self._reverse = MappingProxyType({k: v[1] for k, v in tables.items()})
        self._unary_meanings = MappingProxyType(dict(unary_meanings or {}))
        self._binary_meanings = MappingProxyType(dict(binary_meanings or {}))

    @classmethod
    def default(cls) -> "OpcodeRegistry":
        return cls(
            operators=[(code, name) for code, name, _, _ in _OPERATOR_TABLE],
            unary_modifiers=_UNARY_MODIFIER_TABLE,
            binary_modifiers=_BINARY_MODIFIER_TABLE,
            unary_meanings={
                code: unary for code, _, unary, _ in _OPERATOR_TABLE if unary
            },
            binary_meanings={
                code: binary for code, _, _, binary in _OPERATOR_TABLE if binary
            },
        )

    def lookup(self, category: Category, code: int) -> Optional[Identity]:
        return self._forward[category].get(code)

    def code_of(self, category: Category, identity: Identity) -> int:
        try:
            return self._reverse[category][identity]
        except KeyError:
            raise KeyError(
                f"{identity!r} is not registered as a {category.value}"
            ) from None

    def all(self, category: Category) -> Tuple[Tuple[int, Identity], ...]:
        return tuple(sorted(self._forward[category].items()))

    def unary_meaning(self, code: int) -> Optional[str]:
        return self._unary_meanings.get(code)

    def binary_meaning(self, code: int) -> Optional[str]:
        return self._binary_meanings.get(code)

    def __contains__(self, item: Tuple[Category, int]) -> bool:
        category, code = item
        return code in self._forward[category]


DEFAULT_REGISTRY = OpcodeRegistry.default()


__all__ = [
    "Category",
    "OperatorName",
    "UnaryModifierName",
    "BinaryModifierName",
    "Identity",
    "OpcodeRegistry",
    "DEFAULT_REGISTRY",
]
