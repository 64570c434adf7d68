from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar, Sequence, Tuple, Union

from .registry import BinaryModifierName, OperatorName, UnaryModifierName
from .tags import Tag, TagCategory, category_of  # noqa: F401


def _as_tuple(items: Sequence["Item"]) -> Tuple["Item", ...]:
    return tuple(items) if not isinstance(items, tuple) else items


def _float_bits(value: float) -> int:
    return struct.unpack("<Q", struct.pack("<d", value))[0]


# Value expressions


@dataclass(frozen=True, slots=True, eq=False)
class Number:
    """A binary64 literal.  Equality compares bit patterns, so NaN == NaN."""

    tag: ClassVar[Tag] = Tag.NUMBER
    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Number):
            return NotImplemented
        return _float_bits(self.value) == _float_bits(other.value)

    def __hash__(self) -> int:
        return hash((Number, _float_bits(self.value)))


@dataclass(frozen=True, slots=True)
class Char:
    tag: ClassVar[Tag] = Tag.CHAR
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or len(self.value) != 1:
            raise ValueError(f"Char must hold exactly one character: {self.value!r}")
        if 0xD800 <= ord(self.value) <= 0xDFFF:
            raise ValueError(f"Char cannot hold a surrogate: {ord(self.value):#x}")


@dataclass(frozen=True, slots=True)
class StaticArray:
    """Homogeneous array; every item is of the kind named by ``element_tag``."""

    tag: ClassVar[Tag] = Tag.STATIC_ARRAY
    element_tag: Tag
    items: Sequence["Value"] = ()

    def __post_init__(self) -> None:
        element_tag = Tag(self.element_tag)
        if category_of(element_tag) is not TagCategory.VALUE:
            raise ValueError(f"array element tag must be a value tag: {element_tag!r}")
        object.__setattr__(self, "element_tag", element_tag)
        object.__setattr__(self, "items", _as_tuple(self.items))
        for index, item in enumerate(self.items):
            if getattr(item, "tag", None) is not element_tag:
                raise ValueError(
                    f"array element {index} is {item!r}, expected {element_tag.name}"
                )


@dataclass(frozen=True, slots=True)
class UnaryApply:
    tag: ClassVar[Tag] = Tag.UNARY_APPLY
    function: "Function"
    operand: "Value"


@dataclass(frozen=True, slots=True)
class BinaryApply:
    tag: ClassVar[Tag] = Tag.BINARY_APPLY
    function: "Function"
    left: "Value"
    right: "Value"


Value = Union[Number, Char, StaticArray, UnaryApply, BinaryApply]


# Function expressions


@dataclass(frozen=True, slots=True)
class Operator:
    tag: ClassVar[Tag] = Tag.OPERATOR
    op: OperatorName


@dataclass(frozen=True, slots=True)
class FunctionLiteral:
    tag: ClassVar[Tag] = Tag.FUNCTION_LITERAL
    body: Sequence["Item"] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "body", _as_tuple(self.body))


@dataclass(frozen=True, slots=True)
class UnaryModified:
    tag: ClassVar[Tag] = Tag.UNARY_MODIFIED
    modifier: UnaryModifierName
    function: "Function"


@dataclass(frozen=True, slots=True)
class BinaryModified:
    tag: ClassVar[Tag] = Tag.BINARY_MODIFIED
    modifier: BinaryModifierName
    first: "Item"
    second: "Item"


@dataclass(frozen=True, slots=True)
class Atop:
    tag: ClassVar[Tag] = Tag.ATOP
    first: "Function"
    second: "Function"


@dataclass(frozen=True, slots=True)
class Fork:
    tag: ClassVar[Tag] = Tag.FORK
    left: "Item"
    center: "Function"
    right: "Function"


Function = Union[
    Operator,
    FunctionLiteral,
    UnaryModified,
    BinaryModified,
    Atop,
    Fork,
]

Item = Union[Value, Function]
Program = Tuple[Item, ...]

VALUE_TYPES = (Number, Char, StaticArray, UnaryApply, BinaryApply)
FUNCTION_TYPES = (Operator, FunctionLiteral, UnaryModified, BinaryModified, Atop, Fork)

NODE_TYPES = {cls.tag: cls for cls in VALUE_TYPES + FUNCTION_TYPES}


def is_value(node: object) -> bool:
    return isinstance(node, VALUE_TYPES)


def is_function(node: object) -> bool:
    return isinstance(node, FUNCTION_TYPES)


def is_item(node: object) -> bool:
    return is_value(node) or is_function(node)
