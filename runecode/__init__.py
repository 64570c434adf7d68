"""
Bytecode for a glyph-based, point-free array language.

The package exposes the immutable opcode registry, the AST model, a total
encoder and a validating decoder that agree bit-for-bit on a little-endian
recursive tagged-union layout.  Glyphs, evaluation and file handling live
outside this package.
"""

from .ast import (  # noqa: F401
    Atop,
    BinaryApply,
    BinaryModified,
    Char,
    Fork,
    Function,
    FunctionLiteral,
    Item,
    Number,
    Operator,
    Program,
    StaticArray,
    UnaryApply,
    UnaryModified,
    Value,
    is_function,
    is_value,
)
from .config import DecodeLimits, load_decode_limits  # noqa: F401
from .decoder import ProgramReader, decode, decode_program  # noqa: F401
from .encoder import BytecodeWriter, encode, encode_program  # noqa: F401
from .errors import (  # noqa: F401
    DecodeError,
    ExcessiveLength,
    InvalidChar,
    MalformedTag,
    RecursionLimitExceeded,
    TruncatedInput,
    UnknownOpcode,
)
from .registry import (  # noqa: F401
    DEFAULT_REGISTRY,
    BinaryModifierName,
    Category,
    OpcodeRegistry,
    OperatorName,
    UnaryModifierName,
)
from .tags import Tag, TagCategory, category_of  # noqa: F401
from . import validate  # noqa: F401
from . import serde  # noqa: F401

__all__ = [
    "Atop",
    "BinaryApply",
    "BinaryModified",
    "Char",
    "Fork",
    "Function",
    "FunctionLiteral",
    "Item",
    "Number",
    "Operator",
    "Program",
    "StaticArray",
    "UnaryApply",
    "UnaryModified",
    "Value",
    "is_function",
    "is_value",
    "DecodeLimits",
    "load_decode_limits",
    "ProgramReader",
    "decode",
    "decode_program",
    "BytecodeWriter",
    "encode",
    "encode_program",
    "DecodeError",
    "ExcessiveLength",
    "InvalidChar",
    "MalformedTag",
    "RecursionLimitExceeded",
    "TruncatedInput",
    "UnknownOpcode",
    "DEFAULT_REGISTRY",
    "BinaryModifierName",
    "Category",
    "OpcodeRegistry",
    "OperatorName",
    "UnaryModifierName",
    "Tag",
    "TagCategory",
    "category_of",
    "validate",
    "serde",
]
