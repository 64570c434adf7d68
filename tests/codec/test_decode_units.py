import struct

import pytest

from runecode import ast, decode, decode_program, encode, encode_program
from runecode.config import DecodeLimits
from runecode.errors import (
    DecodeError,
    ExcessiveLength,
    InvalidChar,
    MalformedTag,
    RecursionLimitExceeded,
    TruncatedInput,
    UnknownOpcode,
)
from runecode.registry import (
    BinaryModifierName,
    OpcodeRegistry,
    OperatorName,
    UnaryModifierName,
)
from runecode.tags import Tag


def _u64(value: int) -> bytes:
    return struct.pack("<Q", value)


def _f64(value: float) -> bytes:
    return struct.pack("<d", value)


PLUS = ast.Operator(OperatorName.ADD)
IDENTITY = ast.Operator(OperatorName.RIGHT)


def test_empty_program_round_trips() -> None:
    program, consumed = decode_program(_u64(0))
    assert program == ()
    assert consumed == 8
    assert encode_program(program) == _u64(0)


def test_number_item_round_trips() -> None:
    payload = b"\x00" + _f64(3.14)
    item, consumed = decode(payload)
    assert item == ast.Number(3.14)
    assert consumed == 9
    assert encode(item) == payload


def test_unary_apply_of_operator_round_trips() -> None:
    payload = b"\x03\x10\x00\x00" + _f64(2.0)
    item, _ = decode(payload)
    assert item == ast.UnaryApply(PLUS, ast.Number(2.0))
    assert encode(item) == payload


def test_number_array_and_short_element_bytes() -> None:
    values = _f64(1.0) + _f64(2.0) + _f64(3.0)
    item, consumed = decode(b"\x02" + _u64(3) + b"\x00" + values)
    assert item == ast.StaticArray(
        Tag.NUMBER, [ast.Number(1.0), ast.Number(2.0), ast.Number(3.0)]
    )
    assert len(item.items) == 3
    assert consumed == 1 + 8 + 1 + 24

    with pytest.raises(TruncatedInput):
        decode(b"\x02" + _u64(5) + b"\x00" + values)


def test_unassigned_tag_is_malformed_at_absolute_offset() -> None:
    with pytest.raises(MalformedTag) as excinfo:
        decode(b"\xff")
    assert excinfo.value.offset == 0
    assert excinfo.value.tag == 0xFF

    with pytest.raises(MalformedTag) as excinfo:
        decode_program(_u64(1) + b"\xff")
    assert excinfo.value.offset == 8
    assert excinfo.value.tag == 0xFF


def test_single_item_program_classifies_tag_before_payload() -> None:
    with pytest.raises(MalformedTag) as excinfo:
        decode_program(_u64(1) + b"\x28")
    assert excinfo.value.offset == 8
    with pytest.raises(TruncatedInput) as excinfo:
        decode_program(_u64(1) + b"\x10")
    assert excinfo.value.offset == 9


def test_fork_value_branch_by_tag_range() -> None:
    payload = b"\x15" + b"\x00" + _f64(1.0) + b"\x10\x00" + b"\x10\x0d"
    item, _ = decode(payload)
    assert isinstance(item, ast.Fork)
    assert ast.is_value(item.left)
    assert item.left == ast.Number(1.0)
    assert item.center == PLUS
    assert item.right == IDENTITY
    assert encode(item) == payload


def test_function_in_value_or_function_slot() -> None:
    payload = b"\x13\x2c" + b"\x10\x00" + b"\x01a"
    item, _ = decode(payload)
    assert item == ast.BinaryModified(BinaryModifierName.ATOP, PLUS, ast.Char("a"))


def test_chars_of_every_width() -> None:
    for text in ("a", "é", "€", "\U0001F600"):
        encoded = b"\x01" + text.encode("utf-8")
        item, consumed = decode(encoded)
        assert item == ast.Char(text)
        assert consumed == len(encoded)


@pytest.mark.parametrize(
    "payload",
    [
        b"\x01\x80",  # continuation byte as lead
        b"\x01\xc0\x80",  # overlong lead
        b"\x01\xc3\x28",  # bad continuation
        b"\x01\xed\xa0\x80",  # surrogate
        b"\x01\xf5\x80\x80\x80",  # beyond U+10FFFF
    ],
)
def test_invalid_char_payloads(payload: bytes) -> None:
    with pytest.raises(InvalidChar) as excinfo:
        decode(payload)
    assert excinfo.value.offset == 1


def test_truncated_char_payload() -> None:
    with pytest.raises(TruncatedInput):
        decode(b"\x01\xe2\x82")


def test_trailing_bytes_are_reported_not_consumed() -> None:
    program, consumed = decode_program(_u64(1) + b"\x10\x00" + b"\xde\xad")
    assert program == (PLUS,)
    assert consumed == 10


def test_decoding_starts_from_value_slot_rules() -> None:
    # Function where a value is required.
    with pytest.raises(MalformedTag) as excinfo:
        decode(b"\x03\x10\x00\x10\x00")
    assert excinfo.value.offset == 3
    assert excinfo.value.expected == "value"
    # Value where a function is required.
    with pytest.raises(MalformedTag) as excinfo:
        decode(b"\x14\x00" + _f64(1.0) + b"\x10\x00")
    assert excinfo.value.offset == 1
    assert excinfo.value.expected == "function"


@pytest.mark.parametrize("tag", [5, 15, 22, 31, 0x20, 0x28, 0xFF])
def test_unassigned_or_modifier_tags_in_item_position(tag: int) -> None:
    with pytest.raises(MalformedTag):
        decode(bytes([tag, 0, 0, 0, 0, 0, 0, 0, 0]))


def test_array_element_tag_must_be_value_tag() -> None:
    with pytest.raises(MalformedTag) as excinfo:
        decode(b"\x02" + _u64(1) + b"\x10\x00")
    assert excinfo.value.offset == 9
    with pytest.raises(MalformedTag):
        decode(b"\x02" + _u64(0) + b"\x07")


def test_array_of_applications() -> None:
    apply = ast.UnaryApply(PLUS, ast.Number(4.0))
    array = ast.StaticArray(Tag.UNARY_APPLY, [apply, apply])
    payload = encode(array)
    assert payload[:10] == b"\x02" + _u64(2) + b"\x03"
    item, _ = decode(payload)
    assert item == array


def test_unknown_operator_opcode() -> None:
    with pytest.raises(UnknownOpcode) as excinfo:
        decode(b"\x10\xee")
    assert excinfo.value.offset == 1
    assert excinfo.value.category == "operator"
    assert excinfo.value.code == 0xEE


def test_modifier_opcodes_do_not_cross_categories() -> None:
    # FOLD (0x21) is a unary modifier; it is not a binary modifier.
    with pytest.raises(UnknownOpcode):
        decode(b"\x13\x21\x10\x00\x10\x00")
    # BESIDE (0x29) is a binary modifier; it is not a unary modifier.
    with pytest.raises(UnknownOpcode):
        decode(b"\x12\x29\x10\x00")
    # Unassigned code inside the unary range.
    with pytest.raises(UnknownOpcode):
        decode(b"\x12\x27\x10\x00")


def test_older_registry_rejects_newer_opcode() -> None:
    older = OpcodeRegistry(
        operators=[(0x00, OperatorName.ADD)],
        unary_modifiers=[(0x21, UnaryModifierName.FOLD)],
        binary_modifiers=[],
    )
    fold = ast.UnaryModified(UnaryModifierName.FOLD, PLUS)
    assert decode(encode(fold), registry=older)[0] == fold
    with pytest.raises(UnknownOpcode):
        decode(encode(ast.UnaryModified(UnaryModifierName.EACH, PLUS)), registry=older)


def test_program_count_larger_than_input_is_excessive() -> None:
    with pytest.raises(ExcessiveLength) as excinfo:
        decode_program(_u64(2**63) + b"\x10\x00")
    assert excinfo.value.offset == 0
    with pytest.raises(ExcessiveLength):
        decode_program(_u64(3) + b"\x10\x00")
    with pytest.raises(TruncatedInput) as excinfo:
        decode_program(_u64(2) + b"\x10\x00")
    assert excinfo.value.offset == 10


def test_program_count_over_configured_ceiling() -> None:
    payload = encode_program([PLUS, PLUS, PLUS])
    limits = DecodeLimits(max_length=2)
    with pytest.raises(ExcessiveLength) as excinfo:
        decode_program(payload, limits=limits)
    assert excinfo.value.limit == 2


def test_array_length_larger_than_input_is_excessive() -> None:
    with pytest.raises(ExcessiveLength) as excinfo:
        decode(b"\x02" + _u64(2**40) + b"\x01" + b"abc")
    assert excinfo.value.offset == 1


def test_truncated_function_literal() -> None:
    payload = encode(ast.FunctionLiteral([PLUS, ast.Number(1.0)]))
    for cut in range(len(payload)):
        with pytest.raises(DecodeError):
            decode(payload[:cut])


def _nested_literal(depth: int) -> ast.Item:
    node: ast.Item = PLUS
    for _ in range(depth):
        node = ast.FunctionLiteral([node])
    return node


def test_recursion_limit() -> None:
    limits = DecodeLimits(max_depth=8)
    ok = _nested_literal(8)
    assert decode(encode(ok), limits=limits)[0] == ok
    with pytest.raises(RecursionLimitExceeded) as excinfo:
        decode(encode(_nested_literal(9)), limits=limits)
    assert excinfo.value.limit == 8
    assert excinfo.value.depth == 9


def test_recursion_limit_counts_array_nesting() -> None:
    node: ast.StaticArray = ast.StaticArray(Tag.NUMBER, [ast.Number(0.0)])
    for _ in range(4):
        node = ast.StaticArray(Tag.STATIC_ARRAY, [node])
    payload = encode(node)
    assert decode(payload, limits=DecodeLimits(max_depth=5))[0] == node
    with pytest.raises(RecursionLimitExceeded):
        decode(payload, limits=DecodeLimits(max_depth=4))


def test_deep_hostile_input_fails_cleanly() -> None:
    # A long run of UnaryModified headers never reaches a leaf.
    payload = b"\x12\x21" * 10_000
    with pytest.raises(RecursionLimitExceeded):
        decode(payload, limits=DecodeLimits(max_depth=64))


def test_empty_input() -> None:
    with pytest.raises(TruncatedInput):
        decode(b"")
    with pytest.raises(TruncatedInput):
        decode_program(b"")


def test_error_message_names_offset() -> None:
    with pytest.raises(DecodeError, match="at offset 8"):
        decode_program(_u64(1) + b"\x16\x00")
