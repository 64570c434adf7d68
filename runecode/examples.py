"""Seed programs used by unit tests and tooling smoke checks."""

from __future__ import annotations

from .ast import (
    Atop,
    BinaryApply,
    BinaryModified,
    Char,
    Fork,
    FunctionLiteral,
    Number,
    Operator,
    Program,
    StaticArray,
    Tag,
    UnaryApply,
    UnaryModified,
)
from .registry import BinaryModifierName, OperatorName, UnaryModifierName


def _numbers(*values: float) -> StaticArray:
    return StaticArray(Tag.NUMBER, [Number(v) for v in values])


def sum_fold() -> Program:
    """Fold addition over a literal array: one unary application."""
    total = UnaryModified(UnaryModifierName.FOLD, Operator(OperatorName.ADD))
    return (UnaryApply(total, _numbers(1.0, 2.0, 3.0, 4.0)),)


def average_fork() -> Program:
    """(fold add) divide (length): the classic mean train."""
    mean = Fork(
        left=UnaryModified(UnaryModifierName.FOLD, Operator(OperatorName.ADD)),
        center=Operator(OperatorName.DIVIDE),
        right=Operator(OperatorName.NOT_EQUAL),
    )
    return (UnaryApply(mean, _numbers(2.0, 4.0, 9.0)),)


def negate_each() -> Program:
    negate = UnaryModified(UnaryModifierName.EACH, Operator(OperatorName.SUBTRACT))
    return (UnaryApply(negate, _numbers(-0.0, 1.5, float("inf"))),)


def char_table() -> Program:
    chars = StaticArray(Tag.CHAR, [Char("a"), Char("é"), Char("€"), Char("\U0001F600")])
    equal_table = UnaryModified(UnaryModifierName.TABLE, Operator(OperatorName.EQUAL))
    return (BinaryApply(equal_table, chars, chars),)


def nested_literal() -> Program:
    """A function literal whose body holds a train and a nested literal."""
    inner = FunctionLiteral(
        [Atop(Operator(OperatorName.REVERSE), Operator(OperatorName.RANGE))]
    )
    body = [
        Number(10.0),
        Atop(Operator(OperatorName.MULTIPLY), inner),
        StaticArray(Tag.STATIC_ARRAY, [_numbers(1.0), _numbers(), _numbers(2.0, 3.0)]),
    ]
    return (FunctionLiteral(body), FunctionLiteral(()))


def constant_beside() -> Program:
    """Binary modifiers mixing a value operand with a function operand."""
    add_two = BinaryModified(
        BinaryModifierName.BESIDE, Number(2.0), Operator(OperatorName.ADD)
    )
    over = BinaryModified(
        BinaryModifierName.OVER, Operator(OperatorName.MAXIMUM), add_two
    )
    return (BinaryApply(over, Number(1.0), Char("x")),)


ALL_SAMPLES = (
    sum_fold,
    average_fork,
    negate_each,
    char_table,
    nested_literal,
    constant_beside,
)
