from __future__ import annotations

from functools import lru_cache, partial
from typing import Dict

from hypothesis import strategies as st

from runecode import ast
from runecode.registry import BinaryModifierName, OperatorName, UnaryModifierName
from runecode.tags import Tag

MAX_LIST = 4


def numbers() -> st.SearchStrategy[ast.Number]:
    # NaN payloads are exercised by unit tests; keep generated trees comparable.
    return st.floats(allow_nan=False, width=64).map(ast.Number)


def chars() -> st.SearchStrategy[ast.Char]:
    return st.characters(exclude_categories=("Cs",)).map(ast.Char)


def operators() -> st.SearchStrategy[ast.Operator]:
    return st.sampled_from(list(OperatorName)).map(ast.Operator)


@lru_cache(maxsize=None)
def arrays(budget: int) -> st.SearchStrategy[ast.StaticArray]:
    element_kinds: Dict[Tag, st.SearchStrategy] = {
        Tag.NUMBER: numbers(),
        Tag.CHAR: chars(),
    }
    if budget > 1:
        element_kinds[Tag.STATIC_ARRAY] = arrays(budget - 1)
        element_kinds[Tag.UNARY_APPLY] = unary_applies(budget - 1)
        element_kinds[Tag.BINARY_APPLY] = binary_applies(budget - 1)
    return st.sampled_from(sorted(element_kinds)).flatmap(
        lambda tag: st.lists(element_kinds[tag], max_size=MAX_LIST).map(
            partial(ast.StaticArray, tag)
        )
    )


@lru_cache(maxsize=None)
def unary_applies(budget: int) -> st.SearchStrategy[ast.UnaryApply]:
    return st.builds(ast.UnaryApply, functions(budget - 1), values(budget - 1))


@lru_cache(maxsize=None)
def binary_applies(budget: int) -> st.SearchStrategy[ast.BinaryApply]:
    inner = values(budget - 1)
    return st.builds(ast.BinaryApply, functions(budget - 1), inner, inner)


@lru_cache(maxsize=None)
def values(budget: int = 4) -> st.SearchStrategy:
    """Value expressions whose nesting depth is at most ``budget``."""
    leaves = st.one_of(numbers(), chars())
    if budget <= 0:
        return leaves
    return st.one_of(
        leaves,
        arrays(budget),
        unary_applies(budget),
        binary_applies(budget),
    )


@lru_cache(maxsize=None)
def functions(budget: int = 4) -> st.SearchStrategy:
    """Function expressions whose nesting depth is at most ``budget``."""
    if budget <= 0:
        return operators()
    inner_fn = functions(budget - 1)
    inner_item = items(budget - 1)
    return st.one_of(
        operators(),
        st.lists(inner_item, max_size=MAX_LIST).map(ast.FunctionLiteral),
        st.builds(ast.UnaryModified, st.sampled_from(list(UnaryModifierName)), inner_fn),
        st.builds(
            ast.BinaryModified,
            st.sampled_from(list(BinaryModifierName)),
            inner_item,
            inner_item,
        ),
        st.builds(ast.Atop, inner_fn, inner_fn),
        st.builds(ast.Fork, inner_item, inner_fn, inner_fn),
    )


@lru_cache(maxsize=None)
def items(budget: int = 4) -> st.SearchStrategy:
    return st.one_of(values(budget), functions(budget))


def programs(budget: int = 4) -> st.SearchStrategy:
    return st.lists(items(budget), max_size=MAX_LIST).map(tuple)
