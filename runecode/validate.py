from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from . import ast
from .config import DecodeLimits, load_decode_limits
from .registry import DEFAULT_REGISTRY, Category, OpcodeRegistry


def iter_children(node: ast.Item) -> Iterable[Tuple[str, ast.Item]]:
    """Yield ``(field, child)`` pairs in wire order."""
    if isinstance(node, ast.StaticArray):
        for index, element in enumerate(node.items):
            yield f"items[{index}]", element
    elif isinstance(node, ast.UnaryApply):
        yield "function", node.function
        yield "operand", node.operand
    elif isinstance(node, ast.BinaryApply):
        yield "function", node.function
        yield "left", node.left
        yield "right", node.right
    elif isinstance(node, ast.FunctionLiteral):
        for index, item in enumerate(node.body):
            yield f"body[{index}]", item
    elif isinstance(node, ast.UnaryModified):
        yield "function", node.function
    elif isinstance(node, (ast.BinaryModified, ast.Atop)):
        yield "first", node.first
        yield "second", node.second
    elif isinstance(node, ast.Fork):
        yield "left", node.left
        yield "center", node.center
        yield "right", node.right


def tree_depth(node: ast.Item) -> int:
    """Nesting depth as counted by the decoder; a leaf has depth 0."""
    return max((tree_depth(child) + 1 for _, child in iter_children(node)), default=0)


_FUNCTION_FIELDS = {
    ast.UnaryApply: ("function",),
    ast.BinaryApply: ("function",),
    ast.UnaryModified: ("function",),
    ast.Atop: ("first", "second"),
    ast.Fork: ("center", "right"),
}

_VALUE_FIELDS = {
    ast.UnaryApply: ("operand",),
    ast.BinaryApply: ("left", "right"),
}


def _err(errors: List[str], path: str, message: str) -> None:
    errors.append(f"{path}: {message}")


def _check_opcode(
    node: ast.Item, path: str, registry: OpcodeRegistry, errors: List[str]
) -> None:
    if isinstance(node, ast.Operator):
        category, identity = Category.OPERATOR, node.op
    elif isinstance(node, ast.UnaryModified):
        category, identity = Category.UNARY_MODIFIER, node.modifier
    elif isinstance(node, ast.BinaryModified):
        category, identity = Category.BINARY_MODIFIER, node.modifier
    else:
        return
    try:
        registry.code_of(category, identity)
    except KeyError:
        _err(errors, path, f"{identity!r} is not a registered {category.value}")


def _validate_node(
    node: object,
    path: str,
    depth: int,
    registry: OpcodeRegistry,
    limits: DecodeLimits,
    errors: List[str],
) -> None:
    if not ast.is_item(node):
        _err(errors, path, f"unsupported node {node!r}")
        return
    if depth > limits.max_depth:
        _err(errors, path, f"nesting depth {depth} exceeds limit {limits.max_depth}")
        return
    _check_opcode(node, path, registry, errors)

    if isinstance(node, ast.StaticArray) and len(node.items) > limits.max_length:
        _err(errors, path, f"array length {len(node.items)} exceeds {limits.max_length}")
    if isinstance(node, ast.FunctionLiteral) and len(node.body) > limits.max_length:
        _err(errors, path, f"body length {len(node.body)} exceeds {limits.max_length}")

    for name in _FUNCTION_FIELDS.get(type(node), ()):
        if not ast.is_function(getattr(node, name)):
            _err(errors, f"{path}.{name}", "expected a function expression")
    for name in _VALUE_FIELDS.get(type(node), ()):
        if not ast.is_value(getattr(node, name)):
            _err(errors, f"{path}.{name}", "expected a value expression")

    for name, child in iter_children(node):
        _validate_node(child, f"{path}.{name}", depth + 1, registry, limits, errors)


def validate(
    item: ast.Item,
    *,
    registry: OpcodeRegistry = DEFAULT_REGISTRY,
    limits: Optional[DecodeLimits] = None,
    path: str = "item",
) -> List[str]:
    errors: List[str] = []
    limits = limits if limits is not None else load_decode_limits()
    _validate_node(item, path, 0, registry, limits, errors)
    return errors


def validate_program(
    items: Iterable[ast.Item],
    *,
    registry: OpcodeRegistry = DEFAULT_REGISTRY,
    limits: Optional[DecodeLimits] = None,
) -> List[str]:
    errors: List[str] = []
    limits = limits if limits is not None else load_decode_limits()
    items = tuple(items)
    if len(items) > limits.max_length:
        _err(errors, "program", f"length {len(items)} exceeds {limits.max_length}")
    for index, item in enumerate(items):
        _validate_node(item, f"program[{index}]", 0, registry, limits, errors)
    return errors


__all__ = ["validate", "validate_program", "iter_children", "tree_depth"]
