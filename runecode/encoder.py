from __future__ import annotations

import logging
from typing import Callable, Iterable, List, NamedTuple, Optional, Tuple

from . import ast
from .coding import Encoder
from .registry import DEFAULT_REGISTRY, Category, Identity, OpcodeRegistry

logger = logging.getLogger(__name__)


class _Slot(NamedTuple):
    accepts: Callable[[object], bool]
    kind: str


_ITEM = _Slot(ast.is_item, "item")
_VALUE = _Slot(ast.is_value, "value")
_FUNCTION = _Slot(ast.is_function, "function")

# (node, slot, where); a slot of None marks an untagged array element.
_Pending = Tuple[object, Optional[_Slot], str]


class BytecodeWriter:
    """
    Serializes trees into the little-endian bytecode layout.

    Counts and lengths are always taken from the in-memory structure.  A tree
    that puts a value into a function slot, or uses an identity the registry
    does not know, is a producer bug and raises ``TypeError``/``ValueError``.

    Nodes are written in pre-order from an explicit work stack, so any nesting
    depth encodes without growing the Python call stack.
    """

    def __init__(self, registry: OpcodeRegistry = DEFAULT_REGISTRY) -> None:
        self.registry = registry
        self.out = Encoder()

    def getvalue(self) -> bytes:
        return bytes(self.out.buf)

    def write_program(self, items: Iterable[ast.Item]) -> None:
        stack: List[_Pending] = []
        self._push_body(stack, items, "program item")
        self._drain(stack)

    def write_item(self, item: ast.Item) -> None:
        self._drain([(item, _ITEM, "item")])

    def _drain(self, stack: List[_Pending]) -> None:
        while stack:
            node, slot, where = stack.pop()
            if slot is None:
                self._write_payload(node, stack)
                continue
            if not slot.accepts(node):
                if slot is _ITEM:
                    raise TypeError(f"Unsupported node {node!r}")
                raise TypeError(f"{where} must be a {slot.kind} expression (got {node!r})")
            self.out.unsigned_byte(node.tag)
            self._write_payload(node, stack)

    def _push_body(self, stack: List[_Pending], items: Iterable[ast.Item], where: str) -> None:
        items = tuple(items)
        self.out.unsigned_quad_le(len(items))
        stack.extend((item, _ITEM, where) for item in reversed(items))

    def _write_opcode(self, category: Category, identity: Identity) -> None:
        try:
            code = self.registry.code_of(category, identity)
        except KeyError as exc:
            raise ValueError(str(exc.args[0])) from None
        self.out.unsigned_byte(code)

    def _write_payload(self, node: ast.Item, stack: List[_Pending]) -> None:
        """Write the fixed part of ``node`` and queue its children."""
        children: List[_Pending]
        if isinstance(node, ast.Number):
            self.out.double_le(node.value)
            return
        if isinstance(node, ast.Char):
            self.out.raw(node.value.encode("utf-8"))
            return
        if isinstance(node, ast.StaticArray):
            for element in node.items:
                if element.tag is not node.element_tag:
                    raise ValueError(
                        f"array element {element!r} does not match {node.element_tag.name}"
                    )
            self.out.unsigned_quad_le(len(node.items))
            self.out.unsigned_byte(node.element_tag)
            children = [(element, None, "array element") for element in node.items]
        elif isinstance(node, ast.UnaryApply):
            children = [
                (node.function, _FUNCTION, "unary application function"),
                (node.operand, _VALUE, "unary application operand"),
            ]
        elif isinstance(node, ast.BinaryApply):
            children = [
                (node.function, _FUNCTION, "binary application function"),
                (node.left, _VALUE, "binary application left operand"),
                (node.right, _VALUE, "binary application right operand"),
            ]
        elif isinstance(node, ast.Operator):
            self._write_opcode(Category.OPERATOR, node.op)
            return
        elif isinstance(node, ast.FunctionLiteral):
            self._push_body(stack, node.body, "function literal body item")
            return
        elif isinstance(node, ast.UnaryModified):
            self._write_opcode(Category.UNARY_MODIFIER, node.modifier)
            children = [(node.function, _FUNCTION, "unary modifier operand")]
        elif isinstance(node, ast.BinaryModified):
            self._write_opcode(Category.BINARY_MODIFIER, node.modifier)
            children = [
                (node.first, _ITEM, "binary modifier first operand"),
                (node.second, _ITEM, "binary modifier second operand"),
            ]
        elif isinstance(node, ast.Atop):
            children = [
                (node.first, _FUNCTION, "atop first function"),
                (node.second, _FUNCTION, "atop second function"),
            ]
        elif isinstance(node, ast.Fork):
            children = [
                (node.left, _ITEM, "fork left"),
                (node.center, _FUNCTION, "fork center"),
                (node.right, _FUNCTION, "fork right"),
            ]
        else:  # pragma: no cover - is_item() admits nothing else
            raise TypeError(f"Unsupported node {node!r}")
        stack.extend(reversed(children))


def encode(item: ast.Item, *, registry: OpcodeRegistry = DEFAULT_REGISTRY) -> bytes:
    writer = BytecodeWriter(registry)
    writer.write_item(item)
    return writer.getvalue()


def encode_program(
    items: Iterable[ast.Item], *, registry: OpcodeRegistry = DEFAULT_REGISTRY
) -> bytes:
    writer = BytecodeWriter(registry)
    writer.write_program(items)
    payload = writer.getvalue()
    logger.debug("encoded program into %d bytes", len(payload))
    return payload


__all__ = ["BytecodeWriter", "encode", "encode_program"]
