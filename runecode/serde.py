from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List

from . import ast
from .registry import BinaryModifierName, OperatorName, UnaryModifierName
from .tags import Tag

_KIND = "type"


def item_to_dict(item: ast.Item) -> Dict[str, Any]:
    if isinstance(item, ast.Number):
        return {_KIND: "number", "value": item.value}
    if isinstance(item, ast.Char):
        return {_KIND: "char", "value": item.value}
    if isinstance(item, ast.StaticArray):
        return {
            _KIND: "array",
            "element": item.element_tag.name.lower(),
            "items": [item_to_dict(element) for element in item.items],
        }
    if isinstance(item, ast.UnaryApply):
        return {
            _KIND: "unary_apply",
            "function": item_to_dict(item.function),
            "operand": item_to_dict(item.operand),
        }
    if isinstance(item, ast.BinaryApply):
        return {
            _KIND: "binary_apply",
            "function": item_to_dict(item.function),
            "left": item_to_dict(item.left),
            "right": item_to_dict(item.right),
        }
    if isinstance(item, ast.Operator):
        return {_KIND: "operator", "op": item.op.value}
    if isinstance(item, ast.FunctionLiteral):
        return {_KIND: "function", "body": program_to_list(item.body)}
    if isinstance(item, ast.UnaryModified):
        return {
            _KIND: "unary_modified",
            "modifier": item.modifier.value,
            "function": item_to_dict(item.function),
        }
    if isinstance(item, ast.BinaryModified):
        return {
            _KIND: "binary_modified",
            "modifier": item.modifier.value,
            "first": item_to_dict(item.first),
            "second": item_to_dict(item.second),
        }
    if isinstance(item, ast.Atop):
        return {
            _KIND: "atop",
            "first": item_to_dict(item.first),
            "second": item_to_dict(item.second),
        }
    if isinstance(item, ast.Fork):
        return {
            _KIND: "fork",
            "left": item_to_dict(item.left),
            "center": item_to_dict(item.center),
            "right": item_to_dict(item.right),
        }
    raise TypeError(f"Unsupported node {item!r}")


def program_to_list(items: Iterable[ast.Item]) -> List[Dict[str, Any]]:
    return [item_to_dict(item) for item in items]


def dict_to_item(data: Dict[str, Any]) -> ast.Item:
    kind = data[_KIND]
    if kind == "number":
        return ast.Number(data["value"])
    if kind == "char":
        return ast.Char(data["value"])
    if kind == "array":
        return ast.StaticArray(
            element_tag=Tag[data["element"].upper()],
            items=[dict_to_item(element) for element in data.get("items", ())],
        )
    if kind == "unary_apply":
        return ast.UnaryApply(
            function=dict_to_item(data["function"]),
            operand=dict_to_item(data["operand"]),
        )
    if kind == "binary_apply":
        return ast.BinaryApply(
            function=dict_to_item(data["function"]),
            left=dict_to_item(data["left"]),
            right=dict_to_item(data["right"]),
        )
    if kind == "operator":
        return ast.Operator(OperatorName(data["op"]))
    if kind == "function":
        return ast.FunctionLiteral(list_to_program(data.get("body", ())))
    if kind == "unary_modified":
        return ast.UnaryModified(
            modifier=UnaryModifierName(data["modifier"]),
            function=dict_to_item(data["function"]),
        )
    if kind == "binary_modified":
        return ast.BinaryModified(
            modifier=BinaryModifierName(data["modifier"]),
            first=dict_to_item(data["first"]),
            second=dict_to_item(data["second"]),
        )
    if kind == "atop":
        return ast.Atop(
            first=dict_to_item(data["first"]),
            second=dict_to_item(data["second"]),
        )
    if kind == "fork":
        return ast.Fork(
            left=dict_to_item(data["left"]),
            center=dict_to_item(data["center"]),
            right=dict_to_item(data["right"]),
        )
    raise ValueError(f"Unknown node kind {kind}")


def list_to_program(data: Iterable[Dict[str, Any]]) -> ast.Program:
    return tuple(dict_to_item(entry) for entry in data)


def to_json(items: Iterable[ast.Item], *, indent: int = 2) -> str:
    return json.dumps(program_to_list(items), indent=indent, sort_keys=True)


def from_json(payload: str) -> ast.Program:
    return list_to_program(json.loads(payload))
