"""JSON serialization/deserialization for Bteja AST.

This module converts between Bteja AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. It supports a full
round-trip for all node types and `TypeSpec`.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from .ast import (
    Program,
    VariableDeclaration,
    Assignment,
    Return,
    If,
    For,
    Parameter,
    FunctionDeclaration,
    FunctionCall,
    BinaryExpression,
    UnaryExpression,
    Literal,
    ArrayLiteral,
    Identifier,
    ArrayAccess,
)
from .types import TypeSpec


def typespec_to_obj(t: Optional[TypeSpec]) -> Optional[Dict[str, Any]]:
    if t is None:
        return None
    return {"kind": t.kind, "args": [typespec_to_obj(a) for a in t.args]}


def typespec_from_obj(o: Optional[Dict[str, Any]]) -> Optional[TypeSpec]:
    if o is None:
        return None
    return TypeSpec(o["kind"], tuple(typespec_from_obj(x) for x in o.get("args", [])))


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None
    if isinstance(node, Program):
        return {"type": "Program", "statements": [ast_to_obj(n) for n in node.statements]}
    if isinstance(node, VariableDeclaration):
        return {
            "type": "VariableDeclaration",
            "name": node.name,
            "declared_type": typespec_to_obj(node.declared_type),
            "initializer": ast_to_obj(node.initializer),
        }
    if isinstance(node, Assignment):
        return {"type": "Assignment", "target_name": node.target_name, "value": ast_to_obj(node.value)}
    if isinstance(node, Return):
        return {"type": "Return", "value": ast_to_obj(node.value)}
    if isinstance(node, If):
        return {
            "type": "If",
            "condition": ast_to_obj(node.condition),
            "then_branch": [ast_to_obj(s) for s in node.then_branch],
            "else_branch": [ast_to_obj(s) for s in node.else_branch],
        }
    if isinstance(node, For):
        return {
            "type": "For",
            "init": ast_to_obj(node.init),
            "condition": ast_to_obj(node.condition),
            "increment": ast_to_obj(node.increment),
            "body": [ast_to_obj(s) for s in node.body],
        }
    if isinstance(node, Parameter):
        return {"type": "Parameter", "type_spec": typespec_to_obj(node.type_spec), "name": node.name}
    if isinstance(node, FunctionDeclaration):
        return {
            "type": "FunctionDeclaration",
            "name": node.name,
            "return_type": typespec_to_obj(node.return_type),
            "parameters": [ast_to_obj(p) for p in node.parameters],
            "body": [ast_to_obj(s) for s in node.body],
        }
    if isinstance(node, FunctionCall):
        return {"type": "FunctionCall", "name": node.name, "arguments": [ast_to_obj(a) for a in node.arguments]}
    if isinstance(node, BinaryExpression):
        return {
            "type": "BinaryExpression",
            "left": ast_to_obj(node.left),
            "operator": node.operator,
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, UnaryExpression):
        return {"type": "UnaryExpression", "operator": node.operator, "operand": ast_to_obj(node.operand)}
    if isinstance(node, Literal):
        return {"type": "Literal", "raw_text": node.raw_text}
    if isinstance(node, ArrayLiteral):
        return {"type": "ArrayLiteral", "elements": [ast_to_obj(e) for e in node.elements]}
    if isinstance(node, Identifier):
        return {"type": "Identifier", "name": node.name}
    if isinstance(node, ArrayAccess):
        return {"type": "ArrayAccess", "array": ast_to_obj(node.array), "index": ast_to_obj(node.index)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def _nodes(objs) -> tuple:
    return tuple(ast_from_obj(o) for o in objs)


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Program":
        return Program(statements=_nodes(obj["statements"]))
    if t == "VariableDeclaration":
        return VariableDeclaration(
            name=obj["name"],
            declared_type=typespec_from_obj(obj["declared_type"]),
            initializer=ast_from_obj(obj.get("initializer")),
        )
    if t == "Assignment":
        return Assignment(target_name=obj["target_name"], value=ast_from_obj(obj["value"]))
    if t == "Return":
        return Return(value=ast_from_obj(obj.get("value")))
    if t == "If":
        return If(
            condition=ast_from_obj(obj["condition"]),
            then_branch=_nodes(obj["then_branch"]),
            else_branch=_nodes(obj.get("else_branch", [])),
        )
    if t == "For":
        return For(
            init=ast_from_obj(obj["init"]),
            condition=ast_from_obj(obj["condition"]),
            increment=ast_from_obj(obj["increment"]),
            body=_nodes(obj["body"]),
        )
    if t == "Parameter":
        return Parameter(type_spec=typespec_from_obj(obj["type_spec"]), name=obj["name"])
    if t == "FunctionDeclaration":
        return FunctionDeclaration(
            name=obj["name"],
            return_type=typespec_from_obj(obj.get("return_type")),
            parameters=_nodes(obj["parameters"]),
            body=_nodes(obj["body"]),
        )
    if t == "FunctionCall":
        return FunctionCall(name=obj["name"], arguments=_nodes(obj["arguments"]))
    if t == "BinaryExpression":
        return BinaryExpression(
            left=ast_from_obj(obj["left"]),
            operator=obj["operator"],
            right=ast_from_obj(obj["right"]),
        )
    if t == "UnaryExpression":
        return UnaryExpression(operator=obj["operator"], operand=ast_from_obj(obj["operand"]))
    if t == "Literal":
        return Literal(raw_text=obj["raw_text"])
    if t == "ArrayLiteral":
        return ArrayLiteral(elements=_nodes(obj["elements"]))
    if t == "Identifier":
        return Identifier(name=obj["name"])
    if t == "ArrayAccess":
        return ArrayAccess(array=ast_from_obj(obj["array"]), index=ast_from_obj(obj["index"]))

    raise ValueError(f"Unknown AST node type: {t}")
