"""Abstract Syntax Tree (AST) definitions for the Bteja language.

The AST classes defined in this module represent the syntactic structure
of parsed Bteja programs. They are used by the interpreter to evaluate
Bteja code. Each node corresponds to a construct in the Bteja grammar and
is immutable once built.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .types import TypeSpec


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass(frozen=True)
class Program(Node):
    statements: Tuple[Node, ...]


@dataclass(frozen=True)
class VariableDeclaration(Node):
    name: str
    declared_type: TypeSpec
    initializer: Optional[Node]


@dataclass(frozen=True)
class Assignment(Node):
    target_name: str
    value: Node


@dataclass(frozen=True)
class Return(Node):
    value: Optional[Node]


@dataclass(frozen=True)
class If(Node):
    condition: Node
    then_branch: Tuple[Node, ...]
    else_branch: Tuple[Node, ...] = ()


@dataclass(frozen=True)
class For(Node):
    init: Node
    condition: Node
    increment: Node
    body: Tuple[Node, ...]


@dataclass(frozen=True)
class Parameter:
    type_spec: TypeSpec
    name: str


@dataclass(frozen=True)
class FunctionDeclaration(Node):
    name: str
    return_type: Optional[TypeSpec]  # None for void functions
    parameters: Tuple[Parameter, ...]
    body: Tuple[Node, ...]


@dataclass(frozen=True)
class FunctionCall(Node):
    name: str
    arguments: Tuple[Node, ...]


@dataclass(frozen=True)
class BinaryExpression(Node):
    left: Node
    operator: str
    right: Node


@dataclass(frozen=True)
class UnaryExpression(Node):
    operator: str
    operand: Node


@dataclass(frozen=True)
class Literal(Node):
    raw_text: str  # typed when evaluated, see types.resolve_literal


@dataclass(frozen=True)
class ArrayLiteral(Node):
    elements: Tuple[Node, ...]


@dataclass(frozen=True)
class Identifier(Node):
    name: str


@dataclass(frozen=True)
class ArrayAccess(Node):
    array: Union[Identifier, 'ArrayAccess']
    index: Node
