"""Type definitions and helpers for Bteja.

This module defines the runtime type system used by the Bteja interpreter:
type descriptors (`TypeSpec`), the closed set of runtime values, the
recursive compatibility check between the two, and the content-driven
resolution of literal text into values.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple

INT_MIN = -(2 ** 63)
INT_MAX = 2 ** 63 - 1

_INT_RE = re.compile(r'[+-]?\d+')
_REAL_RE = re.compile(r'[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?')


@dataclass(frozen=True)
class TypeSpec:
    """Represents a Bteja type specification.

    A type is described by its `kind` (one of 'int', 'real', 'bool',
    'string' or 'array'). Array types carry their element types in `args`.
    One entry means a homogeneous array of any length, so `[int]` becomes
    `TypeSpec('array', (TypeSpec('int'),))`. More than one entry means a
    fixed-size tuple whose elements are typed positionally, so
    `[int, string]` only accepts two-element arrays.
    """
    kind: str
    args: Tuple['TypeSpec', ...] = ()

    def __repr__(self) -> str:
        if self.kind != 'array':
            return self.kind
        return '[' + ', '.join(repr(a) for a in self.args) + ']'

    @property
    def is_tuple(self) -> bool:
        return self.kind == 'array' and len(self.args) > 1

    # Convenience constructors
    @staticmethod
    def integer() -> 'TypeSpec':
        return TypeSpec('int')

    @staticmethod
    def real() -> 'TypeSpec':
        return TypeSpec('real')

    @staticmethod
    def boolean() -> 'TypeSpec':
        return TypeSpec('bool')

    @staticmethod
    def string() -> 'TypeSpec':
        return TypeSpec('string')

    @staticmethod
    def array(*elems: 'TypeSpec') -> 'TypeSpec':
        return TypeSpec('array', tuple(elems))


class Value:
    """Base class of the runtime values. Values are immutable."""
    __slots__ = ()


@dataclass(frozen=True)
class IntVal(Value):
    value: int

    def __repr__(self) -> str:
        return f"Int({self.value})"


@dataclass(frozen=True)
class RealVal(Value):
    value: float

    def __repr__(self) -> str:
        return f"Real({self.value!r})"


@dataclass(frozen=True)
class BoolVal(Value):
    value: bool

    def __repr__(self) -> str:
        return f"Bool({self.value})"


@dataclass(frozen=True)
class StrVal(Value):
    value: str

    def __repr__(self) -> str:
        return f"Str({self.value!r})"


@dataclass(frozen=True)
class ArrayVal(Value):
    """An ordered, immutable sequence of values.

    Arrays carry no element type of their own; a declared `TypeSpec`
    decides whether a given array is acceptable.
    """
    items: Tuple[Value, ...]

    def __repr__(self) -> str:
        return f"Array({list(self.items)!r})"


def type_name(value: Optional[Value]) -> str:
    """Return the Bteja type name of a runtime value."""
    if isinstance(value, IntVal):
        return 'int'
    if isinstance(value, RealVal):
        return 'real'
    if isinstance(value, BoolVal):
        return 'bool'
    if isinstance(value, StrVal):
        return 'string'
    if isinstance(value, ArrayVal):
        return '[' + ', '.join(type_name(item) for item in value.items) + ']'
    if value is None:
        return 'void'
    return type(value).__name__


def check_value(value: Value, spec: TypeSpec) -> bool:
    """Check whether a runtime value matches a type specification.

    Returns True if the value conforms to the given type specification.
    Otherwise a TypeError (not a Bteja error) is raised with a descriptive
    message; callers turn it into a Bteja runtime error.
    """
    kind = spec.kind
    if kind == 'int':
        if isinstance(value, IntVal):
            return True
    elif kind == 'real':
        if isinstance(value, RealVal):
            return True
    elif kind == 'bool':
        if isinstance(value, BoolVal):
            return True
    elif kind == 'string':
        if isinstance(value, StrVal):
            return True
    elif kind == 'array':
        if not isinstance(value, ArrayVal):
            raise TypeError(f"expected {spec!r}, got {type_name(value)}")
        if not spec.is_tuple:
            elem_type = spec.args[0]
            for item in value.items:
                check_value(item, elem_type)
            return True
        if len(value.items) != len(spec.args):
            raise TypeError(
                f"expected {spec!r} with {len(spec.args)} elements, got {len(value.items)} elements")
        for item, elem_type in zip(value.items, spec.args):
            check_value(item, elem_type)
        return True
    else:
        raise TypeError(f"unknown type spec: {spec!r}")
    raise TypeError(f"expected {spec!r}, got {type_name(value)}")


def in_int_range(n: int) -> bool:
    return INT_MIN <= n <= INT_MAX


def resolve_literal(raw: str) -> Value:
    """Turn literal source text into a value.

    The text is tried as an integer, then as a real, then as a boolean
    (case-insensitively); anything else stays a string. The same rule
    applies to the contents of string literals.
    """
    text = raw.strip()
    if _INT_RE.fullmatch(text):
        return IntVal(int(text))
    if _REAL_RE.fullmatch(text):
        return RealVal(float(text))
    if text.lower() in ('true', 'false'):
        return BoolVal(text.lower() == 'true')
    return StrVal(raw)


def to_string(value: Optional[Value]) -> str:
    """Convert a Bteja value to its display form."""
    if value is None:
        return 'null'
    if isinstance(value, BoolVal):
        return 'true' if value.value else 'false'
    if isinstance(value, IntVal):
        return str(value.value)
    if isinstance(value, RealVal):
        return repr(value.value)
    if isinstance(value, StrVal):
        return value.value
    if isinstance(value, ArrayVal):
        return '[' + ', '.join(to_string(item) for item in value.items) + ']'
    return str(value)
