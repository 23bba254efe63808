"""Tree-walking interpreter for the Bteja language.

The interpreter executes a `Program` AST directly. It owns two pieces of
state: a write-once table of declared functions and a call stack of
variable environments whose bottom frame holds the globals. Running a
program returns the final mapping of global variable names to values.

Statement execution returns either None (normal completion) or a
`ReturnSignal` carrying the value of a `return` statement; `if` and `for`
pass the signal outward so that a return anywhere in a function body ends
the call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .ast import (
    Program, VariableDeclaration, Assignment, Return, If, For,
    FunctionDeclaration, FunctionCall, BinaryExpression, UnaryExpression,
    Literal, ArrayLiteral, Identifier, ArrayAccess, Node,
)
from .environment import CallStack, Environment
from .errors import BtejaRuntimeError
from .lexer import tokenize
from .parser import parse
from .types import (
    Value, IntVal, RealVal, BoolVal, StrVal, ArrayVal,
    check_value, in_int_range, resolve_literal, to_string, type_name,
)


@dataclass(frozen=True)
class ReturnSignal:
    """Result of executing a `return`; value is None for a bare return."""
    value: Optional[Value]


class Interpreter:
    """Core interpreter that executes Bteja AST."""
    def __init__(self, debug_level: int = 0, debug_file: Optional[str] = 'debug.txt',
                 max_call_depth: int = 100):
        self.functions: Dict[str, FunctionDeclaration] = {}
        self.stack = CallStack(max_call_depth)
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 and debug_file else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    @property
    def environment(self) -> Environment:
        return self.stack.current

    # Public API
    def run(self, program: Program) -> Dict[str, Optional[Value]]:
        """Execute a program and return the final global variables."""
        try:
            signal = self.execute_block(program.statements)
            if signal is not None:
                raise BtejaRuntimeError('UnsupportedNodeError', 'return statement outside of a function')
            return self.stack.globals.snapshot()
        except RecursionError:
            # Python's own stack ran out before max_call_depth was reached
            self.stack.unwind()
            raise BtejaRuntimeError('RecursionError', 'call nesting exceeded the host interpreter stack') from None
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    def execute_block(self, statements: Sequence[Node]) -> Optional[ReturnSignal]:
        for stmt in statements:
            signal = self.execute(stmt)
            if signal is not None:
                return signal
        return None

    def execute(self, node: Node) -> Optional[ReturnSignal]:
        if isinstance(node, VariableDeclaration):
            value = self.evaluate(node.initializer) if node.initializer is not None else None
            self.environment.declare(node.name, node.declared_type, value)
            if self.debug_level >= 2:
                self.debug(f"declare {node.declared_type!r} {node.name} = {to_string(value)}")
            return None
        if isinstance(node, Assignment):
            value = self.evaluate(node.value)
            self.environment.assign(node.target_name, value)
            if self.debug_level >= 2:
                self.debug(f"assign {node.target_name} = {to_string(value)}")
            return None
        if isinstance(node, FunctionDeclaration):
            if node.name in self.functions:
                raise BtejaRuntimeError('RedeclarationError', f"function '{node.name}' is already declared")
            self.functions[node.name] = node
            if self.debug_level >= 2:
                self.debug(f"define function {node.name}")
            return None
        if isinstance(node, FunctionCall):
            # result of a call statement is discarded
            self.call_function(node)
            return None
        if isinstance(node, If):
            return self.execute_if(node)
        if isinstance(node, For):
            return self.execute_for(node)
        if isinstance(node, Return):
            value = self.evaluate(node.value) if node.value is not None else None
            return ReturnSignal(value)
        raise BtejaRuntimeError('UnsupportedNodeError', f"cannot execute {type(node).__name__}")

    def execute_if(self, node: If) -> Optional[ReturnSignal]:
        if self.evaluate_condition(node.condition, 'if'):
            return self.execute_block(node.then_branch)
        if len(node.else_branch) == 1 and isinstance(node.else_branch[0], If):
            # else-if chain
            return self.execute_if(node.else_branch[0])
        return self.execute_block(node.else_branch)

    def execute_for(self, node: For) -> Optional[ReturnSignal]:
        signal = self.execute(node.init)
        if signal is not None:
            return signal
        while self.evaluate_condition(node.condition, 'for'):
            signal = self.execute_block(node.body)
            if signal is not None:
                return signal
            signal = self.execute(node.increment)
            if signal is not None:
                return signal
        return None

    def evaluate_condition(self, expr: Node, construct: str) -> bool:
        cond = self.evaluate(expr)
        if self.debug_level >= 3:
            self.debug(f"{construct} condition {to_string(cond)}")
        if not isinstance(cond, BoolVal):
            raise BtejaRuntimeError('TypeError', f"{construct} condition must evaluate to a boolean, got {type_name(cond)}")
        return cond.value

    def call_function(self, node: FunctionCall) -> Optional[Value]:
        if node.name not in self.functions:
            raise BtejaRuntimeError('NameError', f"function '{node.name}' is not defined")
        func = self.functions[node.name]
        # Arguments are evaluated in the caller's frame
        args: List[Value] = [self.evaluate(arg) for arg in node.arguments]
        if len(args) != len(func.parameters):
            raise BtejaRuntimeError(
                'ArityError',
                f"function '{func.name}' expects {len(func.parameters)} arguments, but {len(args)} were provided")
        if self.debug_level >= 1:
            self.debug(f"call {func.name}({', '.join(to_string(a) for a in args)})")
        frame = self.stack.push(func.name)
        try:
            for param, arg in zip(func.parameters, args):
                frame.declare(param.name, param.type_spec, arg)
            signal = self.execute_block(func.body)
        finally:
            self.stack.pop()
        value = signal.value if signal is not None else None
        if func.return_type is None:
            if value is not None:
                raise BtejaRuntimeError('TypeError', f"void function '{func.name}' cannot return a value")
        else:
            if value is None:
                raise BtejaRuntimeError('TypeError', f"function '{func.name}' ended without returning a value")
            try:
                check_value(value, func.return_type)
            except TypeError as e:
                raise BtejaRuntimeError('TypeError', f"return type mismatch in function '{func.name}': {e}")
        if self.debug_level >= 1:
            self.debug(f"{func.name} returned {to_string(value)}")
        return value

    def evaluate(self, node: Node) -> Value:
        if isinstance(node, Literal):
            value = resolve_literal(node.raw_text)
            if isinstance(value, IntVal) and not in_int_range(value.value):
                raise BtejaRuntimeError('OverflowError', f"integer literal {node.raw_text} is out of range")
            return value
        if isinstance(node, ArrayLiteral):
            return ArrayVal(tuple(self.evaluate(element) for element in node.elements))
        if isinstance(node, Identifier):
            return self.environment.get(node.name)
        if isinstance(node, ArrayAccess):
            return self.evaluate_array_access(node)
        if isinstance(node, BinaryExpression):
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return self.apply_binary_op(node.operator, left, right)
        if isinstance(node, UnaryExpression):
            operand = self.evaluate(node.operand)
            if node.operator == '!' and isinstance(operand, BoolVal):
                return BoolVal(not operand.value)
            raise BtejaRuntimeError(
                'TypeError', f"unsupported operand type for '{node.operator}': {type_name(operand)}")
        if isinstance(node, FunctionCall):
            value = self.call_function(node)
            if value is None:
                raise BtejaRuntimeError('TypeError', f"function '{node.name}' does not return a value")
            return value
        raise BtejaRuntimeError('UnsupportedNodeError', f"cannot evaluate {type(node).__name__}")

    def evaluate_array_access(self, node: ArrayAccess) -> Value:
        target = self.evaluate(node.array)
        if not isinstance(target, ArrayVal):
            raise BtejaRuntimeError('TypeError', f"cannot index a value of type {type_name(target)}")
        index = self.evaluate(node.index)
        if not isinstance(index, IntVal):
            raise BtejaRuntimeError('TypeError', f"array index must be an int, got {type_name(index)}")
        if index.value < 0 or index.value >= len(target.items):
            raise BtejaRuntimeError(
                'IndexError', f"array index {index.value} is out of range for length {len(target.items)}")
        return target.items[index.value]

    def apply_binary_op(self, op: str, a: Value, b: Value) -> Value:
        if isinstance(a, IntVal) and isinstance(b, IntVal):
            return self.apply_int_op(op, a.value, b.value)
        # Any real operand promotes both sides to real
        if isinstance(a, (IntVal, RealVal)) and isinstance(b, (IntVal, RealVal)):
            return self.apply_real_op(op, float(a.value), float(b.value))
        if isinstance(a, StrVal) and isinstance(b, StrVal):
            if op == '==':
                return BoolVal(a.value == b.value)
            if op == '!=':
                return BoolVal(a.value != b.value)
            raise BtejaRuntimeError('TypeError', f"unsupported operator '{op}' for {type_name(a)} operands")
        raise BtejaRuntimeError(
            'TypeError', f"unsupported operand types for '{op}': {type_name(a)} and {type_name(b)}")

    def apply_int_op(self, op: str, a: int, b: int) -> Value:
        if op == '+':
            result = a + b
        elif op == '-':
            result = a - b
        elif op == '*':
            result = a * b
        elif op == '/':
            if b == 0:
                raise BtejaRuntimeError('ZeroDivisionError', 'integer division by zero')
            # truncate toward zero
            result = abs(a) // abs(b)
            if (a < 0) != (b < 0):
                result = -result
        else:
            return self.compare(op, a, b)
        if not in_int_range(result):
            raise BtejaRuntimeError('OverflowError', f"integer result of {a} {op} {b} is out of range")
        return IntVal(result)

    def apply_real_op(self, op: str, a: float, b: float) -> Value:
        if op == '+':
            return RealVal(a + b)
        if op == '-':
            return RealVal(a - b)
        if op == '*':
            return RealVal(a * b)
        if op == '/':
            if b == 0.0:
                raise BtejaRuntimeError('ZeroDivisionError', 'real division by zero')
            return RealVal(a / b)
        return self.compare(op, a, b)

    def compare(self, op: str, a, b) -> BoolVal:
        if op == '<':
            return BoolVal(a < b)
        if op == '<=':
            return BoolVal(a <= b)
        if op == '>':
            return BoolVal(a > b)
        if op == '>=':
            return BoolVal(a >= b)
        raise BtejaRuntimeError('TypeError', f"unsupported operator '{op}' for numeric operands")


def parse_program(source: str) -> Program:
    """Tokenize and parse the given source code into a Program AST."""
    return parse(tokenize(source))


def run_program(source: str, debug_level: int = 0) -> Dict[str, Optional[Value]]:
    """Convenience function to parse and run a Bteja program from source string."""
    ast_program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    return interpreter.run(ast_program)
