from dataclasses import dataclass
from typing import Dict, List, Optional

from bteja.errors import BtejaRuntimeError
from bteja.types import TypeSpec, Value, check_value


@dataclass
class Variable:
    name: str
    type_spec: TypeSpec
    value: Optional[Value]  # None until first assigned

    def __str__(self) -> str:
        return f"{self.type_spec!r} {self.name} = {self.value!r}"


class Environment:
    """One scope frame mapping variable names to their declared slots."""
    def __init__(self, name: str = '<global>'):
        self.name = name
        self.variables: Dict[str, Variable] = {}

    def declare(self, name: str, type_spec: TypeSpec, value: Optional[Value]) -> Variable:
        if name in self.variables:
            raise BtejaRuntimeError('RedeclarationError', f"variable '{name}' is already declared")
        if value is not None:
            self.check(name, type_spec, value)
        variable = Variable(name, type_spec, value)
        self.variables[name] = variable
        return variable

    def assign(self, name: str, value: Value) -> Variable:
        variable = self.lookup(name)
        self.check(name, variable.type_spec, value)
        # Values are immutable, so assignment rebinds the slot
        variable = Variable(name, variable.type_spec, value)
        self.variables[name] = variable
        return variable

    def lookup(self, name: str) -> Variable:
        if name not in self.variables:
            raise BtejaRuntimeError('NameError', f"variable '{name}' is not declared")
        return self.variables[name]

    def get(self, name: str) -> Value:
        variable = self.lookup(name)
        if variable.value is None:
            raise BtejaRuntimeError('NameError', f"variable '{name}' is used before being assigned")
        return variable.value

    def snapshot(self) -> Dict[str, Optional[Value]]:
        return {name: variable.value for name, variable in self.variables.items()}

    @staticmethod
    def check(name: str, type_spec: TypeSpec, value: Value):
        try:
            check_value(value, type_spec)
        except TypeError as e:
            raise BtejaRuntimeError('TypeError', f"cannot bind '{name}' of type {type_spec!r}: {e}")


class CallStack:
    """Stack of environments; the bottom frame holds the globals.

    Only the top frame is visible to name lookup, so a function body sees
    its parameters and its own locals but not the caller's variables.
    """
    def __init__(self, max_depth: int = 100):
        self.max_depth = max_depth
        self.frames: List[Environment] = [Environment()]

    @property
    def globals(self) -> Environment:
        return self.frames[0]

    @property
    def current(self) -> Environment:
        return self.frames[-1]

    @property
    def depth(self) -> int:
        return len(self.frames) - 1

    def push(self, name: str) -> Environment:
        if self.depth >= self.max_depth:
            raise BtejaRuntimeError('RecursionError', f"maximum call depth ({self.max_depth}) exceeded in '{name}'")
        frame = Environment(name)
        self.frames.append(frame)
        return frame

    def pop(self) -> Environment:
        return self.frames.pop()

    def unwind(self):
        """Drop every frame above the globals."""
        del self.frames[1:]
