"""Run all three stages and report the outcome as a value.

`execute_source` is the entry point for callers that prefer an explicit
result over exceptions:

    from bteja.pipeline import execute_source

    result = execute_source('var x: int = 5; x = x + 3;')
    if result.success:
        print(result.variables)
    else:
        print(f"{result.stage} error: {result.error}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .ast import Program
from .errors import BtejaError, BtejaRuntimeError, LexError, ParseError
from .interpreter import Interpreter
from .lexer import tokenize
from .parser import parse
from .tokens import Token
from .types import Value


@dataclass
class RunResult:
    """Outcome of running a Bteja program through the whole pipeline."""
    tokens: List[Token] = field(default_factory=list)
    program: Optional[Program] = None
    variables: Dict[str, Optional[Value]] = field(default_factory=dict)
    stage: Optional[str] = None  # 'lex', 'parse' or 'runtime' when failed
    error: Optional[BtejaError] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def error_message(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None


def execute_source(source: str, interpreter: Optional[Interpreter] = None) -> RunResult:
    """Tokenize, parse and interpret `source` without raising language errors.

    Only the outputs of the stages that completed are filled in; variables
    stay empty unless interpretation finished.
    """
    result = RunResult()
    try:
        result.tokens = tokenize(source)
    except LexError as e:
        result.stage, result.error = 'lex', e
        return result
    try:
        result.program = parse(result.tokens)
    except ParseError as e:
        result.stage, result.error = 'parse', e
        return result
    if interpreter is None:
        interpreter = Interpreter()
    try:
        result.variables = interpreter.run(result.program)
    except BtejaRuntimeError as e:
        result.stage, result.error = 'runtime', e
    return result
