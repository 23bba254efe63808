# Bteja language package
# This package provides a lexer, parser and tree-walking interpreter for the Bteja language.
from .errors import BtejaError, LexError, ParseError, BtejaRuntimeError
from .interpreter import run_program, parse_program, Interpreter
from .lexer import tokenize
from .parser import parse
from .pipeline import execute_source, RunResult

__all__ = [
    'tokenize',
    'parse',
    'parse_program',
    'run_program',
    'execute_source',
    'Interpreter',
    'RunResult',
    'BtejaError',
    'LexError',
    'ParseError',
    'BtejaRuntimeError',
]
