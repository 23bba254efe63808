"""Token definitions for the Bteja language.

The lexer produces `Token` values; their `kind` is one of the fixed
`TokenKind` members. Keywords are looked up case-insensitively in
`KEYWORDS`, an immutable table built once at import time.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import Mapping


class TokenKind(Enum):
    # Keywords
    PROGRAM = auto()
    VAR = auto()
    FUNC = auto()
    IF = auto()
    ELSE = auto()
    FOR = auto()
    TRUE = auto()
    FALSE = auto()
    RETURN = auto()

    # Type keywords
    INT = auto()
    FLOAT64 = auto()
    STRING = auto()
    BOOL = auto()

    # Operators
    ASSIGN = auto()
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    LESS = auto()
    LESS_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    EQUAL_EQUAL = auto()
    NOT_EQUAL = auto()
    BANG = auto()

    # Delimiters
    LBRACE = auto()
    RBRACE = auto()
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    COMMA = auto()
    SEMICOLON = auto()
    COLON = auto()

    # Literals
    IDENTIFIER = auto()
    INTEGER_CONSTANT = auto()
    STRING_CONSTANT = auto()

    EOF = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    line: int

    def __str__(self) -> str:
        return f"{self.kind.name} {self.text!r} (line {self.line})"


KEYWORDS: Mapping[str, TokenKind] = MappingProxyType({
    'program': TokenKind.PROGRAM,
    'var': TokenKind.VAR,
    'func': TokenKind.FUNC,
    'if': TokenKind.IF,
    'else': TokenKind.ELSE,
    'for': TokenKind.FOR,
    'true': TokenKind.TRUE,
    'false': TokenKind.FALSE,
    'int': TokenKind.INT,
    'float64': TokenKind.FLOAT64,
    'string': TokenKind.STRING,
    'bool': TokenKind.BOOL,
    'return': TokenKind.RETURN,
})

TWO_CHAR_OPERATORS: Mapping[str, TokenKind] = MappingProxyType({
    '==': TokenKind.EQUAL_EQUAL,
    '!=': TokenKind.NOT_EQUAL,
    '<=': TokenKind.LESS_EQUAL,
    '>=': TokenKind.GREATER_EQUAL,
})

SINGLE_CHAR_TOKENS: Mapping[str, TokenKind] = MappingProxyType({
    '{': TokenKind.LBRACE,
    '}': TokenKind.RBRACE,
    '(': TokenKind.LPAREN,
    ')': TokenKind.RPAREN,
    '[': TokenKind.LBRACKET,
    ']': TokenKind.RBRACKET,
    ',': TokenKind.COMMA,
    ';': TokenKind.SEMICOLON,
    ':': TokenKind.COLON,
    '=': TokenKind.ASSIGN,
    '+': TokenKind.PLUS,
    '-': TokenKind.MINUS,
    '*': TokenKind.STAR,
    '/': TokenKind.SLASH,
    '<': TokenKind.LESS,
    '>': TokenKind.GREATER,
    '!': TokenKind.BANG,
})
