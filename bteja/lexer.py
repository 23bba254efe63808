"""Lexical analysis for the Bteja language.

`tokenize` walks the source one character at a time and produces an
ordered list of tokens that always ends with exactly one EOF token.
Comments and whitespace produce no tokens. Numeric literals are always
emitted as INTEGER_CONSTANT, even when they contain a decimal point; the
interpreter decides the literal's type when it evaluates it.
"""

from __future__ import annotations

from typing import List

from .errors import LexError
from .tokens import KEYWORDS, SINGLE_CHAR_TOKENS, TWO_CHAR_OPERATORS, Token, TokenKind


def tokenize(source: str) -> List[Token]:
    """Convert source code into a list of tokens."""
    tokens: List[Token] = []
    i = 0
    line = 1
    length = len(source)

    def advance(n: int = 1):
        nonlocal i, line
        for _ in range(n):
            if i < length and source[i] == '\n':
                line += 1
            i += 1

    while i < length:
        c = source[i]
        if c.isspace():
            advance()
            continue
        # String literal, no escape processing
        if c == '"':
            start_i = i
            start_line = line
            advance()
            while i < length and source[i] != '"':
                advance()
            if i >= length:
                raise LexError('unterminated string literal', start_i, c, start_line)
            tokens.append(Token(TokenKind.STRING_CONSTANT, source[start_i + 1:i], start_line))
            advance()  # closing quote
            continue
        pair = source[i:i + 2]
        if pair in TWO_CHAR_OPERATORS:
            tokens.append(Token(TWO_CHAR_OPERATORS[pair], pair, line))
            advance(2)
            continue
        # Comments
        if pair == '//':
            while i < length and source[i] != '\n':
                advance()
            continue
        if pair == '/*':
            start_i = i
            start_line = line
            advance(2)
            while i < length and source[i:i + 2] != '*/':
                advance()
            if i >= length:
                raise LexError('unterminated block comment', start_i, c, start_line)
            advance(2)
            continue
        if c in SINGLE_CHAR_TOKENS:
            tokens.append(Token(SINGLE_CHAR_TOKENS[c], c, line))
            advance()
            continue
        # Identifiers or keywords
        if c.isalpha() or c == '_':
            start_i = i
            while i < length and (source[i].isalnum() or source[i] == '_'):
                advance()
            word = source[start_i:i]
            kind = KEYWORDS.get(word.lower(), TokenKind.IDENTIFIER)
            tokens.append(Token(kind, word, line))
            continue
        # Numbers: digits with at most one decimal point
        if c.isdigit():
            start_i = i
            has_dot = False
            while i < length and (source[i].isdigit() or (source[i] == '.' and not has_dot)):
                if source[i] == '.':
                    has_dot = True
                advance()
            tokens.append(Token(TokenKind.INTEGER_CONSTANT, source[start_i:i], line))
            continue
        raise LexError(f"unrecognized character {c!r}", i, c, line)
    tokens.append(Token(TokenKind.EOF, '', line))
    return tokens
