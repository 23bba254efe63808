"""Parser for the Bteja language.

This module implements the second stage of the pipeline:

1. **Token adaptation**: the tokens produced by `bteja.lexer.tokenize` are
   fed to Lark one at a time instead of letting Lark scan text; the
   parser is configured with a pass-through lexer class for the same
   reason. Punctuation and keywords
   that carry no information are mapped to underscore-prefixed terminals
   so that Lark drops them from the parse tree. Each Lark token remembers
   the index of the Bteja token it came from in `start_pos`.

2. **Parsing**: a Lark LALR parser configured with the Bteja grammar builds
   a parse tree, which a custom transformer turns into the AST defined in
   `bteja.ast`. Operator precedence is encoded by the layering of the
   expression rules, equality binding loosest and `!` tightest; all binary
   operators are left-associative.

The `parse` function is the public entry point and returns a `Program`.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Sequence

from lark import Lark, Transformer
from lark import Token as LarkToken
from lark.exceptions import UnexpectedInput, VisitError
from lark.lexer import Lexer as LarkLexer

from .ast import (
    Program, VariableDeclaration, Assignment, Return, If, For, Parameter,
    FunctionDeclaration, FunctionCall, BinaryExpression, UnaryExpression,
    Literal, ArrayLiteral, Identifier, ArrayAccess,
)
from .errors import ParseError
from .tokens import Token, TokenKind
from .types import TypeSpec


BTEJA_GRAMMAR = r"""
    start: statement*

    // Statements
    ?statement: var_decl
              | func_decl
              | if_stmt
              | for_stmt
              | return_stmt
              | assignment
              | call_stmt

    var_decl: _VAR IDENTIFIER _COLON type_spec (_ASSIGN expression)? _SEMICOLON
    assignment: IDENTIFIER _ASSIGN expression _SEMICOLON
    call_stmt: call _SEMICOLON
    return_stmt: _RETURN expression? _SEMICOLON

    func_decl: _FUNC IDENTIFIER _LPAREN parameters _RPAREN return_type block
    parameters: (parameter (_COMMA parameter)*)?
    parameter: IDENTIFIER _COLON type_spec
    return_type: (_COLON type_spec)?

    if_stmt: _IF expression block (_ELSE (if_stmt | block))?
    for_stmt: _FOR _LPAREN statement expression _SEMICOLON statement _RPAREN block
    block: _LBRACE statement* _RBRACE

    // Type specifications
    type_spec: _LBRACKET type_spec (_COMMA type_spec)* _RBRACKET -> array_type
             | INT -> scalar_type
             | FLOAT64 -> scalar_type
             | STRING -> scalar_type
             | BOOL -> scalar_type

    // Expressions with precedence
    ?expression: equality
    ?equality: comparison ((EQUAL_EQUAL | NOT_EQUAL) comparison)*
    ?comparison: term ((LESS | LESS_EQUAL | GREATER | GREATER_EQUAL) term)*
    ?term: factor ((PLUS | MINUS) factor)*
    ?factor: unary ((STAR | SLASH) unary)*
    ?unary: BANG unary -> negation
          | primary
    ?primary: INTEGER_CONSTANT -> literal
            | STRING_CONSTANT -> literal
            | TRUE -> literal
            | FALSE -> literal
            | _LBRACKET arguments? _RBRACKET -> array_literal
            | IDENTIFIER -> identifier
            | array_access
            | call
            | _LPAREN expression _RPAREN
    array_access: IDENTIFIER _LBRACKET expression _RBRACKET
                | array_access _LBRACKET expression _RBRACKET
    call: IDENTIFIER _LPAREN arguments? _RPAREN
    arguments: expression (_COMMA expression)*

    // Terminals come from bteja.lexer
    %declare _VAR _FUNC _IF _ELSE _FOR _RETURN
    %declare _LBRACE _RBRACE _LPAREN _RPAREN _LBRACKET _RBRACKET
    %declare _COMMA _SEMICOLON _COLON _ASSIGN
    %declare IDENTIFIER INTEGER_CONSTANT STRING_CONSTANT TRUE FALSE
    %declare INT FLOAT64 STRING BOOL
    %declare PLUS MINUS STAR SLASH BANG
    %declare LESS LESS_EQUAL GREATER GREATER_EQUAL EQUAL_EQUAL NOT_EQUAL
"""

# Tokens whose text the AST never needs.
_DISCARDED = frozenset({
    TokenKind.VAR, TokenKind.FUNC, TokenKind.IF, TokenKind.ELSE,
    TokenKind.FOR, TokenKind.RETURN, TokenKind.LBRACE, TokenKind.RBRACE,
    TokenKind.LPAREN, TokenKind.RPAREN, TokenKind.LBRACKET, TokenKind.RBRACKET,
    TokenKind.COMMA, TokenKind.SEMICOLON, TokenKind.COLON, TokenKind.ASSIGN,
})

_SCALAR_TYPES = {
    'INT': TypeSpec.integer(),
    'FLOAT64': TypeSpec.real(),
    'STRING': TypeSpec.string(),
    'BOOL': TypeSpec.boolean(),
}


def terminal_name(kind: TokenKind) -> str:
    """Name of the grammar terminal a token kind is fed to Lark as."""
    return '_' + kind.name if kind in _DISCARDED else kind.name


def lark_tokens(tokens: Sequence[Token]) -> Iterator[LarkToken]:
    """Yield the Lark form of every token before EOF."""
    for index, token in enumerate(tokens):
        if token.kind is TokenKind.EOF:
            break
        yield LarkToken(terminal_name(token.kind), token.text, start_pos=index, line=token.line)


class TokenStreamLexer(LarkLexer):
    """Lark lexer that replays an already tokenized Bteja program."""

    def __init__(self, lexer_conf):
        pass

    def lex(self, data: Sequence[Token]) -> Iterator[LarkToken]:
        return lark_tokens(data)


BTEJA_PARSER = Lark(
    BTEJA_GRAMMAR,
    parser='lalr',
    lexer=TokenStreamLexer,
    maybe_placeholders=False,
)


class ASTTransformer(Transformer):
    """Transforms the raw parse tree into an AST."""

    def __init__(self, tokens: Sequence[Token]):
        super().__init__()
        self.tokens = tokens

    def source_token(self, lark_token: LarkToken) -> Token:
        return self.tokens[lark_token.start_pos]

    def start(self, items):
        return Program(tuple(items))

    def var_decl(self, items):
        name = str(items[0])
        declared_type = items[1]
        initializer = items[2] if len(items) > 2 else None
        return VariableDeclaration(name, declared_type, initializer)

    def assignment(self, items):
        return Assignment(str(items[0]), items[1])

    def call_stmt(self, items):
        return items[0]

    def return_stmt(self, items):
        return Return(items[0] if items else None)

    def func_decl(self, items):
        name_token, parameters, return_type, body = items
        # A non-void function needs a return among its own top-level
        # statements; returns nested in if/for bodies do not count.
        if return_type is not None and not any(isinstance(stmt, Return) for stmt in body):
            raise ParseError(
                f"Function '{name_token}' with return type '{return_type!r}' must have a return statement",
                self.source_token(name_token),
            )
        return FunctionDeclaration(str(name_token), return_type, parameters, body)

    def parameters(self, items):
        return tuple(items)

    def parameter(self, items):
        return Parameter(items[1], str(items[0]))

    def return_type(self, items):
        return items[0] if items else None

    def if_stmt(self, items):
        condition = items[0]
        then_branch = items[1]
        else_branch: tuple = ()
        if len(items) > 2:
            else_part = items[2]
            # `else if` becomes an else branch holding the single nested If
            else_branch = (else_part,) if isinstance(else_part, If) else else_part
        return If(condition, then_branch, else_branch)

    def for_stmt(self, items):
        init, condition, increment, body = items
        return For(init, condition, increment, body)

    def block(self, items):
        return tuple(items)

    # Types
    def array_type(self, items):
        return TypeSpec.array(*items)

    def scalar_type(self, items):
        return _SCALAR_TYPES[items[0].type]

    # Expressions
    def binary_chain(self, items):
        # items pattern: expr (op expr)*, folded left-associatively
        left = items[0]
        i = 1
        while i < len(items):
            left = BinaryExpression(left, str(items[i]), items[i + 1])
            i += 2
        return left

    equality = binary_chain
    comparison = binary_chain
    term = binary_chain
    factor = binary_chain

    def negation(self, items):
        return UnaryExpression(str(items[0]), items[1])

    def literal(self, items):
        return Literal(str(items[0]))

    def array_literal(self, items):
        return ArrayLiteral(items[0] if items else ())

    def identifier(self, items):
        return Identifier(str(items[0]))

    def array_access(self, items):
        target, index = items
        if isinstance(target, LarkToken):
            target = Identifier(str(target))
        return ArrayAccess(target, index)

    def call(self, items):
        name = str(items[0])
        arguments = items[1] if len(items) > 1 else ()
        return FunctionCall(name, arguments)

    def arguments(self, items):
        return tuple(items)


def _describe_expected(expected) -> str:
    names = sorted(name.lstrip('_') for name in expected)
    return ', '.join(names)


def parse(tokens: List[Token]) -> Program:
    """Parse a Bteja token list into an AST Program.

    Raises ParseError carrying the offending token when the tokens do not
    form a valid program.
    """
    if not tokens or tokens[-1].kind is not TokenKind.EOF:
        raise ParseError('token stream must end with an EOF token')
    if len(tokens) == 1:
        return Program(())
    try:
        # Tokens are fed one by one; the parser never sees source text.
        interactive = BTEJA_PARSER.parse_interactive()
        last = None
        for last in lark_tokens(tokens):
            interactive.feed_token(last)
        tree = interactive.feed_eof(last)
    except UnexpectedInput as e:
        lark_token = getattr(e, 'token', None)
        token: Optional[Token] = None
        if lark_token is not None and lark_token.type != '$END' and lark_token.start_pos is not None:
            token = tokens[lark_token.start_pos]
        if token is None:
            token = tokens[-1]
        expected = getattr(e, 'expected', None)
        message = f"Unexpected token {token.kind.name} {token.text!r}"
        if expected:
            message += f", expected one of: {_describe_expected(expected)}"
        raise ParseError(message, token) from None
    try:
        return ASTTransformer(tokens).transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, ParseError):
            raise e.orig_exc from None
        raise
