import pytest

from bteja.ast import (
    Program, VariableDeclaration, Assignment, Return, If, For, Parameter,
    FunctionDeclaration, FunctionCall, BinaryExpression, UnaryExpression,
    Literal, ArrayLiteral, Identifier, ArrayAccess,
)
from bteja.errors import ParseError
from bteja.interpreter import parse_program
from bteja.lexer import tokenize
from bteja.parser import parse
from bteja.tokens import Token, TokenKind
from bteja.types import TypeSpec


def single(source):
    program = parse_program(source)
    assert len(program.statements) == 1
    return program.statements[0]


def test_empty_program():
    assert parse([Token(TokenKind.EOF, '', 1)]) == Program(())
    assert parse_program('// nothing here') == Program(())


def test_variable_declaration():
    stmt = single('var x: int = 5;')
    assert stmt == VariableDeclaration('x', TypeSpec.integer(), Literal('5'))
    assert single('var s: string;') == VariableDeclaration('s', TypeSpec.string(), None)


def test_array_and_tuple_types():
    stmt = single('var t: [int, [float64], bool] = [1, [2.5], true];')
    assert stmt.declared_type == TypeSpec.array(
        TypeSpec.integer(), TypeSpec.array(TypeSpec.real()), TypeSpec.boolean())
    assert stmt.initializer == ArrayLiteral((
        Literal('1'), ArrayLiteral((Literal('2.5'),)), Literal('true')))
    assert single('var e: [int] = [];').initializer == ArrayLiteral(())


def test_precedence_and_left_associativity():
    stmt = single('x = 1 + 2 * 3 - 4;')
    assert stmt == Assignment('x', BinaryExpression(
        BinaryExpression(Literal('1'), '+', BinaryExpression(Literal('2'), '*', Literal('3'))),
        '-',
        Literal('4'),
    ))
    stmt = single('x = 8 / 4 / 2;')
    assert stmt.value == BinaryExpression(
        BinaryExpression(Literal('8'), '/', Literal('4')), '/', Literal('2'))


def test_comparison_binds_tighter_than_equality():
    stmt = single('b = 1 < 2 == 3 >= 4;')
    assert stmt.value == BinaryExpression(
        BinaryExpression(Literal('1'), '<', Literal('2')),
        '==',
        BinaryExpression(Literal('3'), '>=', Literal('4')),
    )


def test_parentheses_and_unary():
    stmt = single('b = !(a == 1);')
    assert stmt.value == UnaryExpression('!', BinaryExpression(Identifier('a'), '==', Literal('1')))
    stmt = single('x = (1 + 2) * 3;')
    assert stmt.value == BinaryExpression(
        BinaryExpression(Literal('1'), '+', Literal('2')), '*', Literal('3'))


def test_array_access_nests():
    stmt = single('x = grid[i][j + 1];')
    assert stmt.value == ArrayAccess(
        ArrayAccess(Identifier('grid'), Identifier('i')),
        BinaryExpression(Identifier('j'), '+', Literal('1')),
    )


def test_calls_as_statement_and_expression():
    assert single('show(1, "a");') == FunctionCall('show', (Literal('1'), Literal('a')))
    assert single('reset();') == FunctionCall('reset', ())
    stmt = single('x = f(g(1)) + 2;')
    assert stmt.value == BinaryExpression(
        FunctionCall('f', (FunctionCall('g', (Literal('1'),)),)), '+', Literal('2'))


def test_function_declaration():
    stmt = single('func add(a: int, b: [int, string]): int { return a; }')
    assert stmt == FunctionDeclaration(
        'add',
        TypeSpec.integer(),
        (Parameter(TypeSpec.integer(), 'a'),
         Parameter(TypeSpec.array(TypeSpec.integer(), TypeSpec.string()), 'b')),
        (Return(Identifier('a')),),
    )


def test_void_function_needs_no_return():
    stmt = single('func hello() { x = 1; }')
    assert stmt.return_type is None
    assert stmt.parameters == ()
    assert stmt.body == (Assignment('x', Literal('1')),)


def test_missing_return_statement():
    with pytest.raises(ParseError) as excinfo:
        parse_program('func f(): int {\n  x = 1;\n}')
    assert "Function 'f' with return type 'int' must have a return statement" in str(excinfo.value)
    assert excinfo.value.token.kind is TokenKind.IDENTIFIER
    assert excinfo.value.token.text == 'f'


def test_nested_return_does_not_satisfy_check():
    source = 'func f(x: int): int { if x > 0 { return 1; } }'
    with pytest.raises(ParseError):
        parse_program(source)


def test_if_else_if_chain():
    stmt = single('if a { x = 1; } else if b { x = 2; } else { x = 3; }')
    assert stmt.condition == Identifier('a')
    assert stmt.then_branch == (Assignment('x', Literal('1')),)
    assert len(stmt.else_branch) == 1
    nested = stmt.else_branch[0]
    assert isinstance(nested, If)
    assert nested.condition == Identifier('b')
    assert nested.else_branch == (Assignment('x', Literal('3')),)


def test_if_without_else():
    stmt = single('if (1 > 2) { x = 1; }')
    assert stmt.else_branch == ()


def test_for_statement():
    stmt = single('for (var i: int = 0; i < 3; i = i + 1;) { t = t + i; }')
    assert isinstance(stmt, For)
    assert stmt.init == VariableDeclaration('i', TypeSpec.integer(), Literal('0'))
    assert stmt.condition == BinaryExpression(Identifier('i'), '<', Literal('3'))
    assert stmt.increment == Assignment('i', BinaryExpression(Identifier('i'), '+', Literal('1')))
    assert len(stmt.body) == 1


def test_unexpected_token():
    with pytest.raises(ParseError) as excinfo:
        parse_program('var x: int = 5;\nvar = 3;')
    err = excinfo.value
    assert err.token.kind is TokenKind.ASSIGN
    assert err.token.line == 2
    assert 'Unexpected token ASSIGN' in str(err)
    assert 'IDENTIFIER' in str(err)


def test_invalid_type_syntax():
    with pytest.raises(ParseError) as excinfo:
        parse_program('var x: foo = 1;')
    assert excinfo.value.token.text == 'foo'


def test_input_ends_early():
    tokens = tokenize('var x: int = ')
    with pytest.raises(ParseError) as excinfo:
        parse(tokens)
    assert excinfo.value.token is tokens[-1]
    assert excinfo.value.token.kind is TokenKind.EOF


def test_missing_eof_token():
    with pytest.raises(ParseError):
        parse([Token(TokenKind.IDENTIFIER, 'x', 1)])
