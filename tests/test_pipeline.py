from bteja import execute_source
from bteja.errors import LexError, ParseError, BtejaRuntimeError
from bteja.interpreter import Interpreter
from bteja.tokens import TokenKind
from bteja.types import IntVal


def test_successful_run():
    result = execute_source('var x: int = 5; x = x + 3;')
    assert result.success
    assert result.stage is None
    assert result.error_message is None
    assert result.variables == {'x': IntVal(8)}
    assert result.tokens[-1].kind is TokenKind.EOF
    assert len(result.program.statements) == 2


def test_lex_failure():
    result = execute_source('var x: int = 5 $')
    assert not result.success
    assert result.stage == 'lex'
    assert isinstance(result.error, LexError)
    assert result.tokens == []
    assert result.program is None


def test_parse_failure():
    result = execute_source('var x int = 5;')
    assert result.stage == 'parse'
    assert isinstance(result.error, ParseError)
    assert result.tokens
    assert result.program is None
    assert 'Unexpected token' in result.error_message


def test_runtime_failure():
    result = execute_source('var x: int = 1; var x: int = 2;')
    assert result.stage == 'runtime'
    assert isinstance(result.error, BtejaRuntimeError)
    assert result.error.name == 'RedeclarationError'
    assert result.program is not None
    assert result.variables == {}


def test_custom_interpreter():
    source = 'func f(n: int): int { return f(n + 1); } var x: int = f(0);'
    result = execute_source(source, Interpreter(max_call_depth=5))
    assert result.stage == 'runtime'
    assert result.error.name == 'RecursionError'


def test_deep_recursion_is_reported_not_raised():
    source = ('func down(n: int): int {'
              '  var r: int = 0;'
              '  if n > 0 { r = down(n - 1); }'
              '  return r;'
              '}'
              'var x: int = down(500);')
    result = execute_source(source, Interpreter(max_call_depth=1000))
    assert result.stage == 'runtime'
    assert result.error.name == 'RecursionError'
