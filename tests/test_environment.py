import pytest

from bteja.environment import CallStack, Environment
from bteja.errors import BtejaRuntimeError
from bteja.types import IntVal, StrVal, TypeSpec


def test_declare_assign_get():
    env = Environment()
    env.declare('x', TypeSpec.integer(), None)
    with pytest.raises(BtejaRuntimeError) as excinfo:
        env.get('x')
    assert excinfo.value.name == 'NameError'
    env.assign('x', IntVal(4))
    assert env.get('x') == IntVal(4)
    assert env.snapshot() == {'x': IntVal(4)}


def test_assign_checks_declared_type():
    env = Environment()
    env.declare('x', TypeSpec.integer(), IntVal(1))
    with pytest.raises(BtejaRuntimeError) as excinfo:
        env.assign('x', StrVal('a'))
    assert excinfo.value.name == 'TypeError'
    assert env.get('x') == IntVal(1)


def test_push_pop_and_depth_limit():
    stack = CallStack(max_depth=2)
    assert stack.depth == 0
    frame = stack.push('f')
    assert stack.current is frame
    assert frame.name == 'f'
    stack.push('g')
    with pytest.raises(BtejaRuntimeError) as excinfo:
        stack.push('h')
    assert excinfo.value.name == 'RecursionError'
    stack.pop()
    stack.pop()
    assert stack.current is stack.globals


def test_unwind_keeps_globals():
    stack = CallStack()
    stack.globals.declare('g', TypeSpec.integer(), IntVal(1))
    for name in ('a', 'b', 'c'):
        stack.push(name)
    stack.unwind()
    assert stack.depth == 0
    assert stack.current.get('g') == IntVal(1)
