import json

import pytest

from bteja.__main__ import main


def write_program(tmp_path, source, name='prog.bteja'):
    path = tmp_path / name
    path.write_text(source, encoding='utf-8')
    return path


def test_prints_final_state(tmp_path, capsys):
    path = write_program(
        tmp_path,
        'var x: int = 5; var a: [int, string] = [1, "hi"]; var ok: bool = x > 1; var u: float64;')
    main([str(path)])
    out = capsys.readouterr().out.strip().splitlines()
    assert out == ['x = 5', 'a = [1, hi]', 'ok = true', 'u = null']


def test_tokens_flag(tmp_path, capsys):
    path = write_program(tmp_path, 'var x: int = 1;')
    main(['--tokens', str(path)])
    out = capsys.readouterr().out.strip().splitlines()
    # seven tokens, the EOF token, then the state line
    assert len(out) == 9
    assert out[-1] == 'x = 1'


@pytest.mark.parametrize('source, prefix', [
    ('var x: int = 1 @', 'Lex error: '),
    ('var x: int 1;', 'Parse error: '),
    ('var x: int = "a";', 'Runtime error: TypeError'),
])
def test_errors_exit_with_status_one(tmp_path, capsys, source, prefix):
    path = write_program(tmp_path, source)
    with pytest.raises(SystemExit) as excinfo:
        main([str(path)])
    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.err.startswith(prefix)
    assert captured.out == ''


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / 'nope.bteja')])
    assert excinfo.value.code == 1
    assert 'not found' in capsys.readouterr().err


def test_max_depth(tmp_path, capsys):
    path = write_program(tmp_path, 'func f(n: int): int { return f(n); } var x: int = f(1);')
    with pytest.raises(SystemExit):
        main(['--max-depth', '3', str(path)])
    assert 'RecursionError' in capsys.readouterr().err


def test_deep_recursion_reports_runtime_error(tmp_path, capsys):
    path = write_program(
        tmp_path,
        'func down(n: int): int { var r: int = 0; if n > 0 { r = down(n - 1); } return r; }'
        ' var x: int = down(500);')
    with pytest.raises(SystemExit) as excinfo:
        main(['--max-depth', '1000', str(path)])
    assert excinfo.value.code == 1
    assert capsys.readouterr().err.startswith('Runtime error: RecursionError')


def test_emit_and_run_ast(tmp_path, capsys):
    path = write_program(tmp_path, 'func twice(n: int): int { return n * 2; } var y: int = twice(21);')
    main(['--emit-ast', str(path)])
    out_path = tmp_path / 'prog.bteja.ast.json'
    assert capsys.readouterr().out.strip() == str(out_path)
    data = json.loads(out_path.read_text(encoding='utf-8'))
    assert data['type'] == 'Program'

    main(['--ast', str(out_path)])
    assert capsys.readouterr().out.strip() == 'y = 42'


def test_verbose_writes_debug_file(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    path = write_program(tmp_path, 'func one(): int { return 1; } var y: int = one();')
    main(['-v', str(path)])
    assert capsys.readouterr().out.strip() == 'y = 1'
    trace = (tmp_path / 'debug.txt').read_text(encoding='utf-8')
    assert 'call one()' in trace
