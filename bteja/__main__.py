"""CLI entry point for the Bteja interpreter.

Usage:
    python -m bteja [-v|-vv|-vvv] [--tokens] [--max-depth N] <program_file>
    python -m bteja [-v...] --emit-ast <program_file>
    python -m bteja [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --tokens      Print the token stream before running the program
  --max-depth   Maximum function call depth (default 100)
  --emit-ast    Parse the given .bteja file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. After a successful run the final value of
every global variable is printed, one `name = value` line each.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, Optional

from .ast import Program
from .ast_json import ast_to_obj, ast_from_obj
from .errors import BtejaRuntimeError, LexError, ParseError
from .interpreter import Interpreter
from .lexer import tokenize
from .parser import parse
from .types import Value, to_string


def read_source(path: str) -> str:
    program_file = Path(path)
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    with open(program_file, 'r', encoding='utf-8') as f:
        return f.read()


def print_state(variables: Dict[str, Optional[Value]]) -> None:
    for name, value in variables.items():
        print(f"{name} = {to_string(value)}")


def execute(program: Program, args) -> None:
    interpreter = Interpreter(debug_level=args.v, max_call_depth=args.max_depth)
    try:
        variables = interpreter.run(program)
    except BtejaRuntimeError as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(1)
    print_state(variables)


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(description="Bteja language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--tokens', action='store_true', help='print the token stream before running')
    parser.add_argument('--max-depth', type=int, default=100, metavar='N', help='maximum function call depth')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='BTEJA_FILE', help='emit AST JSON for the given .bteja file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Bteja program file (.bteja) to execute')
    args = parser.parse_args(argv)

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(1)
        with open(ast_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        execute(ast_from_obj(data), args)
        return

    source_path = args.emit_ast or args.program
    if not source_path:
        parser.error('missing program file; or use --emit-ast/--ast')
    source = read_source(source_path)
    try:
        tokens = tokenize(source)
    except LexError as e:
        print(f"Lex error: {e}", file=sys.stderr)
        sys.exit(1)
    if args.tokens:
        for token in tokens:
            print(token)
    try:
        ast_program = parse(tokens)
    except ParseError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        sys.exit(1)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(ast_program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    execute(ast_program, args)


if __name__ == '__main__':
    main()
