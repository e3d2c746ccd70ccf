"""CLI entry point for the ToyLang interpreter.

Usage:
    python -m toylang [-v|-vv|-vvv] [--max-depth N] [--lark] <program_file>
    python -m toylang [-v...] --emit-ast <program_file>
    python -m toylang [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --max-depth   Limit the depth of nested function calls
  --lark        Parse with the Lark grammar instead of the hand-written parser
  --emit-ast    Parse the given program and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from .ast import Program
from .ast_json import ast_to_obj, ast_from_obj
from .errors import LexError, ParseError, ToyRuntimeError
from .grammar import parse_with_lark
from .interpreter import Interpreter
from .parser import parse_program


def _read(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    return path.read_text(encoding='utf-8')


def _parse(source: str, use_lark: bool) -> Program:
    try:
        if use_lark:
            return parse_with_lark(source)
        return parse_program(source)
    except (LexError, ParseError) as e:
        print(f"Parse error: {e}", file=sys.stderr)
        sys.exit(1)


def _execute(program: Program, args: argparse.Namespace) -> None:
    interpreter = Interpreter(debug_level=args.v, max_call_depth=args.max_depth)
    try:
        interpreter.run(program)
    except ToyRuntimeError as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(1)


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(prog='toylang', description="ToyLang interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--max-depth', type=int, default=None, metavar='N',
                        help='maximum depth of nested function calls')
    parser.add_argument('--lark', action='store_true', help='parse with the Lark grammar')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='PROGRAM_FILE', help='emit AST JSON for the given program')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='ToyLang program file to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        ast_program = _parse(_read(program_file), args.lark)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(ast_program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        data = json.loads(_read(Path(args.ast)))
        try:
            ast_program = ast_from_obj(data)
        except (TypeError, ValueError) as e:
            print(f"Error: invalid AST file: {e}", file=sys.stderr)
            sys.exit(1)
        _execute(ast_program, args)
        return

    # Default: execute source file
    if not args.program:
        parser.error('missing program file; or use --emit-ast/--ast')
    _execute(_parse(_read(Path(args.program)), args.lark), args)


if __name__ == '__main__':
    main()
