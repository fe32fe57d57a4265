"""CLI entry point for the Ruistic interpreter.

Usage:
    python -m ruistic [-v|-vv|-vvv] [script]
    python -m ruistic [-v...] --emit-ast <script>
    python -m ruistic [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given script and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Without a script an interactive prompt is started; variables defined at
the prompt stay visible to later inputs. Debug information is written to
`debug.txt` in the current directory when verbosity is greater than zero.

A script with syntax errors still runs the statements that parsed, then
exits with status 65. `--emit-ast` writes nothing for such a script.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from .ast_json import program_from_obj, program_to_obj
from .interpreter import Interpreter
from .parser import Parser
from .scanner import Scanner
from .shell import Shell

# Exit status for input that fails to scan or parse (EX_DATAERR).
EXIT_SYNTAX_ERROR = 65


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def compile_source(source: str):
    """Scan and parse `source`; return the recovered statements and whether any error was reported."""
    scanner = Scanner(source)
    tokens = scanner.scan_tokens()
    parser = Parser(tokens)
    statements = parser.parse_program()
    return statements, scanner.had_error or parser.had_error


def execute(statements, debug_level: int) -> None:
    interpreter = Interpreter(debug_level=debug_level)
    try:
        interpreter.interpret(statements)
    finally:
        interpreter.close()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog='ruistic', description="Ruistic language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='SCRIPT', help='emit AST JSON for the given script')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('script', nargs='?', help='Ruistic script to execute; omit for a prompt')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        statements, had_error = compile_source(read_source(program_file))
        # A partial tree is never written out.
        if had_error:
            sys.exit(EXIT_SYNTAX_ERROR)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(program_to_obj(statements), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        source = read_source(ast_path)
        try:
            statements = program_from_obj(json.loads(source))
        except (KeyError, TypeError, ValueError, RecursionError) as e:
            print(f"Error: {ast_path} is not a valid AST file: {e}", file=sys.stderr)
            sys.exit(1)
        execute(statements, args.v)
        return

    if args.script:
        statements, had_error = compile_source(read_source(Path(args.script)))
        # Whatever parsed still runs; the status reports the syntax errors.
        execute(statements, args.v)
        if had_error:
            sys.exit(EXIT_SYNTAX_ERROR)
        return

    interpreter = Interpreter(debug_level=args.v)
    try:
        Shell(interpreter).cmdloop()
    finally:
        interpreter.close()


if __name__ == '__main__':
    main()
