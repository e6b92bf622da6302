"""CLI entry point for the stoplang interpreter.

Usage:
    python -m stoplang [-v|-vv|-vvv] [program_file]

Options:
  -v            Increase debug verbosity (can be repeated)

Without a program file an interactive session is started. Debug
information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import sys
from pathlib import Path

from .errors import ScriptError
from .interpreter import Interpreter
from .repl import main as repl_main


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="stoplang language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('program', nargs='?', help='stoplang program file (.stop) to execute')
    args = parser.parse_args(argv)

    if not args.program:
        repl_main(Interpreter(debug_level=args.v))
        return

    program_file = Path(args.program)
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    with open(program_file, 'r', encoding='utf-8') as f:
        source = f.read()
    interpreter = Interpreter(debug_level=args.v)
    try:
        interpreter.execute(source)
    except ScriptError as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        interpreter.close()


if __name__ == '__main__':
    main()
