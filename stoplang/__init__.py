# stoplang language package
# This package provides a lexer, parser and tree-walking interpreter for stoplang.
from .errors import ScriptError
from .interpreter import Interpreter, is_statement_complete, parse_program, run_program

__all__ = [
    'run_program',
    'parse_program',
    'is_statement_complete',
    'Interpreter',
    'ScriptError',
]
