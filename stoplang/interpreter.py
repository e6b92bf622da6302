"""Driver for the stoplang language.

This module ties the toolchain together: source text goes through the
`Parser` (which pulls tokens from the `Lexer`) and every top-level
statement is evaluated against one persistent global `Scope`. Debug
tracing follows the verbosity levels of the command line ``-v`` flag:

    1  each top-level statement and its result
    2  declarations, assignments and function definitions
    3  branch and loop decisions
"""

from __future__ import annotations

from typing import Any, List, Optional

from .ast import Node, Program
from .errors import ControlSignal, InterpreterError, ReturnSignal, ScriptSyntaxError
from .lexer import Lexer
from .parser import Parser, is_statement_complete, parse_program
from .scope import Scope
from .types import NULL, render, type_name


def escaped_signal_message(signal: ControlSignal) -> str:
    if isinstance(signal, ReturnSignal):
        return "'return' used outside a function"
    return f"'{signal.keyword}' used outside a loop"


class Interpreter:
    """Core interpreter that executes stoplang programs."""
    def __init__(self, debug_level: int = 0, debug_file: Optional[str] = 'debug.txt'):
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 and debug_file else None
        self.global_scope = Scope(trace_hook=self.trace, debug_level=debug_level)
        self.parser = Parser(Lexer())

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def trace(self, level: int, msg: str) -> None:
        if level <= self.debug_level:
            self.debug(msg)

    def close(self) -> None:
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def parse(self, source: str) -> List[Node]:
        """Re-lex `source` from scratch and parse it into statements."""
        self.parser.reset(source)
        try:
            return self.parser.parse()
        except RecursionError:
            raise InterpreterError('Maximum nesting depth exceeded') from None

    def is_statement_complete(self, source: str) -> bool:
        self.parser.reset(source)
        return self.parser.is_statement_complete()

    def evaluate(self, statement: Node) -> Any:
        """Evaluate one top-level statement in the global scope."""
        try:
            result = statement.evaluate(self.global_scope)
        except ControlSignal as signal:
            raise ScriptSyntaxError(escaped_signal_message(signal)) from None
        except RecursionError:
            raise InterpreterError('Maximum recursion depth exceeded') from None
        if self.debug_level >= 1:
            self.trace(1, f"{type(statement).__name__} -> {type_name(result)} {render(result)}")
        return result

    def execute(self, source: str) -> List[Any]:
        """Parse `source` and evaluate each statement, returning all results."""
        return [self.evaluate(stmt) for stmt in self.parse(source)]

    def run(self, program: Program) -> Any:
        try:
            result: Any = NULL
            for stmt in program.body:
                result = self.evaluate(stmt)
            return result
        finally:
            self.close()


def run_program(source: str, debug_level: int = 0) -> Any:
    """Convenience function to parse and run a stoplang program from source string."""
    ast_program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    return interpreter.run(ast_program)


__all__ = [
    'Interpreter',
    'escaped_signal_message',
    'is_statement_complete',
    'parse_program',
    'run_program',
]
