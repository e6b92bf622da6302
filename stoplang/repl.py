"""Interactive read-eval-print loop.

Lines are accumulated into a buffer until the parser reports the buffer
as complete statements; a line ending in a backslash is joined with the
next one without a newline. The whole buffer is then parsed and each
statement evaluated in turn, echoing every non-null result.
"""

import sys
from typing import Callable, Optional

import colorama
from colorama import Fore, Style

from .errors import InterpreterError, ScriptError
from .interpreter import Interpreter
from .types import NULL, render


PROMPT = '> '
CONTINUATION_PROMPT = '... '
BANNER = "Type 'exit' to quit"


class Repl:
    def __init__(self, interpreter: Optional[Interpreter] = None,
                 read_line: Callable[[str], str] = input):
        self.interpreter = interpreter if interpreter is not None else Interpreter()
        self.read_line = read_line

    def read_input(self) -> Optional[str]:
        """Read lines until they form complete statements.

        Returns None when the user asks to leave (``exit`` on an empty
        buffer, or end of input).
        """
        buffer = ''
        prompt = PROMPT
        while True:
            try:
                line = self.read_line(prompt)
            except EOFError:
                return None
            line = line.rstrip(' \t')
            if line == 'exit' and not buffer:
                return None
            prompt = CONTINUATION_PROMPT
            if line.endswith('\\'):
                buffer += line[:-1]
                continue
            buffer += line + '\n'
            if self.interpreter.is_statement_complete(buffer):
                return buffer

    def evaluate(self, source: str) -> None:
        for stmt in self.interpreter.parse(source):
            result = self.interpreter.evaluate(stmt)
            if result is not NULL:
                print(render(result))

    def report(self, error: Exception) -> None:
        print(f"{Fore.RED}{error}{Style.RESET_ALL}", file=sys.stderr)

    def run(self) -> None:
        colorama.just_fix_windows_console()
        print(BANNER)
        while True:
            try:
                source = self.read_input()
                if source is None:
                    return
                self.evaluate(source)
            except ScriptError as e:
                self.report(e)
            except RecursionError:
                self.report(InterpreterError('Maximum recursion depth exceeded'))


def main(interpreter: Optional[Interpreter] = None) -> None:
    try:
        Repl(interpreter).run()
    except KeyboardInterrupt:
        print()
