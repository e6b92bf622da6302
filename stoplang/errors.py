from typing import Any


class ScriptError(Exception):
    """Base class for every error a stoplang program can raise.

    Each subclass carries a `kind` used when reporting the error to the
    user, e.g. ``TypeError: NOT operator can only be used with booleans``.
    """
    kind = 'Error'

    def __init__(self, message: str):
        super().__init__(f"{self.kind}: {message}")
        self.message = message


class LexError(ScriptError):
    kind = 'LexError'


class ScriptSyntaxError(ScriptError):
    kind = 'SyntaxError'


class ParserError(ScriptSyntaxError):
    kind = 'ParserError'


class InterpreterError(ScriptError):
    kind = 'InterpreterError'


class ScriptTypeError(ScriptError):
    kind = 'TypeError'


class ScriptNameError(ScriptError):
    kind = 'NameError'


class ScriptIndexError(ScriptError):
    kind = 'IndexError'


class ScriptValueError(ScriptError):
    kind = 'ValueError'


class ConversionError(ScriptError):
    kind = 'ConversionError'


class ControlSignal(Exception):
    """Non-error unwinding used for break, continue and return."""
    keyword = ''


class BreakSignal(ControlSignal):
    keyword = 'break'

    def __init__(self):
        super().__init__('break')


class ContinueSignal(ControlSignal):
    keyword = 'continue'

    def __init__(self):
        super().__init__('continue')


class ReturnSignal(ControlSignal):
    """Internal exception to handle return statements in functions."""
    keyword = 'return'

    def __init__(self, value: Any):
        super().__init__('return')
        self.value = value
