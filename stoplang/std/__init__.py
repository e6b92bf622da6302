# Built-in functions and container methods of the stoplang runtime.
from .functions import FUNCTIONS, lookup_function, is_builtin_function
from .methods import lookup_method

__all__ = [
    'FUNCTIONS',
    'lookup_function',
    'is_builtin_function',
    'lookup_method',
]
