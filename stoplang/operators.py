"""Operator semantics.

Dispatch happens on the runtime kinds of the evaluated operands. There is
no implicit promotion: an int and a float never meet in an arithmetic or
comparison operator, and doing so is a TypeError.
"""

import math
from typing import Any

from .errors import InterpreterError, ScriptTypeError, ScriptValueError
from .types import check_int, is_float, is_int, is_scalar, to_bool, type_name


COMPARISONS = ('==', '!=', '<', '<=', '>', '>=')


def _compare(op: str, a: Any, b: Any) -> bool:
    if op == '==':
        return a == b
    if op == '!=':
        return a != b
    if op == '<':
        return a < b
    if op == '<=':
        return a <= b
    if op == '>':
        return a > b
    return a >= b


def _trunc_div(a: int, b: int) -> int:
    # integer division rounding toward zero
    q = abs(a) // abs(b)
    return -q if (a < 0) != (b < 0) else q


def _int_pow(a: int, b: int) -> int:
    if b < 0:
        if a == 0:
            raise ScriptValueError('Zero cannot be raised to a negative power')
        # 1 / a**-b truncates to zero unless |a| is 1
        return a ** (-b % 2) if abs(a) == 1 else 0
    if b == 0:
        return 1
    if abs(a) <= 1:
        return a if b % 2 else abs(a)
    # |a| >= 2 overflows 64 bits long before the exponent reaches 64
    if b >= 64:
        raise ScriptValueError('Integer overflow')
    return check_int(a ** b)


def _int_op(op: str, a: int, b: int) -> Any:
    if op in COMPARISONS:
        return _compare(op, a, b)
    if op == '+':
        return check_int(a + b)
    if op == '-':
        return check_int(a - b)
    if op == '*':
        return check_int(a * b)
    if op == '**':
        return _int_pow(a, b)
    if op in ('/', '//', '%') and b == 0:
        raise ScriptValueError('Division by zero')
    if op == '/':
        return check_int(_trunc_div(a, b))
    if op == '//':
        return check_int(a // b)
    if op == '%':
        # sign follows the dividend, matching `/`
        return a - _trunc_div(a, b) * b
    raise InterpreterError(f"Unexpected binary operator for int values: '{op}'")


def _float_op(op: str, a: float, b: float) -> Any:
    if op in COMPARISONS:
        return _compare(op, a, b)
    if op == '+':
        return a + b
    if op == '-':
        return a - b
    if op == '*':
        return a * b
    if op == '**':
        try:
            return math.pow(a, b)
        except (ValueError, OverflowError) as e:
            raise ScriptValueError(f'Invalid power operation: {e}')
    if op == '%':
        raise ScriptValueError('Modulo requires integer operands')
    if op in ('/', '//') and b == 0.0:
        raise ScriptValueError('Division by zero')
    if op == '/':
        return a / b
    if op == '//':
        return a // b
    raise InterpreterError(f"Unexpected binary operator for float values: '{op}'")


def _str_op(op: str, a: str, b: str) -> Any:
    if op == '+':
        return a + b
    if op == '==':
        return a == b
    if op == '!=':
        return a != b
    if op in COMPARISONS:
        # strings are ordered by length
        return _compare(op, len(a), len(b))
    raise InterpreterError(f"Unexpected binary operator for string values: '{op}'")


def _bool_op(op: str, a: bool, b: bool) -> Any:
    if op == '==':
        return a == b
    if op == '!=':
        return a != b
    if op == 'and':
        return a and b
    if op == 'or':
        return a or b
    raise InterpreterError(f"Unexpected binary operator for boolean values: '{op}'")


def apply_binary_op(op: str, a: Any, b: Any) -> Any:
    if not is_scalar(a) or not is_scalar(b):
        raise InterpreterError(f"Unexpected binary operator '{op}' for {type_name(a)} and {type_name(b)}")
    left_kind, right_kind = type_name(a), type_name(b)
    if left_kind != right_kind:
        raise ScriptTypeError(f"Operator '{op}' cannot mix {left_kind} and {right_kind}")
    if is_int(a):
        return _int_op(op, a, b)
    if is_float(a):
        return _float_op(op, a, b)
    if isinstance(a, str):
        return _str_op(op, a, b)
    return _bool_op(op, a, b)


def apply_unary_op(op: str, value: Any) -> Any:
    if op == 'not':
        if isinstance(value, bool):
            return not value
        raise ScriptTypeError('NOT operator can only be used with boolean values')
    if op == '-':
        if is_int(value) or is_float(value):
            return check_int(-value) if is_int(value) else -value
        raise ScriptTypeError('MINUS operator can only be used with numbers')
    if op == 'abs':
        if is_int(value) or is_float(value):
            return check_int(abs(value)) if is_int(value) else abs(value)
        raise ScriptTypeError('Absolute value operator can only be used with numbers')
    if op == '?':
        return to_bool(value, allow_containers=True)
    raise InterpreterError(f"Unexpected unary operator: '{op}'")
