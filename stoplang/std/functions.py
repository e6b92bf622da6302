"""Free functions available to every stoplang program.

Each function receives the unevaluated argument nodes together with the
calling scope and evaluates them itself, so arity and type problems can be
reported before any argument runs.
"""

import math
from typing import Any, Dict, List

from ..builtin_function import BuiltinFunction
from ..errors import ScriptTypeError, ScriptValueError
from ..types import NULL, check_int, is_float, is_int, render, round_to_int_away_from_zero, type_name


def std_print(args: List[Any], scope: Any) -> Any:
    values = [arg.evaluate(scope) for arg in args]
    print(' '.join(render(v) for v in values))
    return NULL


def std_type(args: List[Any], scope: Any) -> Any:
    return type_name(args[0].evaluate(scope))


def _float_arg(value: Any) -> float:
    if not is_float(value):
        raise ScriptTypeError('Rounding can only be performed on float types')
    if math.isnan(value) or math.isinf(value):
        raise ScriptValueError(f'Cannot round {render(value)}')
    return value


def std_roundf(args: List[Any], scope: Any) -> Any:
    precision = args[1].evaluate(scope)
    if not is_int(precision):
        raise ScriptTypeError('Rounding precision must be an integer')
    value = args[0].evaluate(scope)
    if not is_float(value):
        raise ScriptTypeError('Rounding can only be performed on float types')
    if precision < 0:
        raise ScriptValueError('Rounding precision cannot be negative')
    if math.isnan(value) or math.isinf(value):
        return value
    try:
        coef = 10.0 ** precision
    except OverflowError:
        return value
    scaled = value * coef
    if math.isinf(scaled):
        # already finer than the requested precision
        return value
    return round_to_int_away_from_zero(scaled) / coef


def std_round(args: List[Any], scope: Any) -> Any:
    return check_int(round_to_int_away_from_zero(_float_arg(args[0].evaluate(scope))))


def std_floor(args: List[Any], scope: Any) -> Any:
    return check_int(math.floor(_float_arg(args[0].evaluate(scope))))


def std_ceil(args: List[Any], scope: Any) -> Any:
    return check_int(math.ceil(_float_arg(args[0].evaluate(scope))))


FUNCTIONS: Dict[str, BuiltinFunction] = {
    'print': BuiltinFunction('print', None, std_print),
    'type': BuiltinFunction('type', 1, std_type),
    'roundf': BuiltinFunction('roundf', 2, std_roundf),
    'round': BuiltinFunction('round', 1, std_round),
    'floor': BuiltinFunction('floor', 1, std_floor),
    'ceil': BuiltinFunction('ceil', 1, std_ceil),
}


def lookup_function(name: str):
    return FUNCTIONS.get(name)


def is_builtin_function(name: str) -> bool:
    return name in FUNCTIONS
