"""Runtime values for stoplang.

Scalars are plain Python objects: ``int`` for integers, ``float`` for
floats, ``bool`` for booleans and ``str`` for strings. The absence of a
value is the `NULL` marker. Lists and dictionaries are wrapped in
`ListVal` and `DictVal`; these wrappers are the shared cells of the
language. Assigning a list to two names stores the same `ListVal` under
both, so a mutation through one name is visible through the other.

Because ``bool`` is a subclass of ``int`` in Python, every numeric check
in the interpreter goes through `is_int` / `is_float` rather than a bare
``isinstance``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple
import math

from .errors import ConversionError, ScriptNameError, ScriptTypeError, ScriptValueError


INT_MIN = -2 ** 63
INT_MAX = 2 ** 63 - 1


class NullVal:
    """Marker object for the stoplang `null` value."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'null'


NULL = NullVal()


@dataclass(eq=False)
class ListVal:
    """An ordered, mutable sequence of values.

    `eq` is disabled on purpose: two lists are the same cell only when they
    are the same object.
    """
    items: List[Any] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self) -> str:
        return f"List({self.items!r})"


DictKey = Tuple[str, Any]


@dataclass(eq=False)
class DictVal:
    """A mapping from scalar keys to values.

    Keys are stored together with their kind so `1`, `1.0` and `true` stay
    three distinct keys even though Python considers them equal.
    """
    entries: Dict[DictKey, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        inner = ', '.join(f"{k[1]!r}: {v!r}" for k, v in self.entries.items())
        return f"Dict({{{inner}}})"

    def get(self, key: Any) -> Any:
        tagged = dict_key(key)
        if tagged not in self.entries:
            raise ScriptNameError(f"Key '{render(key)}' not found in the dictionary")
        return self.entries[tagged]

    def set(self, key: Any, value: Any) -> None:
        self.entries[dict_key(key)] = value

    def remove(self, key: Any) -> None:
        tagged = dict_key(key)
        if tagged not in self.entries:
            raise ScriptNameError(f"Key '{render(key)}' not found in the dictionary")
        del self.entries[tagged]

    def contains(self, key: Any) -> bool:
        return dict_key(key) in self.entries

    def keys(self) -> List[Any]:
        return [k[1] for k in self.entries]

    def items(self) -> Iterator[Tuple[Any, Any]]:
        for (_, key), value in self.entries.items():
            yield key, value


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_float(value: Any) -> bool:
    return isinstance(value, float)


def check_int(value: int) -> int:
    """Return `value`, or raise a ValueError if it leaves the 64-bit range."""
    if value < INT_MIN or value > INT_MAX:
        raise ScriptValueError('Integer overflow')
    return value


def is_scalar(value: Any) -> bool:
    return isinstance(value, (bool, int, float, str))


def is_container(value: Any) -> bool:
    return isinstance(value, (ListVal, DictVal))


def dict_key(value: Any) -> DictKey:
    if not is_scalar(value):
        raise ScriptTypeError('Dictionary key must be a basic type')
    return (type_name(value), value)


def type_name(value: Any) -> str:
    """Return the stoplang type name of a runtime value."""
    if isinstance(value, bool):
        return 'bool'
    if isinstance(value, int):
        return 'int'
    if isinstance(value, float):
        return 'float'
    if isinstance(value, str):
        return 'str'
    if isinstance(value, ListVal):
        return 'list'
    if isinstance(value, DictVal):
        return 'dict'
    return 'null'


def render(value: Any, nested: bool = False, _active: Optional[Set[int]] = None) -> str:
    """Convert a value to its canonical textual form.

    Strings are shown raw at the top level and quoted when they appear
    inside a container, so ``print(["a"])`` shows ``["a"]`` while
    ``print("a")`` shows ``a``. A container met again while it is being
    rendered (``a.append(a)``) is shown as ``[...]`` or ``{...}``.
    """
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, str):
        return '"' + value + '"' if nested else value
    if isinstance(value, (ListVal, DictVal)):
        is_list = isinstance(value, ListVal)
        if _active is None:
            _active = set()
        if id(value) in _active:
            return '[...]' if is_list else '{...}'
        _active.add(id(value))
        try:
            if is_list:
                return '[' + ', '.join(render(item, True, _active) for item in value.items) + ']'
            entries = ', '.join(f"{render(k, True)}: {render(v, True, _active)}" for k, v in value.items())
            return '{' + entries + '}'
        finally:
            _active.discard(id(value))
    return 'null'


def round_to_int_away_from_zero(x: float) -> int:
    """Round a floating point number to the nearest integer away from zero.

    Python's built-in round uses bankers rounding, so we implement the
    rule required here: halves are rounded away from zero.
    """
    return math.floor(x + 0.5) if x >= 0 else math.ceil(x - 0.5)


def to_bool(value: Any, allow_containers: bool = False) -> bool:
    """Truthiness: non-zero numbers and non-empty strings are true.

    Containers are only accepted when `allow_containers` is set (the `?`
    operator), in which case a non-empty container is true.
    """
    if isinstance(value, bool):
        return value
    if is_int(value):
        return value != 0
    if is_float(value):
        return value != 0.0
    if isinstance(value, str):
        return len(value) > 0
    if allow_containers and is_container(value):
        return len(value) > 0
    raise ScriptTypeError(f'Cannot convert {type_name(value)} to boolean')


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        return 1 if value else 0
    if is_int(value):
        return value
    if is_float(value):
        if math.isnan(value) or math.isinf(value):
            raise ConversionError(f'Cannot convert float to int: {render(value)}')
        result = int(value)
    elif isinstance(value, str):
        try:
            result = int(value.strip())
        except ValueError:
            raise ConversionError(f'Cannot convert string to int: {value}')
    else:
        raise ScriptTypeError(f'Cannot convert {type_name(value)} to int')
    if result < INT_MIN or result > INT_MAX:
        raise ConversionError(f'Number out of range: {render(value)}')
    return result


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if is_int(value):
        return float(value)
    if is_float(value):
        return value
    if isinstance(value, str):
        try:
            result = float(value.strip())
        except ValueError:
            raise ConversionError(f'Cannot convert string to float: {value}')
        if math.isinf(result) and 'inf' not in value.lower():
            raise ConversionError(f'Number out of range: {value}')
        return result
    raise ScriptTypeError(f'Cannot convert {type_name(value)} to float')


def _to_str(value: Any) -> str:
    if not is_scalar(value):
        raise ScriptTypeError(f'Cannot convert {type_name(value)} to str')
    return render(value)


def cast_value(value: Any, target: str) -> Any:
    """Convert a scalar to one of the cast targets (`int`, `float`, `bool`, `str`).

    Lists, dictionaries and null cannot be cast and raise a TypeError.
    Malformed strings raise a ConversionError.
    """
    if target == 'int':
        return _to_int(value)
    if target == 'float':
        return _to_float(value)
    if target == 'bool':
        return to_bool(value)
    if target == 'str':
        return _to_str(value)
    raise ConversionError(f'Invalid conversion type: {target}')
