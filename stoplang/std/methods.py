from typing import Any, Dict, List

from ..builtin_function import BuiltinMethod
from ..errors import ScriptIndexError, ScriptNameError, ScriptTypeError
from ..types import DictVal, ListVal, is_int, is_scalar, type_name


def list_len(receiver: ListVal, args: List[Any], scope: Any) -> Any:
    return len(receiver.items)


def list_append(receiver: ListVal, args: List[Any], scope: Any) -> Any:
    receiver.items.append(args[0].evaluate(scope))
    return receiver


def list_remove(receiver: ListVal, args: List[Any], scope: Any) -> Any:
    index = args[0].evaluate(scope)
    if not is_int(index):
        raise ScriptTypeError("remove() method's argument must be an integer")
    if index < 0 or index >= len(receiver.items):
        raise ScriptIndexError(f'Cannot remove: index ({index}) out of range')
    del receiver.items[index]
    return receiver


def list_put(receiver: ListVal, args: List[Any], scope: Any) -> Any:
    index = args[0].evaluate(scope)
    if not is_int(index):
        raise ScriptTypeError("put() method's first argument must be an integer")
    value = args[1].evaluate(scope)
    # inserting at len(items) appends
    if index < 0 or index > len(receiver.items):
        raise ScriptIndexError(f'Cannot put: index ({index}) out of range')
    receiver.items.insert(index, value)
    return receiver


def _key_arg(args: List[Any], scope: Any) -> Any:
    key = args[0].evaluate(scope)
    if not is_scalar(key):
        raise ScriptTypeError('Dictionary key must be a basic type')
    return key


def dict_size(receiver: DictVal, args: List[Any], scope: Any) -> Any:
    return len(receiver.entries)


def dict_remove(receiver: DictVal, args: List[Any], scope: Any) -> Any:
    receiver.remove(_key_arg(args, scope))
    return receiver


def dict_exists(receiver: DictVal, args: List[Any], scope: Any) -> Any:
    return receiver.contains(_key_arg(args, scope))


def str_len(receiver: str, args: List[Any], scope: Any) -> Any:
    return len(receiver)


def _trim_chars(name: str, args: List[Any], scope: Any) -> str:
    chars = args[0].evaluate(scope)
    if not isinstance(chars, str):
        raise ScriptTypeError(f"{name}() method's argument must be a string")
    return chars


def str_ltrim(receiver: str, args: List[Any], scope: Any) -> Any:
    return receiver.lstrip(_trim_chars('ltrim', args, scope))


def str_rtrim(receiver: str, args: List[Any], scope: Any) -> Any:
    return receiver.rstrip(_trim_chars('rtrim', args, scope))


LIST_METHODS: Dict[str, BuiltinMethod] = {
    'len': BuiltinMethod('len', 0, list_len),
    'append': BuiltinMethod('append', 1, list_append, mutates=True),
    'remove': BuiltinMethod('remove', 1, list_remove, mutates=True),
    'put': BuiltinMethod('put', 2, list_put, mutates=True),
}

DICT_METHODS: Dict[str, BuiltinMethod] = {
    'size': BuiltinMethod('size', 0, dict_size),
    'remove': BuiltinMethod('remove', 1, dict_remove, mutates=True),
    'exists': BuiltinMethod('exists', 1, dict_exists),
}

STRING_METHODS: Dict[str, BuiltinMethod] = {
    'len': BuiltinMethod('len', 0, str_len),
    'ltrim': BuiltinMethod('ltrim', 1, str_ltrim, mutates=True),
    'rtrim': BuiltinMethod('rtrim', 1, str_rtrim, mutates=True),
}


def lookup_method(receiver: Any, name: str) -> BuiltinMethod:
    if isinstance(receiver, ListVal):
        table, label = LIST_METHODS, 'list'
    elif isinstance(receiver, DictVal):
        table, label = DICT_METHODS, 'dictionary'
    elif isinstance(receiver, str):
        table, label = STRING_METHODS, 'string'
    else:
        raise ScriptTypeError(
            f'Methods can only be called on lists, dictionaries and strings, not {type_name(receiver)}')
    if name not in table:
        raise ScriptNameError(f'Unknown {label} method: {name}')
    return table[name]
