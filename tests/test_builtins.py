import pytest

from stoplang.errors import (
    ScriptIndexError, ScriptNameError, ScriptTypeError, ScriptValueError,
)
from stoplang.interpreter import Interpreter
from stoplang.types import NULL, render


def last(source):
    return Interpreter().execute(source)[-1]


def test_print_joins_arguments(capsys):
    result = last('print("a", 1, 2.5, [true, "b"], {"k": 1})')
    assert result is NULL
    assert capsys.readouterr().out == 'a 1 2.5 [true, "b"] {"k": 1}\n'


def test_print_without_arguments(capsys):
    assert last('type(print())') == 'null'
    assert capsys.readouterr().out == '\n'


def test_rounding():
    assert last('roundf(1.25, 1)') == 1.3
    assert last('round(2.5)') == 3
    assert last('round(-2.5)') == -3
    assert last('floor(-1.5)') == -2
    assert last('ceil(1.2)') == 2


def test_rounding_at_the_edges():
    assert last('roundf(1e300, 400)') == 1e300
    assert last('roundf(1.5, 400)') == 1.5
    with pytest.raises(ScriptValueError):
        last('floor(1e300)')
    with pytest.raises(ScriptValueError):
        last('round(-1e19)')


@pytest.mark.parametrize('source, error', [
    ('roundf(1.0, -1)', ScriptValueError),
    ('roundf(1, 1)', ScriptTypeError),
    ('roundf(1.0, 1.0)', ScriptTypeError),
    ('floor(1)', ScriptTypeError),
    ('round()', ScriptValueError),
    ('type(1, 2)', ScriptValueError),
])
def test_function_errors(source, error):
    with pytest.raises(error):
        last(source)


def test_builtins_cannot_be_redefined():
    with pytest.raises(ScriptNameError):
        last('def print(x) as x stop')


def test_list_methods():
    interp = Interpreter()
    interp.execute('xs := [1, 2]')
    assert render(interp.execute('xs.append(3)')[-1]) == '[1, 2, 3]'
    assert interp.execute('xs.put(3, 4)\nxs.put(0, 0)\nxs.remove(1)\nxs.len()')[-1] == 4
    assert render(interp.execute('xs')[0]) == '[0, 2, 3, 4]'


@pytest.mark.parametrize('source, error', [
    ('[1].remove(1)', ScriptIndexError),
    ('[1].put(2, 0)', ScriptIndexError),
    ('[1].remove("0")', ScriptTypeError),
    ('[1].len(1)', ScriptValueError),
    ('[1].size()', ScriptNameError),
    ('(1).len()', ScriptTypeError),
    ('{1: 2}.remove(3)', ScriptNameError),
    ('"abc".ltrim(1)', ScriptTypeError),
])
def test_method_errors(source, error):
    with pytest.raises(error):
        last(source)


def test_dict_methods():
    interp = Interpreter()
    interp.execute('d := {"a": 1, "b": 2}')
    assert interp.execute('d.size()')[0] == 2
    assert interp.execute('d.exists("a")')[0] is True
    interp.execute('d.remove("a")')
    assert interp.execute('d.exists("a")')[0] is False
    assert render(interp.execute('d')[0]) == '{"b": 2}'


def test_string_methods_rebind_the_variable():
    interp = Interpreter()
    interp.execute('s := "xyhixy"\nt := s')
    assert interp.execute('s.rtrim("xy")')[0] == 'xyhi'
    assert interp.execute('s.ltrim("yx")\ns.len()')[-1] == 2
    assert interp.execute('s')[0] == 'hi'
    # strings are values, the other name keeps the original
    assert interp.execute('t')[0] == 'xyhixy'
