import pytest

from stoplang.errors import ConversionError, ScriptNameError, ScriptTypeError, ScriptValueError
from stoplang.types import (
    INT_MAX, INT_MIN, NULL, DictVal, ListVal, NullVal, cast_value, check_int, render, to_bool, type_name,
)


def test_null_is_a_singleton():
    assert NullVal() is NULL
    assert render(NULL) == 'null'


def test_render_scalars():
    assert render(1) == '1'
    assert render(1.0) == '1.0'
    assert render(0.1) == '0.1'
    assert render(True) == 'true'
    assert render('a') == 'a'


def test_render_nested_strings_are_quoted():
    value = ListVal(['a', 1, ListVal([False])])
    assert render(value) == '["a", 1, [false]]'
    d = DictVal()
    d.set('k', ListVal(['v']))
    d.set(2, NULL)
    assert render(d) == '{"k": ["v"], 2: null}'


def test_type_names():
    assert [type_name(v) for v in (1, 1.5, 'x', True, ListVal(), DictVal(), NULL)] == [
        'int', 'float', 'str', 'bool', 'list', 'dict', 'null']


def test_dict_keys_keep_their_kind():
    d = DictVal()
    d.set(1, 'int')
    d.set(1.0, 'float')
    d.set(True, 'bool')
    assert len(d) == 3
    assert d.get(1.0) == 'float'
    assert d.keys() == [1, 1.0, True]


def test_dict_missing_key():
    with pytest.raises(ScriptNameError) as exc:
        DictVal().get('nope')
    assert "Key 'nope' not found" in str(exc.value)


def test_dict_rejects_container_keys():
    with pytest.raises(ScriptTypeError):
        DictVal().set(ListVal(), 1)


def test_lists_compare_by_identity():
    a = ListVal([1])
    assert a != ListVal([1])
    assert a == a


def test_render_self_containing_containers():
    a = ListVal([1])
    a.items.append(a)
    assert render(a) == '[1, [...]]'
    d = DictVal()
    d.set('self', d)
    d.set('list', ListVal([d]))
    assert render(d) == '{"self": {...}, "list": [{...}]}'


def test_render_shared_but_acyclic_container():
    inner = ListVal([1])
    assert render(ListVal([inner, inner])) == '[[1], [1]]'


def test_check_int_bounds():
    assert check_int(INT_MAX) == INT_MAX
    assert check_int(INT_MIN) == INT_MIN
    for value in (INT_MAX + 1, INT_MIN - 1, 10 ** 100):
        with pytest.raises(ScriptValueError) as exc:
            check_int(value)
        assert 'Integer overflow' in str(exc.value)


@pytest.mark.parametrize('value, target, expected', [
    ('42', 'int', 42),
    (' 42 ', 'int', 42),
    (3.9, 'int', 3),
    (-3.9, 'int', -3),
    (True, 'int', 1),
    ('3.5', 'float', 3.5),
    (2, 'float', 2.0),
    (False, 'float', 0.0),
    (0, 'bool', False),
    (0.5, 'bool', True),
    ('', 'bool', False),
    ('no', 'bool', True),
    (1.5, 'str', '1.5'),
    (True, 'str', 'true'),
])
def test_casts(value, target, expected):
    result = cast_value(value, target)
    assert result == expected
    assert type_name(result) == target


def test_cast_round_trip():
    for value in (42, -7, 3.5, True, 'text'):
        target = type_name(value)
        assert cast_value(cast_value(value, 'str'), target) == value


@pytest.mark.parametrize('value, target', [
    ('3.5', 'int'),
    ('abc', 'int'),
    ('9223372036854775808', 'int'),
    ('abc', 'float'),
    (float('inf'), 'int'),
])
def test_conversion_errors(value, target):
    with pytest.raises(ConversionError):
        cast_value(value, target)


@pytest.mark.parametrize('target', ['int', 'float', 'bool', 'str'])
def test_containers_cannot_be_cast(target):
    with pytest.raises(ScriptTypeError):
        cast_value(ListVal([1]), target)


def test_truthiness_of_containers_is_opt_in():
    with pytest.raises(ScriptTypeError):
        to_bool(ListVal([1]))
    assert to_bool(ListVal([1]), allow_containers=True) is True
    assert to_bool(DictVal(), allow_containers=True) is False
