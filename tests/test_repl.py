import pytest

from stoplang.repl import CONTINUATION_PROMPT, PROMPT, Repl


def make_repl(lines):
    prompts = []
    feed = iter(lines)

    def read_line(prompt):
        prompts.append(prompt)
        try:
            return next(feed)
        except StopIteration:
            raise EOFError
    return Repl(read_line=read_line), prompts


def test_repl_exit_immediately(capsys):
    repl, prompts = make_repl(['exit'])
    repl.run()
    out = capsys.readouterr().out
    assert out == "Type 'exit' to quit\n"
    assert prompts == [PROMPT]


def test_repl_eof_quits(capsys):
    repl, _ = make_repl([])
    repl.run()
    assert "Type 'exit' to quit" in capsys.readouterr().out


def test_repl_echoes_non_null_results(capsys):
    repl, _ = make_repl(['1 + 2', 'print("hi")', 'exit'])
    repl.run()
    lines = capsys.readouterr().out.splitlines()
    # print returns null, which is not echoed
    assert lines[1:] == ['3', 'hi']


def test_repl_multiline_statement(capsys):
    repl, prompts = make_repl(['if true then', '  print("yes")', 'stop', 'exit'])
    repl.run()
    assert prompts == [PROMPT, CONTINUATION_PROMPT, CONTINUATION_PROMPT, PROMPT]
    assert capsys.readouterr().out.splitlines()[1:] == ['yes']


def test_repl_backslash_joins_lines(capsys):
    repl, prompts = make_repl(['x := 1 + \\', '2', 'x', 'exit'])
    repl.run()
    assert prompts[:2] == [PROMPT, CONTINUATION_PROMPT]
    assert capsys.readouterr().out.splitlines()[1:] == ['3', '3']


def test_repl_state_persists(capsys):
    repl, _ = make_repl(['a := [1]', 'a.append(2)', 'a', 'exit'])
    repl.run()
    assert capsys.readouterr().out.splitlines()[-1] == '[1, 2]'


@pytest.mark.parametrize('line, message', [
    ('1 + 1.0', 'TypeError:'),
    ('"abc', 'LexError:'),
    ('break', "'break' used outside a loop"),
    ('1 2', 'SyntaxError:'),
])
def test_repl_reports_errors_and_continues(capsys, line, message):
    repl, _ = make_repl([line, '2', 'exit'])
    repl.run()
    out, err = capsys.readouterr()
    assert message in err
    assert out.splitlines()[-1] == '2'


def test_exit_only_on_empty_buffer(capsys):
    repl, _ = make_repl(['while false do', 'exit', 'stop', 'exit'])
    repl.run()
    out, err = capsys.readouterr()
    # inside the pending loop body `exit` is just a name
    assert err == ''
    assert out == "Type 'exit' to quit\n"


def test_repl_survives_self_containing_list(capsys):
    repl, _ = make_repl(['a := [1]', 'a.append(a)', 'a', '2', 'exit'])
    repl.run()
    out, err = capsys.readouterr()
    assert err == ''
    assert out.splitlines()[-2:] == ['[1, [...]]', '2']


def test_repl_reports_runaway_recursion(capsys):
    repl, _ = make_repl(['def f(n) as return f(n + 1) stop', 'f(0)', '2', 'exit'])
    repl.run()
    out, err = capsys.readouterr()
    assert 'Maximum recursion depth exceeded' in err
    assert out.splitlines()[-1] == '2'


def test_repl_reports_recursion_outside_evaluation(capsys, monkeypatch):
    repl, _ = make_repl(['1', '2', 'exit'])

    def overflow(source):
        if source == '1\n':
            raise RecursionError
        return []
    monkeypatch.setattr(repl.interpreter, 'parse', overflow)
    repl.run()
    out, err = capsys.readouterr()
    assert 'InterpreterError: Maximum recursion depth exceeded' in err
    assert '2' not in out
