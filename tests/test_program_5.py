from pathlib import Path

from stoplang.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parents[1] / 'examples'


def test_program_5_strings_and_builtins(capsys):
    with open(EXAMPLES / 'program_5.stop', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines == [
        'stoplang 8',
        'true true',
        'true',
        '5 1.5',
        '3.14 3 -2 2',
        'int float str list dict',
        'tab\tand "quote"',
    ]
