from pathlib import Path

from stoplang.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parents[1] / 'examples'


def test_program_1_arithmetic_and_casts(capsys):
    with open(EXAMPLES / 'program_1.stop', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip()
    assert out == '\n'.join([
        '3 3 1',
        '-3 -4 -1',
        '1024 0',
        '3.5',
        '3.5',
        '7',
        '3 1',
        '10',
    ])
