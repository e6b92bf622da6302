from pathlib import Path

from stoplang.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parents[1] / 'examples'


def test_program_4_containers(capsys):
    with open(EXAMPLES / 'program_4.stop', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip()
    assert out == '\n'.join([
        '[1, 2, 3, 4]',
        '[[1, 9], [3, 4]]',
        '{"x": 1, 2: "two", "y": [true, false]}',
        '3 true false',
        'x 1',
        '2 two',
        'y [true, false]',
        '{2: "two", "y": [true, false]}',
        'padded 6',
        'e',
        '[4, 5] 2',
    ])
