from pathlib import Path

from stoplang.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parents[1] / 'examples'


def test_program_2_loops(capsys):
    with open(EXAMPLES / 'program_2.stop', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0] == '55'
    # descending range with an explicit negative step
    assert lines[1:5] == ['10', '7', '4', '1']
    assert lines[5:] == ['odd 1', 'odd 3', 'odd 5', 'odd 7']
