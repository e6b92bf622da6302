from pathlib import Path

import pytest

from stoplang.__main__ import main

EXAMPLES = Path(__file__).resolve().parents[1] / 'examples'


def test_cli_runs_program(capsys):
    main([str(EXAMPLES / 'program_3.stop')])
    assert capsys.readouterr().out.strip() == '610\n1 10\n21'


def test_cli_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / 'missing.stop')])
    assert exc.value.code == 1
    assert 'not found' in capsys.readouterr().err


def test_cli_reports_runtime_error(tmp_path, capsys):
    program = tmp_path / 'bad.stop'
    program.write_text('print("before")\nx = 1\n', encoding='utf-8')
    with pytest.raises(SystemExit) as exc:
        main([str(program)])
    assert exc.value.code == 1
    out, err = capsys.readouterr()
    assert out == 'before\n'
    assert 'Runtime error: NameError: Undefined variable: x' in err


def test_cli_writes_debug_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    program = tmp_path / 'p.stop'
    program.write_text('x := 1\n', encoding='utf-8')
    main(['-vv', str(program)])
    assert 'declare x: int = 1' in (tmp_path / 'debug.txt').read_text(encoding='utf-8')
