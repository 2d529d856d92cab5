"""
Tests for the solve.py command-line entry point.
"""

import solve as solve_cli


def _cnf(tmp_path, text, name="f.cnf"):
    path = tmp_path / name
    path.write_text(text)
    return str(path)


def test_prints_sat(tmp_path, capsys):
    path = _cnf(tmp_path, "p cnf 2 2\n1 0\n-1 2 0\n")
    assert solve_cli.main([path]) == 0
    assert capsys.readouterr().out.strip() == "SAT"


def test_prints_model(tmp_path, capsys):
    path = _cnf(tmp_path, "p cnf 2 2\n1 0\n-1 2 0\n")
    assert solve_cli.main([path, "--model"]) == 0
    assert capsys.readouterr().out.splitlines() == ["SAT", "v 1 2 0"]


def test_prints_unsat(tmp_path, capsys):
    path = _cnf(tmp_path, "p cnf 2 4\n1 2 0\n-1 2 0\n1 -2 0\n-1 -2 0\n")
    assert solve_cli.main([path]) == 0
    assert "UNSAT" in capsys.readouterr().out


def test_trace_and_polarity(tmp_path, capsys):
    path = _cnf(tmp_path, "p cnf 2 1\n1 2 0\n")
    assert solve_cli.main([path, "--trace", "--polarity", "true", "--model"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("DECIDE")
    assert out[-2:] == ["SAT", "v 1 2 0"]


def test_missing_file(tmp_path, capsys):
    assert solve_cli.main([str(tmp_path / "missing.cnf")]) == 1
    assert "Error reading file" in capsys.readouterr().err


def test_parse_error(tmp_path, capsys):
    path = _cnf(tmp_path, "p cnf 1 1\n2 0\n")
    assert solve_cli.main([path]) == 1
    assert "Error parsing CNF" in capsys.readouterr().err


def test_undecodable_file(tmp_path, capsys):
    path = tmp_path / "binary.cnf"
    path.write_bytes(b"c \xff\xfe\np cnf 1 1\n1 0\n")
    assert solve_cli.main([str(path)]) == 1
    assert "Error reading file" in capsys.readouterr().err
