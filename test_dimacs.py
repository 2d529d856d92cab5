"""
Tests for DIMACS reading/writing and output formatting.
"""

import logging

import pytest

from cdcl_engine import (
    DimacsParseError,
    Formula,
    FormulaError,
    Sat,
    Unsat,
    fmt_answer,
    fmt_assignments,
    fmt_clause,
    fmt_lit,
    fmt_model,
    format_dimacs,
    parse_dimacs,
    read_dimacs,
    solve,
    write_dimacs,
)


SATLIB_STYLE = """c This Formular is generated by mkcnf
c
p cnf 3 2
 1 -3
 2 0
-1 2 3 0
%
0

"""


def test_parse_comments_and_multiline_clauses():
    formula = parse_dimacs(SATLIB_STYLE)
    assert formula.num_vars == 3
    assert formula.clauses == [(1, -3, 2), (-1, 2, 3)]


def test_unterminated_last_clause():
    formula = parse_dimacs("p cnf 2 2\n1 2 0\n-1 -2\n")
    assert formula.clauses == [(1, 2), (-1, -2)]


def test_bare_zero_is_empty_clause():
    formula = parse_dimacs("p cnf 1 2\n1 0\n0\n")
    assert formula.clauses == [(1,), ()]
    assert solve(formula) == Unsat()


def test_missing_header():
    with pytest.raises(DimacsParseError):
        parse_dimacs("c only a comment\n")


def test_clause_before_header():
    with pytest.raises(DimacsParseError) as excinfo:
        parse_dimacs("1 2 0\np cnf 2 1\n")
    assert excinfo.value.line_number == 1


def test_malformed_and_duplicate_header():
    with pytest.raises(DimacsParseError):
        parse_dimacs("p sat 2 1\n1 0\n")
    with pytest.raises(DimacsParseError) as excinfo:
        parse_dimacs("p cnf 2 1\np cnf 2 1\n1 0\n")
    assert excinfo.value.line_number == 2


def test_invalid_token():
    with pytest.raises(DimacsParseError) as excinfo:
        parse_dimacs("p cnf 2 1\n\n1 x 0\n")
    assert excinfo.value.line_number == 3
    assert "'x'" in str(excinfo.value)


def test_literal_beyond_declared_variables():
    with pytest.raises(DimacsParseError):
        parse_dimacs("p cnf 2 1\n1 3 0\n")


def test_clause_count_mismatch_warns(caplog):
    with caplog.at_level(logging.WARNING):
        formula = parse_dimacs("p cnf 2 3\n1 0\n2 0\n")
    assert len(formula) == 2
    assert "declares 3 clauses" in caplog.text


def test_formula_rejects_bad_literals():
    with pytest.raises(FormulaError):
        Formula(2, [[1, 0]])
    with pytest.raises(FormulaError):
        Formula(2, [[3]])
    with pytest.raises(FormulaError):
        Formula(2, [[True]])
    with pytest.raises(FormulaError):
        Formula(2, [[1, False]])
    assert Formula.from_clauses([[1, -4], [2]]).num_vars == 4


def test_write_and_read(tmp_path):
    formula = Formula(4, [[1, -2], [3, 4, -1], [2]])
    path = tmp_path / "out" / "f.cnf"
    write_dimacs(formula, path, comment="generated\nby test")

    text = path.read_text()
    assert text.startswith("c generated\nc by test\np cnf 4 3\n")
    assert "3 4 -1 0" in text
    assert read_dimacs(path).clauses == formula.clauses


def test_format_writes_only_original_clauses():
    formula = Formula(2, [[1, 2]])
    formula.add_learned((1,))
    assert format_dimacs(formula) == "p cnf 2 1\n1 2 0\n"


def test_fmt_helpers():
    assert fmt_lit(5) == "+x5"
    assert fmt_lit(-5) == "-x5"
    assert fmt_clause((1, -2)) == "( +x1 -x2 )"
    assert fmt_clause(()) == "( )"
    assert fmt_assignments({2: False, 1: True}) == "x1=True , x2=False"
    assert fmt_model({1: True, 2: False}) == ["v 1 -2 0"]
    assert fmt_model({v: True for v in range(1, 4)}, width=2) == ["v 1 2", "v 3 0"]
    assert fmt_answer(Sat({1: True}), model=True) == "SAT\nv 1 0"
    assert fmt_answer(Unsat(), model=True) == "UNSAT"
