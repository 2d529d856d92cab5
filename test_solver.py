"""
Tests for the CDCL search driver.

Random formulas are cross-checked against brute force and PySAT, and
recorded search traces are replayed by the trace verifier.
"""

import itertools
import random

import pytest

from cdcl_engine import (
    CDCLSolver,
    EventKind,
    Formula,
    Sat,
    SolverInterrupted,
    Unsat,
    brute_force_satisfiable,
    check_answer,
    generate_random_formula,
    pysat_satisfiable,
    solve,
    verify_solver_trace,
)


def pigeonhole(pigeons: int, holes: int) -> Formula:
    """Unsatisfiable when pigeons > holes."""
    def p(i, j):
        return i * holes + j + 1

    clauses = [[p(i, j) for j in range(holes)] for i in range(pigeons)]
    for j in range(holes):
        for i, k in itertools.combinations(range(pigeons), 2):
            clauses.append([-p(i, j), -p(k, j)])
    return Formula(pigeons * holes, clauses)


def random_formulas(count: int, var_min: int = 3, var_max: int = 10, seed: int = 0):
    rng = random.Random(seed)
    for _ in range(count):
        yield generate_random_formula(rng.randint(var_min, var_max), rng=rng)


# --- scenarios ---

def test_unit_chain_is_sat():
    answer = solve(Formula(2, [[1], [-1, 2]]))
    assert answer == Sat({1: True, 2: True})
    assert str(answer) == "SAT"


def test_contradicting_units_unsat_at_level_zero():
    solver = CDCLSolver(Formula(1, [[1], [-1]]))
    answer = solver.solve()
    assert answer == Unsat()
    assert str(answer) == "UNSAT"
    assert solver.stats.decisions == 0
    assert solver.stats.conflicts == 1
    assert solver.trail.level == 0


def test_classic_two_variable_unsat():
    formula = Formula(2, [[1, 2], [-1, 2], [1, -2], [-1, -2]])
    solver = CDCLSolver(formula)
    assert solver.solve() == Unsat()
    assert solver.formula.learned_clauses == [(1,)]
    assert solver.stats.decisions == 1
    assert solver.stats.conflicts == 2


def test_empty_clause_is_unsat():
    solver = CDCLSolver(Formula(2, [[1, 2], []]))
    assert solver.solve() == Unsat()
    assert solver.stats.decisions == 0


def test_no_clauses_uses_default_polarity():
    assert solve(Formula(3, [])) == Sat({1: False, 2: False, 3: False})
    assert solve(Formula(3, []), polarity=True) == Sat({1: True, 2: True, 3: True})
    assert solve(Formula(0, [])) == Sat({})


def test_input_formula_is_not_extended():
    formula = Formula(2, [[1, 2], [-1, 2], [1, -2], [-1, -2]])
    solver = CDCLSolver(formula)
    solver.solve()
    assert len(formula) == 4
    assert formula.learned_clauses == []
    assert len(solver.formula) == 5


def test_pigeonhole_unsat():
    formula = pigeonhole(4, 3)
    assert brute_force_satisfiable(formula) is None
    assert solve(formula) == Unsat()


def test_pigeonhole_fits():
    formula = pigeonhole(3, 3)
    answer = solve(formula)
    assert answer.is_sat
    assert check_answer(formula, answer)


# --- soundness ---

def test_sat_answers_satisfy_original_formula():
    for formula in random_formulas(80, seed=1):
        answer = solve(formula)
        if answer.is_sat:
            assert set(answer.assignment) == set(range(1, formula.num_vars + 1))
            assert formula.evaluate(answer.assignment) is True


def test_verdicts_match_brute_force():
    for formula in random_formulas(80, var_max=12, seed=2):
        expected = brute_force_satisfiable(formula) is not None
        assert solve(formula).is_sat == expected, formula.original_clauses


def test_verdicts_match_pysat():
    for formula in random_formulas(40, var_min=10, var_max=25, seed=3):
        assert solve(formula).is_sat == pysat_satisfiable(formula)


@pytest.mark.parametrize("polarity", [False, True])
def test_polarity_does_not_change_verdict(polarity):
    for formula in random_formulas(30, seed=4):
        assert solve(formula, polarity=polarity).is_sat == solve(formula).is_sat


def test_learned_clauses_are_implied():
    for formula in random_formulas(30, var_max=8, seed=5):
        solver = CDCLSolver(formula)
        solver.solve()
        variables = range(1, formula.num_vars + 1)
        for values in itertools.product((False, True), repeat=formula.num_vars):
            assignment = dict(zip(variables, values))
            if not formula.evaluate(assignment):
                continue
            for clause in solver.formula.learned_clauses:
                assert any(assignment[abs(lit)] == (lit > 0) for lit in clause)


def test_learned_clauses_are_new():
    for formula in random_formulas(60, seed=10):
        solver = CDCLSolver(formula)
        solver.solve()
        original = {frozenset(c) for c in formula.original_clauses}
        learned = [frozenset(c) for c in solver.formula.learned_clauses]
        assert len(set(learned)) == len(learned)
        assert not original.intersection(learned)


def test_answers_are_hashable():
    assert hash(Sat({1: True})) == hash(Sat({1: True}))
    assert len({Sat({1: True}), Sat({1: True}), Unsat()}) == 2


def test_deterministic_search():
    for formula in random_formulas(10, seed=6):
        first = CDCLSolver(formula, record_trace=True)
        second = CDCLSolver(formula, record_trace=True)
        assert first.solve() == second.solve()
        assert first.events == second.events


# --- search trace ---

def test_trace_replays():
    for formula in random_formulas(60, seed=7):
        solver = CDCLSolver(formula, record_trace=True)
        solver.solve()
        assert verify_solver_trace(solver)


def test_trace_levels():
    formula = Formula(2, [[1, 2], [-1, 2], [1, -2], [-1, -2]])
    solver = CDCLSolver(formula, record_trace=True)
    solver.solve()

    kinds = [event.kind for event in solver.events]
    assert kinds == [
        EventKind.DECIDE,
        EventKind.PROPAGATE,
        EventKind.CONFLICT,
        EventKind.LEARN,
        EventKind.BACKJUMP,
        EventKind.PROPAGATE,
        EventKind.PROPAGATE,
        EventKind.CONFLICT,
        EventKind.UNSAT,
    ]
    decide = solver.events[0]
    assert (decide.literal, decide.level) == (-1, 1)
    assert solver.events[4].level == 0


def test_learned_literal_is_propagated_after_backjump():
    for formula in random_formulas(40, seed=8):
        solver = CDCLSolver(formula, record_trace=True)
        solver.solve()
        events = solver.events
        for i, event in enumerate(events):
            if event.kind != EventKind.LEARN:
                continue
            assert events[i + 1].kind == EventKind.BACKJUMP
            follow = events[i + 2]
            assert follow.kind == EventKind.PROPAGATE
            assert follow.literal == event.literal
            assert follow.clause == event.clause


def test_tampered_trace_is_rejected():
    formula = Formula(2, [[1], [-1, 2]])
    solver = CDCLSolver(formula, record_trace=True)
    solver.solve()
    solver.events.append(solver.events[0])
    assert not verify_solver_trace(solver)


def test_trail_is_monotone_at_sat():
    for formula in random_formulas(30, seed=9):
        solver = CDCLSolver(formula)
        if solver.solve().is_sat:
            levels = [entry.level for entry in solver.trail.entries]
            assert all(a <= b for a, b in zip(levels, levels[1:]))


# --- interruption ---

def test_interrupt_checked_per_decision():
    calls = []

    def interrupt():
        calls.append(1)
        return len(calls) > 2

    with pytest.raises(SolverInterrupted) as excinfo:
        solve(Formula(5, []), interrupt=interrupt)
    assert excinfo.value.decisions == 2
    assert len(calls) == 3


def test_interrupt_not_consulted_without_decisions():
    assert solve(Formula(1, [[1]]), interrupt=lambda: True) == Sat({1: True})
