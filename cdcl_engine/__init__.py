"""
CDCL Engine Package

A conflict-driven clause-learning SAT solver: assignment trail, unit
propagation, first-UIP conflict analysis and non-chronological
backjumping, plus DIMACS I/O and a benchmark harness.
"""

from .clause import Clause, make_clause, resolve, var_of, to_literal
from .formula import Formula, generate_random_formula
from .trail import Trail, TrailEntry, VarData, Decision, Implied, DECISION
from .propagation import unit_propagate
from .analysis import ConflictAnalysis, analyze_conflict
from .solver import (
    CDCLSolver, solve, Sat, Unsat, SearchState, SearchStats,
    SearchEvent, EventKind
)
from .dimacs import parse_dimacs, read_dimacs, format_dimacs, write_dimacs
from .format import (
    fmt_lit, fmt_clause, fmt_assignments, fmt_model, fmt_answer,
    fmt_event, fmt_trace
)
from .verifier import (
    TraceVerifier, verify_solver_trace, check_answer,
    brute_force_satisfiable, pysat_satisfiable
)
from .errors import (
    FormulaError, DimacsParseError, InvariantViolation, SolverInterrupted
)

__all__ = [
    # Clause model
    'Clause',
    'make_clause',
    'resolve',
    'var_of',
    'to_literal',

    # Formula
    'Formula',
    'generate_random_formula',

    # Trail
    'Trail',
    'TrailEntry',
    'VarData',
    'Decision',
    'Implied',
    'DECISION',

    # Search
    'unit_propagate',
    'ConflictAnalysis',
    'analyze_conflict',
    'CDCLSolver',
    'solve',
    'Sat',
    'Unsat',
    'SearchState',
    'SearchStats',
    'SearchEvent',
    'EventKind',

    # DIMACS
    'parse_dimacs',
    'read_dimacs',
    'format_dimacs',
    'write_dimacs',

    # Formatting
    'fmt_lit',
    'fmt_clause',
    'fmt_assignments',
    'fmt_model',
    'fmt_answer',
    'fmt_event',
    'fmt_trace',

    # Verification
    'TraceVerifier',
    'verify_solver_trace',
    'check_answer',
    'brute_force_satisfiable',
    'pysat_satisfiable',

    # Errors
    'FormulaError',
    'DimacsParseError',
    'InvariantViolation',
    'SolverInterrupted',
]
