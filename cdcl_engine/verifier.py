"""
Verification of solver answers and search traces.

- check_answer: a SAT answer must satisfy every original clause
- brute_force_satisfiable: exhaustive check for small formulas
- pysat_satisfiable: cross-check against an external solver
- TraceVerifier: replays a recorded search trace and checks trail invariants
"""

import itertools
import logging
from typing import Dict, List, Optional, Tuple

from pysat.solvers import Glucose3

from .clause import var_of
from .formula import Formula
from .solver import Answer, EventKind, SearchEvent

logger = logging.getLogger(__name__)

MAX_BRUTE_FORCE_VARS = 20


def check_answer(formula: Formula, answer: Answer) -> bool:
    """
    Check a SAT answer against the original clauses.

    UNSAT answers cannot be checked this way and are accepted.
    """
    if not answer.is_sat:
        return True
    assignment = answer.assignment
    if set(assignment) != set(range(1, formula.num_vars + 1)):
        return False
    return formula.evaluate(assignment) is True


def brute_force_satisfiable(formula: Formula) -> Optional[Dict[int, bool]]:
    """
    Search all assignments of a small formula.

    Returns a satisfying assignment, or None if there is none.
    """
    if formula.num_vars > MAX_BRUTE_FORCE_VARS:
        raise ValueError(
            f"Brute force limited to {MAX_BRUTE_FORCE_VARS} variables, got {formula.num_vars}"
        )

    variables = range(1, formula.num_vars + 1)
    for values in itertools.product((False, True), repeat=formula.num_vars):
        assignment = dict(zip(variables, values))
        if formula.evaluate(assignment):
            return assignment
    return None


def pysat_satisfiable(formula: Formula) -> bool:
    """Decide the original clauses with PySAT's Glucose3."""
    g = Glucose3()
    try:
        for clause in formula.original_clauses:
            g.add_clause(list(clause))
        return g.solve()
    finally:
        g.delete()


class TraceVerifier:
    """
    Replays a search trace and checks it is a valid CDCL run.

    The verifier rebuilds the assignment from DECIDE, PROPAGATE and BACKJUMP
    events and checks at every step that:
    - a variable is assigned at most once
    - each decision opens exactly one new level
    - each propagation is forced by its antecedent
    - each conflict clause is false under the replayed assignment
    - backjumps go to a lower level and drop everything above it
    """

    def __init__(self, formula: Formula, events: List[SearchEvent]):
        self.formula = formula
        self.events = events
        self.assignments: Dict[int, Tuple[bool, int]] = {}
        self.level = 0
        self.errors: List[str] = []

    def verify(self, final_assignment: Optional[Dict[int, bool]] = None) -> bool:
        """
        Verify all events.

        Args:
            final_assignment: If given, the replayed assignment at the end of
                a SAT trace must equal it.

        Returns True if the trace is consistent, False otherwise.
        """
        self.assignments = {}
        self.level = 0
        self.errors = []

        for position, event in enumerate(self.events):
            if not self._replay(event):
                logger.warning("Trace check failed at event %d: %s", position, self.errors[-1])
                return False

        if final_assignment is not None:
            replayed = {var: value for var, (value, _) in self.assignments.items()}
            if replayed != final_assignment:
                self.errors.append("final assignment differs from replayed trail")
                return False
        return True

    def _replay(self, event: SearchEvent) -> bool:
        if event.kind == EventKind.DECIDE:
            return self._replay_decide(event)
        if event.kind == EventKind.PROPAGATE:
            return self._replay_propagate(event)
        if event.kind == EventKind.CONFLICT:
            return self._check(
                self._clause_false(event.clause),
                f"conflict clause {list(event.clause)} is not false"
            )
        if event.kind == EventKind.BACKJUMP:
            return self._replay_backjump(event)
        if event.kind == EventKind.SAT:
            return self._check(
                len(self.assignments) == self.formula.num_vars,
                "SAT reported with unassigned variables"
            )
        return True

    def _replay_decide(self, event: SearchEvent) -> bool:
        var = var_of(event.literal)
        if not self._check(var not in self.assignments, f"x{var} decided twice"):
            return False
        if not self._check(event.level == self.level + 1,
                           f"decision at level {event.level} after level {self.level}"):
            return False
        self.level = event.level
        self.assignments[var] = (event.literal > 0, self.level)
        return True

    def _replay_propagate(self, event: SearchEvent) -> bool:
        var = var_of(event.literal)
        if not self._check(var not in self.assignments, f"x{var} propagated twice"):
            return False
        if not self._check(event.level == self.level,
                           f"propagation recorded at level {event.level}, current {self.level}"):
            return False
        others = [lit for lit in event.clause if lit != event.literal]
        if not self._check(
            event.literal in event.clause and self._clause_false(others),
            f"{list(event.clause)} does not force {event.literal}"
        ):
            return False
        self.assignments[var] = (event.literal > 0, self.level)
        return True

    def _replay_backjump(self, event: SearchEvent) -> bool:
        if not self._check(event.level < self.level,
                           f"backjump from level {self.level} to {event.level}"):
            return False
        self.level = event.level
        self.assignments = {
            var: (value, lvl) for var, (value, lvl) in self.assignments.items()
            if lvl <= event.level
        }
        return True

    def _clause_false(self, clause) -> bool:
        for lit in clause:
            entry = self.assignments.get(var_of(lit))
            if entry is None or entry[0] == (lit > 0):
                return False
        return True

    def _check(self, condition: bool, message: str) -> bool:
        if not condition:
            self.errors.append(message)
        return condition


def verify_solver_trace(solver) -> bool:
    """
    Verify the recorded trace of a CDCLSolver instance.

    Args:
        solver: CDCLSolver constructed with record_trace=True, after solve().

    Returns:
        True if the trace is valid, False otherwise.
    """
    final = solver.trail.assignment() if solver.trail.is_complete() else None
    verifier = TraceVerifier(solver.formula, solver.events)
    return verifier.verify(final)
