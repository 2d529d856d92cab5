"""
Unit propagation.

Without watched literals every pass scans the whole clause list, so a
propagation step costs O(total literals). Clauses are visited in formula
order and literals in clause order, which keeps the search deterministic.
"""

from typing import Optional, Tuple

from .clause import Clause, var_of
from .formula import Formula
from .trail import Implied, Trail


def clause_status(clause: Clause, trail: Trail) -> Tuple[bool, int, Optional[int]]:
    """
    Evaluate a clause under the trail.

    Returns (satisfied, n_unassigned, unassigned_literal). Counting stops at
    two unassigned literals since the clause can then be neither unit nor
    conflicting.
    """
    n_unassigned = 0
    unassigned_lit = None

    for lit in clause:
        value = trail.literal_value(lit)
        if value is None:
            n_unassigned += 1
            if n_unassigned == 1:
                unassigned_lit = lit
            else:
                return False, n_unassigned, None
        elif value:
            return True, n_unassigned, None

    return False, n_unassigned, unassigned_lit


def unit_propagate(formula: Formula, trail: Trail) -> Optional[Clause]:
    """
    Propagate unit clauses to fixpoint.

    Returns the first clause found with every literal false, or None once a
    full pass over the formula forces nothing new.
    """
    while True:
        propagated = False

        for clause in formula.clauses:
            satisfied, n_unassigned, lit = clause_status(clause, trail)
            if satisfied:
                continue

            if n_unassigned == 0:
                return clause

            if n_unassigned == 1:
                trail.push(var_of(lit), lit > 0, Implied(clause))
                propagated = True

        if not propagated:
            return None
