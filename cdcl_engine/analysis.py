"""
Conflict analysis using the first UIP scheme.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .clause import Clause, resolve, var_of
from .errors import InvariantViolation
from .trail import Implied, Trail

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConflictAnalysis:
    """
    Result of analyzing one conflict.

    Attributes:
        learned_clause: Clause derived by resolution. Empty means UNSAT.
        uip_literal: The single literal of the learned clause assigned at the
            conflict level, or None for an empty clause.
        backjump_level: Second highest level in the learned clause (0 for a unit clause).
        conflict_level: Highest level among the conflict clause literals.
        resolutions: Number of resolution steps performed.
    """
    learned_clause: Clause
    uip_literal: Optional[int]
    backjump_level: int
    conflict_level: int
    resolutions: int = 0


def analyze_conflict(conflict: Clause, trail: Trail) -> ConflictAnalysis:
    """
    Derive a learned clause from a conflicting clause.

    Starting from the conflict clause, repeatedly resolve with the antecedent
    of the most recently assigned variable at the conflict level until only
    one literal from that level remains.

    Raises:
        InvariantViolation: If a literal is unassigned or the variable to be
            resolved away was a decision.
    """
    working: Clause = tuple(conflict)
    if not working:
        return ConflictAnalysis((), None, 0, 0)

    conflict_level = max(trail.level_of(var_of(lit)) for lit in working)
    resolutions = 0

    while True:
        at_level = [lit for lit in working if trail.level_of(var_of(lit)) == conflict_level]
        if len(at_level) <= 1:
            break

        # most recent assignment at the conflict level
        lit = max(at_level, key=lambda l: trail.vardata(var_of(l)).index)
        var = var_of(lit)
        reason = trail.reason_of(var)
        if not isinstance(reason, Implied):
            raise InvariantViolation(
                f"Cannot resolve on decision variable x{var} at level {conflict_level}"
            )

        working = resolve(working, reason.antecedent, var)
        resolutions += 1
        if not working:
            logger.debug("Resolution derived the empty clause")
            return ConflictAnalysis((), None, 0, conflict_level, resolutions)

    uip_literal = at_level[0] if at_level else None
    lower_levels = [
        trail.level_of(var_of(lit)) for lit in working if lit != uip_literal
    ]
    backjump_level = max(lower_levels, default=0)

    logger.debug(
        "Learned clause %s (uip %s, conflict level %d, backjump %d, %d resolutions)",
        list(working), uip_literal, conflict_level, backjump_level, resolutions
    )

    return ConflictAnalysis(working, uip_literal, backjump_level, conflict_level, resolutions)
