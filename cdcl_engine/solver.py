"""
CDCL search driver.

The driver runs a small state machine:
- PROPAGATING: unit propagate to fixpoint
- CONFLICT: analyze the conflict, learn a clause and backjump
- DECIDING: pick an unassigned variable and open a new decision level
until the trail is complete (SAT) or a conflict cannot be undone (UNSAT).

The solver optionally records a search trace of SearchEvents that can be
replayed by verifier.TraceVerifier.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Dict, List, Optional, Union

from .analysis import analyze_conflict
from .clause import Clause, to_literal, var_of
from .errors import InvariantViolation, SolverInterrupted
from .formula import Formula
from .propagation import unit_propagate
from .trail import DECISION, Implied, Trail

logger = logging.getLogger(__name__)


class SearchState(Enum):
    PROPAGATING = auto()
    CONFLICT = auto()
    DECIDING = auto()
    SAT = auto()
    UNSAT = auto()


class EventKind(Enum):
    """Kinds of events recorded in the search trace."""
    DECIDE = auto()
    PROPAGATE = auto()
    CONFLICT = auto()
    LEARN = auto()
    BACKJUMP = auto()
    SAT = auto()
    UNSAT = auto()


@dataclass(frozen=True)
class SearchEvent:
    """
    A single step of the search.

    Attributes:
        kind: What happened.
        level: Decision level after the event (target level for BACKJUMP).
        literal: Assigned literal (DECIDE, PROPAGATE) or UIP literal (LEARN).
        clause: Antecedent (PROPAGATE), conflicting clause (CONFLICT) or learned clause (LEARN).
    """
    kind: EventKind
    level: int
    literal: Optional[int] = None
    clause: Optional[Clause] = None


@dataclass(frozen=True)
class Sat:
    """Satisfiable, with a complete assignment over the declared variables."""
    assignment: Dict[int, bool] = field(hash=False)

    @property
    def is_sat(self) -> bool:
        return True

    def __str__(self) -> str:
        return "SAT"


@dataclass(frozen=True)
class Unsat:
    """Unsatisfiable."""

    @property
    def is_sat(self) -> bool:
        return False

    def __str__(self) -> str:
        return "UNSAT"


Answer = Union[Sat, Unsat]


@dataclass
class SearchStats:
    decisions: int = 0
    propagations: int = 0
    conflicts: int = 0
    learned: int = 0
    max_level: int = 0
    elapsed: float = 0.0


class CDCLSolver:
    """
    CDCL SAT solver.

    The solver owns a private copy of the input formula and a trail:
    - formula: original clauses plus learned clauses appended during search
    - trail: assignments with their decision levels and reasons
    - stats: counters for the last solve() call
    - events: search trace when record_trace is enabled
    """

    def __init__(
        self,
        formula: Formula,
        polarity: bool = False,
        interrupt: Optional[Callable[[], bool]] = None,
        record_trace: bool = False
    ):
        """
        Args:
            formula: Input formula. It is copied and never modified.
            polarity: Value given to decision variables.
            interrupt: Called once per decision; the search stops with
                SolverInterrupted when it returns True.
            record_trace: Record SearchEvents in self.events.
        """
        self.formula = formula.copy()
        self.polarity = polarity
        self.interrupt = interrupt
        self.record_trace = record_trace

        self.trail = Trail(self.formula.num_vars)
        self.state = SearchState.PROPAGATING
        self.stats = SearchStats()
        self.events: List[SearchEvent] = []
        self._conflict: Optional[Clause] = None

    def solve(self) -> Answer:
        """
        Run the search to completion.

        Returns Sat(assignment) or Unsat().

        Raises:
            SolverInterrupted: If the interrupt check-point fired.
        """
        start = time.perf_counter()
        try:
            while True:
                if self.state == SearchState.PROPAGATING:
                    self._propagate()
                elif self.state == SearchState.CONFLICT:
                    self._resolve_conflict()
                elif self.state == SearchState.DECIDING:
                    self._decide()
                elif self.state == SearchState.SAT:
                    self._record(EventKind.SAT)
                    return Sat(dict(sorted(self.trail.assignment().items())))
                else:
                    self._record(EventKind.UNSAT)
                    return Unsat()
        finally:
            self.stats.elapsed = time.perf_counter() - start
            logger.debug(
                "Search finished (%s): %d decisions, %d propagations, %d conflicts, "
                "%d learned, max level %d, %.3fs",
                self.state.name, self.stats.decisions, self.stats.propagations,
                self.stats.conflicts, self.stats.learned, self.stats.max_level,
                self.stats.elapsed
            )

    def _propagate(self) -> None:
        mark = len(self.trail)
        conflict = unit_propagate(self.formula, self.trail)

        new_entries = self.trail.entries[mark:]
        self.stats.propagations += len(new_entries)
        if self.record_trace:
            for entry in new_entries:
                self._record(EventKind.PROPAGATE, entry.literal, entry.reason.antecedent)

        if conflict is not None:
            self._conflict = conflict
            self.state = SearchState.CONFLICT
        elif self.trail.is_complete():
            self.state = SearchState.SAT
        else:
            self.state = SearchState.DECIDING

    def _resolve_conflict(self) -> None:
        conflict = self._conflict
        self._conflict = None
        self.stats.conflicts += 1
        self._record(EventKind.CONFLICT, clause=conflict)

        if self.trail.level == 0:
            logger.debug("Conflict at level 0 on %s", list(conflict))
            self.state = SearchState.UNSAT
            return

        analysis = analyze_conflict(conflict, self.trail)
        if not analysis.learned_clause or analysis.conflict_level == 0:
            self.state = SearchState.UNSAT
            return

        learned = analysis.learned_clause
        self.formula.add_learned(learned)
        self.stats.learned += 1
        self._record(EventKind.LEARN, analysis.uip_literal, learned)

        self.trail.pop_to(analysis.backjump_level)
        self._record(EventKind.BACKJUMP)
        logger.debug(
            "Conflict at level %d, backjump to %d", analysis.conflict_level,
            analysis.backjump_level
        )

        uip = analysis.uip_literal
        self.trail.push(var_of(uip), uip > 0, Implied(learned))
        self.stats.propagations += 1
        self._record(EventKind.PROPAGATE, uip, learned)

        self.state = SearchState.PROPAGATING

    def _decide(self) -> None:
        if self.interrupt is not None and self.interrupt():
            raise SolverInterrupted(self.stats.decisions, self.stats.conflicts)

        var = self._pick_branching_variable()
        level = self.trail.new_decision_level()
        self.trail.push(var, self.polarity, DECISION)

        self.stats.decisions += 1
        self.stats.max_level = max(self.stats.max_level, level)
        self._record(EventKind.DECIDE, to_literal(var, self.polarity))

        self.state = SearchState.PROPAGATING

    def _pick_branching_variable(self) -> int:
        """Lowest-index unassigned variable."""
        for var in range(1, self.formula.num_vars + 1):
            if not self.trail.is_assigned(var):
                return var
        raise InvariantViolation("No unassigned variable left to decide")

    def _record(self, kind: EventKind, literal: Optional[int] = None,
                clause: Optional[Clause] = None) -> None:
        if self.record_trace:
            self.events.append(SearchEvent(kind, self.trail.level, literal, clause))


def solve(formula: Formula, **options) -> Answer:
    """
    Decide satisfiability of a formula.

    Keyword options are passed to CDCLSolver.
    """
    return CDCLSolver(formula, **options).solve()
