"""
CNF formulas and random formula generation.
"""

import random
from typing import Iterable, List, Mapping, Optional

from .clause import Clause, make_clause, var_of
from .errors import FormulaError


# Empirically determined clause counts for balanced (phase transition) 3-SAT
BALANCED_CLAUSE_COUNTS = {
    3: 19, 4: 24, 5: 28, 6: 33, 7: 37, 8: 41, 9: 45, 10: 50,
    11: 54, 12: 58, 13: 63, 14: 67, 15: 71, 16: 76, 17: 79,
    18: 83, 19: 87, 20: 92
}


class Formula:
    """
    A CNF formula over variables 1..num_vars.

    The clause list holds the original clauses first, followed by any
    learned clauses appended during search. Clauses are never removed.
    """

    def __init__(self, num_vars: int, clauses: Iterable[Iterable[int]]):
        if num_vars < 0:
            raise FormulaError(f"negative variable count {num_vars}")

        self.num_vars = num_vars
        self.clauses: List[Clause] = []
        for lits in clauses:
            clause = make_clause(lits)
            self._check_clause(clause)
            self.clauses.append(clause)
        self.num_original = len(self.clauses)

    @classmethod
    def from_clauses(cls, clauses: Iterable[Iterable[int]]) -> "Formula":
        """Build a formula whose variable count is the largest variable used."""
        clauses = [list(c) for c in clauses]
        num_vars = max((abs(lit) for c in clauses for lit in c), default=0)
        return cls(num_vars, clauses)

    def _check_clause(self, clause: Clause) -> None:
        for lit in clause:
            if isinstance(lit, bool) or not isinstance(lit, int) or lit == 0:
                raise FormulaError(f"invalid literal {lit!r}", clause)
            if var_of(lit) > self.num_vars:
                raise FormulaError(
                    f"literal {lit} exceeds variable count {self.num_vars}", clause
                )

    @property
    def original_clauses(self) -> List[Clause]:
        return self.clauses[:self.num_original]

    @property
    def learned_clauses(self) -> List[Clause]:
        return self.clauses[self.num_original:]

    def add_learned(self, clause: Clause) -> None:
        """Append a learned clause."""
        self._check_clause(clause)
        self.clauses.append(clause)

    def copy(self) -> "Formula":
        """Fresh formula holding only the original clauses."""
        return Formula(self.num_vars, self.original_clauses)

    def evaluate(self, assignment: Mapping[int, bool]) -> Optional[bool]:
        """
        Evaluate the original clauses under a (possibly partial) assignment.

        Returns True if every clause has a true literal, False if some clause
        has all literals false, and None if the result is undetermined.
        """
        undetermined = False
        for clause in self.original_clauses:
            satisfied = False
            all_assigned = True
            for lit in clause:
                value = assignment.get(var_of(lit))
                if value is None:
                    all_assigned = False
                elif (lit > 0) == value:
                    satisfied = True
                    break
            if satisfied:
                continue
            if all_assigned:
                return False
            undetermined = True
        return None if undetermined else True

    def __len__(self) -> int:
        return len(self.clauses)

    def __repr__(self) -> str:
        return (f"Formula(num_vars={self.num_vars}, original={self.num_original}, "
                f"learned={len(self.clauses) - self.num_original})")


def generate_random_formula(
    n_vars: int,
    clause_length: int = 3,
    variance: float = 0.1,
    n_clauses: Optional[int] = None,
    rng: Optional[random.Random] = None
) -> Formula:
    """
    Generate a random k-SAT formula near the phase transition.

    Args:
        n_vars: Number of variables, numbered 1..n_vars.
        clause_length: Number of literals per clause (default 3 for 3-SAT).
        variance: Relative standard deviation in clause count (e.g., 0.1 = +/-10%).
        n_clauses: Fixed number of clauses. If None, uses phase transition estimate.
        rng: Random source, so that instance families can be reproduced from a seed.

    Returns:
        A Formula over exactly n_vars variables.
    """
    if clause_length > n_vars:
        raise FormulaError(f"clause length {clause_length} exceeds {n_vars} variables")

    rng = rng or random.Random()

    if n_clauses is None:
        base = BALANCED_CLAUSE_COUNTS.get(n_vars, int(n_vars * 4.26))
        delta = int(base * variance)
        n_clauses = rng.randint(base - delta, base + delta)

    variables = list(range(1, n_vars + 1))

    clauses = []
    for _ in range(n_clauses):
        clause_vars = rng.sample(variables, clause_length)
        clause = [var if rng.random() < 0.5 else -var for var in clause_vars]
        clauses.append(clause)

    return Formula(n_vars, clauses)
