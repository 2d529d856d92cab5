"""
Literal and clause model.

A literal is a non-zero signed integer: the variable is its absolute value
and the sign is its polarity. A clause is an immutable tuple of literals.
"""

from typing import Iterable, Optional, Tuple

from .errors import InvariantViolation

Clause = Tuple[int, ...]


def var_of(lit: int) -> int:
    """Variable index of a literal: -5 -> 5"""
    return abs(lit)


def to_literal(var: int, value: bool) -> int:
    """Literal that is true when `var` takes `value`."""
    return var if value else -var


def make_clause(literals: Iterable[int]) -> Clause:
    """
    Build a clause from literals.

    Duplicate literals collapse to their first occurrence so that a clause
    such as (1 1 -2) behaves as (1 -2) during propagation.
    """
    return tuple(dict.fromkeys(literals))


def resolve(left: Clause, right: Clause, var: Optional[int] = None) -> Clause:
    """
    Resolve two clauses on a variable.

    The result is the union of both clauses minus the complementary pair on
    `var`, with duplicates collapsed. When `var` is omitted the pivot is the
    first variable of `left` that appears with opposite sign in `right`.

    Raises:
        InvariantViolation: If the clauses do not clash on the pivot.
    """
    if var is None:
        right_lits = set(right)
        for lit in left:
            if -lit in right_lits:
                var = var_of(lit)
                break
        else:
            raise InvariantViolation(
                f"No complementary pair between {list(left)} and {list(right)}"
            )

    left_has = {lit for lit in left if var_of(lit) == var}
    right_has = {lit for lit in right if var_of(lit) == var}
    if not any(-lit in right_has for lit in left_has):
        raise InvariantViolation(
            f"Cannot resolve {list(left)} and {list(right)} on x{var}"
        )

    return make_clause(
        lit for lit in left + right if var_of(lit) != var
    )
