"""
Assignment trail: the single record of solver state.

The trail keeps assignments in chronological order together with the
decision level and reason of each one. Per-variable data is indexed by
variable for O(1) lookup and is kept consistent with the trail on every
push and pop.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from .clause import Clause, to_literal, var_of
from .errors import InvariantViolation


@dataclass(frozen=True)
class Decision:
    """The assignment was a free choice."""


@dataclass(frozen=True)
class Implied:
    """The assignment was forced by an antecedent clause."""
    antecedent: Clause


Reason = Union[Decision, Implied]

DECISION = Decision()


@dataclass(frozen=True)
class TrailEntry:
    var: int
    value: bool
    level: int
    reason: Reason

    @property
    def literal(self) -> int:
        return to_literal(self.var, self.value)


@dataclass(frozen=True)
class VarData:
    """
    Current state of an assigned variable.

    Attributes:
        value: Assigned truth value.
        level: Decision level at which it was assigned.
        reason: Decision or Implied(antecedent).
        index: Position on the trail, used to order assignments by recency.
    """
    value: bool
    level: int
    reason: Reason
    index: int


class Trail:
    """
    Ordered assignment history with per-variable metadata.

    All mutation of assignment state goes through push(), pop_to() and
    new_decision_level().
    """

    def __init__(self, num_vars: int):
        self.num_vars = num_vars
        self.entries: List[TrailEntry] = []
        self.level: int = 0
        self._vardata: List[Optional[VarData]] = [None] * (num_vars + 1)

    def push(self, var: int, value: bool, reason: Reason) -> None:
        """
        Assign `var` at the current decision level.

        Raises:
            InvariantViolation: If the variable is out of range or already assigned.
        """
        if not 1 <= var <= self.num_vars:
            raise InvariantViolation(f"Variable x{var} outside 1..{self.num_vars}")
        if self._vardata[var] is not None:
            raise InvariantViolation(f"Variable x{var} is already assigned")

        self._vardata[var] = VarData(value, self.level, reason, len(self.entries))
        self.entries.append(TrailEntry(var, value, self.level, reason))

    def new_decision_level(self) -> int:
        """Open a new decision level and return it."""
        self.level += 1
        return self.level

    def pop_to(self, level: int) -> List[TrailEntry]:
        """
        Backtrack to `level`.

        Removes every entry assigned above `level`, clears its variable data
        and makes `level` the current decision level.

        Returns:
            The removed entries, most recent first.

        Raises:
            InvariantViolation: If `level` is negative or above the current level.
        """
        if level < 0 or level > self.level:
            raise InvariantViolation(
                f"Cannot pop to level {level} from level {self.level}"
            )

        removed = []
        while self.entries and self.entries[-1].level > level:
            entry = self.entries.pop()
            self._vardata[entry.var] = None
            removed.append(entry)
        self.level = level
        return removed

    def value_of(self, var: int) -> Optional[bool]:
        """None if unassigned, else the assigned value."""
        data = self._vardata[var]
        return None if data is None else data.value

    def literal_value(self, lit: int) -> Optional[bool]:
        """None if the literal's variable is unassigned, else the literal's truth value."""
        data = self._vardata[var_of(lit)]
        if data is None:
            return None
        return data.value == (lit > 0)

    def vardata(self, var: int) -> Optional[VarData]:
        return self._vardata[var]

    def level_of(self, var: int) -> int:
        data = self._vardata[var]
        if data is None:
            raise InvariantViolation(f"Variable x{var} is not assigned")
        return data.level

    def reason_of(self, var: int) -> Reason:
        data = self._vardata[var]
        if data is None:
            raise InvariantViolation(f"Variable x{var} is not assigned")
        return data.reason

    def is_assigned(self, var: int) -> bool:
        return self._vardata[var] is not None

    def is_complete(self) -> bool:
        """True when every declared variable is assigned."""
        return len(self.entries) == self.num_vars

    def assignment(self) -> Dict[int, bool]:
        """Current assignment as a var -> value dict, in trail order."""
        return {entry.var: entry.value for entry in self.entries}

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"Trail(level={self.level}, assigned={len(self.entries)}/{self.num_vars})"
