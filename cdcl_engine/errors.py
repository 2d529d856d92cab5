"""
Custom exceptions for the CDCL engine.
"""

from typing import Optional


class FormulaError(ValueError):
    """Raised when a formula is built from invalid literals."""

    def __init__(self, message: str, clause: Optional[tuple] = None):
        self.clause = clause
        super().__init__(self._format_message(message))

    def _format_message(self, message: str) -> str:
        msg = f"Invalid formula: {message}"
        if self.clause is not None:
            msg += f"\n  Clause: {list(self.clause)}"
        return msg


class DimacsParseError(ValueError):
    """Raised when a DIMACS CNF document cannot be parsed."""

    def __init__(self, reason: str, line_number: int = -1, line: str = ""):
        self.reason = reason
        self.line_number = line_number
        self.line = line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"DIMACS parse error at line {self.line_number}: {self.reason}"
        if self.line:
            msg += f"\n  Line: {repr(self.line)}"
        return msg


class InvariantViolation(RuntimeError):
    """
    Raised when the solver state breaks one of its own invariants.

    These signal a defect in the search logic, not a property of the input,
    and are never caught inside the engine.
    """

    def __init__(self, message: str):
        super().__init__(message)


class SolverInterrupted(Exception):
    """Raised when the interrupt check-point asks the search to stop."""

    def __init__(self, decisions: int = 0, conflicts: int = 0):
        self.decisions = decisions
        self.conflicts = conflicts
        super().__init__(
            f"Search interrupted after {decisions} decisions and {conflicts} conflicts"
        )
