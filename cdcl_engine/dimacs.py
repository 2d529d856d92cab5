"""
DIMACS CNF reading and writing.

Format:
    c comment
    p cnf <num_vars> <num_clauses>
    1 -2 3 0
    -1 2 0

Clauses may span several lines and are terminated by 0. SATLIB files end
with a '%' line followed by a stray 0; everything after '%' is ignored.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from .errors import DimacsParseError, FormulaError
from .formula import Formula

logger = logging.getLogger(__name__)

HEADER_PATTERN = re.compile(r"^p\s+cnf\s+(\d+)\s+(\d+)\s*$")


def parse_dimacs(text: str) -> Formula:
    """
    Parse a DIMACS CNF document.

    Args:
        text: Document contents.

    Returns:
        Formula over the declared variable count.

    Raises:
        DimacsParseError: On a missing, repeated or malformed header, a
            non-integer token, or a literal beyond the declared variables.
    """
    num_vars: Optional[int] = None
    num_clauses = 0
    clauses: List[List[int]] = []
    current: List[int] = []

    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("c"):
            continue
        if line.startswith("%"):
            break

        if line.startswith("p"):
            if num_vars is not None:
                raise DimacsParseError("duplicate problem line", line_number, raw)
            match = HEADER_PATTERN.match(line)
            if not match:
                raise DimacsParseError("malformed problem line", line_number, raw)
            num_vars = int(match.group(1))
            num_clauses = int(match.group(2))
            continue

        if num_vars is None:
            raise DimacsParseError("clause before problem line", line_number, raw)

        for token in line.split():
            try:
                lit = int(token)
            except ValueError:
                raise DimacsParseError(f"invalid token {token!r}", line_number, raw) from None

            if lit == 0:
                clauses.append(current)
                current = []
            elif abs(lit) > num_vars:
                raise DimacsParseError(
                    f"literal {lit} exceeds declared {num_vars} variables", line_number, raw
                )
            else:
                current.append(lit)

    if num_vars is None:
        raise DimacsParseError("missing problem line", 0)

    # unterminated final clause
    if current:
        clauses.append(current)

    if len(clauses) != num_clauses:
        logger.warning(
            "Problem line declares %d clauses but %d were read", num_clauses, len(clauses)
        )

    try:
        return Formula(num_vars, clauses)
    except FormulaError as e:
        raise DimacsParseError(str(e)) from e


def read_dimacs(path: Union[str, Path]) -> Formula:
    """Read and parse a DIMACS CNF file."""
    path = Path(path)
    logger.debug("Reading %s", path)
    return parse_dimacs(path.read_text())


def format_dimacs(formula: Formula, comment: str = "") -> str:
    """Render the original clauses of a formula as DIMACS CNF."""
    lines = []
    for comment_line in comment.splitlines():
        lines.append(f"c {comment_line}")
    lines.append(f"p cnf {formula.num_vars} {formula.num_original}")
    for clause in formula.original_clauses:
        lines.append(" ".join(str(lit) for lit in clause) + " 0")
    return "\n".join(lines) + "\n"


def write_dimacs(formula: Formula, path: Union[str, Path], comment: str = "") -> None:
    """Write a formula to a DIMACS CNF file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        f.write(format_dimacs(formula, comment))
