#!/usr/bin/env python3
"""
Solve a DIMACS CNF file.

Usage:
    python solve.py problem.cnf
    python solve.py problem.cnf --model          # also print the satisfying assignment
    python solve.py problem.cnf --trace -v       # print the search trace, debug logging
"""

import argparse
import logging
import sys

from cdcl_engine import (
    CDCLSolver,
    DimacsParseError,
    fmt_answer,
    fmt_assignments,
    fmt_trace,
    read_dimacs,
)

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="CDCL SAT solver")
    parser.add_argument("cnf_file", help="Path to a DIMACS CNF file")
    parser.add_argument(
        "--model",
        action="store_true",
        help="Print the satisfying assignment as 'v' lines"
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Print the search trace"
    )
    parser.add_argument(
        "--polarity",
        choices=["false", "true"],
        default="false",
        help="Value given to decision variables (default: false)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        formula = read_dimacs(args.cnf_file)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading file '{args.cnf_file}': {e}", file=sys.stderr)
        return 1
    except DimacsParseError as e:
        print(f"Error parsing CNF: {e}", file=sys.stderr)
        return 1

    logger.info("Loaded %r", formula)

    solver = CDCLSolver(
        formula,
        polarity=args.polarity == "true",
        record_trace=args.trace,
    )
    answer = solver.solve()
    if answer.is_sat:
        logger.debug("Assignment: %s", fmt_assignments(answer.assignment))

    if args.trace:
        print(fmt_trace(solver.events))
    print(fmt_answer(answer, model=args.model))
    return 0


if __name__ == "__main__":
    sys.exit(main())
