#!/usr/bin/env python3
"""
Generate random 3-SAT benchmark instances.

Formulas near the phase transition are solved, optionally cross-checked
against PySAT, and written to <output>/<family>/sat or <output>/<family>/unsat
so they can be run with benchmark.py.

Usage:
    python generate.py                          # 100 formulas with 5-20 variables
    python generate.py --count 500 --seed 7
    python generate.py --var-min 30 --var-max 50 --family random-50
"""

import argparse
import logging
import random
import sys
from pathlib import Path

from tqdm import tqdm

from cdcl_engine import (
    generate_random_formula,
    pysat_satisfiable,
    solve,
    write_dimacs,
)

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Generate random 3-SAT instances")
    parser.add_argument(
        "--output",
        type=str,
        default="benchmarks",
        help="Output directory (default: benchmarks)"
    )
    parser.add_argument(
        "--family",
        type=str,
        default="random-3sat",
        help="Instance family directory name"
    )
    parser.add_argument("--count", type=int, default=100, help="Number of formulas")
    parser.add_argument("--var-min", type=int, default=5, help="Minimum number of variables")
    parser.add_argument("--var-max", type=int, default=20, help="Maximum number of variables")
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    parser.add_argument(
        "--no-pysat",
        action="store_true",
        help="Skip PySAT verification"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    rng = random.Random(args.seed)
    family_dir = Path(args.output) / args.family
    counts = {"sat": 0, "unsat": 0}

    for i in tqdm(range(args.count), desc="Generating formulas"):
        n_vars = rng.randint(args.var_min, args.var_max)
        formula = generate_random_formula(n_vars, rng=rng)
        answer = solve(formula)

        if not args.no_pysat and pysat_satisfiable(formula) != answer.is_sat:
            logger.error("Result mismatch with PySAT on formula %d", i)
            return 1

        category = "sat" if answer.is_sat else "unsat"
        counts[category] += 1
        path = family_dir / category / f"{args.family}-{n_vars:03d}-{i:05d}.cnf"
        write_dimacs(formula, path, comment=f"{args.family} seed={args.seed} index={i}")

    logger.info(
        "Wrote %d SAT and %d UNSAT instances to %s", counts["sat"], counts["unsat"], family_dir
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
