"""
Benchmark runs over SATLIB-style instance directories.

Instances live under <root>/<suite>/<category>/*.cnf where category is
'sat' or 'unsat'. Each instance is solved under a wall-clock timeout and
classified as OK, FAIL or TIMEOUT.
"""

import logging
import shutil
import tarfile
import tempfile
import time
import urllib.request
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from tqdm import tqdm

from .dimacs import read_dimacs
from .errors import DimacsParseError, SolverInterrupted
from .solver import CDCLSolver
from .verifier import check_answer, pysat_satisfiable

logger = logging.getLogger(__name__)

SAT = "sat"
UNSAT = "unsat"
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class BenchmarkSuite:
    name: str
    category: str  # "sat" or "unsat"
    url: str


SATLIB_SUITES = [
    BenchmarkSuite(
        "flat30-60", SAT,
        "https://www.cs.ubc.ca/~hoos/SATLIB/Benchmarks/SAT/GCP/flat30-60.tar.gz",
    ),
    BenchmarkSuite(
        "sw100-8-lp0-c5", SAT,
        "https://www.cs.ubc.ca/~hoos/SATLIB/Benchmarks/SAT/SW-GCP/sw100-8-lp0-c5.tar.gz",
    ),
    BenchmarkSuite(
        "planning", SAT,
        "https://www.cs.ubc.ca/~hoos/SATLIB/Benchmarks/SAT/PLANNING/BlocksWorld/blocksworld.tar.gz",
    ),
    BenchmarkSuite(
        "uniform-unsat75", UNSAT,
        "https://www.cs.ubc.ca/~hoos/SATLIB/Benchmarks/SAT/RND3SAT/uuf75-325.tar.gz",
    ),
]


class Outcome(Enum):
    OK = "OK"
    FAIL = "FAIL"
    TIMEOUT = "TIMEOUT"


@dataclass
class BenchmarkResult:
    path: Path
    expected: str
    outcome: Outcome
    answer: Optional[str] = None
    elapsed: float = 0.0
    message: str = ""


@dataclass
class BenchmarkSummary:
    results: List[BenchmarkResult] = field(default_factory=list)

    def count(self, outcome: Outcome) -> int:
        return sum(1 for r in self.results if r.outcome == outcome)

    def with_outcome(self, outcome: Outcome) -> List[BenchmarkResult]:
        return [r for r in self.results if r.outcome == outcome]

    def counts(self) -> Dict[str, int]:
        return {outcome.value: self.count(outcome) for outcome in Outcome}

    @property
    def passed(self) -> bool:
        return all(r.outcome == Outcome.OK for r in self.results)


def find_suite(name: str) -> BenchmarkSuite:
    for suite in SATLIB_SUITES:
        if suite.name == name:
            return suite
    raise KeyError(f"Unknown benchmark suite: {name}")


def fetch_suite(suite: BenchmarkSuite, root: Union[str, Path]) -> Path:
    """
    Download and extract the .cnf files of a suite if not already present.

    Returns:
        The <root>/<suite>/<category> directory.
    """
    target_dir = Path(root) / suite.name / suite.category
    if target_dir.exists():
        logger.info("Skipping %s (already exists)", suite.name)
        return target_dir

    logger.info("Downloading %s from %s", suite.name, suite.url)
    target_dir.mkdir(parents=True)
    try:
        with tempfile.TemporaryDirectory() as tmp:
            archive_path = Path(tmp) / "download.tar.gz"
            with urllib.request.urlopen(suite.url) as response, open(archive_path, 'wb') as f:
                shutil.copyfileobj(response, f)
            count = _extract_cnf_files(archive_path, target_dir)
    except BaseException:
        shutil.rmtree(target_dir, ignore_errors=True)
        raise

    logger.info("Extracted %d CNF files to %s", count, target_dir)
    return target_dir


def _extract_cnf_files(archive_path: Path, target_dir: Path) -> int:
    count = 0
    with tarfile.open(archive_path, 'r:gz') as archive:
        for member in archive.getmembers():
            if not member.isfile() or not member.name.endswith(".cnf"):
                continue
            source = archive.extractfile(member)
            if source is None:
                continue
            with source, open(target_dir / Path(member.name).name, 'wb') as f:
                shutil.copyfileobj(source, f)
            count += 1
    return count


def find_cnf_files(root: Union[str, Path]) -> List[Path]:
    """All .cnf files below root, in sorted order."""
    return sorted(Path(root).rglob("*.cnf"))


def categorize(path: Union[str, Path]) -> str:
    """
    Expected verdict of an instance, taken from its parent directory name.

    Raises:
        ValueError: If the parent directory is neither 'sat' nor 'unsat'.
    """
    parent = Path(path).parent.name
    if parent in (SAT, UNSAT):
        return parent
    raise ValueError(
        f"Test file {path} is not in a 'sat' or 'unsat' directory (found: {parent})"
    )


def run_instance(
    path: Union[str, Path],
    expected: str,
    timeout: float = DEFAULT_TIMEOUT,
    polarity: bool = False,
    verify_with_pysat: bool = False
) -> BenchmarkResult:
    """Solve one instance under a timeout and compare with the expected verdict."""
    path = Path(path)
    start = time.monotonic()
    deadline = start + timeout

    try:
        formula = read_dimacs(path)
    except (OSError, UnicodeDecodeError, DimacsParseError) as e:
        return BenchmarkResult(path, expected, Outcome.FAIL, message=f"Failed to read CNF file: {e}")

    if formula.num_original == 0:
        return BenchmarkResult(path, expected, Outcome.FAIL, message="Formula should not be empty")

    solver = CDCLSolver(formula, polarity=polarity, interrupt=lambda: time.monotonic() > deadline)
    try:
        answer = solver.solve()
    except SolverInterrupted:
        return BenchmarkResult(
            path, expected, Outcome.TIMEOUT, elapsed=time.monotonic() - start,
            message=f"Timeout ({timeout:g}s exceeded)"
        )
    elapsed = time.monotonic() - start

    verdict = str(answer).lower()
    result = BenchmarkResult(path, expected, Outcome.OK, str(answer), elapsed)

    if verdict != expected:
        result.outcome = Outcome.FAIL
        result.message = f"Expected {expected.upper()} but got {answer} for {path.name}"
    elif not check_answer(formula, answer):
        result.outcome = Outcome.FAIL
        result.message = f"SAT answer but valuation doesn't satisfy formula for {path.name}"
    elif verify_with_pysat and pysat_satisfiable(formula) != answer.is_sat:
        result.outcome = Outcome.FAIL
        result.message = f"Result mismatch with PySAT for {path.name}"

    return result


def run_benchmarks(
    files: Iterable[Union[str, Path]],
    timeout: float = DEFAULT_TIMEOUT,
    polarity: bool = False,
    verify_with_pysat: bool = False
) -> BenchmarkSummary:
    """
    Run every categorizable instance sequentially.

    Files outside a 'sat' or 'unsat' directory are skipped with a warning.
    """
    summary = BenchmarkSummary()
    files = list(files)

    progress = tqdm(files, desc="Solving instances")
    for path in progress:
        try:
            expected = categorize(path)
        except ValueError as e:
            logger.warning("%s", e)
            continue

        result = run_instance(path, expected, timeout, polarity, verify_with_pysat)
        summary.results.append(result)
        if result.outcome != Outcome.OK:
            logger.info("%s %s: %s", result.outcome.value, path, result.message)

        counts = summary.counts()
        progress.set_postfix(ok=counts["OK"], failed=counts["FAIL"], timeout=counts["TIMEOUT"])

    return summary
