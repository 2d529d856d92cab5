"""
Benchmark entry point. Fetches SATLIB suites and solves every instance under
a wall-clock timeout.

Usage:
    python benchmark.py
    python benchmark.py timeout=30 suites=[uniform-unsat75]
    python benchmark.py fetch=false data_dir=benchmarks verify_pysat=true
"""

import logging
import sys
from pathlib import Path

import hydra
from omegaconf import DictConfig, OmegaConf

from cdcl_engine.benchmark import (
    Outcome,
    fetch_suite,
    find_cnf_files,
    find_suite,
    run_benchmarks,
)

logger = logging.getLogger(__name__)


def resolve_path(path: str, orig_cwd: str) -> str:
    """Resolve a potentially relative path against the original working directory."""
    p = Path(path)
    if not p.is_absolute():
        p = Path(orig_cwd) / p
    return str(p)


@hydra.main(version_base=None, config_path="configs", config_name="benchmark")
def main(cfg: DictConfig):
    # Ensure logging shows on console (Hydra can redirect it)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s", force=True)

    orig_cwd = hydra.utils.get_original_cwd()
    data_dir = Path(resolve_path(cfg.data_dir, orig_cwd))

    print("=" * 60)
    print("CDCL Benchmark")
    print("=" * 60)
    print(OmegaConf.to_yaml(cfg))

    if cfg.fetch:
        for name in cfg.suites:
            fetch_suite(find_suite(name), data_dir)

    files = find_cnf_files(data_dir)
    logger.info("Running %d instances from %s", len(files), data_dir)

    summary = run_benchmarks(
        files,
        timeout=cfg.timeout,
        polarity=cfg.polarity,
        verify_with_pysat=cfg.verify_pysat,
    )

    print()
    for result in summary.with_outcome(Outcome.FAIL):
        print(f"FAIL {result.path}: {result.message}")
    for result in summary.with_outcome(Outcome.TIMEOUT):
        print(f"TIMEOUT {result.path}")

    counts = summary.counts()
    print(f"{counts['OK']} OK | {counts['FAIL']} FAILED | {counts['TIMEOUT']} TIMEOUT")

    if not summary.passed:
        sys.exit(1)


if __name__ == "__main__":
    main()
