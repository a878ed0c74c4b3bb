#!/usr/bin/env python3
# Copyright 2026 phpsym Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the phpsym CI checks locally.

Usage: ``python tools/ci.py [--fail-fast] [STEP ...]`` where STEP is one of
``format``, ``lint``, ``types``, ``tests`` or ``build``. All steps run when
none are named.
"""

import argparse
import subprocess
import sys
import time
from pathlib import Path

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: dict[str, tuple[str, list[str]]] = {
    "format": ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    "lint": ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    "types": ("Type check", ["uv", "run", "ty", "check", "src/"]),
    "tests": ("Tests", ["uv", "run", "pytest", "--cov=phpsym", "--cov-report=term-missing"]),
    "build": ("Build", ["uv", "build"]),
}


def main() -> int:
    """Run the selected CI steps and print a summary."""
    parser = argparse.ArgumentParser(description="Run phpsym CI checks")
    parser.add_argument("steps", nargs="*", metavar="STEP", help=", ".join(STEPS))
    parser.add_argument("--fail-fast", action="store_true", help="Stop at the first failing step")
    args = parser.parse_args()
    unknown = [step for step in args.steps if step not in STEPS]
    if unknown:
        parser.error(f"unknown step(s): {', '.join(unknown)}")

    selected = args.steps or list(STEPS)
    results: list[tuple[str, bool, float]] = []
    for key in selected:
        title, cmd = STEPS[key]
        passed, elapsed = _run_step(title, cmd)
        results.append((title, passed, elapsed))
        if not passed and args.fail_fast:
            break

    _print_summary(results, skipped=len(selected) - len(results))
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################

_RULE = "=" * 60
_REPO_ROOT = Path(__file__).resolve().parent.parent


def _run_step(title: str, cmd: list[str]) -> tuple[bool, float]:
    print(f"\n{chalk.blue(_RULE)}\n{chalk.blue(title)}\n{chalk.blue(_RULE)}")
    start = time.monotonic()
    proc = subprocess.run(cmd, cwd=_REPO_ROOT)
    return proc.returncode == 0, time.monotonic() - start


def _print_summary(results: list[tuple[str, bool, float]], skipped: int) -> None:
    print(f"\n{chalk.blue(_RULE)}\n{chalk.blue('  Summary')}\n{chalk.blue(_RULE)}")
    for title, passed, elapsed in results:
        color = chalk.green if passed else chalk.red
        print(color(f"  {'PASS' if passed else 'FAIL'}  {title} ({elapsed:.1f}s)"))
    if skipped:
        print(chalk.yellow(f"  SKIP  {skipped} step(s) after first failure"))
    print()


if __name__ == "__main__":
    sys.exit(main())
