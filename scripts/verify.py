#!/usr/bin/env python3
"""Run formatters, tests, linting and type checking for cue-maker."""

import argparse
import subprocess
import sys
from dataclasses import dataclass
from typing import List, Optional

PACKAGE = "cue_maker"


@dataclass
class VerificationStep:
    """A named command, with an optional read-only variant for CI."""

    name: str
    command: List[str]
    check_command: Optional[List[str]] = None

    def command_for(self, check_mode: bool) -> List[str]:
        """Return the command to run in the given mode."""
        if check_mode and self.check_command:
            return self.check_command
        return self.command


STEPS = [
    VerificationStep(
        name="Formatting",
        command=["black", PACKAGE, "scripts"],
        check_command=["black", "--check", PACKAGE, "scripts"],
    ),
    VerificationStep(
        name="Import sorting",
        command=["isort", "--profile", "black", PACKAGE, "scripts"],
        check_command=["isort", "--profile", "black", "--check-only", PACKAGE, "scripts"],
    ),
    VerificationStep(
        name="Tests",
        command=["pytest", f"--cov={PACKAGE}", "--log-level=WARNING"],
    ),
    VerificationStep(name="Linting", command=["pylint", PACKAGE]),
    VerificationStep(name="Type checking", command=["mypy", PACKAGE]),
]


def run_step(step: VerificationStep, check_mode: bool) -> bool:
    """Run one step, print its output and return whether it passed."""
    print(f"\n=== {step.name} ===")
    result = subprocess.run(
        step.command_for(check_mode), capture_output=True, text=True
    )
    print(result.stdout + result.stderr)

    passed = result.returncode == 0
    print(f"{'✅' if passed else '❌'} {step.name} {'passed' if passed else 'failed'}")
    return passed


def main():
    """Run verification steps, stopping at the first failure unless checking."""
    parser = argparse.ArgumentParser(description="Run verification steps")
    parser.add_argument(
        "--check", action="store_true", help="Check only, don't fix (for CI)"
    )
    args = parser.parse_args()

    failures = []
    for step in STEPS:
        if run_step(step, args.check):
            continue
        failures.append(step.name)
        if not args.check:
            sys.exit(1)

    if failures:
        print("\n❌ Some verification steps failed:")
        for failure in failures:
            print(f"  - {failure}")
        sys.exit(1)


if __name__ == "__main__":
    main()
