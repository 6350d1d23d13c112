#!/usr/bin/env python3
"""
Test runner for the AgentDeals catalog.

Wraps pytest with the marker selections used by the suite: `unit` for
component tests, `integration` for end-to-end command line runs against
temporary catalog files.
"""

import argparse
import shutil
import subprocess
import sys
from pathlib import Path
from typing import List


class TestRunner:
    """Runs pytest with a chosen selection."""

    def __init__(self, project_root: Path):
        self.project_root = project_root

    def run_command(self, command: List[str], description: str) -> bool:
        """Run a command and return success status."""
        print(f"\n{description}...")
        print(f"Running: {' '.join(command)}")

        try:
            result = subprocess.run(command, cwd=self.project_root, check=False)
        except FileNotFoundError:
            print(f"{description} failed - pytest not found")
            return False

        if result.returncode == 0:
            print(f"{description} completed successfully")
            return True
        print(f"{description} failed with exit code {result.returncode}")
        return False

    def run_marked(self, marker: str, description: str, verbose: bool = False) -> bool:
        cmd = ["pytest", "-m", marker]
        if verbose:
            cmd.append("-v")
        return self.run_command(cmd, description)

    def run_specific_test(self, test_path: str, verbose: bool = False) -> bool:
        """Run a specific test file or test function."""
        cmd = ["pytest", test_path]
        if verbose:
            cmd.append("-v")
        return self.run_command(cmd, f"Specific test: {test_path}")

    def run_failed_tests(self, verbose: bool = False) -> bool:
        """Re-run only failed tests from last run."""
        cmd = ["pytest", "--lf"]
        if verbose:
            cmd.append("-v")
        return self.run_command(cmd, "Failed tests from last run")

    def run_all_tests(self, verbose: bool = False) -> bool:
        cmd = ["pytest"]
        if verbose:
            cmd.append("-v")
        return self.run_command(cmd, "All tests")

    def clean_test_artifacts(self) -> None:
        """Remove pytest caches and bytecode."""
        print("\nCleaning test artifacts...")

        cache = self.project_root / ".pytest_cache"
        if cache.is_dir():
            shutil.rmtree(cache)
            print("  Removed directory: .pytest_cache")

        for pycache in self.project_root.rglob("__pycache__"):
            if pycache.is_dir():
                shutil.rmtree(pycache)
                print(f"  Removed: {pycache}")

        print("Test artifacts cleaned")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Run tests with various configurations"
    )

    parser.add_argument("--unit", action="store_true", help="Run unit tests only")
    parser.add_argument(
        "--integration", action="store_true", help="Run integration tests only"
    )
    parser.add_argument("--fast", action="store_true", help="Skip slow tests")
    parser.add_argument(
        "--failed", action="store_true", help="Re-run failed tests from last run"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--clean", action="store_true", help="Clean test artifacts")
    parser.add_argument("--test", type=str, help="Run specific test file or function")
    parser.add_argument(
        "--project-root", type=Path, default=Path.cwd(), help="Project root directory"
    )

    args = parser.parse_args()

    runner = TestRunner(args.project_root)

    if args.clean:
        runner.clean_test_artifacts()
        return

    if args.test:
        success = runner.run_specific_test(args.test, args.verbose)
    elif args.unit:
        success = runner.run_marked("unit", "Unit tests", args.verbose)
    elif args.integration:
        success = runner.run_marked("integration", "Integration tests", args.verbose)
    elif args.fast:
        success = runner.run_marked("not slow", "Fast tests", args.verbose)
    elif args.failed:
        success = runner.run_failed_tests(args.verbose)
    else:
        success = runner.run_all_tests(args.verbose)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
