#!/usr/bin/env python
"""
Quick reference: running the test suites.

Execute this file or use the commands below directly.
"""

import subprocess
import sys


def run_tests() -> int:
    """Run every suite; return the number that failed."""
    
    print("=" * 70)
    print("RUNNING ECS LOGGING TEST SUITE")
    print("=" * 70)
    print()
    
    commands = [
        ("Unit Tests - Paths", "pytest tests/unit/test_paths.py -v"),
        ("Unit Tests - HTTP Formatters", "pytest tests/unit/test_http_formatters.py -v"),
        ("Unit Tests - Error Formatters", "pytest tests/unit/test_error_formatters.py -v"),
        ("Unit Tests - Records", "pytest tests/unit/test_record.py -v"),
        ("Unit Tests - Logging Formatter", "pytest tests/unit/test_formatter.py -v"),
        ("Unit Tests - Config", "pytest tests/unit/test_config.py -v"),
        ("Unit Tests - Spec", "pytest tests/unit/test_spec.py -v"),
        ("Unit Tests - Validator", "pytest tests/unit/test_validator.py -v"),
        ("Integration Tests - Round Trip", "pytest tests/integration/test_round_trip.py -v"),
        ("All Tests with Coverage", "pytest tests/ -v --cov=src --cov-report=html"),
    ]
    
    failed = 0
    for name, cmd in commands:
        print(f"\n{'='*70}")
        print(f"{name}")
        print(f"{'='*70}")
        print(f"Command: {cmd}\n")
        result = subprocess.run(cmd, shell=True)
        if result.returncode != 0:
            print(f"❌ {name} failed")
            failed += 1
        else:
            print(f"✓ {name} passed")
    return failed


def run_specific_tests():
    """Print handy test commands."""
    
    print("\nQuick test commands:")
    print("  pytest tests/unit/ -v          # All unit tests")
    print("  pytest tests/integration/ -v   # All integration tests")
    print("  pytest tests/ -v -k validator  # Tests matching 'validator'")
    print("  pytest tests/ -m integration   # Integration marker only")
    print("  pytest tests/ --co             # List test collection (no run)")


if __name__ == "__main__":
    failures = run_tests()
    run_specific_tests()
    sys.exit(1 if failures else 0)
