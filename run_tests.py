#!/usr/bin/env python3
"""
Main test runner for the jsarena test suite.

Runs a quick end-to-end smoke check, then discovers and runs every test
module under tests/.
"""

import sys
import os
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.dirname(__file__))
sys.path.insert(0, project_root)


def run_smoke_check():
    """Parse, render and re-parse a small program."""

    print("jsarena Test Suite")
    print("=" * 60)

    try:
        from jsarena import parse, render, format_errors
    except ImportError as e:
        print(f"Failed to import jsarena: {e}")
        return False

    code = """
    var total = 0, step = 0x10;
    function accumulate(values) {
        return values.map(v => v * step);
    }
    if (total == 0) total = accumulate([1, 2, 3]); else total++;
    """

    result = parse(code)
    if not result.ok:
        print(format_errors(result.errors, code))
        return False
    print(f"  Parsed {len(result.body)} statements into {len(result.arena)} nodes")

    rendered = render(result)
    if parse(rendered).dump() != result.dump():
        print("  Round trip produced a different tree:")
        print(rendered)
        return False
    print("  Round trip OK")
    print()
    return True


def run_all_tests():
    """Discover and run every unittest module under tests/."""
    if not run_smoke_check():
        return False

    suite = unittest.defaultTestLoader.discover(os.path.join(project_root, "tests"))
    outcome = unittest.TextTestRunner(verbosity=2).run(suite)
    return outcome.wasSuccessful()


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
