#!/usr/bin/env python3
"""Run the import-boundary checks of tests/test_arch_boundaries.py without pytest."""

from __future__ import annotations

import sys
from pathlib import Path

CHECKS = ("test_no_low_level_imports_orchestrator", "test_core_is_self_contained")


def main() -> int:
    repo_root = Path(__file__).resolve().parents[1]
    test_path = repo_root / "tests" / "test_arch_boundaries.py"
    if not test_path.is_file():
        print("ERROR: tests/test_arch_boundaries.py not found.", file=sys.stderr)
        return 3

    ns: dict[str, object] = {"__file__": str(test_path)}  # the checks locate src/ from __file__
    code = test_path.read_text(encoding="utf-8")
    exec(compile(code, str(test_path), "exec"), ns, ns)

    failed = False
    for name in CHECKS:
        fn = ns.get(name)
        if not callable(fn):
            print(f"ERROR: {name} not found.", file=sys.stderr)
            return 3
        try:
            fn()  # type: ignore[misc]
        except AssertionError as e:
            print(f"{name}: {e}", file=sys.stderr)
            failed = True

    if failed:
        return 2
    print("OK: architecture boundaries respected.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
