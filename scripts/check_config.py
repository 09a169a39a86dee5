#!/usr/bin/env python
"""
Config check pipeline - validates the pricing tables and runs the golden quotes.

Usage:
    python scripts/check_config.py
"""
import subprocess
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from duct_quote.data.load_config import build_config_report


def main():
    print("=" * 60)
    print("DUCT QUOTE CONFIG CHECK")
    print("=" * 60)
    print()

    print("[1/2] Validating pricing tables...")
    report = build_config_report(verbose=True)

    if report["status"] != "success":
        print("\n❌ CONFIG INVALID")
        for error in report["errors"]:
            print(f"  ERROR: {error}")
        sys.exit(1)

    print()
    print("[2/2] Running golden quotes...")

    test_result = subprocess.run(
        [sys.executable, '-m', 'pytest', 'tests/test_golden_cases.py', '-v', '--tb=short'],
        cwd=Path(__file__).parent.parent
    )

    if test_result.returncode != 0:
        print("\n❌ GOLDEN QUOTES FAILED")
        sys.exit(1)

    print()
    print("=" * 60)
    print("✅ CONFIG OK")
    print("=" * 60)
    print()
    print("Summary:")
    print(f"  Version: {report['metrics']['config_version']}")
    print(f"  Zipcodes: {report['metrics']['zipcode_count']}")
    print(f"  Add-on services: {report['metrics']['add_on_count']}")
    for warning in report["warnings"]:
        print(f"  WARNING: {warning}")


if __name__ == "__main__":
    main()
