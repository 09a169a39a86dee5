"""
Print the resolution trace of a single quote.

Usage:
    python scripts/debug_quote.py 2500 2 84101 [add_on ...]
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from duct_quote.engine import PricingEngine, QuoteInputError, parse_quote_form
from duct_quote.engine.display import breakdown_rows


def debug(args: list[str]):
    if len(args) < 3:
        print(__doc__)
        sys.exit(1)

    try:
        request = parse_quote_form(args[0], args[1], args[2], args[3:])
    except QuoteInputError as e:
        print(f"{e.title}: {e.message}")
        sys.exit(1)

    engine = PricingEngine()
    print(f"Config version: {engine.config.version}")
    print(f"Request: {request}")

    result = engine.calculate(request)
    print("\nTrace:")
    print(result.get_trace_text())

    print("\nBreakdown:")
    for label, amount in breakdown_rows(request, result, engine.config):
        print(f"  {label:<45} {amount:>12}")
    print(f"  {'Clean & Seal (list)':<45} ${result.clean_and_seal_price:>11,.2f}")
    print(f"  {'Clean & Seal (partner)':<45} ${result.clean_and_seal_total:>11,.2f}")

    for warning in result.warnings:
        print(f"WARNING: {warning}")


if __name__ == "__main__":
    debug(sys.argv[1:])
