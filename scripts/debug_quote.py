#!/usr/bin/env python
"""
Print a quote with its calculation trace.

Usage:
    python scripts/debug_quote.py standard 48h hard --pages 5
    python scripts/debug_quote.py premium standard easy --words 2500 --config my_pricing.json
"""
import argparse
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from expert_pricing.config.loader import load_pricing_config
from expert_pricing.engine import ConfigurationError, JobParameters, QuoteCalculator
from expert_pricing.utils.logger import setup_logging


def debug():
    parser = argparse.ArgumentParser(description="Debug a single quote")
    parser.add_argument("tier")
    parser.add_argument("urgency")
    parser.add_argument("complexity")
    size = parser.add_mutually_exclusive_group(required=True)
    size.add_argument("--pages")
    size.add_argument("--words")
    parser.add_argument("--config", type=Path, default=None)
    args = parser.parse_args()

    setup_logging("DEBUG")

    try:
        config = load_pricing_config(args.config)
    except ConfigurationError as e:
        print(f"❌ {e}")
        for err in e.errors:
            print(f"  - {err}")
        sys.exit(1)

    params = JobParameters.from_form(
        tier_id=args.tier,
        urgency_id=args.urgency,
        complexity_id=args.complexity,
        mode="pages" if args.pages is not None else "words",
        pages=args.pages,
        words=args.words,
    )
    result = QuoteCalculator(config).calculate(params)

    print(f"\nStatus: {result.status.value}")
    if result.reason:
        print(f"Reason: {result.reason}")
    print("\nTrace:")
    print(result.get_trace_text())

    if result.breakdown:
        b = result.breakdown
        print("\nBreakdown:")
        print(f"  Base price:          ${b.base_price:,.2f}")
        print(f"  Total price:         ${b.total_price:,.2f}")
        print(f"  Executor payout:     ${b.executor_payout:,.2f}")
        print(f"  Reviewer commission: ${b.reviewer_commission:,.2f}")
        print(f"  Platform fee:        ${b.platform_fee:,.2f}")


if __name__ == "__main__":
    debug()
