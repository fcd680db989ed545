"""Manual customs review pass execution script."""

import argparse
import logging
import random
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from customs_review.config import get_settings
from customs_review.db.connection import get_sync_connection_simple
from customs_review.db.store import DeclarationStore
from customs_review.scheduler.review import ReviewScheduler


def setup_logging(verbose: bool = False, debug: bool = False):
    """Configure logging based on verbosity flags."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main():
    """Run one review pass against the configured database."""
    parser = argparse.ArgumentParser(
        description="Run one customs review pass now",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/run_review_pass.py
  python scripts/run_review_pass.py --delay-minutes 0 --verbose
  python scripts/run_review_pass.py --seed 42 --approval-probability 0.5
        """,
    )
    parser.add_argument(
        "--delay-minutes",
        type=float,
        default=None,
        help="Override the review delay (minutes)",
    )
    parser.add_argument(
        "--approval-probability",
        type=float,
        default=None,
        help="Override the approval probability (0.0-1.0)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed the random source for a reproducible outcome",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--debug",
        "-d",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, debug=args.debug)

    settings = get_settings()
    overrides = {}
    if args.delay_minutes is not None:
        overrides["review_delay_minutes"] = args.delay_minutes
    if args.approval_probability is not None:
        overrides["approval_probability"] = args.approval_probability

    print("\n🏛️  Running customs review pass\n")

    store = DeclarationStore(get_sync_connection_simple())
    try:
        reviewer = ReviewScheduler(
            store,
            interval_seconds=settings.review_interval_seconds,
            review_delay_minutes=overrides.get("review_delay_minutes", settings.review_delay_minutes),
            approval_probability=overrides.get("approval_probability", settings.approval_probability),
            rng=random.Random(args.seed),
        )
        result = reviewer.run_review_pass()

        print(f"  Examined:  {result.examined}")
        print(f"  Approved:  {result.approved}")
        print(f"  Rejected:  {result.rejected}")
        print(f"  Waiting:   {result.pending}")
        print(f"  Skipped:   {result.skipped}")
        print(f"  Failed:    {result.failed}")
        if result.history_failures:
            print(f"  ⚠️  Audit history not written for {result.history_failures} declaration(s)")
        print()
        return 0

    except Exception as e:
        print(f"\n❌ Error during review pass: {e}\n", file=sys.stderr)
        if args.debug:
            import traceback

            traceback.print_exc()
        return 1

    finally:
        store.close()


if __name__ == "__main__":
    sys.exit(main())
