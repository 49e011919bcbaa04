"""
Span table generator for masstimber.

Prints beam (or joist) sizes over a grid of spans for one load, grade and
fire rating. Sizes marked * exceed the largest catalog section.

Usage:
    python scripts/span_table.py --load 3.0
    python scripts/span_table.py --member joist --load 2.0 --fire 60/60/60
    python scripts/span_table.py --load 5.0 --csv beams.csv
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from masstimber.core.config import EngineConfig
from masstimber.core.context import initialize
from masstimber.core.data_models import FireRating
from masstimber.engines.span_tables import beam_span_table, joist_span_table


def main():
    """Main entry point for the span table script."""
    parser = argparse.ArgumentParser(
        description="Mass timber span tables"
    )
    parser.add_argument(
        '--member',
        choices=['beam', 'joist'],
        default='beam',
        help='Member type to tabulate (default: beam)'
    )
    parser.add_argument(
        '--load',
        type=float,
        default=3.0,
        help='Area load in kPa (default: 3.0)'
    )
    parser.add_argument(
        '--grade',
        default=None,
        help='Timber grade (default: configured default grade)'
    )
    parser.add_argument(
        '--fire',
        choices=[rating.value for rating in FireRating],
        default='none',
        help='Fire resistance level (default: none)'
    )
    parser.add_argument(
        '--env-file',
        default=None,
        help='Optional .env file with MASSTIMBER_* settings'
    )
    parser.add_argument(
        '--csv',
        default=None,
        help='Write the table to this CSV file as well'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Show engine log messages'
    )

    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    context = initialize(config=EngineConfig.from_env(args.env_file))
    if args.member == 'beam':
        table = beam_span_table(context, args.load, args.grade, args.fire)
    else:
        table = joist_span_table(context, args.load, args.grade, args.fire)

    print(f"{args.member.capitalize()} sizes (width x depth, mm) - "
          f"{args.load} kPa, fire rating {args.fire}")
    print(table.to_string())

    if args.csv:
        table.to_csv(args.csv)
        print(f"\nSaved to {args.csv}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
