"""CLI for a single benchmark run."""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from ..core.config_loader import ConfigError
from ..core.load_tester import LoadTester
from ..results.charts import generate_latency_chart
from ..results.report import export_results, print_config, print_results
from .options import add_config_arguments, config_from_args


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m httpbench run",
        description="Benchmark an HTTP endpoint with a fixed pool of parallel workers",
    )
    add_config_arguments(parser)

    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write results to a .json summary or a per-request .csv/.tsv file",
    )
    parser.add_argument(
        "--chart",
        type=str,
        default=None,
        metavar="PNG",
        help="Save a response time chart to this path",
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose", action="store_true", help="Log every failed request"
    )
    verbosity.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )
    return parser


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(levelname)s - %(message)s"
    )


def main(argv: Optional[List[str]] = None):
    """Main entry point for the run CLI."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    try:
        config = config_from_args(args)
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print_config(config)
    print("-" * 40)

    tester = LoadTester(config)

    try:
        result = asyncio.run(tester.run())
    except KeyboardInterrupt:
        print("\nBenchmark interrupted by user")
        sys.exit(130)

    print_results(result)

    try:
        if args.output:
            export_results(result, args.output, tester.aggregator)
            print(f"\nResults written to: {args.output}")
        if args.chart:
            saved = generate_latency_chart(result, args.chart)
            if saved:
                print(f"Chart saved as: {saved}")
    except (OSError, ValueError) as e:
        print(f"Error writing results: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
