"""Command-line options shared by the subcommands."""

import argparse

from ..core.config_loader import resolve_config
from ..core.models import BenchmarkConfig


def add_config_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the flags that describe a benchmark configuration."""
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Configuration file (JSON format); flags override its values",
    )
    parser.add_argument("--url", type=str, default=None, help="Target URL to benchmark")
    parser.add_argument(
        "--method",
        type=str,
        default=None,
        help="HTTP method: GET, POST, PUT, etc. (default: GET)",
    )
    parser.add_argument(
        "--token",
        type=str,
        default=None,
        help="Authorization token, sent as a Bearer token",
    )
    parser.add_argument(
        "--total",
        type=int,
        default=None,
        help="Total number of requests to make (default: 100)",
    )
    parser.add_argument(
        "--parallel",
        type=int,
        default=None,
        help="Number of parallel workers (default: 10)",
    )
    parser.add_argument(
        "--timeout",
        type=str,
        default=None,
        help="Per-request timeout, e.g. 30s, 500ms, 1m (default: 30s)",
    )
    parser.add_argument(
        "--headers",
        type=str,
        default=None,
        help="Custom headers (format: 'key1:value1,key2:value2')",
    )
    parser.add_argument(
        "--params",
        type=str,
        default=None,
        help="Query parameters (format: 'key1=value1,key2=value2')",
    )
    parser.add_argument(
        "--dump-failures",
        type=str,
        default=None,
        metavar="DIR",
        help="Directory to dump failure responses (only unique failures)",
    )
    parser.add_argument(
        "--post-file",
        type=str,
        default=None,
        help="File containing POST data",
    )
    parser.add_argument(
        "--post-data",
        type=str,
        default=None,
        help="POST data as string",
    )
    parser.add_argument(
        "--content-type",
        type=str,
        default=None,
        help="Content-Type for requests with a body (default: application/json)",
    )


def config_from_args(args: argparse.Namespace) -> BenchmarkConfig:
    """Resolve parsed flags (and the config file they name) into a config."""
    overrides = {
        "url": args.url,
        "method": args.method,
        "auth_token": args.token,
        "total_requests": args.total,
        "parallel_count": args.parallel,
        "timeout": args.timeout,
        "dump_failures_dir": args.dump_failures,
        "post_data_file": args.post_file,
        "post_data": args.post_data,
        "content_type": args.content_type,
    }
    return resolve_config(
        overrides,
        config_file=args.config,
        extra_headers=args.headers,
        extra_params=args.params,
    )
