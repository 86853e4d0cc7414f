"""CLI that resolves and prints a configuration without running it."""

import argparse
import sys
from typing import List, Optional

from ..core.config_loader import ConfigError
from ..results.report import print_config
from .options import add_config_arguments, config_from_args


def main(argv: Optional[List[str]] = None):
    """Main entry point for show-config CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m httpbench show-config",
        description="Resolve flags and config file, print the result and exit",
    )
    add_config_arguments(parser)
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print_config(config)


if __name__ == "__main__":
    main()
