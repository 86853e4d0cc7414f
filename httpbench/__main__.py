"""Main entry point for the httpbench package.

Usage:
    python -m httpbench run --url http://localhost:8080/ --total 1000 --parallel 20
    python -m httpbench run --config bench.json --dump-failures ./failures
    python -m httpbench show-config --config bench.json --headers 'X-Run:[thread_number]'
"""

import sys


def main():
    """Main entry point that dispatches to subcommands."""
    if len(sys.argv) < 2:
        print_help()
        sys.exit(1)

    command = sys.argv[1]

    if command in ["-h", "--help", "help"]:
        print_help()
        sys.exit(0)

    args = sys.argv[2:]

    if command == "run":
        from .cli.run import main as run_main

        run_main(args)
    elif command == "show-config":
        from .cli.show_config import main as show_config_main

        show_config_main(args)
    else:
        print(f"Unknown command: {command}")
        print_help()
        sys.exit(1)


def print_help():
    """Print help message."""
    print(
        """httpbench - HTTP load generation

Usage: python -m httpbench <command> [options]

Commands:
    run           Run a benchmark and print aggregate statistics
    show-config   Print the resolved configuration without sending requests

Placeholders:
    [test_number]    replaced by the request index (0..total-1)
    [thread_number]  replaced by the worker index (0..parallel-1)
    Both work in the URL, headers, query parameters, token and POST data.

Examples:
    # 1000 GET requests, 20 at a time
    python -m httpbench run --url http://localhost:8080/ --total 1000 --parallel 20

    # POST a templated body and keep one sample of each distinct failure
    python -m httpbench run --url http://localhost:8080/items --method POST \\
        --post-data '{"id": [test_number]}' --dump-failures ./failures

    # Use a JSON config file and save per-request results
    python -m httpbench run --config bench.json --output results.csv

For command-specific help:
    python -m httpbench <command> --help
"""
    )


if __name__ == "__main__":
    main()
