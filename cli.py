#!/usr/bin/env python3
"""
Command-line interface for the client & contract service.

Usage:
    python cli.py [command] [options]

Commands:
    demo        Run the lifecycle walkthrough
    test        Run the test suite
    serve       Start the API server

Examples:
    python cli.py demo
    python cli.py demo --today 2025-06-01
    python cli.py test -v
    python cli.py serve --reload
"""

import argparse
import subprocess
import sys
from datetime import date

from shared import config


def run_demo(today: date) -> None:
    """Run the lifecycle demo on a pinned date."""
    from lifecycle.demo import run_lifecycle_demo
    run_lifecycle_demo(today)


def run_tests(args: list[str]) -> int:
    """Run the test suite."""
    cmd = [sys.executable, "-m", "pytest"] + args
    return subprocess.run(cmd).returncode


def run_server(host: str, port: int, reload: bool) -> int:
    """Start the API server."""
    problems = config.validate_config()
    if problems:
        for problem in problems:
            print(f"Configuration error: {problem}")
        return 1

    cmd = [sys.executable, "-m", "uvicorn", "api.main:app", f"--host={host}", f"--port={port}"]
    if reload:
        cmd.append("--reload")

    print(f"Starting server at http://{host}:{port}")
    print(f"API docs available at http://{host}:{port}/docs")
    return subprocess.run(cmd).returncode


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Client & Contract Service CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo
  %(prog)s demo --today 2025-06-01
  %(prog)s test -v
  %(prog)s serve --reload
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run the lifecycle walkthrough")
    demo_parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=config.pinned_today() or date(2025, 5, 15),
        help="Reference date for the demo (YYYY-MM-DD)",
    )

    # Test command
    test_parser = subparsers.add_parser("test", help="Run the test suite")
    test_parser.add_argument(
        "pytest_args",
        nargs="*",
        default=[],
        help="Arguments to pass to pytest",
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", default=config.HOST, help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=config.PORT, help="Port to bind to")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args, extra = parser.parse_known_args()
    if extra and args.command != "test":
        parser.error(f"unrecognized arguments: {' '.join(extra)}")

    if args.command == "demo":
        run_demo(args.today)
    elif args.command == "test":
        sys.exit(run_tests(args.pytest_args + extra))
    elif args.command == "serve":
        sys.exit(run_server(args.host, args.port, args.reload))
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
