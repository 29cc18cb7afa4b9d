"""CLI entry point for the API test runner."""

import argparse
import asyncio
import json
import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from jettest.config import EngineConfig
from jettest.constants import (
    APP_BANNER,
    APP_COPYRIGHT,
    APP_DESCRIPTION,
    APP_NAME,
    APP_VERSION,
)
from jettest.errors import CollectorStalledError
from jettest.executor import TestExecutor
from jettest.reporting import format_output, summary_lines
from jettest.suite_loader import load_test_suite

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_STALLED = 2

TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})

VERSION_ALIASES = ("v", "ver", "about")


def env_flag(name: str) -> bool:
    """Read a boolean environment variable, treating unset as false."""
    value = os.environ.get(name, "").strip()
    if not value or value in FALSE_VALUES:
        return False
    if value in TRUE_VALUES:
        return True
    raise ValueError(f"invalid boolean value {value!r} for {name}")


def show_version() -> None:
    """Print name, version, description and license."""
    print(f"{APP_NAME} {APP_VERSION}")
    print(APP_DESCRIPTION)
    print(APP_COPYRIGHT)


async def run(
    host: str,
    file: Path,
    client_id: str | None = None,
    auth_token: str | None = None,
    timeout: int = 30,
    debug: bool = False,
    json_output: bool = False,
) -> int:
    """Run the suite in ``file`` against ``host`` and return the exit code."""
    log = logging.getLogger("jettest")

    try:
        config = EngineConfig(
            host=host,
            client_id=client_id or None,
            auth_token=auth_token or None,
            timeout=timeout,
            debug=debug,
        )
    except ValidationError as exc:
        log.error("Invalid configuration: %s", exc)
        return EXIT_FAILURE

    try:
        suite = await load_test_suite(file)
    except (FileNotFoundError, ValueError) as exc:
        log.error("Unable to load test suite: %s", exc)
        return EXIT_FAILURE

    if not suite.tests:
        log.info("No tests defined in %s", file)

    # Keep stdout parseable when printing the JSON summary.
    stream = sys.stderr if json_output else sys.stdout

    try:
        async with TestExecutor.from_config(config, stream=stream) as executor:
            summary = await executor.run(suite.tests)
    except CollectorStalledError as exc:
        log.error("Test run aborted: %s", exc)
        return EXIT_STALLED

    if json_output:
        print(json.dumps(format_output(summary), indent=2))
    else:
        print("\n".join(summary_lines(summary, debug=debug)))

    return EXIT_FAILURE if summary.failed else EXIT_SUCCESS


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser; flags fall back to JETTEST_* variables."""
    parser = argparse.ArgumentParser(
        prog="jettest",
        description="A command-line tool for testing APIs using YAML configuration",
    )
    parser.add_argument(
        "--host",
        default=os.environ.get("JETTEST_HOST"),
        help="Specify the API host (env: JETTEST_HOST)",
    )
    parser.add_argument(
        "-f",
        "--file",
        type=Path,
        default=os.environ.get("JETTEST_FILE"),
        help="Specify the path to the YAML test file (env: JETTEST_FILE)",
    )
    parser.add_argument(
        "--clientID",
        "--cid",
        dest="client_id",
        default=os.environ.get("JETTEST_CLIENT_ID"),
        help="Set the client ID for requests (env: JETTEST_CLIENT_ID)",
    )
    parser.add_argument(
        "--authToken",
        "--at",
        dest="auth_token",
        default=os.environ.get("JETTEST_AUTH_TOKEN"),
        help="Provide an authentication token for requests (env: JETTEST_AUTH_TOKEN)",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=int,
        default=os.environ.get("JETTEST_TIMEOUT", "30"),
        help="Set the request timeout duration in seconds (default: 30)",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug mode (env: JETTEST_DEBUG)",
    )
    parser.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the summary as JSON (env: JETTEST_JSON)",
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser(
        "version", aliases=list(VERSION_ALIASES), help="Print the version"
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is not None:
        show_version()
        sys.exit(EXIT_SUCCESS)

    try:
        debug = args.debug or env_flag("JETTEST_DEBUG")
        json_output = args.json_output or env_flag("JETTEST_JSON")
    except ValueError as exc:
        parser.error(str(exc))

    missing = [
        flag
        for flag, value in (("--host", args.host), ("--file", args.file))
        if not value
    ]
    if missing:
        parser.error(f"the following arguments are required: {', '.join(missing)}")

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    if not json_output:
        print(APP_BANNER, end="")

    exit_code = asyncio.run(
        run(
            host=args.host,
            file=args.file,
            client_id=args.client_id,
            auth_token=args.auth_token,
            timeout=args.timeout,
            debug=debug,
            json_output=json_output,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
