"""Human-readable and JSON rendering of outcomes and run summaries."""

import sys
from collections.abc import Sequence
from typing import Any, TextIO

from jettest.models.failure import DebugDump
from jettest.models.result import Outcome, RunSummary


def outcome_lines(outcome: Outcome, *, debug: bool) -> Sequence[str]:
    """Lines printed for one outcome.

    Passing tests only show up in debug mode. Failing tests list every failure
    indented beneath the header line.
    """
    request = outcome.test.request
    label = f"{outcome.test.name} ({request.method.upper()} {request.path})"

    if outcome.passed:
        return [f"Test Passed: {label}"] if debug else []

    return [f"Test Failed: {label}", *(f"\t- {f}" for f in outcome.failures)]


def print_outcome(
    outcome: Outcome, *, debug: bool, stream: TextIO | None = None
) -> None:
    """Print an outcome as one contiguous block."""
    lines = outcome_lines(outcome, debug=debug)
    if lines:
        print("\n".join(lines), file=stream or sys.stdout, flush=True)


def summary_lines(summary: RunSummary, *, debug: bool) -> Sequence[str]:
    """Closing summary block printed after a run."""
    lines = [
        "",
        "test results:",
        f"total tests: {summary.total}",
        f"tests passed: {summary.passed}",
        f"tests failed: {summary.failed}",
        "",
    ]
    if summary.failed == 0:
        lines.append("all tests passed successfully!")
    else:
        lines.append("some tests failed.")
        if not debug:
            lines.append(
                "hint: use '-d' for detailed request and response information."
            )
    return lines


def format_output(summary: RunSummary) -> dict[str, Any]:
    """Format a run summary for JSON output."""
    results: list[dict[str, Any]] = []
    for outcome in summary.outcomes:
        results.append(
            {
                "name": outcome.test.name,
                "method": outcome.test.request.method.upper(),
                "path": outcome.test.request.path,
                "status": "passed" if outcome.passed else "failed",
                "failures": [
                    {"kind": failure.kind, "message": str(failure)}
                    for failure in outcome.failures
                    if not isinstance(failure, DebugDump)
                ],
            }
        )

    return {
        "total": summary.total,
        "passed": summary.passed,
        "failed": summary.failed,
        "results": results,
    }
