"""Evaluation of a completed HTTP exchange against a test's expectations."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import timedelta

from jettest.json_path import get_value
from jettest.models.definition import ExpectationSpec
from jettest.models.failure import (
    BodyReadFailure,
    BodyValueMismatch,
    DebugDump,
    Failure,
    LatencyExceeded,
    StatusMismatch,
)
from jettest.request_builder import HttpRequest


@dataclass(frozen=True, kw_only=True)
class Exchange:
    """A sent request together with what came back.

    ``body`` is None when the response body could not be read; ``body_error``
    then says why.
    """

    request: HttpRequest
    status: int
    latency: timedelta
    reason: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None
    body_error: str | None = None

    def describe_response(self) -> str:
        """Representation used in debug output."""
        return (
            f"{self.status} {self.reason or ''}".rstrip()
            + f" headers={list(self.headers.items())} latency={self.latency}"
        )


@dataclass(frozen=True, kw_only=True)
class ResponseChecker:
    """Checks responses and records every expectation that was not met."""

    debug: bool = False

    def check(self, expect: ExpectationSpec, exchange: Exchange) -> Sequence[Failure]:
        """Return the failures for one exchange (empty when it passed)."""
        failures: list[Failure] = []

        if exchange.status != expect.status_code:
            failures.append(
                StatusMismatch(expected=expect.status_code, actual=exchange.status)
            )

        if exchange.body is None:
            failures.append(BodyReadFailure(reason=exchange.body_error or "unknown"))
            return failures

        for assertion in expect.body:
            actual = get_value(exchange.body, assertion.path)
            if actual != assertion.value:
                failures.append(
                    BodyValueMismatch(
                        path=assertion.path, expected=assertion.value, actual=actual
                    )
                )

        if expect.max_latency is not None and exchange.latency > expect.max_latency:
            failures.append(
                LatencyExceeded(max_latency=expect.max_latency, actual=exchange.latency)
            )

        if failures and self.debug:
            failures.extend(self.diagnostics(exchange))

        return failures

    def diagnostics(self, exchange: Exchange) -> Sequence[DebugDump]:
        """Raw body, request and response dumps for a failing exchange."""
        body = (exchange.body or b"").decode("utf-8", errors="replace")
        return [
            DebugDump(label="body", content=body),
            DebugDump(label="request", content=exchange.request.describe()),
            DebugDump(label="response", content=exchange.describe_response()),
        ]
