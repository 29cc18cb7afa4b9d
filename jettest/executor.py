"""Concurrent execution of API tests against a single host."""

import asyncio
import logging
import time
from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, TextIO

import aiohttp

from jettest.checker import Exchange, ResponseChecker
from jettest.config import EngineConfig
from jettest.errors import (
    CollectorStalledError,
    RequestConstructionError,
    UnsupportedMethodError,
)
from jettest.models.definition import TestDefinition
from jettest.models.failure import (
    ExecutionError,
    RequestConstructionFailure,
    TransportFailure,
    UnsupportedMethod,
)
from jettest.models.result import Outcome, RunSummary
from jettest.reporting import print_outcome
from jettest.request_builder import HttpRequest, build_request

log = logging.getLogger(__name__)

LIVENESS_CEILING = 30.0


@dataclass(frozen=True, kw_only=True)
class TestExecutor:
    """Runs every test of a suite in parallel on one shared HTTP session."""

    __test__ = False

    config: EngineConfig
    session: aiohttp.ClientSession = field(repr=False)
    liveness_ceiling: float = LIVENESS_CEILING
    stream: TextIO | None = field(default=None, repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: EngineConfig, **kwargs: Any
    ) -> AsyncGenerator["TestExecutor", None]:
        """Create executor with managed session lifecycle."""
        timeout = aiohttp.ClientTimeout(total=config.timeout or None)
        log.info("Creating a new test session for host %s", config.host)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            yield cls(config=config, session=session, **kwargs)

    @property
    def checker(self) -> ResponseChecker:
        return ResponseChecker(debug=self.config.debug)

    async def run(self, tests: Sequence[TestDefinition]) -> RunSummary:
        """Run all tests concurrently and collect their outcomes.

        Args:
            tests: Test definitions to execute

        Returns:
            Totals for the run; outcomes are counted in arrival order

        Raises:
            CollectorStalledError: If no outcome arrives within the liveness
                ceiling while outcomes are still outstanding

        """
        # Capacity 1 makes a finished task wait until the collector is ready.
        queue: asyncio.Queue[Outcome] = asyncio.Queue(maxsize=1)

        log.info("Dispatching %d test(s)...", len(tests))
        tasks = [
            asyncio.create_task(self._execute_and_report(test, queue))
            for test in tests
        ]

        try:
            summary = await self._collect(queue, len(tests))
        finally:
            for task in tasks:
                task.cancel()
            results = await asyncio.gather(*tasks, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    log.error("Test task failed: %s", result, exc_info=result)

        log.info(
            "Test execution completed: total=%d passed=%d failed=%d",
            summary.total,
            summary.passed,
            summary.failed,
        )
        return summary

    async def _collect(
        self, queue: asyncio.Queue[Outcome], expected: int
    ) -> RunSummary:
        """Receive exactly ``expected`` outcomes, each under a fresh deadline."""
        passed = failed = 0
        outcomes: list[Outcome] = []

        for received in range(expected):
            try:
                outcome = await asyncio.wait_for(
                    queue.get(), timeout=self.liveness_ceiling
                )
            except TimeoutError as exc:
                raise CollectorStalledError(
                    received, expected, self.liveness_ceiling
                ) from exc

            print_outcome(outcome, debug=self.config.debug, stream=self.stream)
            outcomes.append(outcome)
            if outcome.passed:
                passed += 1
            else:
                failed += 1

        return RunSummary(
            total=expected, passed=passed, failed=failed, outcomes=outcomes
        )

    async def _execute_and_report(
        self, test: TestDefinition, queue: asyncio.Queue[Outcome]
    ) -> None:
        try:
            outcome = await self.execute(test)
        except Exception as exc:
            log.error("Test execution failed: %s", test.name, exc_info=exc)
            reason = str(exc) or type(exc).__name__
            outcome = Outcome(test=test, failures=[ExecutionError(reason=reason)])
        await queue.put(outcome)

    async def execute(self, test: TestDefinition) -> Outcome:
        """Build, send and check one test, never raising for per-test errors."""
        try:
            request = build_request(self.config, test)
        except UnsupportedMethodError as exc:
            return Outcome(test=test, failures=[UnsupportedMethod(method=exc.method)])
        except RequestConstructionError as exc:
            return Outcome(
                test=test, failures=[RequestConstructionFailure(reason=str(exc))]
            )

        try:
            exchange = await self.send(request)
        except (aiohttp.ClientError, TimeoutError) as exc:
            reason = str(exc) or type(exc).__name__
            log.debug("Request for %s failed: %s", test.name, reason)
            return Outcome(test=test, failures=[TransportFailure(reason=reason)])
        except ValueError as exc:
            return Outcome(
                test=test, failures=[RequestConstructionFailure(reason=str(exc))]
            )

        failures = self.checker.check(test.expect, exchange)
        log.debug(
            "Test checked: name=%s status=%d latency=%s failures=%d",
            test.name,
            exchange.status,
            exchange.latency,
            len(failures),
        )
        return Outcome(test=test, failures=failures)

    async def send(self, request: HttpRequest) -> Exchange:
        """Perform the HTTP call and read the whole response body.

        Latency covers the time until the response headers arrive.
        """
        start = time.perf_counter()
        async with self.session.request(
            request.method,
            request.url,
            headers=request.headers,
            data=request.body.encode() if request.body else None,
        ) as response:
            latency = timedelta(seconds=time.perf_counter() - start)

            body: bytes | None = None
            body_error: str | None = None
            try:
                body = await response.read()
            except (aiohttp.ClientError, TimeoutError) as exc:
                body_error = str(exc) or type(exc).__name__

            return Exchange(
                request=request,
                status=response.status,
                reason=response.reason,
                headers=response.headers.copy(),
                latency=latency,
                body=body,
                body_error=body_error,
            )
