"""Integration tests for the test executor against a live HTTP server."""

import asyncio
import io
from collections.abc import AsyncGenerator
from datetime import timedelta

import pytest
from aiohttp import test_utils, web

from jettest.config import EngineConfig
from jettest.executor import TestExecutor
from jettest.models.definition import BodyAssertion, TestDefinition
from jettest.models.failure import (
    BodyReadFailure,
    BodyValueMismatch,
    LatencyExceeded,
)
from jettest.testing.factories import (
    ExpectationSpecFactory,
    RequestSpecFactory,
    TestDefinitionFactory,
)


async def ping(request: web.Request) -> web.Response:
    """Respond healthy."""
    return web.json_response({"status": "ok"})


async def slow(request: web.Request) -> web.Response:
    """Respond healthy after a delay."""
    await asyncio.sleep(0.2)
    return web.json_response({"status": "ok"})


async def echo(request: web.Request) -> web.Response:
    """Echo method, query, selected headers and body."""
    return web.json_response(
        {
            "method": request.method,
            "query": dict(request.query),
            "client_id": request.headers.get("client-id", ""),
            "authorization": request.headers.get("Authorization", ""),
            "body": await request.text(),
        }
    )


async def item(request: web.Request) -> web.Response:
    """Respond with the decoded item name from the path."""
    return web.json_response({"name": request.match_info["name"]})


async def deep(request: web.Request) -> web.Response:
    """Respond with JSON nested too deeply to decode."""
    return web.Response(
        text="[" * 200_000 + "]" * 200_000, content_type="application/json"
    )


async def truncated(request: web.Request) -> web.StreamResponse:
    """Promise a longer body than is sent, then drop the connection."""
    response = web.StreamResponse(status=200)
    response.content_length = 100
    await response.prepare(request)
    await response.write(b'{"status"')
    assert request.transport is not None
    request.transport.close()
    return response


def make_test(
    name: str,
    path: str,
    *,
    method: str = "GET",
    max_latency: timedelta | None = timedelta(seconds=1),
    assertions: list[BodyAssertion] | None = None,
    **request_fields: object,
) -> TestDefinition:
    """Build a test expecting 200 from the given path."""
    return TestDefinitionFactory.build(
        name=name,
        request=RequestSpecFactory.build(method=method, path=path, **request_fields),
        expect=ExpectationSpecFactory.build(
            status_code=200,
            max_latency=max_latency,
            body=assertions if assertions is not None else [],
        ),
    )


@pytest.fixture
async def server() -> AsyncGenerator[test_utils.TestServer, None]:
    """Serve a small deterministic API."""
    app = web.Application()
    app.router.add_get("/ping", ping)
    app.router.add_get("/slow", slow)
    app.router.add_route("*", "/echo", echo)
    app.router.add_get("/truncated", truncated)
    app.router.add_get("/items/{name}", item)
    app.router.add_get("/deep", deep)
    async with test_utils.TestServer(app) as test_server:
        yield test_server


@pytest.fixture
def config(server: test_utils.TestServer) -> EngineConfig:
    """Point the engine at the test server."""
    return EngineConfig(
        host=f"http://{server.host}:{server.port}",
        client_id="client-1",
        auth_token="secret-token",
        timeout=5,
    )


async def test_latency_exceeded(config: EngineConfig) -> None:
    """Fails a test whose response arrives after the latency bound."""
    test = make_test("slow", "/slow", max_latency=timedelta(milliseconds=50))

    async with TestExecutor.from_config(config, stream=io.StringIO()) as executor:
        outcome = await executor.execute(test)

    assert len(outcome.failures) == 1
    failure = outcome.failures[0]
    assert isinstance(failure, LatencyExceeded)
    assert failure.actual > timedelta(milliseconds=50)


async def test_body_read_failure(config: EngineConfig) -> None:
    """Reports a single body read failure when the body is cut short."""
    test = make_test(
        "truncated",
        "/truncated",
        max_latency=timedelta(microseconds=1),
        assertions=[BodyAssertion(path="status", value="ok")],
    )

    async with TestExecutor.from_config(config, stream=io.StringIO()) as executor:
        outcome = await executor.execute(test)

    assert len(outcome.failures) == 1
    assert isinstance(outcome.failures[0], BodyReadFailure)


async def test_request_reaches_server_intact(config: EngineConfig) -> None:
    """Delivers method, params, credentials and body, including on GET."""
    test = make_test(
        "echo",
        "/echo",
        params={"q": ["a b"]},
        with_client_id=True,
        with_auth_token=True,
        body="payload",
        assertions=[
            BodyAssertion(path="method", value="GET"),
            BodyAssertion(path="query.q", value="a b"),
            BodyAssertion(path="client_id", value="client-1"),
            BodyAssertion(path="authorization", value="secret-token"),
            BodyAssertion(path="body", value="payload"),
        ],
    )

    async with TestExecutor.from_config(config, stream=io.StringIO()) as executor:
        outcome = await executor.execute(test)

    assert outcome.failures == []


async def test_repeated_runs_give_identical_summaries(config: EngineConfig) -> None:
    """Produces the same counts when the same suite runs twice."""
    healthy = [BodyAssertion(path="status", value="ok")]
    unhealthy = [BodyAssertion(path="status", value="down")]
    tests = [
        make_test("ping", "/ping", assertions=healthy),
        make_test("wrong", "/ping", assertions=unhealthy),
        make_test("echo", "/echo", method="POST"),
        make_test("missing", "/missing"),
    ]

    async with TestExecutor.from_config(config, stream=io.StringIO()) as executor:
        first = await executor.run(tests)
    async with TestExecutor.from_config(config, stream=io.StringIO()) as executor:
        second = await executor.run(tests)

    assert first == second
    assert (first.total, first.passed, first.failed) == (4, 2, 2)


async def test_path_with_space_is_escaped(config: EngineConfig) -> None:
    """Sends unsafe path characters percent-encoded."""
    test = make_test(
        "item",
        "/items/a b",
        assertions=[BodyAssertion(path="name", value="a b")],
    )

    async with TestExecutor.from_config(config, stream=io.StringIO()) as executor:
        outcome = await executor.execute(test)

    assert outcome.failures == []


async def test_deeply_nested_body_fails_only_that_test(config: EngineConfig) -> None:
    """Records a failed outcome instead of stalling the run."""
    tests = [
        make_test("deep", "/deep", assertions=[BodyAssertion(path="0", value="x")]),
        make_test("ping", "/ping"),
    ]

    async with TestExecutor.from_config(
        config, stream=io.StringIO(), liveness_ceiling=2
    ) as executor:
        summary = await executor.run(tests)

    assert (summary.total, summary.passed, summary.failed) == (2, 1, 1)
    [failed] = [outcome for outcome in summary.outcomes if not outcome.passed]
    assert failed.failures == [BodyValueMismatch(path="0", expected="x", actual="")]
