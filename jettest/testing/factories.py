"""Test factories for generating test data."""

from datetime import timedelta

from polyfactory import Use
from polyfactory.factories import DataclassFactory
from polyfactory.factories.pydantic_factory import ModelFactory

from jettest.models.definition import (
    BodyAssertion,
    ExpectationSpec,
    RequestSpec,
    TestDefinition,
)
from jettest.models.result import Outcome


class RequestSpecFactory(ModelFactory[RequestSpec]):
    """Factory for RequestSpec."""

    method = "GET"
    path = "/ping"
    params = Use(dict)
    headers = None
    with_client_id = False
    with_auth_token = False
    body = ""


class BodyAssertionFactory(ModelFactory[BodyAssertion]):
    """Factory for BodyAssertion."""

    path = "status"
    value = "ok"


class ExpectationSpecFactory(ModelFactory[ExpectationSpec]):
    """Factory for ExpectationSpec."""

    status_code = 200
    max_latency = timedelta(seconds=1)
    body = Use(list)


class TestDefinitionFactory(ModelFactory[TestDefinition]):
    """Factory for TestDefinition."""

    request = Use(RequestSpecFactory.build)
    expect = Use(ExpectationSpecFactory.build)


class OutcomeFactory(DataclassFactory[Outcome]):
    """Factory for Outcome."""

    test = Use(TestDefinitionFactory.build)
    failures = ()
