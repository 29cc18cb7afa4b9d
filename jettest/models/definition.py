"""Models for test suites loaded from YAML files."""

from collections.abc import Mapping, Sequence
from datetime import timedelta
from typing import Annotated, Any

from pydantic import AliasChoices, BeforeValidator, Field

from jettest.durations import parse_duration
from jettest.models.base import Model


def _as_multimap(value: Any) -> Any:
    """Accept ``key: value`` as shorthand for ``key: [value]``."""
    if not isinstance(value, Mapping):
        return value
    return {
        key: list(values) if isinstance(values, list | tuple) else [values]
        for key, values in value.items()
    }


def _as_text(value: Any) -> Any:
    """Coerce YAML scalars to the string form used in comparisons."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    if value is None:
        return ""
    return value


def _as_duration(value: Any) -> Any:
    if value is None:
        return None
    return parse_duration(value)


Text = Annotated[str, BeforeValidator(_as_text)]
MultiMap = Annotated[Mapping[str, Sequence[Text]], BeforeValidator(_as_multimap)]
Duration = Annotated[timedelta, BeforeValidator(_as_duration)]


class RequestSpec(Model):
    """Everything required to make a test's API request."""

    method: str = Field(..., description="HTTP method (GET, POST or PUT)")
    path: str = Field(default="", description="Path appended to the host")
    params: MultiMap = Field(
        default_factory=dict, description="Query parameters, one or more per key"
    )
    headers: MultiMap | None = Field(
        default=None,
        description="Request headers; when set they replace the default header set",
    )
    with_client_id: bool = Field(
        default=False,
        validation_alias=AliasChoices("with_clientID", "with_client_id"),
        description="Send the configured client id as a client-id header",
    )
    with_auth_token: bool = Field(
        default=False,
        validation_alias=AliasChoices("with_token", "with_auth_token"),
        description="Send the configured auth token as an Authorization header",
    )
    body: Text = Field(default="", description="Literal request payload")


class BodyAssertion(Model):
    """A segment of the response body that is expected."""

    path: str = Field(..., description="JSON path into the response body")
    value: Text = Field(..., description="Expected value, compared as a string")


class ExpectationSpec(Model):
    """Expected response behaviour."""

    status_code: int = Field(..., description="Expected HTTP status code")
    # The persisted key has always been misspelled; both spellings load.
    max_latency: Duration | None = Field(
        default=None,
        validation_alias=AliasChoices("max_latnecy", "max_latency"),
        description="Upper bound on response latency (None means unbounded)",
    )
    body: Sequence[BodyAssertion] = Field(
        default_factory=list, description="Response body assertions"
    )


class TestDefinition(Model):
    """A single declared API check."""

    __test__ = False

    name: str = Field(..., description="Human-readable test name")
    request: RequestSpec = Field(..., description="Request to send")
    expect: ExpectationSpec = Field(..., description="Expected response")


class TestSuite(Model):
    """Complete suite loaded from a YAML file."""

    __test__ = False

    tests: Sequence[TestDefinition] = Field(
        default_factory=list, description="List of tests"
    )
