"""Translate test definitions into concrete HTTP requests."""

from dataclasses import dataclass, field

from multidict import CIMultiDict, CIMultiDictProxy
from yarl import URL

from jettest.config import EngineConfig
from jettest.errors import RequestConstructionError, UnsupportedMethodError
from jettest.models.definition import TestDefinition

SUPPORTED_METHODS = frozenset({"GET", "POST", "PUT"})

REDACTED_HEADERS = frozenset({"authorization"})


@dataclass(frozen=True, kw_only=True)
class HttpRequest:
    """An outbound request ready to be sent on the shared session."""

    method: str
    url: URL
    headers: CIMultiDictProxy[str] = field(
        default_factory=lambda: CIMultiDictProxy(CIMultiDict())
    )
    body: str = ""

    def describe(self) -> str:
        """Representation used in debug output, with credentials masked."""
        headers = {
            key: "<redacted>" if key.lower() in REDACTED_HEADERS else value
            for key, value in self.headers.items()
        }
        return f"{self.method} {self.url} headers={headers} body={self.body!r}"


def validate_method(method: str) -> str:
    """Return the upper-cased method, or raise if it is not supported."""
    normalized = method.upper()
    if normalized not in SUPPORTED_METHODS:
        raise UnsupportedMethodError(method)
    return normalized


def build_url(host: str, path: str, params: dict[str, list[str]]) -> URL:
    """Compose ``host + path`` and the form-encoded query string.

    The path is percent-encoded where needed. Keys are emitted in sorted order
    and values in their declared order. No ``?`` is appended when there are no
    parameters.
    """
    target = f"{host}{path}"
    try:
        url = URL(target)
    except (TypeError, ValueError) as exc:
        raise RequestConstructionError(f"invalid url {target!r}: {exc}") from exc

    if url.scheme not in {"http", "https"} or not url.host:
        raise RequestConstructionError(f"invalid url {target!r}: not an absolute URL")

    query = [(key, value) for key in sorted(params) for value in params[key]]
    return url.extend_query(query) if query else url


def build_request(config: EngineConfig, test: TestDefinition) -> HttpRequest:
    """Build the HTTP request for a single test.

    Args:
        config: Engine configuration (host and credentials)
        test: Test whose request should be built

    Returns:
        The request to send

    Raises:
        UnsupportedMethodError: If the method is not GET, POST or PUT
        RequestConstructionError: If the target URL is invalid

    """
    spec = test.request
    method = validate_method(spec.method)
    url = build_url(
        config.host,
        spec.path,
        {key: list(values) for key, values in spec.params.items()},
    )

    # A declared header map replaces the default set outright.
    headers: CIMultiDict[str] = CIMultiDict()
    if spec.headers is not None:
        for key, values in spec.headers.items():
            for value in values:
                headers.add(key, value)

    if spec.with_client_id:
        headers.add("client-id", config.client_id or "")
    if spec.with_auth_token:
        token = config.auth_token.get_secret_value() if config.auth_token else ""
        headers.add("Authorization", token)

    return HttpRequest(
        method=method,
        url=url,
        headers=CIMultiDictProxy(headers),
        body=spec.body,
    )
