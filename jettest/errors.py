"""Exceptions raised while building requests and collecting outcomes."""


class UnsupportedMethodError(ValueError):
    """Raised when a test uses an HTTP method outside the allow-list."""

    def __init__(self, method: str) -> None:
        super().__init__(f"http method '{method}' is not supported")
        self.method = method


class RequestConstructionError(ValueError):
    """Raised when a test cannot be turned into a valid HTTP request."""


class CollectorStalledError(RuntimeError):
    """Raised when no outcome arrives within the liveness ceiling.

    This is an internal fault (a task never reported back), not a test failure.
    """

    def __init__(self, received: int, expected: int, ceiling: float) -> None:
        super().__init__(
            f"an unexpected delay has occurred. no result has been received for "
            f"{ceiling:g}s. only {received} of {expected} outcomes have been processed."
        )
        self.received = received
        self.expected = expected
        self.ceiling = ceiling
