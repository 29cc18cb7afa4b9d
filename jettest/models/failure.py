"""Failure descriptions recorded against a single test."""

from dataclasses import dataclass
from datetime import timedelta
from typing import ClassVar, Literal

from jettest.durations import format_duration


@dataclass(frozen=True, kw_only=True)
class Failure:
    """Base for everything that can appear in an outcome's failure list."""

    kind: ClassVar[str]

    def describe(self) -> str:
        """Human-readable description of the failure."""
        raise NotImplementedError

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True, kw_only=True)
class UnsupportedMethod(Failure):
    kind: ClassVar[str] = "UnsupportedMethod"

    method: str

    def describe(self) -> str:
        return f"http method '{self.method}' is not supported"


@dataclass(frozen=True, kw_only=True)
class RequestConstructionFailure(Failure):
    kind: ClassVar[str] = "RequestConstructionFailure"

    reason: str

    def describe(self) -> str:
        return f"request construction failure: {self.reason}"


@dataclass(frozen=True, kw_only=True)
class TransportFailure(Failure):
    kind: ClassVar[str] = "TransportFailure"

    reason: str

    def describe(self) -> str:
        return f"transport failure: {self.reason}"


@dataclass(frozen=True, kw_only=True)
class ExecutionError(Failure):
    """An error nothing else accounted for while running the test."""

    kind: ClassVar[str] = "ExecutionError"

    reason: str

    def describe(self) -> str:
        return f"execution failure: {self.reason}"


@dataclass(frozen=True, kw_only=True)
class BodyReadFailure(Failure):
    kind: ClassVar[str] = "BodyReadFailure"

    reason: str

    def describe(self) -> str:
        return (
            "body parsing failure: unable to read response body. "
            "skipping response body checks"
        )


@dataclass(frozen=True, kw_only=True)
class StatusMismatch(Failure):
    kind: ClassVar[str] = "StatusMismatch"

    expected: int
    actual: int

    def describe(self) -> str:
        return (
            f"status code failure: expected status code {self.expected}, "
            f"but received {self.actual}"
        )


@dataclass(frozen=True, kw_only=True)
class BodyValueMismatch(Failure):
    kind: ClassVar[str] = "BodyValueMismatch"

    path: str
    expected: str
    actual: str

    def describe(self) -> str:
        return (
            f"response body failure: expected {self.path} to be {self.expected}, "
            f"but got {self.actual}"
        )


@dataclass(frozen=True, kw_only=True)
class LatencyExceeded(Failure):
    kind: ClassVar[str] = "LatencyExceeded"

    max_latency: timedelta
    actual: timedelta

    def describe(self) -> str:
        return (
            "latency failure: expected latency to be below "
            f"{format_duration(self.max_latency)}, "
            f"but it took {format_duration(self.actual)}"
        )


@dataclass(frozen=True, kw_only=True)
class DebugDump(Failure):
    """Raw exchange data attached to failing tests in debug mode."""

    kind: ClassVar[str] = "DebugDump"

    label: Literal["body", "request", "response"]
    content: str

    def describe(self) -> str:
        return f"{self.label} for debugging: {self.content}"
