"""Models for test execution results."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from jettest.models.definition import TestDefinition
from jettest.models.failure import Failure


@dataclass(frozen=True, kw_only=True)
class Outcome:
    """Result of a single test execution.

    An empty failure list means the test passed.
    """

    test: TestDefinition
    failures: Sequence[Failure] = ()

    @property
    def passed(self) -> bool:
        """Whether the test met every expectation."""
        return not self.failures


@dataclass(frozen=True, kw_only=True)
class RunSummary:
    """Counts of total, passed and failed tests for one run.

    ``outcomes`` holds every outcome in the order it was collected.
    """

    total: int
    passed: int = 0
    failed: int = 0
    outcomes: Sequence[Outcome] = field(default=(), repr=False, compare=False)
