"""Models for executed test results."""

from dataclasses import dataclass
from typing import Literal

TestStatus = Literal["success", "failure", "error", "skipped"]


@dataclass(frozen=True, kw_only=True)
class TestResult:
    """Result of a single executed test.

    Produced by the test-run collector and never mutated afterwards. A result
    carrying both ``expected`` and ``actual`` values for a failed assertion is
    a comparison failure and can be opened in a diff view.
    """

    __test__ = False

    name: str
    status: TestStatus
    trace: str | None = None
    expected: str | None = None
    actual: str | None = None
    duration: float = 0.0

    @property
    def has_trace(self) -> bool:
        """Whether the result carries non-empty trace text."""
        return bool(self.trace)

    @property
    def is_comparison_failure(self) -> bool:
        """Whether expected and actual values are available for a diff."""
        return (
            self.status == "failure"
            and self.expected is not None
            and self.actual is not None
        )
