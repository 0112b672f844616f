"""Models for test-run reports loaded from YAML files."""

from collections.abc import Sequence

from pydantic import Field

from failure_inspector.models.base import Model
from failure_inspector.models.result import TestResult, TestStatus


class TestCaseRecord(Model):
    """Single test case as recorded in a report."""

    __test__ = False

    name: str = Field(..., description="Test name")
    status: TestStatus = Field(..., description="Execution outcome")
    trace: str | None = Field(default=None, description="Raw failure trace text")
    expected: str | None = Field(
        default=None, description="Expected value of a failed comparison"
    )
    actual: str | None = Field(
        default=None, description="Actual value of a failed comparison"
    )
    duration: float = Field(default=0.0, description="Duration in seconds")

    def to_test_result(self) -> TestResult:
        return TestResult(
            name=self.name,
            status=self.status,
            trace=self.trace,
            expected=self.expected,
            actual=self.actual,
            duration=self.duration,
        )


class TestRunReport(Model):
    """Complete test-run report."""

    __test__ = False

    version: str = Field(..., description="Report schema version")
    tests: Sequence[TestCaseRecord] = Field(
        default_factory=list, description="Executed test cases"
    )

    def to_test_results(self) -> Sequence[TestResult]:
        """Convert every recorded test case into a ``TestResult``."""
        return [record.to_test_result() for record in self.tests]
