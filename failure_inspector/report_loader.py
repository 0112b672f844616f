"""Load test-run reports from YAML files."""

import asyncio
from collections.abc import Sequence
from pathlib import Path

import yaml
from pydantic import ValidationError

from failure_inspector.errors import ReportLoadError
from failure_inspector.models.report import TestRunReport
from failure_inspector.models.result import TestResult


async def load_report(report_path: Path) -> TestRunReport:
    """Load and validate a test-run report.

    Args:
        report_path: Path to the YAML report file

    Returns:
        Validated report

    Raises:
        FileNotFoundError: If the report file does not exist
        ReportLoadError: If the file is not valid YAML or does not match the schema

    """
    content = await asyncio.to_thread(report_path.read_text, encoding="utf-8")

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ReportLoadError(f"Invalid YAML in {report_path}: {e}") from e

    if not isinstance(data, dict):
        raise ReportLoadError(f"Report {report_path} must contain a mapping")

    try:
        return TestRunReport.model_validate(data)
    except ValidationError as e:
        raise ReportLoadError(f"Invalid report {report_path}: {e}") from e


async def load_test_results(report_path: Path) -> Sequence[TestResult]:
    """Load a report and convert its test cases into results."""
    report = await load_report(report_path)
    return report.to_test_results()


def pick_result(
    results: Sequence[TestResult], test_name: str | None = None
) -> TestResult | None:
    """Pick the named result, or the first failure carrying a trace."""
    if test_name is not None:
        return next((r for r in results if r.name == test_name), None)
    return next(
        (r for r in results if r.status in {"failure", "error"} and r.has_trace),
        None,
    )
