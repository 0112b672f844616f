"""Shared fixtures for unit tests."""

from pathlib import Path

import pytest

from failure_inspector.events import EventBus
from failure_inspector.inspector import FailureInspector
from failure_inspector.testing.fakes import (
    LineTraceParser,
    MappingSourceLookup,
    RecordingClipboard,
    RecordingComparisonView,
    RecordingNavigator,
)


@pytest.fixture
def bus() -> EventBus:
    """Create an empty event bus."""
    return EventBus()


@pytest.fixture
def parser() -> LineTraceParser:
    """Create a line based trace parser."""
    return LineTraceParser()


@pytest.fixture
def source_lookup() -> MappingSourceLookup:
    """Create a lookup resolving foo.bsl only."""
    return MappingSourceLookup(locations={"foo.bsl": Path("/src/foo.bsl")})


@pytest.fixture
def navigator() -> RecordingNavigator:
    """Create a recording navigator."""
    return RecordingNavigator()


@pytest.fixture
def clipboard() -> RecordingClipboard:
    """Create a recording clipboard."""
    return RecordingClipboard()


@pytest.fixture
def comparison_view() -> RecordingComparisonView:
    """Create a recording comparison view."""
    return RecordingComparisonView()


@pytest.fixture
def inspector(
    parser: LineTraceParser,
    source_lookup: MappingSourceLookup,
    navigator: RecordingNavigator,
    clipboard: RecordingClipboard,
    comparison_view: RecordingComparisonView,
    bus: EventBus,
) -> FailureInspector:
    """Create an inspector wired to in-memory collaborators."""
    return FailureInspector(
        parser=parser,
        source_lookup=source_lookup,
        navigator=navigator,
        clipboard=clipboard,
        comparison_view=comparison_view,
        bus=bus,
    )
