"""Tests for asynchronous display of results."""

import asyncio
from dataclasses import dataclass, field
from typing import Any

from failure_inspector.inspector import FailureInspector
from failure_inspector.models.result import TestResult
from failure_inspector.models.trace import Frame, StackTrace
from failure_inspector.services.base import TraceParser
from failure_inspector.testing.fakes import (
    LineTraceParser,
    MappingSourceLookup,
    RecordingClipboard,
    RecordingComparisonView,
    RecordingNavigator,
)


@dataclass
class GatedParser(TraceParser):
    """Parser whose async parses wait until released by the test."""

    gates: dict[str, asyncio.Event] = field(default_factory=dict)
    delegate: LineTraceParser = field(default_factory=LineTraceParser)

    def parse(self, trace_text: str, test_name: str, context: Any = None) -> StackTrace:
        return self.delegate.parse(trace_text, test_name, context)

    async def parse_async(
        self, trace_text: str, test_name: str, context: Any = None
    ) -> StackTrace:
        gate = self.gates.setdefault(test_name, asyncio.Event())
        await gate.wait()
        return self.parse(trace_text, test_name, context)


def make_inspector(parser: TraceParser) -> FailureInspector:
    """Create an inspector around the given parser."""
    return FailureInspector(
        parser=parser,
        source_lookup=MappingSourceLookup(),
        navigator=RecordingNavigator(),
        clipboard=RecordingClipboard(),
        comparison_view=RecordingComparisonView(),
    )


async def test_default_parse_async_runs_parse() -> None:
    """Base class runs the synchronous parse in a worker thread."""
    parser = LineTraceParser()

    trace = await parser.parse_async("at foo.bsl:10", "T1")

    assert trace == StackTrace([Frame(module="foo.bsl", line=10)])
    assert parser.calls == [("at foo.bsl:10", "T1", None)]


async def test_show_async_displays_parsed_trace() -> None:
    """Populates once the parse completes."""
    inspector = make_inspector(LineTraceParser())

    shown = await inspector.show_async(
        TestResult(name="T2", status="failure", trace="at foo.bsl:10")
    )

    assert shown is True
    assert inspector.state == "populated"
    assert inspector.tree.entries == (Frame(module="foo.bsl", line=10),)


async def test_later_show_supersedes_pending_parse() -> None:
    """Only the latest requested result is rendered."""
    parser = GatedParser()
    inspector = make_inspector(parser)

    first = asyncio.create_task(
        inspector.show_async(TestResult(name="T1", status="failure", trace="at a.bsl:1"))
    )
    await asyncio.sleep(0)
    second = asyncio.create_task(
        inspector.show_async(TestResult(name="T2", status="failure", trace="at b.bsl:2"))
    )
    await asyncio.sleep(0)

    parser.gates["T2"].set()
    assert await second is True
    parser.gates["T1"].set()
    assert await first is False

    assert inspector.result is not None
    assert inspector.result.name == "T2"
    assert inspector.tree.entries == (Frame(module="b.bsl", line=2),)


async def test_sync_show_supersedes_pending_parse() -> None:
    """A synchronous show also invalidates an in-flight parse."""
    parser = GatedParser()
    inspector = make_inspector(parser)

    pending = asyncio.create_task(
        inspector.show_async(TestResult(name="T1", status="failure", trace="at a.bsl:1"))
    )
    await asyncio.sleep(0)
    inspector.show(None)
    parser.gates["T1"].set()

    assert await pending is False
    assert inspector.result is None
    assert inspector.state == "empty"


async def test_show_async_while_pending_is_empty() -> None:
    """The previous trace is not shown while the new one is parsed."""
    parser = GatedParser()
    inspector = make_inspector(parser)
    parser.gates["T1"] = asyncio.Event()
    parser.gates["T1"].set()
    await inspector.show_async(
        TestResult(name="T1", status="failure", trace="at a.bsl:1")
    )

    pending = asyncio.create_task(
        inspector.show_async(TestResult(name="T2", status="failure", trace="at b.bsl:2"))
    )
    await asyncio.sleep(0)

    assert inspector.state == "empty"
    parser.gates["T2"].set()
    await pending
    assert inspector.state == "populated"


async def test_show_async_parse_error_degrades_to_empty() -> None:
    """Async parse failures are absorbed like synchronous ones."""
    inspector = make_inspector(LineTraceParser())

    shown = await inspector.show_async(
        TestResult(name="T1", status="failure", trace="!! broken")
    )

    assert shown is True
    assert inspector.state == "empty"


async def test_dispose_during_parse_discards_result() -> None:
    """A parse finishing after dispose is dropped."""
    parser = GatedParser()
    inspector = make_inspector(parser)

    pending = asyncio.create_task(
        inspector.show_async(TestResult(name="T1", status="failure", trace="at a.bsl:1"))
    )
    await asyncio.sleep(0)
    inspector.dispose()
    parser.gates["T1"].set()

    assert await pending is False
    assert inspector.tree.entries == ()


async def test_show_async_without_trace_is_immediate() -> None:
    """Results without trace skip the parser."""
    parser = LineTraceParser()
    inspector = make_inspector(parser)

    assert await inspector.show_async(TestResult(name="T1", status="success"))
    assert parser.calls == []
    assert inspector.state == "empty"


async def test_clear_drops_pending_parse() -> None:
    """A parse finishing after clear does not repopulate the view."""
    parser = GatedParser()
    inspector = make_inspector(parser)

    pending = asyncio.create_task(
        inspector.show_async(TestResult(name="T1", status="failure", trace="at a.bsl:1"))
    )
    await asyncio.sleep(0)
    inspector.clear()
    parser.gates["T1"].set()

    assert await pending is False
    assert inspector.state == "empty"
    assert inspector.tree.entries == ()
