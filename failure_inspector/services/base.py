"""Abstract collaborators the failure inspector delegates to."""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from failure_inspector.models.trace import Frame, SourceLocation, StackTrace


class TraceParser(ABC):
    """Turns raw trace text into a structured stack trace."""

    @abstractmethod
    def parse(
        self,
        trace_text: str,
        test_name: str,
        context: Any = None,
    ) -> StackTrace:
        """Parse trace text of a failed test.

        Args:
            trace_text: Raw trace text as reported by the test run
            test_name: Name of the test the trace belongs to
            context: Parser specific context, the inspector always passes None

        Returns:
            Parsed stack trace

        Raises:
            TraceParseError: If the text is malformed or unrecognized

        """

    async def parse_async(
        self,
        trace_text: str,
        test_name: str,
        context: Any = None,
    ) -> StackTrace:
        """Parse without blocking the event loop.

        Parsers backed by an asynchronous service override this; the default
        runs ``parse`` in a worker thread.
        """
        return await asyncio.to_thread(self.parse, trace_text, test_name, context)


class SourceLookup(ABC):
    """Resolves frames to source files."""

    @abstractmethod
    def resolve(self, frame: Frame) -> SourceLocation | None:
        """Return the location of the frame, or None if it cannot be found."""


class Navigator(ABC):
    """Opens source locations in the host."""

    @abstractmethod
    def open(self, location: SourceLocation, steal_focus: bool) -> None:
        """Navigate to the location, activating the editor if steal_focus."""


class Clipboard(ABC):
    """System clipboard handle owned by a single inspector."""

    @abstractmethod
    def write(self, text: str) -> None:
        """Replace the clipboard contents."""

    def dispose(self) -> None:
        """Release the underlying handle."""


class ComparisonView(ABC):
    """Diff view between expected and actual values."""

    @abstractmethod
    def open(self, expected: str, actual: str) -> None:
        """Show the difference between expected and actual."""


@dataclass(frozen=True, kw_only=True)
class HostServices:
    """Collaborators provided by a host environment."""

    source_lookup: SourceLookup
    navigator: Navigator
    clipboard: Clipboard
    comparison_view: ComparisonView
    steal_focus: bool = False
