"""Commands available on the inspected trace."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from failure_inspector.errors import SourceNotFoundError
from failure_inspector.models.result import TestResult
from failure_inspector.models.trace import ErrorHeader, Frame, StackTrace, TraceEntry
from failure_inspector.services.base import (
    Clipboard,
    ComparisonView,
    Navigator,
    SourceLookup,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class CommandContext:
    """Snapshot of inspector state commands are evaluated against."""

    result: TestResult | None = None
    stack_trace: StackTrace | None = None
    selection: TraceEntry | None = None


@dataclass(frozen=True, kw_only=True)
class CommandOutcome:
    """Whether a command ran, and a message to show when it could not."""

    ran: bool
    status_message: str | None = None


class Command(ABC):
    """Action whose availability depends only on the command context."""

    name: str
    label: str

    @abstractmethod
    def is_enabled(self, context: CommandContext) -> bool:
        """Return whether the command can run in this context."""

    @abstractmethod
    def execute(self, context: CommandContext) -> CommandOutcome:
        """Perform the command; only called when enabled."""

    def run(self, context: CommandContext) -> CommandOutcome:
        """Execute the command if it is enabled in the context."""
        if not self.is_enabled(context):
            log.debug("Command %s is disabled, skipping", self.name)
            return CommandOutcome(ran=False)
        return self.execute(context)


@dataclass(frozen=True, kw_only=True)
class CopyTraceCommand(Command):
    """Copies the full trace text of the current result."""

    clipboard: Clipboard
    name: str = "copy"
    label: str = "Copy trace"

    def is_enabled(self, context: CommandContext) -> bool:
        return context.result is not None

    def execute(self, context: CommandContext) -> CommandOutcome:
        result = context.result
        if result is None:
            return CommandOutcome(ran=False)
        self.clipboard.write(result.trace or "")
        log.info("Copied trace of %s to clipboard", result.name)
        return CommandOutcome(ran=True)


@dataclass(frozen=True, kw_only=True)
class CompareResultsCommand(Command):
    """Opens expected and actual values of a comparison failure side by side."""

    comparison_view: ComparisonView
    name: str = "compare"
    label: str = "Compare actual with expected"

    def is_enabled(self, context: CommandContext) -> bool:
        return context.result is not None and context.result.is_comparison_failure

    def execute(self, context: CommandContext) -> CommandOutcome:
        result = context.result
        if result is None:
            return CommandOutcome(ran=False)
        self.comparison_view.open(result.expected or "", result.actual or "")
        return CommandOutcome(ran=True)


@dataclass(frozen=True, kw_only=True)
class GotoSourceCommand(Command):
    """Navigates to the source location of the selected frame."""

    source_lookup: SourceLookup
    navigator: Navigator
    steal_focus: bool = False
    name: str = "goto"
    label: str = "Goto line"

    def is_enabled(self, context: CommandContext) -> bool:
        match context.selection:
            case Frame():
                return True
            case ErrorHeader() | None:
                return False

    def execute(self, context: CommandContext) -> CommandOutcome:
        match context.selection:
            case Frame() as frame:
                pass
            case _:
                return CommandOutcome(ran=False)

        try:
            location = self.source_lookup.resolve(frame)
        except SourceNotFoundError:
            location = None
        except Exception:
            log.warning("Source lookup failed for %s", frame.reference, exc_info=True)
            location = None

        if location is None:
            log.warning("Source not found for frame %s", frame.reference)
            return CommandOutcome(
                ran=False, status_message=f"Source not found: {frame.reference}"
            )

        log.info("Opening %s", location)
        self.navigator.open(location, self.steal_focus)
        return CommandOutcome(ran=True)
