"""Controller presenting a failed test's stack trace and its commands."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Literal

from failure_inspector.commands import (
    Command,
    CommandContext,
    CompareResultsCommand,
    CopyTraceCommand,
    GotoSourceCommand,
)
from failure_inspector.events import (
    CommandsUpdated,
    EntryActivated,
    EventBus,
    ResultSelected,
    SelectionChanged,
    Subscription,
)
from failure_inspector.models.result import TestResult
from failure_inspector.models.trace import ErrorHeader, Frame, StackTrace, TraceEntry
from failure_inspector.services.base import (
    Clipboard,
    ComparisonView,
    HostServices,
    Navigator,
    SourceLookup,
    TraceParser,
)
from failure_inspector.tree import TraceTree

log = logging.getLogger(__name__)

type InspectorState = Literal["empty", "populated"]


@dataclass(eq=False, kw_only=True)
class FailureInspector:
    """Shows the stack trace of the selected test result.

    The inspector owns its trace tree and clipboard handle from construction
    until ``dispose``. It reacts to ``ResultSelected``, ``SelectionChanged``
    and ``EntryActivated`` events on the bus and never lets a collaborator
    failure escape to the host: parse errors leave the view empty, lookup
    errors end up in ``status_message``.
    """

    parser: TraceParser
    source_lookup: SourceLookup
    navigator: Navigator
    clipboard: Clipboard
    comparison_view: ComparisonView
    bus: EventBus = field(default_factory=EventBus)
    steal_focus: bool = False

    tree: TraceTree = field(init=False)
    commands: Mapping[str, Command] = field(init=False)
    result: TestResult | None = field(default=None, init=False)
    status_message: str | None = field(default=None, init=False)
    last_run: str | None = field(default=None, init=False)
    enabled_commands: Mapping[str, bool] = field(default_factory=dict, init=False)
    disposed: bool = field(default=False, init=False)
    _generation: int = field(default=0, init=False, repr=False)
    _subscriptions: list[Subscription] = field(
        default_factory=list, init=False, repr=False
    )

    def __post_init__(self) -> None:
        self.tree = TraceTree(bus=self.bus)
        commands: Sequence[Command] = (
            GotoSourceCommand(
                source_lookup=self.source_lookup,
                navigator=self.navigator,
                steal_focus=self.steal_focus,
            ),
            CompareResultsCommand(comparison_view=self.comparison_view),
            CopyTraceCommand(clipboard=self.clipboard),
        )
        self.commands = {command.name: command for command in commands}
        self._subscriptions = [
            self.bus.subscribe(ResultSelected, self._on_result_selected),
            self.bus.subscribe(SelectionChanged, self._on_selection_changed),
            self.bus.subscribe(EntryActivated, self._on_entry_activated),
        ]
        self._update_commands()

    @classmethod
    def for_host(
        cls,
        parser: TraceParser,
        host: HostServices,
        bus: EventBus | None = None,
    ) -> "FailureInspector":
        """Create an inspector wired to the collaborators of a host."""
        return cls(
            parser=parser,
            source_lookup=host.source_lookup,
            navigator=host.navigator,
            clipboard=host.clipboard,
            comparison_view=host.comparison_view,
            bus=bus if bus is not None else EventBus(),
            steal_focus=host.steal_focus,
        )

    @property
    def stack_trace(self) -> StackTrace | None:
        return self.tree.stack_trace

    @property
    def state(self) -> InspectorState:
        if self.stack_trace is None or self.stack_trace.is_empty:
            return "empty"
        return "populated"

    @property
    def selection(self) -> TraceEntry | None:
        return self.tree.selected

    @property
    def context(self) -> CommandContext:
        return CommandContext(
            result=self.result,
            stack_trace=self.stack_trace,
            selection=self.selection,
        )

    def show(self, result: TestResult | None) -> None:
        """Display the trace of a test result, or clear the view for None."""
        if self._ignore_when_disposed("show"):
            return
        self._generation += 1
        self.result = result
        self.status_message = None

        if result is None or not result.trace:
            self._set_stack_trace(None)
            return

        try:
            stack_trace = self.parser.parse(result.trace, result.name, None)
        except Exception:
            log.warning("Failed to parse trace of %s", result.name, exc_info=True)
            stack_trace = None
        self._set_stack_trace(stack_trace)

    async def show_async(self, result: TestResult | None) -> bool:
        """Display a result, parsing its trace without blocking the loop.

        A call superseded by a later ``show`` or ``show_async`` before its
        parse finishes is dropped.

        Returns:
            True if this call's result ended up displayed

        """
        if self._ignore_when_disposed("show_async"):
            return False
        if result is None or not result.trace:
            self.show(result)
            return True

        self._generation += 1
        generation = self._generation
        self.result = result
        self.status_message = None
        self._set_stack_trace(None)

        try:
            stack_trace = await self.parser.parse_async(result.trace, result.name, None)
        except Exception:
            log.warning("Failed to parse trace of %s", result.name, exc_info=True)
            stack_trace = None

        if self.disposed or generation != self._generation:
            log.debug("Discarding superseded trace of %s", result.name)
            return False

        self._set_stack_trace(stack_trace)
        return True

    def clear(self) -> None:
        """Empty the view and drop any pending parse; the current result is kept."""
        if self._ignore_when_disposed("clear"):
            return
        self._generation += 1
        self._set_stack_trace(None)

    def select(self, index: int | None) -> bool:
        """Select the entry at index (None clears the selection).

        Returns:
            False if the index does not point at a displayed entry

        """
        if self._ignore_when_disposed("select"):
            return False
        try:
            self.tree.select(index)
        except IndexError:
            log.warning("Cannot select entry %s of %d", index, len(self.tree.entries))
            return False
        return True

    def activate(self) -> bool:
        """Activate the selected entry as a double-click would.

        Returns:
            True if the activation ran a command

        """
        if self._ignore_when_disposed("activate"):
            return False
        self.last_run = None
        self.tree.activate()
        return self.last_run is not None

    def run(self, name: str) -> bool:
        """Run a command by name; returns whether it ran.

        Raises:
            KeyError: If no command has that name

        """
        command = self.commands[name]
        if self._ignore_when_disposed(name):
            return False
        try:
            outcome = command.run(self.context)
        except Exception:
            log.exception("Command %s failed", name)
            self.status_message = f"{command.label} failed"
            return False
        self.status_message = outcome.status_message
        if outcome.ran:
            self.last_run = name
        return outcome.ran

    def dispose(self) -> None:
        """Release the tree, the clipboard and event subscriptions once."""
        if self.disposed:
            log.debug("Inspector already disposed")
            return
        self.disposed = True
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions.clear()
        self.tree.dispose()
        try:
            self.clipboard.dispose()
        except Exception:
            log.warning("Failed to release clipboard", exc_info=True)

    def _set_stack_trace(self, stack_trace: StackTrace | None) -> None:
        if stack_trace is not None and stack_trace.is_empty:
            stack_trace = None
        had_selection = self.tree.selected_index is not None
        self.tree.set_stack_trace(stack_trace)
        # SelectionChanged from the tree already recomputes enablement
        if not had_selection:
            self._update_commands()

    def _update_commands(self) -> None:
        context = self.context
        self.enabled_commands = {
            name: command.is_enabled(context) for name, command in self.commands.items()
        }
        self.bus.publish(CommandsUpdated(enabled=dict(self.enabled_commands)))

    def _ignore_when_disposed(self, operation: str) -> bool:
        if self.disposed:
            log.warning("Ignoring %s on disposed inspector", operation)
        return self.disposed

    def _on_result_selected(self, event: ResultSelected) -> None:
        self.show(event.result)

    def _on_selection_changed(self, event: SelectionChanged) -> None:
        self._update_commands()

    def _on_entry_activated(self, event: EntryActivated) -> None:
        match event.entry:
            case ErrorHeader() if self.result is not None and (
                self.result.is_comparison_failure
            ):
                self.run("compare")
            case Frame():
                self.run("goto")
            case _:
                log.debug("Nothing to do for activated entry %r", event.entry)
