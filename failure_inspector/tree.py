"""Display tree holding the entries of the inspected stack trace."""

import logging
from dataclasses import dataclass, field

from failure_inspector.events import EntryActivated, EventBus, SelectionChanged
from failure_inspector.models.trace import StackTrace, TraceEntry

log = logging.getLogger(__name__)


@dataclass(kw_only=True)
class TraceTree:
    """Headless counterpart of a tree widget showing one stack trace.

    Selection and activation are published on the bus so the owner reacts to
    them the same way it would react to widget events.
    """

    bus: EventBus
    stack_trace: StackTrace | None = None
    selected_index: int | None = None
    disposed: bool = field(default=False, init=False)

    @property
    def entries(self) -> tuple[TraceEntry, ...]:
        if self.stack_trace is None:
            return ()
        return tuple(self.stack_trace.entries)

    @property
    def selected(self) -> TraceEntry | None:
        if self.selected_index is None:
            return None
        return self.entries[self.selected_index]

    def set_stack_trace(self, stack_trace: StackTrace | None) -> None:
        """Replace the displayed trace, dropping the current selection."""
        if self.disposed:
            return
        had_selection = self.selected_index is not None
        self.stack_trace = stack_trace
        self.selected_index = None
        if had_selection:
            self.bus.publish(SelectionChanged(entry=None))

    def select(self, index: int | None) -> None:
        """Select the entry at index, or clear the selection with None.

        Raises:
            IndexError: If index is outside the displayed entries

        """
        if self.disposed:
            return
        if index is not None and not 0 <= index < len(self.entries):
            raise IndexError(f"No trace entry at index {index}")
        self.selected_index = index
        self.bus.publish(SelectionChanged(entry=self.selected))

    def activate(self) -> None:
        """Activate the selected entry (double-click / Enter)."""
        if self.disposed or self.selected_index is None:
            return
        self.bus.publish(EntryActivated(entry=self.selected))

    def dispose(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        self.stack_trace = None
        self.selected_index = None
        log.debug("Trace tree disposed")
