"""Synchronous publish/subscribe event bus used between host and inspector."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from failure_inspector.models.result import TestResult
from failure_inspector.models.trace import TraceEntry

log = logging.getLogger(__name__)

type Handler[E] = Callable[[E], None]


@dataclass(frozen=True)
class ResultSelected:
    """A test result was selected in the host's test-run view."""

    result: TestResult | None


@dataclass(frozen=True)
class SelectionChanged:
    """The selected trace entry changed."""

    entry: TraceEntry | None


@dataclass(frozen=True)
class EntryActivated:
    """A trace entry was double-clicked or confirmed with Enter."""

    entry: TraceEntry | None


@dataclass(frozen=True)
class CommandsUpdated:
    """Enabled state of the inspector's commands was recomputed."""

    enabled: Mapping[str, bool]


@dataclass(eq=False)
class Subscription:
    """Handle returned by ``EventBus.subscribe``."""

    bus: "EventBus"
    event_type: type
    handler: Handler[Any]
    active: bool = True

    def unsubscribe(self) -> None:
        """Remove the handler from the bus; calling it again does nothing."""
        if not self.active:
            return
        self.active = False
        self.bus._remove(self)


@dataclass
class EventBus:
    """Dispatches events to handlers subscribed to their exact type.

    Handlers run synchronously on the publishing thread, in subscription
    order. An exception in one handler is logged and does not prevent the
    remaining handlers from running.
    """

    _subscriptions: dict[type, list[Subscription]] = field(default_factory=dict)

    def subscribe[E](self, event_type: type[E], handler: Handler[E]) -> Subscription:
        subscription = Subscription(bus=self, event_type=event_type, handler=handler)
        self._subscriptions.setdefault(event_type, []).append(subscription)
        return subscription

    def publish(self, event: object) -> None:
        # copy: handlers may unsubscribe while we iterate
        for subscription in list(self._subscriptions.get(type(event), ())):
            if not subscription.active:
                continue
            try:
                subscription.handler(event)
            except Exception:
                log.exception(
                    "Handler %r failed for %s", subscription.handler, type(event).__name__
                )

    def subscriber_count(self, event_type: type) -> int:
        return len(self._subscriptions.get(event_type, ()))

    def _remove(self, subscription: Subscription) -> None:
        subscriptions = self._subscriptions.get(subscription.event_type, [])
        if subscription in subscriptions:
            subscriptions.remove(subscription)
