"""In-process domain events broker.

The broker keeps two registries: handlers keyed by event kind, and the
aggregates that currently hold undispatched events, keyed by aggregate id.
Once the unit of work that produced the events has committed, the caller
asks the broker to dispatch an aggregate's events. Dispatch invokes every
handler registered for each buffered event, then clears the buffer and
forgets the aggregate.

This is a synchronous notification mechanism, not a message queue: nothing
is persisted, and a handler registered after dispatch never sees the event.
"""

from __future__ import annotations

import asyncio
import inspect
import threading
from collections.abc import Awaitable
from functools import partial
from typing import TYPE_CHECKING, Any

from shared_kernel.domain.events import DomainEvent, DomainEventHandler
from shared_kernel.events.observability import DefaultDomainEventsBrokerProbe

if TYPE_CHECKING:
    from shared_kernel.domain.aggregate_root import AggregateRoot
    from shared_kernel.events.observability import DomainEventsBrokerProbe


def _resolve_kind(event_kind: str | type[DomainEvent[Any]]) -> str:
    if isinstance(event_kind, type) and issubclass(event_kind, DomainEvent):
        return event_kind.kind
    if not isinstance(event_kind, str) or not event_kind.strip():
        raise ValueError(
            "event_kind must be a non-empty string or a DomainEvent subclass, "
            f"got {event_kind!r}"
        )
    return event_kind


def _handler_name(handler: DomainEventHandler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


class DomainEventsBroker:
    """Routes aggregate domain events to handlers registered by event kind.

    One broker is owned by the application's composition root and passed to
    whatever commits units of work. All operations are serialized by a
    re-entrant lock, so handlers may call back into the broker on the
    dispatching thread.

    Lifecycle of an aggregate id: unregistered -> registered -> unregistered.
    Registering an id that is already registered keeps the first instance.

    Example:
        >>> broker = DomainEventsBroker()
        >>> broker.register_event_handler(UserCreated, send_welcome_email)
        >>> user = User.create(name="Ada", registry=broker)
        >>> # ... persist user, commit ...
        >>> broker.dispatch_aggregate_events(user)
    """

    def __init__(
        self,
        probe: DomainEventsBrokerProbe | None = None,
        pending_aggregates_warning_threshold: int | None = None,
        pending_events_warning_threshold: int | None = None,
    ) -> None:
        """Initialize with empty registries.

        Args:
            probe: Optional observability probe (defaults to structlog)
            pending_aggregates_warning_threshold: Warn once when the number
                of aggregates awaiting dispatch first exceeds this (None
                disables the check)
            pending_events_warning_threshold: Warn when a registering
                aggregate buffers exactly this many events (None disables)
        """
        self._handlers: dict[str, list[DomainEventHandler]] = {}
        self._aggregates: dict[Any, AggregateRoot[Any]] = {}
        self._dispatching: set[Any] = set()
        self._background_tasks: set[asyncio.Future[Any]] = set()
        self._lock = threading.RLock()
        self._probe = probe or DefaultDomainEventsBrokerProbe()
        self._pending_aggregates_threshold = pending_aggregates_warning_threshold
        self._pending_events_threshold = pending_events_warning_threshold

    @property
    def registered_aggregates(self) -> tuple[AggregateRoot[Any], ...]:
        """Aggregates awaiting dispatch, in registration order."""
        with self._lock:
            return tuple(self._aggregates.values())

    def handlers_for(
        self, event_kind: str | type[DomainEvent[Any]]
    ) -> tuple[DomainEventHandler, ...]:
        """Handlers registered for an event kind, in invocation order."""
        kind = _resolve_kind(event_kind)
        with self._lock:
            return tuple(self._handlers.get(kind, ()))

    def is_registered(self, aggregate: AggregateRoot[Any]) -> bool:
        """Check whether an aggregate with the same id awaits dispatch."""
        with self._lock:
            return aggregate.id in self._aggregates

    def register_event_handler(
        self,
        event_kind: str | type[DomainEvent[Any]],
        handler: DomainEventHandler,
    ) -> None:
        """Register a handler for an event kind.

        Handlers are invoked in registration order. Registering the same
        handler twice makes it run twice per event.

        Args:
            event_kind: The event kind tag, or the event class itself
            handler: Callable receiving the event; may be a coroutine function

        Raises:
            ValueError: If event_kind is empty or of an unsupported type
            TypeError: If handler is not callable
        """
        kind = _resolve_kind(event_kind)
        if not callable(handler):
            raise TypeError(f"Handler for {kind!r} must be callable, got {handler!r}")

        with self._lock:
            handlers = self._handlers.setdefault(kind, [])
            handlers.append(handler)
            self._probe.handler_registered(kind, _handler_name(handler), len(handlers))

    def register_aggregate(self, aggregate: AggregateRoot[Any]) -> None:
        """Include an aggregate for having its events dispatched later.

        A no-op when an aggregate with the same id is already registered;
        the registered instance is kept, not replaced.
        """
        with self._lock:
            if aggregate.id not in self._aggregates:
                self._aggregates[aggregate.id] = aggregate
                pending_count = len(self._aggregates)
                self._probe.aggregate_registered(aggregate.id, pending_count)

                threshold = self._pending_aggregates_threshold
                if threshold is not None and pending_count == threshold + 1:
                    self._probe.pending_aggregates_threshold_exceeded(
                        pending_count, threshold
                    )

            threshold = self._pending_events_threshold
            event_count = len(aggregate.pending_events)
            if threshold is not None and event_count == threshold:
                self._probe.pending_events_threshold_reached(
                    aggregate.id, event_count, threshold
                )

    def unregister_aggregate(self, aggregate: AggregateRoot[Any]) -> None:
        """Forget an aggregate without dispatching; its buffer is untouched."""
        with self._lock:
            if self._aggregates.pop(aggregate.id, None) is not None:
                self._probe.aggregate_unregistered(aggregate.id)

    def dispatch_aggregate_events(self, aggregate: AggregateRoot[Any]) -> None:
        """Dispatch the buffered events of a registered aggregate.

        The registered instance with the argument's id is dispatched, which
        may be a different object than the argument. Unregistered aggregates
        are ignored.

        Each event's handlers run in registration order, events in recording
        order. Asynchronous handlers are scheduled and never awaited.
        Afterwards the buffer is cleared and the aggregate unregistered.

        If a handler raises, the exception propagates unchanged: remaining
        handlers and events are skipped, the buffer is left as it was and
        the aggregate stays registered.

        A handler that dispatches the aggregate currently being dispatched
        gets a no-op, so each buffered event reaches its handlers once.
        """
        with self._lock:
            found = self._aggregates.get(aggregate.id)
            if found is None or found.id in self._dispatching:
                self._probe.dispatch_skipped(aggregate.id)
                return

            self._dispatching.add(found.id)
            try:
                events = found.pending_events
                for event in events:
                    self._dispatch_event(found, event)
            finally:
                self._dispatching.discard(found.id)

            found.clear_events()
            # A handler may already have removed it.
            self._aggregates.pop(found.id, None)
            self._probe.aggregate_events_dispatched(found.id, len(events))

    def clear_event_handlers(self) -> None:
        """Remove every registered handler."""
        with self._lock:
            kind_count = len(self._handlers)
            self._handlers = {}
            self._probe.event_handlers_cleared(kind_count)

    def clear_registered_aggregates(self) -> None:
        """Forget every registered aggregate, leaving their buffers untouched."""
        with self._lock:
            aggregate_count = len(self._aggregates)
            self._aggregates = {}
            self._probe.registered_aggregates_cleared(aggregate_count)

    async def wait_for_pending_handlers(self) -> None:
        """Wait until every scheduled asynchronous handler has finished.

        Failures were already reported through the probe and are not raised.
        """
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)

    def _dispatch_event(
        self, aggregate: AggregateRoot[Any], event: DomainEvent[Any]
    ) -> None:
        handlers = tuple(self._handlers.get(event.event_kind, ()))
        for handler in handlers:
            try:
                result = handler(event)
            except Exception as e:
                self._probe.handler_failed(
                    aggregate.id, event.event_kind, _handler_name(handler), str(e)
                )
                raise

            if inspect.isawaitable(result):
                self._schedule(event, handler, result)

        self._probe.event_dispatched(aggregate.id, event.event_kind, len(handlers))

    def _schedule(
        self,
        event: DomainEvent[Any],
        handler: DomainEventHandler,
        awaitable: Awaitable[Any],
    ) -> None:
        name = _handler_name(handler)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            self._probe.async_handler_not_scheduled(event.event_kind, name)
            return

        task = asyncio.ensure_future(awaitable, loop=loop)
        self._background_tasks.add(task)
        task.add_done_callback(partial(self._on_handler_done, event.event_kind, name))

    def _on_handler_done(
        self, event_kind: str, handler_name: str, task: asyncio.Future[Any]
    ) -> None:
        self._background_tasks.discard(task)
        if task.cancelled():
            return

        error = task.exception()
        if error is not None:
            self._probe.async_handler_failed(event_kind, handler_name, str(error))
