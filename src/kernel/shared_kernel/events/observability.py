"""Observability probes for the domain events broker.

Following Domain Oriented Observability, probes capture domain-significant
broker activity without cluttering the dispatch logic with logging concerns.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import Any, Protocol

import structlog


class DomainEventsBrokerProbe(Protocol):
    """Protocol for domain events broker observability.

    Implementations can log, emit metrics, or send traces.
    """

    def handler_registered(
        self, event_kind: str, handler_name: str, handler_count: int
    ) -> None:
        """Called when a handler is added for an event kind."""
        ...

    def aggregate_registered(self, aggregate_id: Any, pending_count: int) -> None:
        """Called when an aggregate is newly registered for dispatch."""
        ...

    def aggregate_unregistered(self, aggregate_id: Any) -> None:
        """Called when an aggregate is removed without being dispatched."""
        ...

    def dispatch_skipped(self, aggregate_id: Any) -> None:
        """Called when dispatch is requested for an unregistered aggregate."""
        ...

    def event_dispatched(
        self, aggregate_id: Any, event_kind: str, handler_count: int
    ) -> None:
        """Called after every handler of one event has been invoked.

        Zero handlers is valid; it may also indicate a missing registration.
        """
        ...

    def aggregate_events_dispatched(self, aggregate_id: Any, event_count: int) -> None:
        """Called when an aggregate's buffer was dispatched and cleared."""
        ...

    def handler_failed(
        self, aggregate_id: Any, event_kind: str, handler_name: str, error: str
    ) -> None:
        """Called when a handler raises synchronously, before re-raising."""
        ...

    def async_handler_failed(
        self, event_kind: str, handler_name: str, error: str
    ) -> None:
        """Called when a scheduled asynchronous handler finishes with an error."""
        ...

    def async_handler_not_scheduled(self, event_kind: str, handler_name: str) -> None:
        """Called when an asynchronous handler ran outside any event loop."""
        ...

    def event_handlers_cleared(self, event_kind_count: int) -> None:
        """Called when the handler registry is reset."""
        ...

    def registered_aggregates_cleared(self, aggregate_count: int) -> None:
        """Called when the pending aggregate registry is reset."""
        ...

    def pending_aggregates_threshold_exceeded(self, count: int, threshold: int) -> None:
        """Called when more aggregates await dispatch than the threshold allows."""
        ...

    def pending_events_threshold_reached(
        self, aggregate_id: Any, count: int, threshold: int
    ) -> None:
        """Called when one aggregate buffers the threshold number of events."""
        ...


class DefaultDomainEventsBrokerProbe:
    """Default implementation using structlog.

    Logs all broker activity with appropriate log levels.
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._log = (logger or structlog.get_logger()).bind(
            component="domain_events_broker"
        )

    def handler_registered(
        self, event_kind: str, handler_name: str, handler_count: int
    ) -> None:
        """Log handler registration."""
        self._log.debug(
            "domain_event_handler_registered",
            event_kind=event_kind,
            handler=handler_name,
            handler_count=handler_count,
        )

    def aggregate_registered(self, aggregate_id: Any, pending_count: int) -> None:
        """Log aggregate registration."""
        self._log.debug(
            "aggregate_registered",
            aggregate_id=str(aggregate_id),
            pending_count=pending_count,
        )

    def aggregate_unregistered(self, aggregate_id: Any) -> None:
        """Log aggregate removal."""
        self._log.debug("aggregate_unregistered", aggregate_id=str(aggregate_id))

    def dispatch_skipped(self, aggregate_id: Any) -> None:
        """Log dispatch of an aggregate that is not registered."""
        self._log.debug("aggregate_dispatch_skipped", aggregate_id=str(aggregate_id))

    def event_dispatched(
        self, aggregate_id: Any, event_kind: str, handler_count: int
    ) -> None:
        """Log a single event fan-out."""
        self._log.debug(
            "domain_event_dispatched",
            aggregate_id=str(aggregate_id),
            event_kind=event_kind,
            handler_count=handler_count,
        )

    def aggregate_events_dispatched(self, aggregate_id: Any, event_count: int) -> None:
        """Log completed dispatch of an aggregate."""
        self._log.info(
            "aggregate_events_dispatched",
            aggregate_id=str(aggregate_id),
            event_count=event_count,
        )

    def handler_failed(
        self, aggregate_id: Any, event_kind: str, handler_name: str, error: str
    ) -> None:
        """Log a synchronous handler failure."""
        self._log.error(
            "domain_event_handler_failed",
            aggregate_id=str(aggregate_id),
            event_kind=event_kind,
            handler=handler_name,
            error=error,
        )

    def async_handler_failed(
        self, event_kind: str, handler_name: str, error: str
    ) -> None:
        """Log a failed background handler."""
        self._log.error(
            "domain_event_async_handler_failed",
            event_kind=event_kind,
            handler=handler_name,
            error=error,
        )

    def async_handler_not_scheduled(self, event_kind: str, handler_name: str) -> None:
        """Log an asynchronous handler dropped for lack of an event loop."""
        self._log.warning(
            "domain_event_async_handler_not_scheduled",
            event_kind=event_kind,
            handler=handler_name,
        )

    def event_handlers_cleared(self, event_kind_count: int) -> None:
        """Log handler registry reset."""
        self._log.info("domain_event_handlers_cleared", event_kind_count=event_kind_count)

    def registered_aggregates_cleared(self, aggregate_count: int) -> None:
        """Log pending aggregate registry reset."""
        if aggregate_count > 0:
            self._log.warning(
                "registered_aggregates_cleared", aggregate_count=aggregate_count
            )

    def pending_aggregates_threshold_exceeded(self, count: int, threshold: int) -> None:
        """Log pending aggregate growth."""
        self._log.warning(
            "pending_aggregates_threshold_exceeded",
            count=count,
            threshold=threshold,
        )

    def pending_events_threshold_reached(
        self, aggregate_id: Any, count: int, threshold: int
    ) -> None:
        """Log per-aggregate buffer growth."""
        self._log.warning(
            "pending_events_threshold_reached",
            aggregate_id=str(aggregate_id),
            count=count,
            threshold=threshold,
        )
