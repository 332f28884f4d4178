"""Unit of work that dispatches domain events after commit.

Aggregates built with the unit of work as their registry are tracked as
soon as they record an event. Leaving the ``with`` block commits and then
dispatches the tracked aggregates through the broker; an exception discards
their events instead, so listeners never hear about rolled-back changes.
"""

from __future__ import annotations

from collections.abc import Callable
from types import TracebackType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from shared_kernel.domain.aggregate_root import AggregateRoot
    from shared_kernel.events.broker import DomainEventsBroker


class UnitOfWork:
    """Context manager tying event dispatch to a successful commit.

    Example:
        >>> with UnitOfWork(broker, commit=session.commit) as uow:
        ...     order = Order.place(items, registry=uow)
        ...     repository.add(order)
        >>> # committed, OrderPlaced handlers have run
    """

    def __init__(
        self,
        broker: DomainEventsBroker,
        commit: Callable[[], None] | None = None,
    ) -> None:
        """Initialize the unit of work.

        Args:
            broker: Broker that dispatches the tracked aggregates
            commit: Persists the work; called before any dispatch
        """
        self._broker = broker
        self._commit = commit
        self._tracked: dict[Any, AggregateRoot[Any]] = {}
        self._active = False

    @property
    def tracked_aggregates(self) -> tuple[AggregateRoot[Any], ...]:
        """Aggregates registered during this unit of work, in order."""
        return tuple(self._tracked.values())

    def register_aggregate(self, aggregate: AggregateRoot[Any]) -> None:
        """Track an aggregate and register it with the broker.

        Raises:
            RuntimeError: If called outside the ``with`` block
        """
        if not self._active:
            raise RuntimeError("UnitOfWork is not active; use it as a context manager")

        self._tracked.setdefault(aggregate.id, aggregate)
        self._broker.register_aggregate(aggregate)

    def __enter__(self) -> UnitOfWork:
        if self._active:
            raise RuntimeError("UnitOfWork is already active")
        self._active = True
        self._tracked = {}
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._active = False
        tracked = list(self._tracked.values())
        self._tracked = {}

        if exc_type is not None:
            self._discard(tracked)
            return

        try:
            if self._commit is not None:
                self._commit()
        except Exception:
            self._discard(tracked)
            raise

        for aggregate in tracked:
            self._broker.dispatch_aggregate_events(aggregate)

    def _discard(self, aggregates: list[AggregateRoot[Any]]) -> None:
        for aggregate in aggregates:
            aggregate.clear_events()
            self._broker.unregister_aggregate(aggregate)
