"""Aggregate root base class for the shared kernel."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, Protocol, runtime_checkable

from shared_kernel.domain.entity import Entity, EntityConfig, IdT
from shared_kernel.domain.events import DomainEvent


@runtime_checkable
class AggregateRegistry(Protocol):
    """Anything that keeps track of aggregates with pending events.

    Implemented by the domain events broker and by the unit of work.
    """

    def register_aggregate(self, aggregate: AggregateRoot[Any]) -> None: ...


class AggregateRoot(Entity[IdT], Generic[IdT]):
    """Entity that is the consistency boundary of an aggregate.

    Aggregate roots record domain events produced by their own methods.
    Events stay in an ordered buffer until they are dispatched after the
    unit of work that produced them commits.

    Event collection:
    - Mutating methods call _record_event() once their invariants hold
    - pending_events exposes the buffer in recording order
    - When built with a registry, every recorded event registers the
      aggregate with it so the registry can dispatch the buffer later

    Example:
        >>> class User(AggregateRoot[str]):
        ...     def rename(self, name: str) -> None:
        ...         self._data["name"] = name
        ...         self._record_event(
        ...             UserRenamed(aggregate_id=self.id, data={"name": name})
        ...         )
    """

    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        config: EntityConfig[IdT] | None = None,
        registry: AggregateRegistry | None = None,
    ) -> None:
        super().__init__(data, config)
        self._pending_events: list[DomainEvent[Any]] = []
        self._registry = registry

    @property
    def pending_events(self) -> tuple[DomainEvent[Any], ...]:
        """Return pending events in recording order without clearing them."""
        return tuple(self._pending_events)

    def _record_event(self, event: DomainEvent[Any]) -> None:
        """Append a domain event to the buffer.

        Only the aggregate's own methods should call this. If the registry
        rejects the aggregate, the event is removed again before the error
        propagates.
        """
        self._pending_events.append(event)
        if self._registry is not None:
            try:
                self._registry.register_aggregate(self)
            except Exception:
                self._pending_events.pop()
                raise

    def clear_events(self) -> None:
        """Discard all pending events. Safe to call on an empty buffer."""
        self._pending_events.clear()
