"""Domain event base type for the shared kernel.

Domain events capture facts about things that have happened to an
aggregate. They are immutable value objects carrying the id of the
aggregate they concern, when they occurred, and an optional payload.

Every concrete event class carries a ``kind`` tag used to route it to
handlers. Declare it explicitly so that renaming the class does not change
routing:

    >>> class UserCreated(DomainEvent[dict], kind="user.created"):
    ...     pass
    >>> UserCreated(aggregate_id="01J...", data={"name": "Ada"}).event_kind
    'user.created'

Classes that declare no tag are routed by their class name, fixed when the
class is created.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, ClassVar, Generic, Self, TypeVar

from shared_kernel.domain.value_object import freeze

D = TypeVar("D")


@dataclass(frozen=True)
class EventContext:
    """Context an event is constructed in.

    Attributes:
        aggregate_id: The id of the aggregate the event belongs to
    """

    aggregate_id: Any


@dataclass(frozen=True, kw_only=True)
class DomainEvent(Generic[D]):
    """Base class for all domain events.

    Attributes:
        aggregate_id: The id of the aggregate root this event belongs to
        data: Optional event payload, deep-frozen at construction
        occurred_at: When the event occurred (UTC)
        event_kind: Routing tag, copied from the class ``kind`` at construction
    """

    kind: ClassVar[str] = "DomainEvent"

    aggregate_id: Any
    data: D | None = None
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    event_kind: str = field(init=False)

    def __init_subclass__(cls, kind: str | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if kind is not None and not kind.strip():
            raise ValueError(f"{cls.__name__}: event kind must not be empty")
        cls.kind = kind if kind is not None else cls.__name__

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", freeze(self.data))
        object.__setattr__(self, "event_kind", type(self).kind)

    @classmethod
    def from_context(cls, context: EventContext, data: D | None = None) -> Self:
        """Build an event for the aggregate named by ``context``."""
        return cls(aggregate_id=context.aggregate_id, data=data)

    @property
    def timestamp(self) -> str:
        """ISO-8601 representation of ``occurred_at``."""
        return self.occurred_at.isoformat()


# Prototype for functions that consume domain events. Handlers may be
# coroutine functions; their awaitables are scheduled, never awaited.
DomainEventHandler = Callable[[DomainEvent[Any]], Awaitable[None] | None]
