"""Domain building blocks shared by every bounded context.

Entities (identity), value objects (structure), domain events (facts) and
aggregate roots (consistency boundaries that buffer events). This package
must stay free of infrastructure and of the event dispatch machinery.
"""

from shared_kernel.domain.aggregate_root import AggregateRegistry, AggregateRoot
from shared_kernel.domain.entity import (
    Entity,
    EntityConfig,
    Identifiable,
    generate_ulid,
    is_entity,
)
from shared_kernel.domain.events import DomainEvent, DomainEventHandler, EventContext
from shared_kernel.domain.value_object import ValueObject, freeze

__all__ = [
    "AggregateRegistry",
    "AggregateRoot",
    "DomainEvent",
    "DomainEventHandler",
    "Entity",
    "EntityConfig",
    "EventContext",
    "Identifiable",
    "ValueObject",
    "freeze",
    "generate_ulid",
    "is_entity",
]
