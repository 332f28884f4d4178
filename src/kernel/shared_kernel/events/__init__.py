"""In-process domain event dispatch.

The broker routes the events buffered by aggregate roots to handlers
registered by event kind, once the unit of work that produced them commits.
"""

from shared_kernel.events.broker import DomainEventsBroker
from shared_kernel.events.observability import (
    DefaultDomainEventsBrokerProbe,
    DomainEventsBrokerProbe,
)
from shared_kernel.events.unit_of_work import UnitOfWork

__all__ = [
    "DefaultDomainEventsBrokerProbe",
    "DomainEventsBroker",
    "DomainEventsBrokerProbe",
    "UnitOfWork",
]
