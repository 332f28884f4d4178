"""Shared infrastructure dependencies.

Composition root for the process-wide domain events broker. Application
code receives the broker from here and passes it explicitly to whatever
commits units of work.
"""

from functools import lru_cache

from infrastructure.settings import get_domain_events_settings
from shared_kernel.events import DefaultDomainEventsBrokerProbe, DomainEventsBroker


@lru_cache
def get_domain_events_broker() -> DomainEventsBroker:
    """Get the application-scoped domain events broker (singleton).

    The broker is thread-safe and shared across the process. Tests should
    build their own DomainEventsBroker instead of using this one.

    Returns:
        DomainEventsBroker configured from DomainEventsSettings.
    """
    settings = get_domain_events_settings()
    return DomainEventsBroker(
        probe=DefaultDomainEventsBrokerProbe(),
        pending_aggregates_warning_threshold=settings.pending_aggregates_warning_threshold,
        pending_events_warning_threshold=settings.pending_events_warning_threshold,
    )
