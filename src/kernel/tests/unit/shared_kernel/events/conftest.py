"""Fixtures for domain events broker tests."""

from unittest.mock import MagicMock

import pytest

from shared_kernel.events import DomainEventsBroker


@pytest.fixture
def probe() -> MagicMock:
    """Provide a mock broker probe."""
    return MagicMock()


@pytest.fixture
def broker(probe: MagicMock) -> DomainEventsBroker:
    """Provide a fresh broker per test so no registrations leak between tests."""
    return DomainEventsBroker(probe=probe)
