"""
Shared pytest fixtures for the client & contract service tests.

These fixtures provide a fresh store, a pinned clock and wired managers
for every test, so tests never depend on the real date or on each other.
"""

import pytest
from datetime import date

from lifecycle.wiring import Managers, build_managers
from shared.clock import FixedClock
from shared.data_store import DataStore
from shared.schemas import IndividualRequest, OrganizationRequest


@pytest.fixture
def today() -> date:
    """Reference date every test runs on."""
    return date(2025, 5, 15)


@pytest.fixture
def clock(today: date) -> FixedClock:
    """Clock pinned to the reference date."""
    return FixedClock(today)


@pytest.fixture
def data_store() -> DataStore:
    """Fresh, empty DataStore for each test."""
    return DataStore()


@pytest.fixture
def managers(data_store: DataStore, clock: FixedClock) -> Managers:
    """Client and contract managers wired over the test store and clock."""
    return build_managers(data_store, clock)


# =============================================================================
# Request Fixtures
# =============================================================================

@pytest.fixture
def acme_request() -> OrganizationRequest:
    """Organization request for Acme SA."""
    return OrganizationRequest(
        name="Acme SA",
        phone="+41 21 000 00 00",
        email="contact@acme.example",
        organization_identifier="CHE-123.456.789",
    )


@pytest.fixture
def jane_request() -> IndividualRequest:
    """Individual request for Jane Doe."""
    return IndividualRequest(
        name="Jane Doe",
        phone="+41 79 000 00 00",
        email="jane.doe@example.com",
        birthdate=date(1990, 4, 2),
    )


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture
def acme(managers: Managers, acme_request: OrganizationRequest):
    """Active organization client."""
    return managers.clients.create(acme_request)


@pytest.fixture
def jane(managers: Managers, jane_request: IndividualRequest):
    """Active individual client."""
    return managers.clients.create(jane_request)
