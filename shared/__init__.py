"""
Shared infrastructure for the client & contract service.

This package contains code used by the lifecycle managers and the API:
- Domain models (IndividualClient, OrganizationClient, Contract)
- Request/response schemas
- In-memory data store with transaction scope
- Injectable clock
- Domain errors
"""

from shared.models import (
    Client,
    Contract,
    IndividualClient,
    OrganizationClient,
)
from shared.data_store import ConstraintViolation, DataStore
from shared.clock import Clock, FixedClock, SystemClock
from shared.errors import DomainError, DomainErrorKind

__all__ = [
    "Client",
    "Contract",
    "IndividualClient",
    "OrganizationClient",
    "ConstraintViolation",
    "DataStore",
    "Clock",
    "FixedClock",
    "SystemClock",
    "DomainError",
    "DomainErrorKind",
]
