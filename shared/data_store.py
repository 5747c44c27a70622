"""
In-memory data store for clients and contracts.

This module provides the storage collaborators the lifecycle managers rely on:
- ClientStore: lookups by id, active-only lookups, organization identifier checks
- ContractStore: "active as of a date" queries, update-window queries, cost sums
- DataStore: owns both stores and the transaction scope

Design decisions:
- Entities are frozen Pydantic models; saving replaces the stored instance
- Every query that depends on "now" takes the reference date as a parameter
- The uniqueness of active organization identifiers is enforced here, on save,
  independently of any check the managers make beforehand
- transaction() snapshots both stores and restores them if the block raises;
  nested scopes join the outermost one
- A re-entrant lock serializes transactions, so concurrent callers never
  observe each other's half-applied writes
"""

import functools
import logging
import threading
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Callable, Iterator, Optional, TypeVar

from shared.models import ORGANIZATION, Client, Contract

logger = logging.getLogger("data_store")

T = TypeVar("T")


class ConstraintViolation(Exception):
    """A write was rejected by a storage constraint."""

    def __init__(self, constraint: str, message: str):
        super().__init__(message)
        self.constraint = constraint


# =============================================================================
# Client Storage
# =============================================================================

class ClientStore:
    """Storage for both client variants, keyed by id."""

    UNIQUE_ACTIVE_IDENTIFIER = "uq_active_organization_identifier"

    def __init__(self):
        self._clients: dict[int, Client] = {}
        self._next_id = 1

    def get_by_id(self, client_id: int) -> Optional[Client]:
        """Get a client by ID, active or not."""
        return self._clients.get(client_id)

    def get_active_by_id(self, client_id: int) -> Optional[Client]:
        """Get a client by ID only if it has not been deactivated."""
        client = self._clients.get(client_id)
        if client is None or not client.active:
            return None
        return client

    def get_clients(self) -> list[Client]:
        """Get all clients, ordered by id."""
        return [self._clients[key] for key in sorted(self._clients)]

    def exists_active_organization_with_identifier(self, identifier: str) -> bool:
        """Check whether an active organization already holds the identifier."""
        return self._find_active_organization(identifier) is not None

    def save(self, client: Client) -> Client:
        """
        Insert or replace a client.

        Assigns the next id to new clients. Raises ConstraintViolation when an
        active organization would share its identifier with another one.
        """
        if client.id is None:
            client = client.model_copy(update={"id": self._next_id})
        self._next_id = max(self._next_id, client.id + 1)

        if client.kind == ORGANIZATION and client.active:
            holder = self._find_active_organization(client.organization_identifier)
            if holder is not None and holder.id != client.id:
                raise ConstraintViolation(
                    self.UNIQUE_ACTIVE_IDENTIFIER,
                    f"Organization identifier '{client.organization_identifier}' "
                    f"is already held by active client {holder.id}",
                )

        self._clients[client.id] = client
        return client

    def _find_active_organization(self, identifier: str) -> Optional[Client]:
        for client in self._clients.values():
            if (
                client.kind == ORGANIZATION
                and client.active
                and client.organization_identifier == identifier
            ):
                return client
        return None

    def _snapshot(self) -> tuple[dict[int, Client], int]:
        return dict(self._clients), self._next_id

    def _restore(self, snapshot: tuple[dict[int, Client], int]) -> None:
        self._clients, self._next_id = snapshot


# =============================================================================
# Contract Storage
# =============================================================================

class ContractStore:
    """Storage for contracts, queried by id or by owning client."""

    def __init__(self):
        self._contracts: dict[int, Contract] = {}
        self._next_id = 1

    def get_by_id(self, contract_id: int) -> Optional[Contract]:
        """Get a contract by ID regardless of its end date."""
        return self._contracts.get(contract_id)

    def get_active_by_id(self, contract_id: int, as_of: date) -> Optional[Contract]:
        """Get a contract by ID only if it is active on the given date."""
        contract = self._contracts.get(contract_id)
        if contract is None or not contract.is_active_at(as_of):
            return None
        return contract

    def list_for_client(self, client_id: int) -> list[Contract]:
        """Get every contract of a client, closed ones included."""
        return [c for c in self._ordered() if c.client_id == client_id]

    def list_active_for_client(self, client_id: int, as_of: date) -> list[Contract]:
        """Get the client's contracts that are active on the given date."""
        return [
            c for c in self._ordered()
            if c.client_id == client_id and c.is_active_at(as_of)
        ]

    def list_active_for_client_in_update_window(
        self,
        client_id: int,
        as_of: date,
        after: Optional[date] = None,
        before: Optional[date] = None,
    ) -> list[Contract]:
        """
        Get the client's active contracts last updated within [after, before].

        Both bounds are inclusive and independently optional.
        """
        return [
            c for c in self.list_active_for_client(client_id, as_of)
            if c.update_date_within(after, before)
        ]

    def sum_active_cost(self, client_id: int, as_of: date) -> Decimal:
        """Sum the cost of the client's active contracts (zero when none)."""
        return sum(
            (c.cost_amount for c in self.list_active_for_client(client_id, as_of)),
            Decimal("0"),
        )

    def save(self, contract: Contract) -> Contract:
        """Insert or replace a contract, assigning an id to new ones."""
        if contract.id is None:
            contract = contract.model_copy(update={"id": self._next_id})
        self._next_id = max(self._next_id, contract.id + 1)
        self._contracts[contract.id] = contract
        return contract

    def save_all(self, contracts: list[Contract]) -> None:
        """Save a batch of contracts."""
        for contract in contracts:
            self.save(contract)

    def _ordered(self) -> list[Contract]:
        return [self._contracts[key] for key in sorted(self._contracts)]

    def _snapshot(self) -> tuple[dict[int, Contract], int]:
        return dict(self._contracts), self._next_id

    def _restore(self, snapshot: tuple[dict[int, Contract], int]) -> None:
        self._contracts, self._next_id = snapshot


# =============================================================================
# Data Store
# =============================================================================

class DataStore:
    """
    Central data store holding both aggregates.

    Example:
        store = DataStore()
        with store.transaction():
            client = store.clients.save(client)
            store.contracts.save(contract)
        # Commits on normal exit, restores both stores if the block raises
    """

    def __init__(self):
        self.clients = ClientStore()
        self.contracts = ContractStore()
        self._lock = threading.RLock()
        self._depth = 0

    @contextmanager
    def transaction(self) -> Iterator["DataStore"]:
        """
        Provide an atomic scope around a series of reads and writes.

        A scope opened while another is active on the same thread joins it;
        only the outermost scope commits or rolls back.
        """
        with self._lock:
            if self._depth > 0:
                self._depth += 1
                try:
                    yield self
                finally:
                    self._depth -= 1
                return

            snapshot = (self.clients._snapshot(), self.contracts._snapshot())
            self._depth = 1
            logger.debug("Transaction started")
            try:
                yield self
                logger.debug("Transaction committed")
            except Exception as e:
                self.clients._restore(snapshot[0])
                self.contracts._restore(snapshot[1])
                logger.warning(f"Transaction rolled back: {e}")
                raise
            finally:
                self._depth = 0

    def reset(self) -> None:
        """Drop all clients and contracts."""
        with self._lock:
            self.clients = ClientStore()
            self.contracts = ContractStore()


# Module-level singleton for convenience
# In tests, create a new DataStore instance instead
_default_store: Optional[DataStore] = None


def get_data_store() -> DataStore:
    """Get the default data store singleton."""
    global _default_store
    if _default_store is None:
        _default_store = DataStore()
    return _default_store


def reset_data_store() -> DataStore:
    """Reset the default data store (useful for testing)."""
    global _default_store
    _default_store = DataStore()
    return _default_store


def transactional(method: Callable[..., T]) -> Callable[..., T]:
    """
    Run a service method inside its owner's store transaction.

    The decorated method's instance must expose the DataStore as `self.store`.
    """
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self.store.transaction():
            return method(self, *args, **kwargs)
    return wrapper
