"""
Contract lifecycle manager.

Owns the contract aggregate: creation, "active as of today" queries, cost
aggregation, cost updates, and the bulk closure triggered when a client is
deactivated.

A contract is active on a date when it has no end date or the date is
strictly before its end date. "Today" always comes from the injected clock.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from lifecycle.capabilities import ActiveClientLookup
from shared.clock import Clock
from shared.data_store import DataStore, transactional
from shared.errors import DomainError, DomainErrorKind
from shared.models import Contract
from shared.schemas import ContractRequest, ContractResponse

logger = logging.getLogger("contract_lifecycle")


class ContractLifecycleManager:
    """
    Source of truth for contracts.

    Every operation except the cascade first checks, through the client
    lookup, that the owning client exists and is active.
    """

    def __init__(self, store: DataStore, clock: Clock, clients: ActiveClientLookup):
        self.store = store
        self.clock = clock
        self._clients = clients

    @transactional
    def create(self, client_id: int, request: ContractRequest) -> Contract:
        """
        Open a contract for an active client.

        start_date defaults to today; update_date is stamped with today.

        Raises:
            DomainError(CLIENT_NOT_FOUND): no active client with this id
            DomainError(INVALID_DATE_RANGE): start_date is after end_date
        """
        self._require_active_client(client_id, "Create contract failed")

        if (
            request.start_date is not None
            and request.end_date is not None
            and request.start_date > request.end_date
        ):
            raise DomainError(
                DomainErrorKind.INVALID_DATE_RANGE,
                f"Invalid contract dates: startDate {request.start_date} "
                f"is after endDate {request.end_date}",
                "Create contract failed",
            )

        today = self.clock.today()
        contract = Contract(
            client_id=client_id,
            start_date=request.start_date or today,
            end_date=request.end_date,
            cost_amount=request.cost_amount,
            update_date=today,
        )
        saved = self.store.contracts.save(contract)
        logger.info(f"Contract {saved.id} created for client {client_id}")
        return saved

    @transactional
    def find_active_for_client(
        self,
        client_id: int,
        updated_after: Optional[date] = None,
        updated_before: Optional[date] = None,
    ) -> list[Contract]:
        """
        Get the client's contracts active today, ordered by id.

        When given, updated_after / updated_before restrict the result to
        contracts whose update_date falls in that inclusive window.

        Raises:
            DomainError(CLIENT_NOT_FOUND): no active client with this id
        """
        self._require_active_client(client_id, "Find active contracts failed")
        return self.store.contracts.list_active_for_client_in_update_window(
            client_id,
            self.clock.today(),
            updated_after,
            updated_before,
        )

    @transactional
    def sum_active_cost(self, client_id: int) -> Decimal:
        """
        Sum the cost of the client's contracts active today.

        Raises:
            DomainError(CLIENT_NOT_FOUND): no active client with this id
        """
        self._require_active_client(client_id, "Sum active contracts cost failed")
        return self.store.contracts.sum_active_cost(client_id, self.clock.today())

    @transactional
    def close_all_active_for_client(self, client_id: int) -> None:
        """
        Close every contract of the client that is active today.

        Called by the client manager while deactivating a client; the client
        has already been checked there, so it is not checked again.
        """
        today = self.clock.today()
        active = self.store.contracts.list_active_for_client(client_id, today)
        closed = [
            contract.model_copy(update={"end_date": today, "update_date": today})
            for contract in active
        ]
        self.store.contracts.save_all(closed)
        logger.info(f"Closed {len(closed)} active contract(s) for client {client_id}")

    @transactional
    def update_cost(self, contract_id: int, new_cost: Decimal) -> Contract:
        """
        Change the cost of an active contract and stamp its update date.

        Raises:
            DomainError(CONTRACT_NOT_FOUND): no contract with this id is active today
        """
        today = self.clock.today()
        contract = self.store.contracts.get_active_by_id(contract_id, today)
        if contract is None:
            raise DomainError(
                DomainErrorKind.CONTRACT_NOT_FOUND,
                f"Not found contract by id: {contract_id}",
                "Update contract cost failed",
            )

        updated = contract.model_copy(update={"cost_amount": new_cost, "update_date": today})
        saved = self.store.contracts.save(updated)
        logger.info(f"Contract {contract_id} cost set to {new_cost}")
        return saved

    # =========================================================================
    # Response mapping
    # =========================================================================

    @staticmethod
    def to_response(contract: Contract) -> ContractResponse:
        """Map a contract to its response shape (update_date stays internal)."""
        return ContractResponse(
            id=contract.id,
            client_id=contract.client_id,
            start_date=contract.start_date,
            end_date=contract.end_date,
            cost_amount=contract.cost_amount,
        )

    @classmethod
    def to_response_list(cls, contracts: list[Contract]) -> list[ContractResponse]:
        return [cls.to_response(contract) for contract in contracts]

    def _require_active_client(self, client_id: int, user_message: str) -> None:
        if self._clients.find_active(client_id) is None:
            raise DomainError(
                DomainErrorKind.CLIENT_NOT_FOUND,
                f"Not found client by id: {client_id}",
                user_message,
            )
