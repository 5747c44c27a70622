"""
Client lifecycle manager.

Owns the client aggregate: creation of both variants, updates of the common
fields, deactivation (with the contract cascade), and translation of clients
into response shapes.

Lifecycle:
    created (active) -> updated any number of times -> deactivated (terminal)

Every public operation runs in one store transaction. Deactivation closes the
client's contracts first and flips the client afterwards, inside the same
transaction, so a failure in either step leaves nothing behind.
"""

import logging
from typing import Optional

from lifecycle.capabilities import ContractCascadeProvider
from shared.clock import Clock
from shared.data_store import ConstraintViolation, DataStore, transactional
from shared.errors import DomainError, DomainErrorKind
from shared.models import (
    CLIENT_KINDS,
    INDIVIDUAL,
    ORGANIZATION,
    Client,
    IndividualClient,
    OrganizationClient,
)
from shared.schemas import (
    ClientRequest,
    ClientRequestBase,
    ClientResponse,
    IndividualResponse,
    OrganizationResponse,
)

logger = logging.getLogger("client_lifecycle")


class ClientLifecycleManager:
    """
    Source of truth for clients.

    Example:
        manager = ClientLifecycleManager(store, clock, lambda: contracts)
        client = manager.create(OrganizationRequest(...))
        manager.deactivate(client.id)
    """

    def __init__(
        self,
        store: DataStore,
        clock: Clock,
        contracts: ContractCascadeProvider,
    ):
        self.store = store
        self.clock = clock
        self._contracts = contracts

    # =========================================================================
    # Operations
    # =========================================================================

    @transactional
    def create(self, request: ClientRequest) -> Client:
        """
        Register a new active client of the request's variant.

        Raises:
            DomainError(DUPLICATE_IDENTIFIER): an active organization already
                holds the requested identifier
            DomainError(INVALID_BIRTHDATE): birthdate after the clock's today
            DomainError(UNSUPPORTED_TYPE): the request is neither variant
        """
        kind = getattr(request, "kind", None)

        if kind == ORGANIZATION:
            identifier = request.organization_identifier
            if self.store.clients.exists_active_organization_with_identifier(identifier):
                raise DomainError(
                    DomainErrorKind.DUPLICATE_IDENTIFIER,
                    f"An organization with identifier '{identifier}' already exists",
                    "Create client failed",
                )
            client = OrganizationClient(
                **self._common_fields(request),
                active=True,
                organization_identifier=identifier,
            )
        elif kind == INDIVIDUAL:
            today = self.clock.today()
            if request.birthdate > today:
                raise DomainError(
                    DomainErrorKind.INVALID_BIRTHDATE,
                    f"Invalid birthdate: {request.birthdate} is after {today}",
                    "Create client failed",
                )
            client = IndividualClient(
                **self._common_fields(request),
                active=True,
                birthdate=request.birthdate,
            )
        else:
            raise DomainError(
                DomainErrorKind.UNSUPPORTED_TYPE,
                f"Client type mismatch: request={type(request).__name__}. "
                f"Expected one of: {', '.join(CLIENT_KINDS)}",
                "Create client failed",
            )

        try:
            saved = self.store.clients.save(client)
        except ConstraintViolation as e:
            raise DomainError(
                DomainErrorKind.DUPLICATE_IDENTIFIER,
                str(e),
                "Create client failed",
            ) from e

        logger.info(f"Client {saved.id} created ({saved.kind})")
        return saved

    def find_active(self, client_id: int) -> Optional[Client]:
        """Get the client if it exists and is still active, otherwise None."""
        return self.store.clients.get_active_by_id(client_id)

    @transactional
    def update(
        self,
        client_id: int,
        request: ClientRequest,
    ) -> Client:
        """
        Update name, phone and email of an active client.

        The variant field (birthdate / organization identifier) is never
        changed, even when the request carries a different value.

        Raises:
            DomainError(NOT_FOUND): no active client with this id
            DomainError(TYPE_MISMATCH): request variant differs from the client's
        """
        client = self._require_active(client_id, "Update client failed")

        request_kind = getattr(request, "kind", None)
        if request_kind != client.kind:
            raise DomainError(
                DomainErrorKind.TYPE_MISMATCH,
                f"Client type mismatch: client={client.kind}, request={request_kind}",
                "Update client failed",
            )

        updated = client.model_copy(update=self._common_fields(request))
        saved = self.store.clients.save(updated)
        logger.info(f"Client {client_id} updated")
        return saved

    @transactional
    def deactivate(self, client_id: int) -> None:
        """
        Deactivate a client after closing all of its active contracts.

        Raises:
            DomainError(NOT_FOUND): no active client with this id
        """
        client = self._require_active(client_id, "Deactivate client failed")

        self._contracts().close_all_active_for_client(client_id)

        self.store.clients.save(client.model_copy(update={"active": False}))
        logger.info(f"Client {client_id} deactivated on {self.clock.today()}")

    # =========================================================================
    # Response mapping
    # =========================================================================

    @staticmethod
    def to_response(client: Client) -> ClientResponse:
        """
        Map a client to the response shape of its variant.

        Raises:
            DomainError(UNSUPPORTED_TYPE): the client is neither variant
        """
        kind = getattr(client, "kind", None)
        common = {
            "id": client.id,
            "name": client.name,
            "phone": client.phone,
            "email": client.email,
            "active": client.active,
        }

        if kind == ORGANIZATION:
            return OrganizationResponse(
                **common,
                organization_identifier=client.organization_identifier,
            )
        if kind == INDIVIDUAL:
            return IndividualResponse(**common, birthdate=client.birthdate)

        raise DomainError(
            DomainErrorKind.UNSUPPORTED_TYPE,
            f"Client type mismatch: client={kind}. "
            f"Expected one of: {', '.join(CLIENT_KINDS)}",
            "Read client failed",
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _require_active(self, client_id: int, user_message: str) -> Client:
        client = self.find_active(client_id)
        if client is None:
            raise DomainError(
                DomainErrorKind.NOT_FOUND,
                f"Not found client by id: {client_id}",
                user_message,
            )
        return client

    @staticmethod
    def _common_fields(request: ClientRequestBase) -> dict:
        return {
            "name": request.name,
            "phone": request.phone,
            "email": request.email,
        }
