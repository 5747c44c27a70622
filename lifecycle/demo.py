"""
Demonstration script for the client & contract lifecycle.

Walks through the main rules on a pinned clock:
1. An organization and a person are registered
2. Contracts are opened, one with a past end date
3. Active costs are summed, one contract cost is updated
4. The organization is deactivated, closing its contracts
5. The freed organization identifier is reused
"""

import logging
from datetime import date
from decimal import Decimal

from lifecycle.wiring import build_managers
from shared import config
from shared.clock import FixedClock
from shared.data_store import DataStore
from shared.errors import DomainError
from shared.schemas import ContractRequest, IndividualRequest, OrganizationRequest

logging.basicConfig(
    level=config.LOG_LEVEL,
    format=config.LOG_FORMAT,
    datefmt=config.LOG_DATE_FORMAT,
)


def run_lifecycle_demo(today: date = date(2025, 5, 15)) -> None:
    """Run the full client/contract walkthrough and print each step."""
    print("\n" + "=" * 70)
    print(f"CLIENT & CONTRACT LIFECYCLE DEMO (today = {today})")
    print("=" * 70 + "\n")

    clock = FixedClock(today)
    managers = build_managers(DataStore(), clock)
    clients, contracts = managers.clients, managers.contracts

    acme = clients.create(OrganizationRequest(
        name="Acme SA",
        phone="+41 21 000 00 00",
        email="contact@acme.example",
        organization_identifier="CHE-123.456.789",
    ))
    jane = clients.create(IndividualRequest(
        name="Jane Doe",
        phone="+41 79 000 00 00",
        email="jane.doe@example.com",
        birthdate=date(1990, 4, 2),
    ))
    print(f"Registered: {clients.to_response(acme)}")
    print(f"Registered: {clients.to_response(jane)}\n")

    print("-" * 70)
    print("ACTION: Opening contracts for Acme")
    print("-" * 70 + "\n")
    first = contracts.create(acme.id, ContractRequest(cost_amount=Decimal("500")))
    contracts.create(acme.id, ContractRequest(
        start_date=date(2025, 1, 1),
        end_date=date(2025, 12, 31),
        cost_amount=Decimal("250"),
    ))
    contracts.create(acme.id, ContractRequest(
        start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 31),
        cost_amount=Decimal("1000"),
    ))
    print(f"Active contracts: {len(contracts.find_active_for_client(acme.id))}")
    print(f"Active cost sum:  {contracts.sum_active_cost(acme.id)}\n")

    contracts.update_cost(first.id, Decimal("650"))
    print(f"After cost update: {contracts.sum_active_cost(acme.id)}\n")

    print("-" * 70)
    print("ACTION: Deactivating Acme")
    print("-" * 70 + "\n")
    clients.deactivate(acme.id)
    closed = managers.store.contracts.list_for_client(acme.id)
    for contract in closed:
        print(f"  contract {contract.id}: end_date={contract.end_date}")
    print(f"Acme still active: {clients.find_active(acme.id) is not None}\n")

    try:
        contracts.sum_active_cost(acme.id)
    except DomainError as e:
        print(f"Expected failure: {e}\n")

    reborn = clients.create(OrganizationRequest(
        name="Acme Holding SA",
        phone="+41 21 000 00 01",
        email="holding@acme.example",
        organization_identifier="CHE-123.456.789",
    ))
    print(f"Identifier reused by client {reborn.id}")
    print("\n" + "=" * 70 + "\n")


if __name__ == "__main__":
    run_lifecycle_demo()
