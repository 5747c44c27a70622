"""
Builds the two lifecycle managers over a shared store and clock.

The client manager gets a provider for its contract cascade instead of the
contract manager itself; the provider is only called during deactivation,
by which point both managers exist.
"""

from dataclasses import dataclass
from typing import Optional

from lifecycle.clients import ClientLifecycleManager
from lifecycle.contracts import ContractLifecycleManager
from shared.clock import Clock, SystemClock
from shared.data_store import DataStore, get_data_store


@dataclass
class Managers:
    """The wired pair of lifecycle managers."""
    clients: ClientLifecycleManager
    contracts: ContractLifecycleManager
    store: DataStore
    clock: Clock


def build_managers(
    store: Optional[DataStore] = None,
    clock: Optional[Clock] = None,
) -> Managers:
    """
    Wire a client manager and a contract manager together.

    Example:
        managers = build_managers(DataStore(), FixedClock(date(2025, 5, 15)))
        client = managers.clients.create(request)
        managers.contracts.create(client.id, ContractRequest(cost_amount=500))
    """
    store = store or get_data_store()
    clock = clock or SystemClock()

    holder: dict[str, ContractLifecycleManager] = {}
    clients = ClientLifecycleManager(store, clock, lambda: holder["contracts"])
    contracts = ContractLifecycleManager(store, clock, clients)
    holder["contracts"] = contracts

    return Managers(clients=clients, contracts=contracts, store=store, clock=clock)
